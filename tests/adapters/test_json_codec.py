"""Unit tests for the FHIR JSON codec."""

import json
from decimal import Decimal

import pytest

from fhirmodel.adapters.codecs import JSONCodec, XMLCodec, codec_for_path, get_codec
from fhirmodel.domain.ports import ParseError, UnknownType, UnsupportedSourceError
from fhirmodel.domain.resources import Claim, ClaimResponse


class TestJSONCodecDumps:
    """Test JSON output."""

    def test_resource_type_first(self, minimal_claim_tree):
        text = JSONCodec().dumps(Claim.from_tree(minimal_claim_tree))

        assert text.startswith('{\n  "resourceType": "Claim"')

    def test_compact(self, minimal_claim_tree):
        text = JSONCodec(indent=0).dumps(Claim.from_tree(minimal_claim_tree))

        assert "\n" not in text

    def test_decimals_are_numbers(self, claim_response_tree):
        text = JSONCodec(indent=None).dumps(ClaimResponse.from_tree(claim_response_tree))

        assert '"value": 135.57' in text
        assert '"value": "135.57"' not in text
        assert '"value": 80.00' in text

    def test_decimal_precision_kept(self, minimal_claim_tree):
        """High-precision values and trailing zeros survive a text round trip."""
        minimal_claim_tree["total"] = {"value": Decimal("12345678901234567.10"), "currency": "USD"}
        codec = JSONCodec()
        claim = Claim.from_tree(minimal_claim_tree)

        text = codec.dumps(claim)
        back = codec.loads(text)

        assert '"value": 12345678901234567.10' in text
        assert str(back.total.value) == "12345678901234567.10"
        assert back == claim

    def test_trailing_zero_kept(self, minimal_claim_tree):
        minimal_claim_tree["total"] = {"value": Decimal("1.10"), "currency": "USD"}

        back = JSONCodec().loads(JSONCodec().dumps(Claim.from_tree(minimal_claim_tree)))

        assert str(back.total.value) == "1.10"

    def test_integral_decimal_is_int(self, minimal_claim_tree):
        minimal_claim_tree["total"] = {"value": Decimal("100"), "currency": "USD"}

        data = json.loads(JSONCodec().dumps(Claim.from_tree(minimal_claim_tree)))

        assert data["total"]["value"] == 100
        assert isinstance(data["total"]["value"], int)

    def test_non_ascii_kept(self, minimal_claim_tree):
        minimal_claim_tree["patient"]["display"] = "Zoë Müller"

        assert "Zoë Müller" in JSONCodec().dumps(Claim.from_tree(minimal_claim_tree))


class TestJSONCodecLoads:
    """Test JSON input."""

    def test_round_trip(self, claim_with_items_tree):
        codec = JSONCodec()
        claim = Claim.from_tree(claim_with_items_tree)

        assert codec.loads(codec.dumps(claim)) == claim

    def test_decimals_are_exact(self):
        text = (
            '{"resourceType": "Claim", "status": "active", '
            '"total": {"value": 0.1, "currency": "USD"}}'
        )

        claim = JSONCodec().loads(text)

        assert claim.total.value == Decimal("0.1")

    def test_invalid_json(self):
        with pytest.raises(ParseError):
            JSONCodec().loads('{"resourceType": "Claim",')

    def test_unknown_resource(self):
        with pytest.raises(UnknownType):
            JSONCodec().loads('{"resourceType": "Patient"}')

    def test_bytes_input(self, minimal_claim_tree):
        text = json.dumps(minimal_claim_tree).encode("utf-8")

        assert isinstance(JSONCodec().loads(text), Claim)


class TestCodecFactory:
    """Test get_codec and codec_for_path."""

    def test_get_codec(self):
        assert isinstance(get_codec("json"), JSONCodec)
        assert isinstance(get_codec("XML"), XMLCodec)
        assert get_codec("json", indent=4).indent == 4

    def test_codec_for_path(self):
        assert isinstance(codec_for_path("claim.json"), JSONCodec)
        assert isinstance(codec_for_path("/data/claim.xml"), XMLCodec)

    def test_unsupported_format(self):
        with pytest.raises(UnsupportedSourceError):
            get_codec("yaml")
        with pytest.raises(UnsupportedSourceError):
            codec_for_path("claim.csv")
