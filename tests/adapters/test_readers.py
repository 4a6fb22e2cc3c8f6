"""Unit tests for the JSON and XML document readers."""

import json

import pytest

from fhirmodel.adapters.codecs import XMLCodec
from fhirmodel.adapters.readers import JSONReader, XMLReader, get_reader
from fhirmodel.domain import ParseOptions
from fhirmodel.domain.enums import UnknownKeyPolicy
from fhirmodel.domain.ports import SourceNotFoundError, UnsupportedSourceError
from fhirmodel.domain.resources import Claim, MedicationKnowledge


@pytest.fixture
def write_json(tmp_path):
    def _write(name, data):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write


class TestGetReader:
    """Test reader selection by file extension."""

    def test_json_and_ndjson(self):
        assert isinstance(get_reader("claim.json"), JSONReader)
        assert isinstance(get_reader("claims.NDJSON"), JSONReader)

    def test_xml(self):
        assert isinstance(get_reader("claim.xml"), XMLReader)

    def test_options_passed_through(self):
        options = ParseOptions(unknown_keys=UnknownKeyPolicy.PRESERVE)

        assert get_reader("claim.json", options=options).options is options

    def test_unsupported(self):
        with pytest.raises(UnsupportedSourceError):
            get_reader("claims.csv")


class TestJSONReader:
    """Test JSON and NDJSON reading."""

    def test_single_resource(self, write_json, minimal_claim_tree):
        path = write_json("claim.json", minimal_claim_tree)

        results = list(JSONReader().read(path))

        assert len(results) == 1
        assert results[0].is_success()
        assert isinstance(results[0].value, Claim)

    def test_array_with_bad_document(self, write_json, minimal_claim_tree, medication_knowledge_tree):
        """A bad document becomes a failure result; the rest of the file is read."""
        bad = dict(minimal_claim_tree, status=["active"])
        path = write_json("bundle.json", [minimal_claim_tree, bad, medication_knowledge_tree])

        results = list(JSONReader().read(path))

        assert [r.is_success() for r in results] == [True, False, True]
        failure = results[1]
        assert failure.error_type == "ParseError"
        assert failure.error_details["record_index"] == 1
        assert failure.error_details["source"] == str(path)
        assert failure.error_details["path"] == "Claim.status"
        assert isinstance(results[2].value, MedicationKnowledge)

    def test_ndjson(self, tmp_path, minimal_claim_tree):
        path = tmp_path / "claims.ndjson"
        path.write_text(
            json.dumps(minimal_claim_tree) + "\n\n" + "{not json}\n" + json.dumps({"resourceType": "Patient"}) + "\n",
            encoding="utf-8",
        )

        results = list(JSONReader().read(path))

        assert [r.is_success() for r in results] == [True, False, False]
        assert results[1].error_type == "ParseError"
        assert results[1].error_details["record_index"] == 1
        assert results[2].error_type == "UnknownType"

    def test_decimals_read_exactly(self, tmp_path):
        path = tmp_path / "claim.json"
        path.write_text('{"resourceType": "Claim", "total": {"value": 0.1, "currency": "USD"}}', encoding="utf-8")

        claim = next(JSONReader().read(path)).value

        assert str(claim.total.value) == "0.1"

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceNotFoundError):
            list(JSONReader().read(tmp_path / "missing.json"))

    def test_invalid_json_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text('{"resourceType": ', encoding="utf-8")

        with pytest.raises(UnsupportedSourceError):
            list(JSONReader().read(path))

    def test_wrong_extension(self, tmp_path):
        path = tmp_path / "claim.txt"
        path.write_text("{}", encoding="utf-8")

        with pytest.raises(UnsupportedSourceError):
            list(JSONReader().read(path))

    def test_source_info(self, write_json, minimal_claim_tree):
        path = write_json("claim.json", minimal_claim_tree)

        info = JSONReader().get_source_info(path)

        assert info["format"] == "json"
        assert info["size_bytes"] == path.stat().st_size
        assert JSONReader().get_source_info(path.parent / "none.json") is None


class TestXMLReader:
    """Test XML reading."""

    def test_read(self, tmp_path, minimal_claim_tree):
        path = tmp_path / "claim.xml"
        path.write_text(XMLCodec().dumps(Claim.from_tree(minimal_claim_tree)), encoding="utf-8")

        results = list(XMLReader().read(path))

        assert len(results) == 1
        assert results[0].value == Claim.from_tree(minimal_claim_tree)

    def test_bad_document_is_failure_result(self, tmp_path):
        path = tmp_path / "claim.xml"
        path.write_text("<Claim xmlns='http://hl7.org/fhir'><status value='active'>", encoding="utf-8")

        results = list(XMLReader().read(path))

        assert results[0].is_failure()
        assert results[0].error_type == "ParseError"

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceNotFoundError):
            list(XMLReader().read(tmp_path / "missing.xml"))
