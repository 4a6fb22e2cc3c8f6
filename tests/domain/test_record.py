"""Unit tests for the Record runtime: field access, tree conversion, equality."""

import logging
from decimal import Decimal

import pytest

from fhirmodel.domain import ChoiceValue, ParseOptions, parse_resource
from fhirmodel.domain.datatypes import CodeableConcept, Coding, Extension, Narrative, Period, Reference
from fhirmodel.domain.enums import RequiredFieldPolicy, UnknownKeyPolicy
from fhirmodel.domain.ports import (
    CardinalityViolation,
    MissingRequiredField,
    ParseError,
    TypeMismatch,
    UnknownField,
    UnknownType,
)
from fhirmodel.domain.resources import Claim, MedicationKnowledge
from fhirmodel.domain.resources.claim import ClaimInsurance, ClaimItem


class TestRecordGet:
    """Test get by every accepted name form."""

    def test_get_by_wire_and_python_name(self, claim_with_items_tree):
        claim = Claim.from_tree(claim_with_items_tree)
        item = claim.item[0]

        assert claim.get("status") == "active"
        assert item.get("productOrService") is item.get("product_or_service")
        assert item.get("unitPrice").value == Decimal("135.57")

    def test_get_list_returns_list(self, claim_with_items_tree):
        claim = Claim.from_tree(claim_with_items_tree)

        assert [i.sequence for i in claim.get("item")] == [1, 2, 3]
        assert claim.get("careTeam") == []

    def test_get_absent_returns_none(self, minimal_claim_tree):
        claim = Claim.from_tree(minimal_claim_tree)

        assert claim.get("total") is None
        assert claim.get("accident") is None

    def test_get_choice(self, claim_with_items_tree):
        """A concrete name returns the value only when that alternative is populated."""
        claim = Claim.from_tree(claim_with_items_tree)
        first, second = claim.item[0], claim.item[1]

        assert first.get("servicedDate") == "2014-08-16"
        assert first.get("servicedPeriod") is None
        assert first.get("serviced") == ChoiceValue(kind="date", value="2014-08-16")
        assert second.get("servicedDate") is None
        assert second.get("servicedPeriod").end == "2014-08-20"

    def test_get_unknown_field(self):
        with pytest.raises(UnknownField):
            Claim().get("bogus")


class TestRecordSet:
    """Test set: kind checks, cardinality and choice handling."""

    def test_set_and_get(self):
        claim = Claim()
        claim.set("status", "draft")
        claim.set("patient", Reference(reference="Patient/1"))

        assert claim.get("status") == "draft"
        assert claim.patient.reference == "Patient/1"

    def test_set_returns_none(self):
        assert Claim().set("status", "active") is None

    def test_set_none_clears(self, minimal_claim_tree):
        claim = Claim.from_tree(minimal_claim_tree)
        claim.set("status", None)
        claim.set("insurance", None)

        assert claim.status is None
        assert claim.insurance == []
        assert "insurance" not in claim.to_tree()

    def test_list_to_single_field_is_rejected(self):
        with pytest.raises(CardinalityViolation):
            Claim().set("status", ["active"])

    def test_scalar_to_list_field_is_not_wrapped(self):
        """A single value given to a repeating field is rejected, never auto-wrapped."""
        claim = Claim()
        insurance = ClaimInsurance(sequence=1, focal=True, coverage=Reference(reference="Coverage/1"))

        with pytest.raises(CardinalityViolation):
            claim.set("insurance", insurance)
        assert claim.insurance == []

        claim.set("insurance", [insurance])
        assert claim.insurance == [insurance]

    def test_primitive_kind_mismatch(self):
        claim = Claim()

        with pytest.raises(TypeMismatch):
            claim.set("status", 5)
        with pytest.raises(TypeMismatch):
            claim.set("created", "yesterday")
        with pytest.raises(TypeMismatch):
            ClaimItem().set("sequence", 0)

    def test_complex_kind_mismatch(self):
        with pytest.raises(TypeMismatch):
            Claim().set("patient", CodeableConcept(text="not a reference"))
        with pytest.raises(TypeMismatch):
            Claim().set("patient", {"reference": "Patient/1"})

    def test_list_item_kind_mismatch(self):
        with pytest.raises(TypeMismatch):
            ClaimItem().set("careTeamSequence", [1, "2"])

    def test_set_unknown_field(self):
        with pytest.raises(UnknownField):
            Claim().set("bogus", "x")

    def test_decimal_is_coerced(self):
        item = ClaimItem()
        item.set("factor", 0.5)

        assert item.factor == Decimal("0.5")

    def test_choice_last_write_wins(self):
        """Setting another alternative replaces the populated one."""
        item = ClaimItem(sequence=1)
        item.set("servicedDate", "2014-08-16")
        item.set("servicedPeriod", Period(start="2014-08-16", end="2014-08-20"))

        assert item.get("servicedDate") is None
        assert item.get("serviced").kind == "Period"
        tree = item.to_tree()
        assert "servicedPeriod" in tree
        assert "servicedDate" not in tree

    def test_choice_by_logical_name(self):
        """The logical name picks the first alternative that accepts the value."""
        item = ClaimItem()
        item.set("serviced", "2014-08-16")
        assert item.get("serviced").kind == "date"

        item.set("serviced", Period(start="2014-08-16"))
        assert item.get("serviced").kind == "Period"

        with pytest.raises(TypeMismatch):
            item.set("serviced", 42)

    def test_choice_concrete_name_kind_mismatch(self):
        with pytest.raises(TypeMismatch):
            ClaimItem().set("servicedDate", Period(start="2014-08-16"))

    def test_set_rejects_dicts(self):
        """set() takes records for complex kinds on plain and choice fields alike."""
        item = ClaimItem()

        with pytest.raises(TypeMismatch):
            item.set("servicedPeriod", {"start": "2014-08-16"})
        with pytest.raises(TypeMismatch):
            item.set("serviced", {"start": "2014-08-16"})
        with pytest.raises(TypeMismatch):
            item.set("serviced", ChoiceValue(kind="Period", value={"start": "2014-08-16"}))
        assert item.get("serviced") is None

    def test_choice_rejects_list(self):
        with pytest.raises(CardinalityViolation):
            ClaimItem().set("serviced", ["2014-08-16"])

    def test_choice_value_of_undeclared_kind(self):
        with pytest.raises(TypeMismatch):
            ClaimItem().set("serviced", ChoiceValue(kind="string", value="today"))


class TestRecordConstruction:
    """Test keyword construction."""

    def test_concrete_choice_keyword(self):
        item = ClaimItem(sequence=1, serviced_date="2014-08-16")

        assert item.get("servicedDate") == "2014-08-16"

    def test_wire_name_keyword(self):
        item = ClaimItem(**{"sequence": 1, "servicedPeriod": Period(start="2014-08-16")})

        assert item.get("serviced").kind == "Period"

    def test_two_alternatives_rejected(self):
        with pytest.raises(ValueError):
            ClaimItem(serviced_date="2014-08-16", serviced_period=Period(start="2014-08-16"))

    def test_undeclared_keyword_rejected(self):
        with pytest.raises(ValueError):
            Claim(bogus="x")

    def test_primitive_checked_on_construction(self):
        with pytest.raises(TypeMismatch):
            Claim(status="active", created="not-a-date")
        with pytest.raises(TypeMismatch):
            ClaimInsurance(sequence=0, focal=True, coverage=Reference(reference="Coverage/1"))
        with pytest.raises(TypeMismatch):
            ClaimItem(sequence=1, care_team_sequence=[1, 0])

    def test_primitive_checked_on_assignment(self):
        claim = Claim()

        with pytest.raises(TypeMismatch):
            claim.created = "yesterday"
        assert claim.created is None

    def test_constructed_record_round_trips(self):
        """Anything construction accepts survives to_tree / from_tree."""
        claim = Claim(
            status="active",
            created="2014-08-16",
            insurance=[ClaimInsurance(sequence=1, focal=True, coverage=Reference(reference="Coverage/1"))],
        )

        assert Claim.from_tree(claim.to_tree()) == claim

    def test_dicts_build_nested_records(self):
        """Keyword construction builds records from dicts on plain and choice fields."""
        claim = Claim(patient={"reference": "Patient/1"})
        item = ClaimItem(sequence=1, serviced_period={"start": "2014-08-16"})

        assert claim.patient == Reference(reference="Patient/1")
        assert item.get("servicedPeriod") == Period(start="2014-08-16")

    def test_dict_for_choice_checked(self):
        with pytest.raises(TypeMismatch):
            ClaimItem(sequence=1, serviced_period={"start": "16 August"})


class TestToTree:
    """Test tree output."""

    def test_resource_type_first(self, minimal_claim_tree):
        tree = Claim.from_tree(minimal_claim_tree).to_tree()

        assert next(iter(tree)) == "resourceType"
        assert tree["resourceType"] == "Claim"

    def test_declaration_order(self, minimal_claim_tree):
        tree = Claim.from_tree(minimal_claim_tree).to_tree()

        assert list(tree) == [
            "resourceType", "id", "status", "type", "use", "patient", "created", "provider", "priority", "insurance",
        ]

    def test_absent_and_empty_fields_omitted(self):
        claim = Claim(status="active", identifier=[])

        assert claim.to_tree() == {"resourceType": "Claim", "status": "active"}

    def test_choice_uses_concrete_name(self):
        item = ClaimItem(sequence=2, serviced_period=Period(start="2014-08-16"))

        assert item.to_tree() == {"sequence": 2, "servicedPeriod": {"start": "2014-08-16"}}

    def test_datatype_has_no_resource_type(self):
        assert Coding(system="http://s", code="c").to_tree() == {"system": "http://s", "code": "c"}


class TestFromTree:
    """Test tree input and its error reporting."""

    def test_round_trip(self, claim_with_items_tree):
        """from_tree(to_tree(r)) == r, and to_tree reproduces the input."""
        claim = Claim.from_tree(claim_with_items_tree)

        assert Claim.from_tree(claim.to_tree()) == claim
        assert claim.to_tree() == claim_with_items_tree

    def test_not_an_object(self):
        with pytest.raises(ParseError):
            Claim.from_tree(["Claim"])

    def test_resource_type_mismatch(self, minimal_claim_tree):
        minimal_claim_tree["resourceType"] = "ClaimResponse"

        with pytest.raises(ParseError):
            Claim.from_tree(minimal_claim_tree)

    def test_unknown_key_rejected_by_default(self, minimal_claim_tree):
        minimal_claim_tree["colour"] = "blue"

        with pytest.raises(ParseError) as exc_info:
            Claim.from_tree(minimal_claim_tree)
        assert "colour" in str(exc_info.value)

    def test_unknown_key_preserved(self, minimal_claim_tree):
        """Preserved keys survive a round trip and are emitted last."""
        minimal_claim_tree["colour"] = "blue"
        options = ParseOptions(unknown_keys=UnknownKeyPolicy.PRESERVE)

        tree = Claim.from_tree(minimal_claim_tree, options=options).to_tree()

        assert tree["colour"] == "blue"
        assert list(tree)[-1] == "colour"

    def test_unknown_nested_key_preserved(self, minimal_claim_tree):
        minimal_claim_tree["insurance"][0]["note"] = "x"
        options = ParseOptions(unknown_keys=UnknownKeyPolicy.PRESERVE)

        claim = Claim.from_tree(minimal_claim_tree, options=options)

        assert claim.to_tree()["insurance"][0]["note"] == "x"

    def test_primitive_error_path(self, claim_with_items_tree):
        claim_with_items_tree["item"][1]["sequence"] = "two"

        with pytest.raises(ParseError) as exc_info:
            Claim.from_tree(claim_with_items_tree)
        assert exc_info.value.path == "Claim.item[1].sequence"

    def test_bad_date(self, minimal_claim_tree):
        minimal_claim_tree["created"] = "2014-13-45"

        with pytest.raises(ParseError) as exc_info:
            Claim.from_tree(minimal_claim_tree)
        assert exc_info.value.path == "Claim.created"

    def test_null_rejected(self, minimal_claim_tree):
        minimal_claim_tree["status"] = None

        with pytest.raises(ParseError):
            Claim.from_tree(minimal_claim_tree)

    def test_array_expected(self, minimal_claim_tree):
        minimal_claim_tree["insurance"] = minimal_claim_tree["insurance"][0]

        with pytest.raises(ParseError):
            Claim.from_tree(minimal_claim_tree)

    def test_single_value_expected(self, minimal_claim_tree):
        minimal_claim_tree["status"] = ["active"]

        with pytest.raises(ParseError):
            Claim.from_tree(minimal_claim_tree)

    def test_two_choice_alternatives(self, claim_with_items_tree):
        claim_with_items_tree["item"][0]["servicedPeriod"] = {"start": "2014-08-16"}

        with pytest.raises(ParseError):
            Claim.from_tree(claim_with_items_tree)

    def test_missing_required_warns_by_default(self, caplog):
        """Under the warn policy the record is built and a warning is logged."""
        with caplog.at_level(logging.WARNING, logger="fhirmodel.domain.record"):
            claim = Claim.from_tree({"resourceType": "Claim", "status": "draft"})

        assert claim.status == "draft"
        assert "missing required field(s)" in caplog.text
        assert "use" in claim.missing_required()

    def test_missing_required_raises_under_error_policy(self):
        options = ParseOptions(required_fields=RequiredFieldPolicy.ERROR)

        with pytest.raises(MissingRequiredField) as exc_info:
            Claim.from_tree({"resourceType": "Claim", "status": "draft"}, options=options)

        assert exc_info.value.fields == ["type", "use", "patient", "created", "provider", "priority", "insurance"]

    def test_nested_missing_required_under_error_policy(self, minimal_claim_tree):
        del minimal_claim_tree["insurance"][0]["coverage"]
        options = ParseOptions(required_fields=RequiredFieldPolicy.ERROR)

        with pytest.raises(MissingRequiredField) as exc_info:
            Claim.from_tree(minimal_claim_tree, options=options)
        assert exc_info.value.fields == ["coverage"]

    def test_contained_resources(self, minimal_claim_tree, medication_knowledge_tree):
        minimal_claim_tree["contained"] = [medication_knowledge_tree]

        claim = Claim.from_tree(minimal_claim_tree)

        assert isinstance(claim.contained[0], MedicationKnowledge)
        assert claim.to_tree()["contained"][0]["resourceType"] == "MedicationKnowledge"

    def test_contained_unknown_type(self, minimal_claim_tree):
        minimal_claim_tree["contained"] = [{"resourceType": "Patient", "id": "p1"}]

        with pytest.raises(UnknownType):
            Claim.from_tree(minimal_claim_tree)

    def test_extensions(self, minimal_claim_tree):
        minimal_claim_tree["extension"] = [{"url": "http://example.org/flag", "valueBoolean": True}]

        claim = Claim.from_tree(minimal_claim_tree)

        assert isinstance(claim.extension[0], Extension)
        assert claim.extension[0].get("valueBoolean") is True


class TestParseResource:
    """Test dispatch on resourceType."""

    def test_dispatch(self, minimal_claim_tree, medication_knowledge_tree):
        assert isinstance(parse_resource(minimal_claim_tree), Claim)
        assert isinstance(parse_resource(medication_knowledge_tree), MedicationKnowledge)

    def test_unknown_resource_type(self):
        with pytest.raises(UnknownType):
            parse_resource({"resourceType": "Patient"})

    def test_missing_resource_type(self):
        with pytest.raises(ParseError):
            parse_resource({"status": "active"})


class TestEqualityAndHashing:
    """Test structural equality and hashing over the canonical tree."""

    def test_equal_trees_are_equal(self, claim_with_items_tree):
        first = Claim.from_tree(claim_with_items_tree)
        second = Claim.from_tree(claim_with_items_tree)

        assert first == second
        assert hash(first) == hash(second)
        assert first.fingerprint() == second.fingerprint()
        assert len({first, second}) == 1

    def test_different_values_are_not_equal(self, minimal_claim_tree):
        first = Claim.from_tree(minimal_claim_tree)
        second = Claim.from_tree(minimal_claim_tree)
        second.set("status", "draft")

        assert first != second
        assert first.fingerprint() != second.fingerprint()

    def test_hash_follows_mutation(self, minimal_claim_tree):
        """Records are mutable; the hash tracks the current content."""
        claim = Claim.from_tree(minimal_claim_tree)
        before = hash(claim)

        claim.set("status", "draft")

        assert hash(claim) != before
        assert hash(claim) == hash(Claim.from_tree(dict(minimal_claim_tree, status="draft")))

    def test_decimal_precision_does_not_change_hash(self):
        """1.0 and 1.00 compare equal, so they must hash alike."""
        first = ClaimItem(sequence=1, factor=Decimal("1.0"))
        second = ClaimItem(sequence=1, factor=Decimal("1.00"))

        assert first == second
        assert hash(first) == hash(second)

    def test_empty_list_equals_absent(self):
        assert Claim(status="active", identifier=[]) == Claim(status="active")

    def test_different_types_are_not_equal(self):
        assert Coding(code="a") != CodeableConcept(text="a")

    def test_narrative(self):
        narrative = Narrative(status="generated", div='<div xmlns="http://www.w3.org/1999/xhtml">Claim</div>')

        assert narrative.to_tree()["div"].startswith("<div")
