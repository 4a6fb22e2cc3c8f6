"""Scenario tests for the Claim, ClaimResponse and MedicationKnowledge resources."""

from decimal import Decimal

from fhirmodel.domain.datatypes import CodeableConcept, Money, Reference
from fhirmodel.domain.enums import Severity, ViolationKind
from fhirmodel.domain.resources import Claim, ClaimResponse, MedicationKnowledge
from fhirmodel.domain.resources.claim import (
    ClaimInsurance,
    ClaimItem,
    ClaimItemDetail,
    ClaimItemDetailSubDetail,
)

USCLS = "http://terminology.hl7.org/CodeSystem/ex-USCLS"


def _service(code):
    return CodeableConcept.of(USCLS, code)


class TestClaimScenarios:
    """End-to-end Claim scenarios built through the record API."""

    def test_minimal_valid_claim(self):
        """A claim built with set() validates clean and survives a tree round trip."""
        claim = Claim()
        claim.set("status", "active")
        claim.set("type", CodeableConcept.of("http://terminology.hl7.org/CodeSystem/claim-type", "oral"))
        claim.set("use", "claim")
        claim.set("patient", Reference(reference="Patient/1"))
        claim.set("created", "2014-08-16")
        claim.set("provider", Reference(reference="Organization/1"))
        claim.set("priority", CodeableConcept.of("http://terminology.hl7.org/CodeSystem/processpriority", "normal"))
        claim.set("insurance", [
            ClaimInsurance(sequence=1, focal=True, coverage=Reference(reference="Coverage/9876B1"))
        ])

        assert claim.validate() == []
        assert Claim.from_tree(claim.to_tree()) == claim

    def test_removing_required_field(self, minimal_claim_tree):
        claim = Claim.from_tree(minimal_claim_tree)
        claim.set("use", None)

        assert claim.missing_required() == ["use"]
        assert [v.kind for v in claim.validate()] == [ViolationKind.MISSING_REQUIRED_FIELD]

    def test_nested_list_order(self):
        """Items, details and sub-details keep insertion order through the tree."""
        sub_details = [
            ClaimItemDetailSubDetail(sequence=1, product_or_service=_service("1102")),
            ClaimItemDetailSubDetail(sequence=2, product_or_service=_service("1103")),
        ]
        detail = ClaimItemDetail(sequence=1, product_or_service=_service("1101"), sub_detail=sub_details)
        items = [
            ClaimItem(sequence=1, product_or_service=_service("1205"), detail=[detail]),
            ClaimItem(sequence=2, product_or_service=_service("2101")),
            ClaimItem(sequence=3, product_or_service=_service("2141")),
        ]
        claim = Claim(status="active", use="claim", item=items)

        tree = claim.to_tree()
        assert [item["sequence"] for item in tree["item"]] == [1, 2, 3]
        assert [s["sequence"] for s in tree["item"][0]["detail"][0]["subDetail"]] == [1, 2]

        parsed = Claim.from_tree(tree)
        assert [item.sequence for item in parsed.item] == [1, 2, 3]
        assert parsed.item[0].detail[0].sub_detail[1].get("productOrService").coding[0].code == "1103"

    def test_item_by_sequence(self, claim_with_items_tree):
        claim = Claim.from_tree(claim_with_items_tree)

        assert claim.item_by_sequence(2).get("servicedPeriod").start == "2014-08-16"
        assert claim.item_by_sequence(9) is None

    def test_money_values(self, claim_with_items_tree):
        claim = Claim.from_tree(claim_with_items_tree)

        assert claim.item[0].net == Money(value=Decimal("135.57"), currency="USD")


class TestClaimResponse:
    """ClaimResponse parsing and validation."""

    def test_round_trip(self, claim_response_tree):
        response = ClaimResponse.from_tree(claim_response_tree)

        assert response.to_tree() == claim_response_tree
        assert response.validate() == []

    def test_adjudication_values(self, claim_response_tree):
        response = ClaimResponse.from_tree(claim_response_tree)
        adjudication = response.item[0].adjudication

        assert adjudication[0].amount.value == Decimal("135.57")
        assert adjudication[1].value == Decimal("80.00")

    def test_required_fields(self):
        assert ClaimResponse().missing_required() == [
            "status", "type", "use", "patient", "created", "insurer", "outcome",
        ]

    def test_item_requires_adjudication(self, claim_response_tree):
        claim_response_tree["item"][0]["adjudication"] = []
        response = ClaimResponse.from_tree(claim_response_tree)

        paths = [v.path for v in response.validate()]

        assert paths == ["ClaimResponse.item[0].adjudication"]

    def test_bad_outcome(self, claim_response_tree):
        claim_response_tree["outcome"] = "settled"

        violations = ClaimResponse.from_tree(claim_response_tree).validate()

        assert violations[0].kind == ViolationKind.INVALID_CODE
        assert violations[0].path == "ClaimResponse.outcome"


class TestMedicationKnowledge:
    """MedicationKnowledge parsing, choices and validation."""

    def test_round_trip(self, medication_knowledge_tree):
        medication = MedicationKnowledge.from_tree(medication_knowledge_tree)

        assert medication.to_tree() == medication_knowledge_tree
        assert medication.validate() == []

    def test_choice_alternatives(self, medication_knowledge_tree):
        medication = MedicationKnowledge.from_tree(medication_knowledge_tree)

        assert medication.ingredient[0].get("item").kind == "Reference"
        assert medication.drug_characteristic[0].get("valueString") == "XLD 150"
        assert medication.kinetics[0].lethal_dose50[0].value == Decimal("500")

    def test_status_binding(self, medication_knowledge_tree):
        medication_knowledge_tree["status"] = "retired"

        violation = MedicationKnowledge.from_tree(medication_knowledge_tree).validate()[0]

        assert violation.kind == ViolationKind.INVALID_CODE
        assert violation.severity == Severity.ERROR

    def test_unlisted_characteristic_is_information(self, medication_knowledge_tree):
        medication_knowledge_tree["drugCharacteristic"][0]["type"] = {"coding": [{"code": "weight"}]}

        violation = MedicationKnowledge.from_tree(medication_knowledge_tree).validate()[0]

        assert violation.severity == Severity.INFORMATION
        assert violation.path == "MedicationKnowledge.drugCharacteristic[0].type"
