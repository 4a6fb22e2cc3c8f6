"""Shared fixtures: sample resource trees and a clean configuration environment."""

import os
from decimal import Decimal

import pytest

from fhirmodel.infrastructure.settings import settings

CLAIM_TYPE_SYSTEM = "http://terminology.hl7.org/CodeSystem/claim-type"
PRIORITY_SYSTEM = "http://terminology.hl7.org/CodeSystem/processpriority"
USCLS_SYSTEM = "http://terminology.hl7.org/CodeSystem/ex-USCLS"


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Run every test without FM_* variables and with fresh settings."""
    for name in list(os.environ):
        if name.startswith("FM_"):
            monkeypatch.delenv(name)
    settings.reload()
    yield
    # variables loaded from a .env file are not tracked by monkeypatch
    for name in list(os.environ):
        if name.startswith("FM_"):
            os.environ.pop(name)
    settings.reload()


@pytest.fixture
def minimal_claim_tree():
    """Smallest Claim with every required field populated and no findings."""
    return {
        "resourceType": "Claim",
        "id": "100150",
        "status": "active",
        "type": {"coding": [{"system": CLAIM_TYPE_SYSTEM, "code": "oral"}]},
        "use": "claim",
        "patient": {"reference": "Patient/1"},
        "created": "2014-08-16",
        "provider": {"reference": "Organization/1"},
        "priority": {"coding": [{"system": PRIORITY_SYSTEM, "code": "normal"}]},
        "insurance": [
            {"sequence": 1, "focal": True, "coverage": {"reference": "Coverage/9876B1"}}
        ],
    }


@pytest.fixture
def claim_with_items_tree(minimal_claim_tree):
    """Claim with three line items; the first carries a detail with two sub-details."""
    tree = dict(minimal_claim_tree)
    tree["item"] = [
        {
            "sequence": 1,
            "productOrService": {"coding": [{"system": USCLS_SYSTEM, "code": "1205"}]},
            "servicedDate": "2014-08-16",
            "unitPrice": {"value": Decimal("135.57"), "currency": "USD"},
            "net": {"value": Decimal("135.57"), "currency": "USD"},
            "detail": [
                {
                    "sequence": 1,
                    "productOrService": {"coding": [{"system": USCLS_SYSTEM, "code": "1101"}]},
                    "subDetail": [
                        {"sequence": 1, "productOrService": {"coding": [{"system": USCLS_SYSTEM, "code": "1102"}]}},
                        {"sequence": 2, "productOrService": {"coding": [{"system": USCLS_SYSTEM, "code": "1103"}]}},
                    ],
                }
            ],
        },
        {
            "sequence": 2,
            "productOrService": {"coding": [{"system": USCLS_SYSTEM, "code": "2101"}]},
            "servicedPeriod": {"start": "2014-08-16", "end": "2014-08-20"},
        },
        {
            "sequence": 3,
            "productOrService": {"coding": [{"system": USCLS_SYSTEM, "code": "2141"}]},
            "quantity": {"value": 2},
        },
    ]
    return tree


@pytest.fixture
def claim_response_tree():
    return {
        "resourceType": "ClaimResponse",
        "id": "R3500",
        "status": "active",
        "type": {"coding": [{"system": CLAIM_TYPE_SYSTEM, "code": "oral"}]},
        "use": "claim",
        "patient": {"reference": "Patient/1"},
        "created": "2014-08-16",
        "insurer": {"identifier": {"system": "http://www.jurisdiction.org/insurers", "value": "555123"}},
        "outcome": "complete",
        "disposition": "Claim settled as per contract.",
        "item": [
            {
                "itemSequence": 1,
                "adjudication": [
                    {
                        "category": {"coding": [{"code": "eligible"}]},
                        "amount": {"value": Decimal("135.57"), "currency": "USD"},
                    },
                    {
                        "category": {"coding": [{"code": "eligpercent"}]},
                        "value": Decimal("80.00"),
                    },
                ],
            }
        ],
        "payment": {
            "type": {"coding": [{"system": "http://terminology.hl7.org/CodeSystem/ex-paymenttype", "code": "complete"}]},
            "date": "2014-08-31",
            "amount": {"value": Decimal("100.47"), "currency": "USD"},
        },
    }


@pytest.fixture
def medication_knowledge_tree():
    return {
        "resourceType": "MedicationKnowledge",
        "id": "example",
        "code": {"coding": [{"system": "http://snomed.info/sct", "code": "108761006", "display": "Capecitabine-containing product"}]},
        "status": "active",
        "doseForm": {"coding": [{"system": "http://snomed.info/sct", "code": "385055001", "display": "Tablet dose form"}]},
        "amount": {"value": 50, "unit": "mg", "system": "http://unitsofmeasure.org", "code": "mg"},
        "synonym": ["Xeloda"],
        "ingredient": [
            {"itemReference": {"reference": "Substance/capecitabine"}, "isActive": True}
        ],
        "drugCharacteristic": [
            {"type": {"coding": [{"code": "imprintcd"}]}, "valueString": "XLD 150"}
        ],
        "kinetics": [
            {"lethalDose50": [{"value": 500, "unit": "mg"}]}
        ],
    }
