"""FHIR resources supported by the model.

Importing this package registers every resource and backbone type.
"""

from .base import DomainResource, Resource
from .claim import Claim
from .claim_response import ClaimResponse
from .medication_knowledge import MedicationKnowledge

__all__ = [
    "Resource",
    "DomainResource",
    "Claim",
    "ClaimResponse",
    "MedicationKnowledge",
]
