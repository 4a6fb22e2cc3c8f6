"""Domain layer for fhirmodel.

This module contains the record runtime, the type registry, the code binding
checker and the generated FHIR types. Everything here is pure Python plus
Pydantic; codecs and file readers live in the adapters package.
"""

from .datatypes import (
    Address,
    Attachment,
    CodeableConcept,
    Coding,
    Dosage,
    Duration,
    Extension,
    Identifier,
    Meta,
    Money,
    Narrative,
    Period,
    Quantity,
    Range,
    Ratio,
    Reference,
)
from .metadata import FieldDescriptor, UNBOUNDED, choice_group, fields_of, parse_resource, registry
from .ports import ParseOptions, Result, Violation, raise_for_violations
from .record import ChoiceValue, Record
from .resources import Claim, ClaimResponse, DomainResource, MedicationKnowledge, Resource

__all__ = [
    "Address",
    "Attachment",
    "ChoiceValue",
    "Claim",
    "ClaimResponse",
    "CodeableConcept",
    "Coding",
    "DomainResource",
    "Dosage",
    "Duration",
    "Extension",
    "FieldDescriptor",
    "Identifier",
    "MedicationKnowledge",
    "Meta",
    "Money",
    "Narrative",
    "ParseOptions",
    "Period",
    "Quantity",
    "Range",
    "Ratio",
    "Record",
    "Reference",
    "Resource",
    "Result",
    "UNBOUNDED",
    "Violation",
    "choice_group",
    "fields_of",
    "parse_resource",
    "raise_for_violations",
    "registry",
]
