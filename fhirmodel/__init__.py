"""fhirmodel - FHIR R4 record models for claims, claim responses and medication knowledge.

Importing ``fhirmodel.domain`` registers every record type with the type
registry, so ``fields_of`` and ``parse_resource`` see the complete schema.
"""

__version__ = "0.1.0"
