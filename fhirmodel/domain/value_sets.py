"""Enumerated value sets referenced by the record types.

Each constant is a ``ValueSet``; fields bind to one with ``VS.bind(strength)``.
``VALUE_SETS`` indexes them by canonical URL.
"""

from typing import Iterable

from fhirmodel.domain.bindings import ValueSet
from fhirmodel.domain.ports import UnknownType

VALUE_SETS: dict[str, ValueSet] = {}

_HL7 = "http://hl7.org/fhir"
_TERMINOLOGY = "http://terminology.hl7.org/CodeSystem"


def _register(url: str, system: str, codes: Iterable[str]) -> ValueSet:
    value_set = ValueSet(url=url, codes={system: tuple(codes)})
    VALUE_SETS[url] = value_set
    return value_set


def get_value_set(url: str) -> ValueSet:
    """Look up a value set by canonical URL.

    Raises:
        UnknownType: If no value set with that URL is known
    """
    try:
        return VALUE_SETS[url]
    except KeyError:
        raise UnknownType(url) from None


# Shared datatypes and resource base

LANGUAGES = _register(f"{_HL7}/ValueSet/languages", "urn:ietf:bcp:47", [
    "ar", "bn", "cs", "da", "de", "de-AT", "de-CH", "de-DE", "el", "en", "en-AU",
    "en-CA", "en-GB", "en-IN", "en-NZ", "en-SG", "en-US", "es", "es-AR", "es-ES",
    "es-UY", "fi", "fr", "fr-BE", "fr-CH", "fr-FR", "fy", "fy-NL", "hi", "hr", "it",
    "it-CH", "it-IT", "ja", "ko", "nl", "nl-BE", "nl-NL", "no", "no-NO", "pa", "pl",
    "pt", "pt-BR", "ru", "ru-RU", "sr", "sr-RS", "sv", "sv-SE", "te", "zh", "zh-CN",
    "zh-HK", "zh-SG", "zh-TW",
])
IDENTIFIER_USE = _register(f"{_HL7}/ValueSet/identifier-use", f"{_HL7}/identifier-use", [
    "usual", "official", "temp", "secondary", "old",
])
IDENTIFIER_TYPE = _register(f"{_HL7}/ValueSet/identifier-type", f"{_TERMINOLOGY}/v2-0203", [
    "DL", "PPN", "BRN", "MR", "MCN", "EN", "TAX", "NIIP", "PRN", "MD", "DR", "ACSN",
    "UDI", "SNO", "SB", "PLAC", "FILL", "JHN",
])
QUANTITY_COMPARATOR = _register(f"{_HL7}/ValueSet/quantity-comparator", f"{_HL7}/quantity-comparator", [
    "<", "<=", ">=", ">",
])
ADDRESS_USE = _register(f"{_HL7}/ValueSet/address-use", f"{_HL7}/address-use", [
    "home", "work", "temp", "old", "billing",
])
ADDRESS_TYPE = _register(f"{_HL7}/ValueSet/address-type", f"{_HL7}/address-type", [
    "postal", "physical", "both",
])
NARRATIVE_STATUS = _register(f"{_HL7}/ValueSet/narrative-status", f"{_HL7}/narrative-status", [
    "generated", "extensions", "additional", "empty",
])
COMMON_TAGS = _register(f"{_HL7}/ValueSet/common-tags", f"{_TERMINOLOGY}/common-tags", [
    "actionable",
])
DOSE_RATE_TYPE = _register(f"{_HL7}/ValueSet/dose-rate-type", f"{_TERMINOLOGY}/dose-rate-type", [
    "calculated", "ordered",
])

# Financial resources

FM_STATUS = _register(f"{_HL7}/ValueSet/fm-status", f"{_HL7}/fm-status", [
    "active", "cancelled", "draft", "entered-in-error",
])
CLAIM_TYPE = _register(f"{_HL7}/ValueSet/claim-type", f"{_TERMINOLOGY}/claim-type", [
    "institutional", "oral", "pharmacy", "professional", "vision",
])
CLAIM_SUBTYPE = _register(f"{_HL7}/ValueSet/claim-subtype", f"{_TERMINOLOGY}/ex-claimsubtype", [
    "ortho", "emergency",
])
CLAIM_USE = _register(f"{_HL7}/ValueSet/claim-use", f"{_HL7}/claim-use", [
    "claim", "preauthorization", "predetermination",
])
PROCESS_PRIORITY = _register(f"{_HL7}/ValueSet/process-priority", f"{_TERMINOLOGY}/processpriority", [
    "stat", "normal", "deferred",
])
FUNDS_RESERVE = _register(f"{_HL7}/ValueSet/fundsreserve", f"{_TERMINOLOGY}/fundsreserve", [
    "patient", "provider", "none",
])
RELATED_CLAIM_RELATIONSHIP = _register(
    f"{_HL7}/ValueSet/related-claim-relationship", f"{_TERMINOLOGY}/ex-relatedclaimrelationship",
    ["prior", "associated"],
)
PAYEE_TYPE = _register(f"{_HL7}/ValueSet/payeetype", f"{_TERMINOLOGY}/payeetype", [
    "subscriber", "provider", "other",
])
CARE_TEAM_ROLE = _register(f"{_HL7}/ValueSet/claim-careteamrole", f"{_TERMINOLOGY}/claimcareteamrole", [
    "primary", "assist", "supervisor", "other",
])
PROVIDER_QUALIFICATION = _register(
    f"{_HL7}/ValueSet/provider-qualification", f"{_TERMINOLOGY}/ex-providerqualification",
    ["311405", "604215", "604210"],
)
INFORMATION_CATEGORY = _register(
    f"{_HL7}/ValueSet/claim-informationcategory", f"{_TERMINOLOGY}/claiminformationcategory",
    ["info", "discharge", "onset", "related", "exception", "material", "attachment",
     "missingtooth", "prosthesis", "other", "hospitalized", "employmentimpacted",
     "externalcause", "patientreasonforvisit"],
)
CLAIM_EXCEPTION = _register(f"{_HL7}/ValueSet/claim-exception", f"{_TERMINOLOGY}/claim-exception", [
    "student", "disabled",
])
MISSING_TOOTH_REASON = _register(
    f"{_HL7}/ValueSet/missing-tooth-reason", f"{_TERMINOLOGY}/missingtoothreason",
    ["e", "c", "u", "o"],
)
ICD_10 = _register(f"{_HL7}/ValueSet/icd-10", f"{_HL7}/sid/icd-10", [
    "123456", "123457", "987654", "123987", "112233", "997755", "321789",
])
DIAGNOSIS_TYPE = _register(f"{_HL7}/ValueSet/ex-diagnosistype", f"{_TERMINOLOGY}/ex-diagnosistype", [
    "admitting", "clinical", "differential", "discharge", "laboratory", "nursing",
    "prenatal", "principal", "radiology", "remote", "retrospective", "self",
])
DIAGNOSIS_ON_ADMISSION = _register(
    f"{_HL7}/ValueSet/ex-diagnosis-on-admission", f"{_TERMINOLOGY}/ex-diagnosis-on-admission",
    ["y", "n", "u", "w"],
)
DIAGNOSIS_RELATED_GROUP = _register(
    f"{_HL7}/ValueSet/ex-diagnosisrelatedgroup", f"{_TERMINOLOGY}/ex-diagnosisrelatedgroup",
    ["100", "101", "300", "400"],
)
PROCEDURE_TYPE = _register(f"{_HL7}/ValueSet/ex-procedure-type", f"{_TERMINOLOGY}/ex-procedure-type", [
    "primary", "secondary",
])
ICD_10_PROCEDURES = _register(f"{_HL7}/ValueSet/icd-10-procedures", f"{_HL7}/sid/ex-icd-10-procedures", [
    "123001", "123002", "123003",
])
ACT_INCIDENT_CODE = _register(
    "http://terminology.hl7.org/ValueSet/v3-ActIncidentCode", f"{_TERMINOLOGY}/v3-ActCode",
    ["MVA", "SCHOOL", "SPT", "WPA"],
)
REVENUE_CENTER = _register(f"{_HL7}/ValueSet/ex-revenue-center", f"{_TERMINOLOGY}/ex-revenue-center", [
    "0370", "0420", "0421", "0440", "0441", "0450", "0451", "0452", "0010",
])
BENEFIT_CATEGORY = _register(f"{_HL7}/ValueSet/ex-benefitcategory", f"{_TERMINOLOGY}/ex-benefitcategory", [
    "1", "2", "3", "4", "5", "14", "23", "24", "25", "26", "27", "28", "30", "35", "36",
    "37", "49", "55", "56", "61", "62", "63", "69", "76", "F1", "F3", "F4", "F6",
])
SERVICE_USCLS = _register(f"{_HL7}/ValueSet/service-uscls", f"{_TERMINOLOGY}/ex-USCLS", [
    "1101", "1102", "1103", "1201", "1205", "2101", "2102", "2141", "2601", "11101",
    "11102", "11103", "11104", "21211", "21212", "27211", "67211", "99111", "99333", "99555",
])
CLAIM_MODIFIERS = _register(f"{_HL7}/ValueSet/claim-modifiers", f"{_TERMINOLOGY}/modifiers", [
    "a", "b", "c", "e", "rooh", "x",
])
PROGRAM_CODE = _register(f"{_HL7}/ValueSet/ex-program-code", f"{_TERMINOLOGY}/ex-programcode", [
    "as", "hd", "auscr", "none",
])
SERVICE_PLACE = _register(f"{_HL7}/ValueSet/service-place", f"{_TERMINOLOGY}/ex-serviceplace", [
    "01", "03", "04", "05", "06", "07", "08", "09", "11", "12", "13", "14", "15", "19",
    "20", "21", "41",
])
TOOTH = _register(f"{_HL7}/ValueSet/tooth", f"{_TERMINOLOGY}/ex-tooth", [
    "0", "1", "2", "3", "4", "5", "6", "7", "8",
    "11", "12", "13", "14", "15", "16", "17", "18",
    "21", "22", "23", "24", "25", "26", "27", "28",
    "31", "32", "33", "34", "35", "36", "37", "38",
    "41", "42", "43", "44", "45", "46", "47", "48",
])
SURFACE = _register(f"{_HL7}/ValueSet/surface", f"{_TERMINOLOGY}/FDI-surface", [
    "M", "O", "I", "D", "B", "V", "L", "MO", "DO", "DI", "MOD",
])
REMITTANCE_OUTCOME = _register(f"{_HL7}/ValueSet/remittance-outcome", f"{_HL7}/remittance-outcome", [
    "queued", "complete", "error", "partial",
])
FORMS = _register(f"{_HL7}/ValueSet/forms", f"{_TERMINOLOGY}/forms-codes", ["1", "2"])
ADJUDICATION = _register(f"{_HL7}/ValueSet/adjudication", f"{_TERMINOLOGY}/adjudication", [
    "submitted", "copay", "eligible", "deductible", "unallocdeduct", "eligpercent", "tax", "benefit",
])
ADJUDICATION_REASON = _register(
    f"{_HL7}/ValueSet/adjudication-reason", f"{_TERMINOLOGY}/adjudication-reason",
    ["ar001", "ar002"],
)
ADJUDICATION_ERROR = _register(
    f"{_HL7}/ValueSet/adjudication-error", f"{_TERMINOLOGY}/adjudication-error",
    ["a001", "a002"],
)
PAYMENT_TYPE = _register(f"{_HL7}/ValueSet/ex-paymenttype", f"{_TERMINOLOGY}/ex-paymenttype", [
    "complete", "partial",
])
PAYMENT_ADJUSTMENT_REASON = _register(
    f"{_HL7}/ValueSet/payment-adjustment-reason", f"{_TERMINOLOGY}/payment-adjustment-reason",
    ["a001", "a002"],
)
NOTE_TYPE = _register(f"{_HL7}/ValueSet/note-type", f"{_HL7}/note-type", [
    "display", "print", "printoper",
])

# Medication knowledge

MEDICATION_KNOWLEDGE_STATUS = _register(
    f"{_HL7}/ValueSet/medicationknowledge-status",
    f"{_TERMINOLOGY}/medicationknowledge-status",
    ["active", "inactive", "entered-in-error"],
)
PACKAGE_TYPE = _register(
    f"{_HL7}/ValueSet/medicationknowledge-package-type",
    f"{_TERMINOLOGY}/medicationknowledge-package-type",
    ["amp", "bag", "blstrpk", "bot", "box", "can", "cart", "disk", "doset", "jar", "jug",
     "minim", "nebamp", "ovul", "pch", "pkt", "sash", "strip", "tin", "tub", "tube", "vial"],
)
DRUG_CHARACTERISTIC = _register(
    f"{_HL7}/ValueSet/medicationknowledge-characteristic",
    f"{_TERMINOLOGY}/medicationknowledge-characteristic",
    ["imprintcd", "size", "shape", "color", "coating", "scoring", "logo"],
)
