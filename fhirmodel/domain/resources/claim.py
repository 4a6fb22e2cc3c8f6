"""Claim resource.

A provider's request for adjudication or reimbursement of products and
services. Line items nest three levels deep: ``item`` -> ``detail`` ->
``subDetail``, each with its own 1-based ``sequence``.
"""

from decimal import Decimal
from typing import ClassVar, Optional

from pydantic import StrictBool, StrictInt

from fhirmodel.domain import value_sets as vs
from fhirmodel.domain.datatypes import (
    EXAMPLE,
    EXTENSIBLE,
    REQUIRED,
    BackboneElement,
    CodeableConcept,
    Identifier,
    Money,
    Period,
    Quantity,
    Reference,
)
from fhirmodel.domain.metadata import UNBOUNDED, choice, element
from fhirmodel.domain.record import ChoiceValue
from fhirmodel.domain.resources.base import DomainResource

PROVIDERS = ["Practitioner", "PractitionerRole", "Organization"]


class ClaimRelated(BackboneElement):
    type_name: ClassVar[str] = "Claim.Related"

    claim: Optional[Reference] = element("Reference", targets=["Claim"], description="Reference to the related claim")
    relationship: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.RELATED_CLAIM_RELATIONSHIP.bind(EXAMPLE),
        description="How the reference claim is related",
    )
    reference: Optional[Identifier] = element("Identifier", description="File or case reference")


class ClaimPayee(BackboneElement):
    type_name: ClassVar[str] = "Claim.Payee"

    type: Optional[CodeableConcept] = element(
        "CodeableConcept", min=1, binding=vs.PAYEE_TYPE.bind(EXAMPLE), description="Category of recipient"
    )
    party: Optional[Reference] = element(
        "Reference", targets=PROVIDERS + ["Patient", "RelatedPerson"], description="Recipient reference"
    )


class ClaimCareTeam(BackboneElement):
    type_name: ClassVar[str] = "Claim.CareTeam"

    sequence: Optional[StrictInt] = element("positiveInt", min=1, description="Order of care team")
    provider: Optional[Reference] = element("Reference", min=1, targets=PROVIDERS, description="Practitioner or organization")
    responsible: Optional[StrictBool] = element("boolean", description="Indicator of the lead practitioner")
    role: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.CARE_TEAM_ROLE.bind(EXAMPLE), description="Function within the team"
    )
    qualification: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.PROVIDER_QUALIFICATION.bind(EXAMPLE), description="Practitioner credential or specialization"
    )


class ClaimSupportingInfo(BackboneElement):
    type_name: ClassVar[str] = "Claim.SupportingInfo"

    sequence: Optional[StrictInt] = element("positiveInt", min=1, description="Information instance identifier")
    category: Optional[CodeableConcept] = element(
        "CodeableConcept", min=1, binding=vs.INFORMATION_CATEGORY.bind(EXAMPLE),
        description="Classification of the supplied information",
    )
    code: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.CLAIM_EXCEPTION.bind(EXAMPLE), description="Type of information"
    )
    timing: Optional[ChoiceValue] = choice("date", "Period", description="When it occurred")
    value: Optional[ChoiceValue] = choice(
        "boolean", "string", "Quantity", "Attachment", "Reference", description="Data to be provided"
    )
    reason: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.MISSING_TOOTH_REASON.bind(EXAMPLE), description="Explanation for the information"
    )


class ClaimDiagnosis(BackboneElement):
    type_name: ClassVar[str] = "Claim.Diagnosis"

    sequence: Optional[StrictInt] = element("positiveInt", min=1, description="Diagnosis instance identifier")
    diagnosis: Optional[ChoiceValue] = choice(
        "CodeableConcept", "Reference", min=1, binding=vs.ICD_10.bind(EXAMPLE), targets=["Condition"],
        description="Nature of illness or problem",
    )
    type: list[CodeableConcept] = element(
        "CodeableConcept", max=UNBOUNDED, binding=vs.DIAGNOSIS_TYPE.bind(EXAMPLE), description="Timing or nature of the diagnosis"
    )
    on_admission: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.DIAGNOSIS_ON_ADMISSION.bind(EXAMPLE), description="Present on admission"
    )
    package_code: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.DIAGNOSIS_RELATED_GROUP.bind(EXAMPLE), description="Package billing code"
    )


class ClaimProcedure(BackboneElement):
    type_name: ClassVar[str] = "Claim.Procedure"

    sequence: Optional[StrictInt] = element("positiveInt", min=1, description="Procedure instance identifier")
    type: list[CodeableConcept] = element(
        "CodeableConcept", max=UNBOUNDED, binding=vs.PROCEDURE_TYPE.bind(EXAMPLE), description="Category of Procedure"
    )
    date: Optional[str] = element("dateTime", description="When the procedure was performed")
    procedure: Optional[ChoiceValue] = choice(
        "CodeableConcept", "Reference", min=1, binding=vs.ICD_10_PROCEDURES.bind(EXAMPLE), targets=["Procedure"],
        description="Specific clinical procedure",
    )
    udi: list[Reference] = element("Reference", max=UNBOUNDED, targets=["Device"], description="Unique device identifier")


class ClaimInsurance(BackboneElement):
    type_name: ClassVar[str] = "Claim.Insurance"

    sequence: Optional[StrictInt] = element("positiveInt", min=1, description="Insurance instance identifier")
    focal: Optional[StrictBool] = element("boolean", min=1, description="Coverage to be used for adjudication")
    identifier: Optional[Identifier] = element("Identifier", description="Pre-assigned Claim number")
    coverage: Optional[Reference] = element("Reference", min=1, targets=["Coverage"], description="Insurance information")
    business_arrangement: Optional[str] = element("string", description="Additional provider contract number")
    pre_auth_ref: list[str] = element("string", max=UNBOUNDED, description="Prior authorization reference number")
    claim_response: Optional[Reference] = element(
        "Reference", targets=["ClaimResponse"], description="Adjudication results"
    )


class ClaimAccident(BackboneElement):
    type_name: ClassVar[str] = "Claim.Accident"

    date: Optional[str] = element("date", min=1, description="When the incident occurred")
    type: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.ACT_INCIDENT_CODE.bind(EXTENSIBLE), description="The nature of the accident"
    )
    location: Optional[ChoiceValue] = choice(
        "Address", "Reference", targets=["Location"], description="Where the event occurred"
    )


class ClaimItemDetailSubDetail(BackboneElement):
    type_name: ClassVar[str] = "Claim.Item.Detail.SubDetail"

    sequence: Optional[StrictInt] = element("positiveInt", min=1, description="Item instance identifier")
    revenue: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.REVENUE_CENTER.bind(EXAMPLE), description="Revenue or cost center code"
    )
    category: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.BENEFIT_CATEGORY.bind(EXAMPLE), description="Benefit classification"
    )
    product_or_service: Optional[CodeableConcept] = element(
        "CodeableConcept", min=1, binding=vs.SERVICE_USCLS.bind(EXAMPLE), description="Billing, service, product, or drug code"
    )
    modifier: list[CodeableConcept] = element(
        "CodeableConcept", max=UNBOUNDED, binding=vs.CLAIM_MODIFIERS.bind(EXAMPLE), description="Service/Product billing modifiers"
    )
    program_code: list[CodeableConcept] = element(
        "CodeableConcept", max=UNBOUNDED, binding=vs.PROGRAM_CODE.bind(EXAMPLE), description="Program the product or service is provided under"
    )
    quantity: Optional[Quantity] = element("Quantity", description="Count of products or services")
    unit_price: Optional[Money] = element("Money", description="Fee, charge or cost per item")
    factor: Optional[Decimal] = element("decimal", description="Price scaling factor")
    net: Optional[Money] = element("Money", description="Total item cost")
    udi: list[Reference] = element("Reference", max=UNBOUNDED, targets=["Device"], description="Unique device identifier")


class ClaimItemDetail(BackboneElement):
    type_name: ClassVar[str] = "Claim.Item.Detail"

    sequence: Optional[StrictInt] = element("positiveInt", min=1, description="Item instance identifier")
    revenue: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.REVENUE_CENTER.bind(EXAMPLE), description="Revenue or cost center code"
    )
    category: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.BENEFIT_CATEGORY.bind(EXAMPLE), description="Benefit classification"
    )
    product_or_service: Optional[CodeableConcept] = element(
        "CodeableConcept", min=1, binding=vs.SERVICE_USCLS.bind(EXAMPLE), description="Billing, service, product, or drug code"
    )
    modifier: list[CodeableConcept] = element(
        "CodeableConcept", max=UNBOUNDED, binding=vs.CLAIM_MODIFIERS.bind(EXAMPLE), description="Service/Product billing modifiers"
    )
    program_code: list[CodeableConcept] = element(
        "CodeableConcept", max=UNBOUNDED, binding=vs.PROGRAM_CODE.bind(EXAMPLE), description="Program the product or service is provided under"
    )
    quantity: Optional[Quantity] = element("Quantity", description="Count of products or services")
    unit_price: Optional[Money] = element("Money", description="Fee, charge or cost per item")
    factor: Optional[Decimal] = element("decimal", description="Price scaling factor")
    net: Optional[Money] = element("Money", description="Total item cost")
    udi: list[Reference] = element("Reference", max=UNBOUNDED, targets=["Device"], description="Unique device identifier")
    sub_detail: list[ClaimItemDetailSubDetail] = element(
        "Claim.Item.Detail.SubDetail", max=UNBOUNDED, description="Product or service provided"
    )


class ClaimItem(BackboneElement):
    type_name: ClassVar[str] = "Claim.Item"

    sequence: Optional[StrictInt] = element("positiveInt", min=1, description="Item instance identifier")
    care_team_sequence: list[StrictInt] = element("positiveInt", max=UNBOUNDED, description="Applicable careTeam members")
    diagnosis_sequence: list[StrictInt] = element("positiveInt", max=UNBOUNDED, description="Applicable diagnoses")
    procedure_sequence: list[StrictInt] = element("positiveInt", max=UNBOUNDED, description="Applicable procedures")
    information_sequence: list[StrictInt] = element("positiveInt", max=UNBOUNDED, description="Applicable exception and supporting information")
    revenue: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.REVENUE_CENTER.bind(EXAMPLE), description="Revenue or cost center code"
    )
    category: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.BENEFIT_CATEGORY.bind(EXAMPLE), description="Benefit classification"
    )
    product_or_service: Optional[CodeableConcept] = element(
        "CodeableConcept", min=1, binding=vs.SERVICE_USCLS.bind(EXAMPLE), description="Billing, service, product, or drug code"
    )
    modifier: list[CodeableConcept] = element(
        "CodeableConcept", max=UNBOUNDED, binding=vs.CLAIM_MODIFIERS.bind(EXAMPLE), description="Product or service billing modifiers"
    )
    program_code: list[CodeableConcept] = element(
        "CodeableConcept", max=UNBOUNDED, binding=vs.PROGRAM_CODE.bind(EXAMPLE), description="Program the product or service is provided under"
    )
    serviced: Optional[ChoiceValue] = choice("date", "Period", description="Date or dates of service or product delivery")
    location: Optional[ChoiceValue] = choice(
        "CodeableConcept", "Address", "Reference", binding=vs.SERVICE_PLACE.bind(EXAMPLE), targets=["Location"],
        description="Place of service or where product was supplied",
    )
    quantity: Optional[Quantity] = element("Quantity", description="Count of products or services")
    unit_price: Optional[Money] = element("Money", description="Fee, charge or cost per item")
    factor: Optional[Decimal] = element("decimal", description="Price scaling factor")
    net: Optional[Money] = element("Money", description="Total item cost")
    udi: list[Reference] = element("Reference", max=UNBOUNDED, targets=["Device"], description="Unique device identifier")
    body_site: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.TOOTH.bind(EXAMPLE), description="Anatomical location"
    )
    sub_site: list[CodeableConcept] = element(
        "CodeableConcept", max=UNBOUNDED, binding=vs.SURFACE.bind(EXAMPLE), description="Anatomical sub-location"
    )
    encounter: list[Reference] = element(
        "Reference", max=UNBOUNDED, targets=["Encounter"], description="Encounters related to this billed item"
    )
    detail: list[ClaimItemDetail] = element("Claim.Item.Detail", max=UNBOUNDED, description="Product or service provided")


class Claim(DomainResource):
    """Claim, pre-determination or pre-authorization."""

    type_name: ClassVar[str] = "Claim"

    identifier: list[Identifier] = element("Identifier", max=UNBOUNDED, description="Business Identifier for claim")
    status: Optional[str] = element(
        "code", min=1, binding=vs.FM_STATUS.bind(REQUIRED), description="active | cancelled | draft | entered-in-error"
    )
    type: Optional[CodeableConcept] = element(
        "CodeableConcept", min=1, binding=vs.CLAIM_TYPE.bind(EXTENSIBLE), description="Category or discipline"
    )
    sub_type: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.CLAIM_SUBTYPE.bind(EXAMPLE), description="More granular claim type"
    )
    use: Optional[str] = element(
        "code", min=1, binding=vs.CLAIM_USE.bind(REQUIRED), description="claim | preauthorization | predetermination"
    )
    patient: Optional[Reference] = element("Reference", min=1, targets=["Patient"], description="The recipient of the products and services")
    billable_period: Optional[Period] = element("Period", description="Relevant time frame for the claim")
    created: Optional[str] = element("dateTime", min=1, description="Resource creation date")
    enterer: Optional[Reference] = element(
        "Reference", targets=["Practitioner", "PractitionerRole"], description="Author of the claim"
    )
    insurer: Optional[Reference] = element("Reference", targets=["Organization"], description="Target")
    provider: Optional[Reference] = element(
        "Reference", min=1, targets=PROVIDERS, description="Party responsible for the claim"
    )
    priority: Optional[CodeableConcept] = element(
        "CodeableConcept", min=1, binding=vs.PROCESS_PRIORITY.bind(EXAMPLE), description="Desired processing urgency"
    )
    funds_reserve: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.FUNDS_RESERVE.bind(EXAMPLE), description="For whom to reserve funds"
    )
    related: list[ClaimRelated] = element("Claim.Related", max=UNBOUNDED, description="Prior or corollary claims")
    prescription: Optional[Reference] = element(
        "Reference", targets=["DeviceRequest", "MedicationRequest", "VisionPrescription"],
        description="Prescription authorizing services and products",
    )
    original_prescription: Optional[Reference] = element(
        "Reference", targets=["DeviceRequest", "MedicationRequest", "VisionPrescription"],
        description="Original prescription if superseded by fulfiller",
    )
    payee: Optional[ClaimPayee] = element("Claim.Payee", description="Recipient of benefits payable")
    referral: Optional[Reference] = element("Reference", targets=["ServiceRequest"], description="Treatment referral")
    facility: Optional[Reference] = element("Reference", targets=["Location"], description="Servicing facility")
    care_team: list[ClaimCareTeam] = element("Claim.CareTeam", max=UNBOUNDED, description="Members of the care team")
    supporting_info: list[ClaimSupportingInfo] = element(
        "Claim.SupportingInfo", max=UNBOUNDED, description="Supporting information"
    )
    diagnosis: list[ClaimDiagnosis] = element("Claim.Diagnosis", max=UNBOUNDED, description="Pertinent diagnosis information")
    procedure: list[ClaimProcedure] = element("Claim.Procedure", max=UNBOUNDED, description="Clinical procedures performed")
    insurance: list[ClaimInsurance] = element(
        "Claim.Insurance", min=1, max=UNBOUNDED, description="Patient insurance information"
    )
    accident: Optional[ClaimAccident] = element("Claim.Accident", description="Details of the event")
    item: list[ClaimItem] = element("Claim.Item", max=UNBOUNDED, description="Product or service provided")
    total: Optional[Money] = element("Money", description="Total claim cost")

    def item_by_sequence(self, sequence: int) -> Optional[ClaimItem]:
        """Return the line item with the given sequence number, if present."""
        for item in self.item:
            if item.sequence == sequence:
                return item
        return None
