"""ClaimResponse resource: the adjudication of a Claim."""

from decimal import Decimal
from typing import ClassVar, Optional

from pydantic import StrictBool, StrictInt

from fhirmodel.domain import value_sets as vs
from fhirmodel.domain.datatypes import (
    EXAMPLE,
    EXTENSIBLE,
    PREFERRED,
    REQUIRED,
    Attachment,
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
from fhirmodel.domain.resources.claim import PROVIDERS


class ClaimResponseItemAdjudication(BackboneElement):
    type_name: ClassVar[str] = "ClaimResponse.Item.Adjudication"

    category: Optional[CodeableConcept] = element(
        "CodeableConcept", min=1, binding=vs.ADJUDICATION.bind(EXAMPLE), description="Type of adjudication information"
    )
    reason: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.ADJUDICATION_REASON.bind(EXAMPLE), description="Explanation of adjudication outcome"
    )
    amount: Optional[Money] = element("Money", description="Monetary amount")
    value: Optional[Decimal] = element("decimal", description="Non-monetary value")


class ClaimResponseItemDetailSubDetail(BackboneElement):
    type_name: ClassVar[str] = "ClaimResponse.Item.Detail.SubDetail"

    sub_detail_sequence: Optional[StrictInt] = element("positiveInt", min=1, description="Claim sub-detail instance identifier")
    note_number: list[StrictInt] = element("positiveInt", max=UNBOUNDED, description="Applicable note numbers")
    adjudication: list[ClaimResponseItemAdjudication] = element(
        "ClaimResponse.Item.Adjudication", max=UNBOUNDED, description="Subdetail level adjudication details"
    )


class ClaimResponseItemDetail(BackboneElement):
    type_name: ClassVar[str] = "ClaimResponse.Item.Detail"

    detail_sequence: Optional[StrictInt] = element("positiveInt", min=1, description="Claim detail instance identifier")
    note_number: list[StrictInt] = element("positiveInt", max=UNBOUNDED, description="Applicable note numbers")
    adjudication: list[ClaimResponseItemAdjudication] = element(
        "ClaimResponse.Item.Adjudication", min=1, max=UNBOUNDED, description="Detail level adjudication details"
    )
    sub_detail: list[ClaimResponseItemDetailSubDetail] = element(
        "ClaimResponse.Item.Detail.SubDetail", max=UNBOUNDED, description="Adjudication for claim sub-details"
    )


class ClaimResponseItem(BackboneElement):
    type_name: ClassVar[str] = "ClaimResponse.Item"

    item_sequence: Optional[StrictInt] = element("positiveInt", min=1, description="Claim item instance identifier")
    note_number: list[StrictInt] = element("positiveInt", max=UNBOUNDED, description="Applicable note numbers")
    adjudication: list[ClaimResponseItemAdjudication] = element(
        "ClaimResponse.Item.Adjudication", min=1, max=UNBOUNDED, description="Adjudication details"
    )
    detail: list[ClaimResponseItemDetail] = element(
        "ClaimResponse.Item.Detail", max=UNBOUNDED, description="Adjudication for claim details"
    )


class ClaimResponseAddItemDetailSubDetail(BackboneElement):
    type_name: ClassVar[str] = "ClaimResponse.AddItem.Detail.SubDetail"

    product_or_service: Optional[CodeableConcept] = element(
        "CodeableConcept", min=1, binding=vs.SERVICE_USCLS.bind(EXAMPLE), description="Billing, service, product, or drug code"
    )
    modifier: list[CodeableConcept] = element(
        "CodeableConcept", max=UNBOUNDED, binding=vs.CLAIM_MODIFIERS.bind(EXAMPLE), description="Service/Product billing modifiers"
    )
    quantity: Optional[Quantity] = element("Quantity", description="Count of products or services")
    unit_price: Optional[Money] = element("Money", description="Fee, charge or cost per item")
    factor: Optional[Decimal] = element("decimal", description="Price scaling factor")
    net: Optional[Money] = element("Money", description="Total item cost")
    note_number: list[StrictInt] = element("positiveInt", max=UNBOUNDED, description="Applicable note numbers")
    adjudication: list[ClaimResponseItemAdjudication] = element(
        "ClaimResponse.Item.Adjudication", min=1, max=UNBOUNDED, description="Added items adjudication"
    )


class ClaimResponseAddItemDetail(BackboneElement):
    type_name: ClassVar[str] = "ClaimResponse.AddItem.Detail"

    product_or_service: Optional[CodeableConcept] = element(
        "CodeableConcept", min=1, binding=vs.SERVICE_USCLS.bind(EXAMPLE), description="Billing, service, product, or drug code"
    )
    modifier: list[CodeableConcept] = element(
        "CodeableConcept", max=UNBOUNDED, binding=vs.CLAIM_MODIFIERS.bind(EXAMPLE), description="Service/Product billing modifiers"
    )
    quantity: Optional[Quantity] = element("Quantity", description="Count of products or services")
    unit_price: Optional[Money] = element("Money", description="Fee, charge or cost per item")
    factor: Optional[Decimal] = element("decimal", description="Price scaling factor")
    net: Optional[Money] = element("Money", description="Total item cost")
    note_number: list[StrictInt] = element("positiveInt", max=UNBOUNDED, description="Applicable note numbers")
    adjudication: list[ClaimResponseItemAdjudication] = element(
        "ClaimResponse.Item.Adjudication", min=1, max=UNBOUNDED, description="Added items adjudication"
    )
    sub_detail: list[ClaimResponseAddItemDetailSubDetail] = element(
        "ClaimResponse.AddItem.Detail.SubDetail", max=UNBOUNDED, description="Insurer added line items"
    )


class ClaimResponseAddItem(BackboneElement):
    type_name: ClassVar[str] = "ClaimResponse.AddItem"

    item_sequence: list[StrictInt] = element("positiveInt", max=UNBOUNDED, description="Item sequence number")
    detail_sequence: list[StrictInt] = element("positiveInt", max=UNBOUNDED, description="Detail sequence number")
    subdetail_sequence: list[StrictInt] = element("positiveInt", max=UNBOUNDED, description="Subdetail sequence number")
    provider: list[Reference] = element(
        "Reference", max=UNBOUNDED, targets=PROVIDERS, description="Authorized providers"
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
    serviced: Optional[ChoiceValue] = choice("date", "Period", description="Date or dates of service or product delivery")
    location: Optional[ChoiceValue] = choice(
        "CodeableConcept", "Address", "Reference", binding=vs.SERVICE_PLACE.bind(EXAMPLE), targets=["Location"],
        description="Place of service or where product was supplied",
    )
    quantity: Optional[Quantity] = element("Quantity", description="Count of products or services")
    unit_price: Optional[Money] = element("Money", description="Fee, charge or cost per item")
    factor: Optional[Decimal] = element("decimal", description="Price scaling factor")
    net: Optional[Money] = element("Money", description="Total item cost")
    body_site: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.TOOTH.bind(EXAMPLE), description="Anatomical location"
    )
    sub_site: list[CodeableConcept] = element(
        "CodeableConcept", max=UNBOUNDED, binding=vs.SURFACE.bind(EXAMPLE), description="Anatomical sub-location"
    )
    note_number: list[StrictInt] = element("positiveInt", max=UNBOUNDED, description="Applicable note numbers")
    adjudication: list[ClaimResponseItemAdjudication] = element(
        "ClaimResponse.Item.Adjudication", min=1, max=UNBOUNDED, description="Added items adjudication"
    )
    detail: list[ClaimResponseAddItemDetail] = element(
        "ClaimResponse.AddItem.Detail", max=UNBOUNDED, description="Insurer added line details"
    )


class ClaimResponseTotal(BackboneElement):
    type_name: ClassVar[str] = "ClaimResponse.Total"

    category: Optional[CodeableConcept] = element(
        "CodeableConcept", min=1, binding=vs.ADJUDICATION.bind(EXAMPLE), description="Type of adjudication information"
    )
    amount: Optional[Money] = element("Money", min=1, description="Financial total for the category")


class ClaimResponsePayment(BackboneElement):
    type_name: ClassVar[str] = "ClaimResponse.Payment"

    type: Optional[CodeableConcept] = element(
        "CodeableConcept", min=1, binding=vs.PAYMENT_TYPE.bind(EXAMPLE), description="Partial or complete payment"
    )
    adjustment: Optional[Money] = element("Money", description="Payment adjustment for non-claim issues")
    adjustment_reason: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.PAYMENT_ADJUSTMENT_REASON.bind(EXAMPLE), description="Explanation for the adjustment"
    )
    date: Optional[str] = element("date", description="Expected date of payment")
    amount: Optional[Money] = element("Money", min=1, description="Payable amount after adjustment")
    identifier: Optional[Identifier] = element("Identifier", description="Business identifier for the payment")


class ClaimResponseProcessNote(BackboneElement):
    type_name: ClassVar[str] = "ClaimResponse.ProcessNote"

    number: Optional[StrictInt] = element("positiveInt", description="Note instance identifier")
    type: Optional[str] = element(
        "code", binding=vs.NOTE_TYPE.bind(REQUIRED), description="display | print | printoper"
    )
    text: Optional[str] = element("string", min=1, description="Note explanatory text")
    language: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.LANGUAGES.bind(PREFERRED), description="Language of the text"
    )


class ClaimResponseInsurance(BackboneElement):
    type_name: ClassVar[str] = "ClaimResponse.Insurance"

    sequence: Optional[StrictInt] = element("positiveInt", min=1, description="Insurance instance identifier")
    focal: Optional[StrictBool] = element("boolean", min=1, description="Coverage to be used for adjudication")
    coverage: Optional[Reference] = element("Reference", min=1, targets=["Coverage"], description="Insurance information")
    business_arrangement: Optional[str] = element("string", description="Additional provider contract number")
    claim_response: Optional[Reference] = element(
        "Reference", targets=["ClaimResponse"], description="Adjudication results"
    )


class ClaimResponseError(BackboneElement):
    type_name: ClassVar[str] = "ClaimResponse.Error"

    item_sequence: Optional[StrictInt] = element("positiveInt", description="Item sequence number")
    detail_sequence: Optional[StrictInt] = element("positiveInt", description="Detail sequence number")
    sub_detail_sequence: Optional[StrictInt] = element("positiveInt", description="Subdetail sequence number")
    code: Optional[CodeableConcept] = element(
        "CodeableConcept", min=1, binding=vs.ADJUDICATION_ERROR.bind(EXAMPLE), description="Error code detailing processing issues"
    )


class ClaimResponse(DomainResource):
    """Response to a claim predetermination or preauthorization."""

    type_name: ClassVar[str] = "ClaimResponse"

    identifier: list[Identifier] = element("Identifier", max=UNBOUNDED, description="Business Identifier for a claim response")
    status: Optional[str] = element(
        "code", min=1, binding=vs.FM_STATUS.bind(REQUIRED), description="active | cancelled | draft | entered-in-error"
    )
    type: Optional[CodeableConcept] = element(
        "CodeableConcept", min=1, binding=vs.CLAIM_TYPE.bind(EXTENSIBLE), description="More granular claim type"
    )
    sub_type: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.CLAIM_SUBTYPE.bind(EXAMPLE), description="More granular claim type"
    )
    use: Optional[str] = element(
        "code", min=1, binding=vs.CLAIM_USE.bind(REQUIRED), description="claim | preauthorization | predetermination"
    )
    patient: Optional[Reference] = element(
        "Reference", min=1, targets=["Patient"], description="The recipient of the products and services"
    )
    created: Optional[str] = element("dateTime", min=1, description="Response creation date")
    insurer: Optional[Reference] = element(
        "Reference", min=1, targets=["Organization"], description="Party responsible for reimbursement"
    )
    requestor: Optional[Reference] = element("Reference", targets=PROVIDERS, description="Party responsible for the claim")
    request: Optional[Reference] = element("Reference", targets=["Claim"], description="Id of resource triggering adjudication")
    outcome: Optional[str] = element(
        "code", min=1, binding=vs.REMITTANCE_OUTCOME.bind(REQUIRED), description="queued | complete | error | partial"
    )
    disposition: Optional[str] = element("string", description="Disposition Message")
    pre_auth_ref: Optional[str] = element("string", description="Preauthorization reference")
    pre_auth_period: Optional[Period] = element("Period", description="Preauthorization reference effective period")
    payee_type: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.PAYEE_TYPE.bind(EXAMPLE), description="Party to be paid any benefits payable"
    )
    item: list[ClaimResponseItem] = element(
        "ClaimResponse.Item", max=UNBOUNDED, description="Adjudication for claim line items"
    )
    add_item: list[ClaimResponseAddItem] = element(
        "ClaimResponse.AddItem", max=UNBOUNDED, description="Insurer added line items"
    )
    adjudication: list[ClaimResponseItemAdjudication] = element(
        "ClaimResponse.Item.Adjudication", max=UNBOUNDED, description="Header-level adjudication"
    )
    total: list[ClaimResponseTotal] = element("ClaimResponse.Total", max=UNBOUNDED, description="Adjudication totals")
    payment: Optional[ClaimResponsePayment] = element("ClaimResponse.Payment", description="Payment Details")
    funds_reserve: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.FUNDS_RESERVE.bind(EXAMPLE), description="Funds reserved status"
    )
    form_code: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.FORMS.bind(EXAMPLE), description="Printed form identifier"
    )
    form: Optional[Attachment] = element("Attachment", description="Printed reference or actual form")
    process_note: list[ClaimResponseProcessNote] = element(
        "ClaimResponse.ProcessNote", max=UNBOUNDED, description="Note concerning adjudication"
    )
    communication_request: list[Reference] = element(
        "Reference", max=UNBOUNDED, targets=["CommunicationRequest"], description="Request for additional information"
    )
    insurance: list[ClaimResponseInsurance] = element(
        "ClaimResponse.Insurance", max=UNBOUNDED, description="Patient insurance information"
    )
    error: list[ClaimResponseError] = element(
        "ClaimResponse.Error", max=UNBOUNDED, description="Processing errors"
    )
