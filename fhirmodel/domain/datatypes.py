"""General-purpose FHIR datatypes used by the resources.

Element and BackboneElement are the abstract bases: every datatype carries an
element ``id`` and ``extension`` list, and backbone elements (the nested
components of resources) add ``modifierExtension``.
"""

from decimal import Decimal
from typing import ClassVar, Optional

from pydantic import StrictBool, StrictInt

from fhirmodel.domain import value_sets as vs
from fhirmodel.domain.enums import BindingStrength
from fhirmodel.domain.metadata import UNBOUNDED, choice, element
from fhirmodel.domain.record import ChoiceValue, Record

REQUIRED = BindingStrength.REQUIRED
EXTENSIBLE = BindingStrength.EXTENSIBLE
PREFERRED = BindingStrength.PREFERRED
EXAMPLE = BindingStrength.EXAMPLE


class Element(Record):
    """Base for all datatypes."""

    id: Optional[str] = element("string", description="Unique id for inter-element referencing")
    extension: list["Extension"] = element("Extension", max=UNBOUNDED, description="Additional content defined by implementations")


class Extension(Element):
    type_name: ClassVar[str] = "Extension"

    url: Optional[str] = element("uri", min=1, description="Identifies the meaning of the extension")
    value: Optional[ChoiceValue] = choice(
        "base64Binary", "boolean", "code", "date", "dateTime", "decimal", "integer",
        "string", "uri", "Address", "Attachment", "CodeableConcept", "Coding",
        "Identifier", "Money", "Period", "Quantity", "Range", "Ratio", "Reference",
        description="Value of extension",
    )


Element.model_rebuild()
Extension.model_rebuild()


class BackboneElement(Element):
    """Base for nested resource components."""

    modifier_extension: list[Extension] = element(
        "Extension", max=UNBOUNDED, description="Extensions that cannot be ignored even if unrecognized"
    )


class Coding(Element):
    type_name: ClassVar[str] = "Coding"

    system: Optional[str] = element("uri", description="Identity of the terminology system")
    version: Optional[str] = element("string", description="Version of the system - if relevant")
    code: Optional[str] = element("code", description="Symbol in syntax defined by the system")
    display: Optional[str] = element("string", description="Representation defined by the system")
    user_selected: Optional[StrictBool] = element("boolean", description="If this coding was chosen directly by the user")


class CodeableConcept(Element):
    """Concept defined by one or more codings plus optional text."""

    type_name: ClassVar[str] = "CodeableConcept"

    coding: list[Coding] = element("Coding", max=UNBOUNDED, description="Code defined by a terminology system")
    text: Optional[str] = element("string", description="Plain text representation of the concept")

    @classmethod
    def of(cls, system: str, code: str, display: Optional[str] = None) -> "CodeableConcept":
        """Shortcut for a concept with a single coding."""
        return cls(coding=[Coding(system=system, code=code, display=display)])


class Period(Element):
    type_name: ClassVar[str] = "Period"

    start: Optional[str] = element("dateTime", description="Starting time with inclusive boundary")
    end: Optional[str] = element("dateTime", description="End time with inclusive boundary, if not ongoing")


class Quantity(Element):
    type_name: ClassVar[str] = "Quantity"

    value: Optional[Decimal] = element("decimal", description="Numerical value (with implicit precision)")
    comparator: Optional[str] = element(
        "code", binding=vs.QUANTITY_COMPARATOR.bind(REQUIRED), description="< | <= | >= | > - how to understand the value"
    )
    unit: Optional[str] = element("string", description="Unit representation")
    system: Optional[str] = element("uri", description="System that defines coded unit form")
    code: Optional[str] = element("code", description="Coded form of the unit")


class Duration(Quantity):
    type_name: ClassVar[str] = "Duration"


class Money(Element):
    type_name: ClassVar[str] = "Money"

    value: Optional[Decimal] = element("decimal", description="Numerical value (with implicit precision)")
    currency: Optional[str] = element("code", description="ISO 4217 Currency Code")


class Range(Element):
    type_name: ClassVar[str] = "Range"

    low: Optional[Quantity] = element("Quantity", description="Low limit")
    high: Optional[Quantity] = element("Quantity", description="High limit")


class Ratio(Element):
    type_name: ClassVar[str] = "Ratio"

    numerator: Optional[Quantity] = element("Quantity", description="Numerator value")
    denominator: Optional[Quantity] = element("Quantity", description="Denominator value")


class Identifier(Element):
    type_name: ClassVar[str] = "Identifier"

    use: Optional[str] = element(
        "code", binding=vs.IDENTIFIER_USE.bind(REQUIRED), description="usual | official | temp | secondary | old"
    )
    type: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.IDENTIFIER_TYPE.bind(EXTENSIBLE), description="Description of identifier"
    )
    system: Optional[str] = element("uri", description="The namespace for the identifier value")
    value: Optional[str] = element("string", description="The value that is unique")
    period: Optional[Period] = element("Period", description="Time period when id is/was valid for use")
    assigner: Optional["Reference"] = element(
        "Reference", targets=["Organization"], description="Organization that issued id"
    )


class Reference(Element):
    """Reference to another resource by literal URL or by identifier."""

    type_name: ClassVar[str] = "Reference"

    reference: Optional[str] = element("string", description="Literal reference, relative, internal or absolute URL")
    type: Optional[str] = element("uri", description="Type the reference refers to (e.g. Patient)")
    identifier: Optional[Identifier] = element("Identifier", description="Logical reference, when literal reference is not known")
    display: Optional[str] = element("string", description="Text alternative for the resource")


Identifier.model_rebuild()


class Attachment(Element):
    type_name: ClassVar[str] = "Attachment"

    content_type: Optional[str] = element("code", description="Mime type of the content, with charset etc.")
    language: Optional[str] = element(
        "code", binding=vs.LANGUAGES.bind(PREFERRED), description="Human language of the content (BCP-47)"
    )
    data: Optional[str] = element("base64Binary", description="Data inline, base64ed")
    url: Optional[str] = element("url", description="Uri where the data can be found")
    size: Optional[StrictInt] = element("unsignedInt", description="Number of bytes of content (if url provided)")
    hash: Optional[str] = element("base64Binary", description="Hash of the data (sha-1, base64ed)")
    title: Optional[str] = element("string", description="Label to display in place of the data")
    creation: Optional[str] = element("dateTime", description="Date attachment was first created")


class Address(Element):
    type_name: ClassVar[str] = "Address"

    use: Optional[str] = element(
        "code", binding=vs.ADDRESS_USE.bind(REQUIRED), description="home | work | temp | old | billing"
    )
    type: Optional[str] = element(
        "code", binding=vs.ADDRESS_TYPE.bind(REQUIRED), description="postal | physical | both"
    )
    text: Optional[str] = element("string", description="Text representation of the address")
    line: list[str] = element("string", max=UNBOUNDED, description="Street name, number, direction & P.O. Box etc.")
    city: Optional[str] = element("string", description="Name of city, town etc.")
    district: Optional[str] = element("string", description="District name (aka county)")
    state: Optional[str] = element("string", description="Sub-unit of country (abbreviations ok)")
    postal_code: Optional[str] = element("string", description="Postal code for area")
    country: Optional[str] = element("string", description="Country (e.g. can be ISO 3166 2 or 3 letter code)")
    period: Optional[Period] = element("Period", description="Time period when address was/is in use")


class Meta(Element):
    type_name: ClassVar[str] = "Meta"

    version_id: Optional[str] = element("id", description="Version specific identifier")
    last_updated: Optional[str] = element("instant", description="When the resource version last changed")
    source: Optional[str] = element("uri", description="Identifies where the resource comes from")
    profile: list[str] = element("canonical", max=UNBOUNDED, description="Profiles this resource claims to conform to")
    security: list[Coding] = element("Coding", max=UNBOUNDED, description="Security Labels applied to this resource")
    tag: list[Coding] = element(
        "Coding", max=UNBOUNDED, binding=vs.COMMON_TAGS.bind(EXAMPLE),
        description="Tags applied to this resource",
    )


class Narrative(Element):
    """Human-readable summary of a resource as limited XHTML."""

    type_name: ClassVar[str] = "Narrative"

    status: Optional[str] = element(
        "code", min=1, binding=vs.NARRATIVE_STATUS.bind(REQUIRED),
        description="generated | extensions | additional | empty",
    )
    div: Optional[str] = element("xhtml", min=1, description="Limited xhtml content")


class DosageDoseAndRate(Element):
    type_name: ClassVar[str] = "Dosage.DoseAndRate"

    type: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.DOSE_RATE_TYPE.bind(EXAMPLE), description="The kind of dose or rate specified"
    )
    dose: Optional[ChoiceValue] = choice("Range", "Quantity", description="Amount of medication per dose")
    rate: Optional[ChoiceValue] = choice("Ratio", "Range", "Quantity", description="Amount of medication per unit of time")


class Dosage(BackboneElement):
    """How a medication is or should be taken. Timing is not modelled."""

    type_name: ClassVar[str] = "Dosage"

    sequence: Optional[StrictInt] = element("integer", description="The order of the dosage instructions")
    text: Optional[str] = element("string", description="Free text dosage instructions")
    additional_instruction: list[CodeableConcept] = element(
        "CodeableConcept", max=UNBOUNDED, description="Supplemental instruction or warnings to the patient"
    )
    patient_instruction: Optional[str] = element("string", description="Patient or consumer oriented instructions")
    as_needed: Optional[ChoiceValue] = choice(
        "boolean", "CodeableConcept", description="Take \"as needed\" (for x)"
    )
    site: Optional[CodeableConcept] = element("CodeableConcept", description="Body site to administer to")
    route: Optional[CodeableConcept] = element("CodeableConcept", description="How drug should enter body")
    method: Optional[CodeableConcept] = element("CodeableConcept", description="Technique for administering medication")
    dose_and_rate: list[DosageDoseAndRate] = element(
        "Dosage.DoseAndRate", max=UNBOUNDED, description="Amount of medication administered"
    )
    max_dose_per_period: Optional[Ratio] = element("Ratio", description="Upper limit on medication per unit of time")
    max_dose_per_administration: Optional[Quantity] = element(
        "Quantity", description="Upper limit on medication per administration"
    )
    max_dose_per_lifetime: Optional[Quantity] = element(
        "Quantity", description="Upper limit on medication per lifetime of the patient"
    )
