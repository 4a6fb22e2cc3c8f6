"""MedicationKnowledge resource: definitional information about a medication."""

from typing import ClassVar, Optional

from pydantic import StrictBool

from fhirmodel.domain import value_sets as vs
from fhirmodel.domain.datatypes import (
    EXAMPLE,
    REQUIRED,
    BackboneElement,
    CodeableConcept,
    Dosage,
    Duration,
    Money,
    Quantity,
    Ratio,
    Reference,
)
from fhirmodel.domain.metadata import UNBOUNDED, choice, element
from fhirmodel.domain.record import ChoiceValue
from fhirmodel.domain.resources.base import DomainResource


class MedicationKnowledgeRelatedMedicationKnowledge(BackboneElement):
    type_name: ClassVar[str] = "MedicationKnowledge.RelatedMedicationKnowledge"

    type: Optional[CodeableConcept] = element("CodeableConcept", min=1, description="Category of medicationKnowledge")
    reference: list[Reference] = element(
        "Reference", min=1, max=UNBOUNDED, targets=["MedicationKnowledge"], description="Associated documentation about the associated medication knowledge"
    )


class MedicationKnowledgeMonograph(BackboneElement):
    type_name: ClassVar[str] = "MedicationKnowledge.Monograph"

    type: Optional[CodeableConcept] = element("CodeableConcept", description="The category of medication document")
    source: Optional[Reference] = element(
        "Reference", targets=["DocumentReference", "Media"], description="Associated documentation about the medication"
    )


class MedicationKnowledgeIngredient(BackboneElement):
    type_name: ClassVar[str] = "MedicationKnowledge.Ingredient"

    item: Optional[ChoiceValue] = choice(
        "CodeableConcept", "Reference", min=1, targets=["Substance"], description="Medication(s) or substance(s) contained in the medication"
    )
    is_active: Optional[StrictBool] = element("boolean", description="Active ingredient indicator")
    strength: Optional[Ratio] = element("Ratio", description="Quantity of ingredient present")


class MedicationKnowledgeCost(BackboneElement):
    type_name: ClassVar[str] = "MedicationKnowledge.Cost"

    type: Optional[CodeableConcept] = element("CodeableConcept", min=1, description="The category of the cost information")
    source: Optional[str] = element("string", description="The source or owner for the price information")
    cost: Optional[Money] = element("Money", min=1, description="The price of the medication")


class MedicationKnowledgeMonitoringProgram(BackboneElement):
    type_name: ClassVar[str] = "MedicationKnowledge.MonitoringProgram"

    type: Optional[CodeableConcept] = element("CodeableConcept", description="Type of program under which the medication is monitored")
    name: Optional[str] = element("string", description="Name of the reviewing program")


class MedicationKnowledgeAdministrationGuidelinesDosage(BackboneElement):
    type_name: ClassVar[str] = "MedicationKnowledge.AdministrationGuidelines.Dosage"

    type: Optional[CodeableConcept] = element("CodeableConcept", min=1, description="Type of dosage")
    dosage: list[Dosage] = element("Dosage", min=1, max=UNBOUNDED, description="Dosage for the medication for the specific guidelines")


class MedicationKnowledgeAdministrationGuidelinesPatientCharacteristics(BackboneElement):
    type_name: ClassVar[str] = "MedicationKnowledge.AdministrationGuidelines.PatientCharacteristics"

    characteristic: Optional[ChoiceValue] = choice(
        "CodeableConcept", "Quantity", min=1, description="Specific characteristic that is relevant to the administration guideline"
    )
    value: list[str] = element("string", max=UNBOUNDED, description="The specific characteristic")


class MedicationKnowledgeAdministrationGuidelines(BackboneElement):
    type_name: ClassVar[str] = "MedicationKnowledge.AdministrationGuidelines"

    dosage: list[MedicationKnowledgeAdministrationGuidelinesDosage] = element(
        "MedicationKnowledge.AdministrationGuidelines.Dosage", max=UNBOUNDED, description="Dosage for the medication for the specific guidelines"
    )
    indication: Optional[ChoiceValue] = choice(
        "CodeableConcept", "Reference", targets=["ObservationDefinition"], description="Indication for use that apply to the specific administration guidelines"
    )
    patient_characteristics: list[MedicationKnowledgeAdministrationGuidelinesPatientCharacteristics] = element(
        "MedicationKnowledge.AdministrationGuidelines.PatientCharacteristics", max=UNBOUNDED,
        description="Characteristics of the patient that are relevant to the administration guidelines",
    )


class MedicationKnowledgeMedicineClassification(BackboneElement):
    type_name: ClassVar[str] = "MedicationKnowledge.MedicineClassification"

    type: Optional[CodeableConcept] = element("CodeableConcept", min=1, description="The type of category for the medication")
    classification: list[CodeableConcept] = element(
        "CodeableConcept", max=UNBOUNDED, description="Specific category assigned to the medication"
    )


class MedicationKnowledgePackaging(BackboneElement):
    type_name: ClassVar[str] = "MedicationKnowledge.Packaging"

    type: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.PACKAGE_TYPE.bind(EXAMPLE), description="A code that defines the specific type of packaging"
    )
    quantity: Optional[Quantity] = element("Quantity", description="The number of product units the package would contain")


class MedicationKnowledgeDrugCharacteristic(BackboneElement):
    type_name: ClassVar[str] = "MedicationKnowledge.DrugCharacteristic"

    type: Optional[CodeableConcept] = element(
        "CodeableConcept", binding=vs.DRUG_CHARACTERISTIC.bind(EXAMPLE), description="Code specifying the type of characteristic of medication"
    )
    value: Optional[ChoiceValue] = choice(
        "CodeableConcept", "string", "Quantity", "base64Binary", description="Description of the characteristic"
    )


class MedicationKnowledgeRegulatorySubstitution(BackboneElement):
    type_name: ClassVar[str] = "MedicationKnowledge.Regulatory.Substitution"

    type: Optional[CodeableConcept] = element("CodeableConcept", min=1, description="Specifies the type of substitution allowed")
    allowed: Optional[StrictBool] = element("boolean", min=1, description="Specifies if regulation allows for changes in the medication when dispensing")


class MedicationKnowledgeRegulatorySchedule(BackboneElement):
    type_name: ClassVar[str] = "MedicationKnowledge.Regulatory.Schedule"

    schedule: Optional[CodeableConcept] = element("CodeableConcept", min=1, description="Specifies the specific drug schedule")


class MedicationKnowledgeRegulatoryMaxDispense(BackboneElement):
    type_name: ClassVar[str] = "MedicationKnowledge.Regulatory.MaxDispense"

    quantity: Optional[Quantity] = element("Quantity", min=1, description="The maximum number of units of the medication that can be dispensed")
    period: Optional[Duration] = element("Duration", description="The period that applies to the maximum number of units")


class MedicationKnowledgeRegulatory(BackboneElement):
    type_name: ClassVar[str] = "MedicationKnowledge.Regulatory"

    regulatory_authority: Optional[Reference] = element(
        "Reference", min=1, targets=["Organization"], description="Specifies the authority of the regulation"
    )
    substitution: list[MedicationKnowledgeRegulatorySubstitution] = element(
        "MedicationKnowledge.Regulatory.Substitution", max=UNBOUNDED, description="Specifies if changes are allowed when dispensing a medication from a regulatory perspective"
    )
    schedule: list[MedicationKnowledgeRegulatorySchedule] = element(
        "MedicationKnowledge.Regulatory.Schedule", max=UNBOUNDED, description="Specifies the schedule of a medication in jurisdiction"
    )
    max_dispense: Optional[MedicationKnowledgeRegulatoryMaxDispense] = element(
        "MedicationKnowledge.Regulatory.MaxDispense", description="The maximum number of units of the medication that can be dispensed in a period"
    )


class MedicationKnowledgeKinetics(BackboneElement):
    type_name: ClassVar[str] = "MedicationKnowledge.Kinetics"

    area_under_curve: list[Quantity] = element("Quantity", max=UNBOUNDED, description="The drug concentration measured at certain discrete points in time")
    lethal_dose50: list[Quantity] = element("Quantity", max=UNBOUNDED, description="The median lethal dose of a drug")
    half_life_period: Optional[Duration] = element("Duration", description="Time required for concentration in the body to decrease by half")


class MedicationKnowledge(DomainResource):
    """Definition of a medication: codes, ingredients, costs, packaging and regulation."""

    type_name: ClassVar[str] = "MedicationKnowledge"

    code: Optional[CodeableConcept] = element("CodeableConcept", description="Code that identifies this medication")
    status: Optional[str] = element(
        "code", binding=vs.MEDICATION_KNOWLEDGE_STATUS.bind(REQUIRED), description="active | inactive | entered-in-error"
    )
    manufacturer: Optional[Reference] = element(
        "Reference", targets=["Organization"], description="Manufacturer of the item"
    )
    dose_form: Optional[CodeableConcept] = element("CodeableConcept", description="powder | tablets | capsule +")
    amount: Optional[Quantity] = element("Quantity", description="Amount of drug in package")
    synonym: list[str] = element("string", max=UNBOUNDED, description="Additional names for a medication")
    related_medication_knowledge: list[MedicationKnowledgeRelatedMedicationKnowledge] = element(
        "MedicationKnowledge.RelatedMedicationKnowledge", max=UNBOUNDED, description="Associated or related medication information"
    )
    associated_medication: list[Reference] = element(
        "Reference", max=UNBOUNDED, targets=["Medication"], description="A medication resource that is associated with this medication"
    )
    product_type: list[CodeableConcept] = element(
        "CodeableConcept", max=UNBOUNDED, description="Category of the medication or product"
    )
    monograph: list[MedicationKnowledgeMonograph] = element(
        "MedicationKnowledge.Monograph", max=UNBOUNDED, description="Associated documentation about the medication"
    )
    ingredient: list[MedicationKnowledgeIngredient] = element(
        "MedicationKnowledge.Ingredient", max=UNBOUNDED, description="Active or inactive ingredient"
    )
    preparation_instruction: Optional[str] = element("markdown", description="The instructions for preparing the medication")
    intended_route: list[CodeableConcept] = element(
        "CodeableConcept", max=UNBOUNDED, description="The intended or approved route of administration"
    )
    cost: list[MedicationKnowledgeCost] = element(
        "MedicationKnowledge.Cost", max=UNBOUNDED, description="The pricing of the medication"
    )
    monitoring_program: list[MedicationKnowledgeMonitoringProgram] = element(
        "MedicationKnowledge.MonitoringProgram", max=UNBOUNDED, description="Program under which a medication is reviewed"
    )
    administration_guidelines: list[MedicationKnowledgeAdministrationGuidelines] = element(
        "MedicationKnowledge.AdministrationGuidelines", max=UNBOUNDED, description="Guidelines for administration of the medication"
    )
    medicine_classification: list[MedicationKnowledgeMedicineClassification] = element(
        "MedicationKnowledge.MedicineClassification", max=UNBOUNDED, description="Categorization of the medication within a formulary or classification system"
    )
    packaging: Optional[MedicationKnowledgePackaging] = element(
        "MedicationKnowledge.Packaging", description="Details about packaged medications"
    )
    drug_characteristic: list[MedicationKnowledgeDrugCharacteristic] = element(
        "MedicationKnowledge.DrugCharacteristic", max=UNBOUNDED, description="Specifies descriptive properties of the medicine"
    )
    contraindication: list[Reference] = element(
        "Reference", max=UNBOUNDED, targets=["DetectedIssue"], description="Potential clinical issue with or between medication(s)"
    )
    regulatory: list[MedicationKnowledgeRegulatory] = element(
        "MedicationKnowledge.Regulatory", max=UNBOUNDED, description="Regulatory information about a medication"
    )
    kinetics: list[MedicationKnowledgeKinetics] = element(
        "MedicationKnowledge.Kinetics", max=UNBOUNDED, description="The time course of drug absorption, distribution, metabolism and excretion of a medication from the body"
    )
