"""Code bindings and the three-tier binding check.

A coded field is bound to a value set with a strength. The check never raises:
it returns a ``Violation`` whose kind and severity follow the strength.

    required            -> invalid-code, error
    extensible          -> binding-mismatch, warning
    preferred / example -> binding-mismatch, information
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from fhirmodel.domain.enums import BindingStrength, Severity, ViolationKind
from fhirmodel.domain.ports import Violation

_OUTCOMES = {
    BindingStrength.REQUIRED: (ViolationKind.INVALID_CODE, Severity.ERROR),
    BindingStrength.EXTENSIBLE: (ViolationKind.BINDING_MISMATCH, Severity.WARNING),
    BindingStrength.PREFERRED: (ViolationKind.BINDING_MISMATCH, Severity.INFORMATION),
    BindingStrength.EXAMPLE: (ViolationKind.BINDING_MISMATCH, Severity.INFORMATION),
}


class ValueSet(BaseModel):
    """An enumerated value set: canonical URL plus codes grouped by code system."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="Canonical URL of the value set")
    codes: dict[str, tuple[str, ...]] = Field(
        default_factory=dict,
        description="Allowed codes keyed by code system URI"
    )

    def bind(self, strength: BindingStrength) -> "CodeBinding":
        """Create a binding of this value set at ``strength``."""
        return CodeBinding(value_set=self, strength=BindingStrength(strength))

    def contains(self, system: Optional[str], code: str) -> bool:
        """Check membership. A missing system matches on the code alone."""
        if system is None:
            return any(code in codes for codes in self.codes.values())
        return code in self.codes.get(system, ())


class CodeBinding(BaseModel):
    """Association of a coded field with a value set and a strength."""

    model_config = ConfigDict(frozen=True)

    value_set: ValueSet
    strength: BindingStrength

    @property
    def url(self) -> str:
        return self.value_set.url


def extract_codes(value: Any) -> Optional[list[tuple[Optional[str], str]]]:
    """Pull ``(system, code)`` pairs out of a coded value.

    Returns None when the value carries nothing to check (a Reference, a
    Quantity without a code). A CodeableConcept without codings yields an
    empty list, which never matches.
    """
    if isinstance(value, str):
        return [(None, value)]
    type_name = getattr(value, "type_name", None)
    if type_name == "Coding":
        return [(value.system, value.code)] if value.code is not None else []
    if type_name == "CodeableConcept":
        return [(coding.system, coding.code) for coding in value.coding if coding.code is not None]
    if type_name in ("Quantity", "Duration"):
        return [(value.system, value.code)] if value.code is not None else None
    return None


def _describe(pairs: list[tuple[Optional[str], str]]) -> str:
    if not pairs:
        return "no coding"
    return ", ".join(f"{system}#{code}" if system else code for system, code in pairs)


def check_binding(binding: CodeBinding, value: Any, path: str, field: str) -> Optional[Violation]:
    """Check one populated value against its binding.

    Parameters:
        binding: The field's binding
        value: A code string, Coding, CodeableConcept or Quantity
        path: Location reported in the violation
        field: Wire name of the field

    Returns:
        Violation if no code in the value belongs to the value set, else None
    """
    if not binding.value_set.codes:
        return None
    pairs = extract_codes(value)
    if pairs is None:
        return None
    if any(binding.value_set.contains(system, code) for system, code in pairs):
        return None

    kind, severity = _OUTCOMES[binding.strength]
    return Violation(
        kind=kind,
        severity=severity,
        path=path,
        field=field,
        message=(
            f"{_describe(pairs)} is not in {binding.strength.value} value set {binding.url}"
        ),
    )
