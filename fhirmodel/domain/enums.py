"""Domain enumerations shared by the record runtime, binding checker and codecs."""

from enum import Enum


class BindingStrength(str, Enum):
    """How strongly a coded field is tied to its value set."""
    REQUIRED = "required"
    EXTENSIBLE = "extensible"
    PREFERRED = "preferred"
    EXAMPLE = "example"


class Severity(str, Enum):
    """Severity attached to a validation finding."""
    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"


class ViolationKind(str, Enum):
    """Category of a validation finding."""
    MISSING_REQUIRED_FIELD = "missing-required-field"
    INVALID_CODE = "invalid-code"
    BINDING_MISMATCH = "binding-mismatch"


class UnknownKeyPolicy(str, Enum):
    """What ``from_tree`` does with keys the schema does not declare."""
    REJECT = "reject"
    PRESERVE = "preserve"


class RequiredFieldPolicy(str, Enum):
    """What ``from_tree`` does when a required field is absent."""
    ERROR = "error"
    WARN = "warn"
