"""Domain Ports - Contracts, Results and Errors for the Record Model.

This module defines the Port interfaces (abstract contracts) that codec and
reader adapters implement, the Result type used to report per-record outcomes
without exceptions, and the exception hierarchy raised by the record runtime.

Architecture:
    - Pure abstract interfaces with no adapter dependencies
    - Adapters (JSON, XML codecs and file readers) implement these ports
    - Structural errors (unknown field, wrong arity, wrong kind) raise at once
    - Data-quality findings are collected as Violation values and never raise
      unless a caller asks for it through ``raise_for_violations``
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Generic, Iterable, Iterator, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

from fhirmodel.domain.enums import RequiredFieldPolicy, Severity, UnknownKeyPolicy, ViolationKind

if TYPE_CHECKING:
    from fhirmodel.domain.record import Record

T = TypeVar('T')


# ============================================================================
# Result Type for Success/Failure Communication
# ============================================================================

@dataclass(frozen=True)
class Result(Generic[T]):
    """Result type for communicating success or failure without exceptions.

    Readers yield one Result per document so that a single malformed record
    does not abort a batch.

    Attributes:
        success: True if the operation succeeded, False otherwise
        value: The successful result value (only present if success=True)
        error: Error message (only present if success=False)
        error_type: Name of the error class (ParseError, UnknownType, ...)
        error_details: Additional error context (source, record_index, path)
    """

    success: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    error_details: Optional[dict] = None

    @classmethod
    def success_result(cls, value: T) -> 'Result[T]':
        """Create a successful result."""
        return cls(success=True, value=value)

    @classmethod
    def failure_result(
        cls,
        error: Union[str, Exception],
        error_type: Optional[str] = None,
        error_details: Optional[dict] = None
    ) -> 'Result[T]':
        """Create a failure result.

        Parameters:
            error: Error message or exception
            error_type: Type of error; defaults to the exception class name
            error_details: Additional context (source, record_index, etc.)

        Returns:
            Result: Failure result with error information
        """
        error_message = str(error) if isinstance(error, Exception) else error
        error_type_name = error_type or (type(error).__name__ if isinstance(error, Exception) else "UnknownError")
        return cls(
            success=False,
            value=None,
            error=error_message,
            error_type=error_type_name,
            error_details=error_details or {}
        )

    def is_success(self) -> bool:
        """Check if result is successful."""
        return self.success

    def is_failure(self) -> bool:
        """Check if result is a failure."""
        return not self.success


# ============================================================================
# Validation Findings
# ============================================================================

class Violation(BaseModel):
    """A single data-quality finding produced by ``Record.validate``.

    Attributes:
        kind: Category of the finding
        severity: error, warning or information
        path: Location of the offending value, e.g. ``Claim.item[0].productOrService``
        field: Wire name of the field the finding is about
        message: Human readable description
    """

    model_config = ConfigDict(frozen=True)

    kind: ViolationKind = Field(..., description="Category of the finding")
    severity: Severity = Field(..., description="Finding severity")
    path: str = Field(..., description="Dotted path to the offending value")
    field: str = Field(..., description="Wire name of the field")
    message: str = Field(..., description="Human readable description")

    @property
    def is_fatal(self) -> bool:
        """True for error-severity findings."""
        return self.severity == Severity.ERROR

    def __str__(self) -> str:
        return f"[{self.severity.value}] {self.path}: {self.message}"


class ParseOptions(BaseModel):
    """Policies applied by ``Record.from_tree``."""

    model_config = ConfigDict(frozen=True)

    unknown_keys: UnknownKeyPolicy = Field(
        default=UnknownKeyPolicy.REJECT,
        description="Reject undeclared keys or keep them for re-emission"
    )
    required_fields: RequiredFieldPolicy = Field(
        default=RequiredFieldPolicy.WARN,
        description="Raise or warn when a required field is absent"
    )


# ============================================================================
# Custom Exception Hierarchy
# ============================================================================

class ModelError(Exception):
    """Base exception for all record model errors."""
    pass


class UnknownType(ModelError):
    """Raised when a type name is not present in the registry."""

    def __init__(self, type_name: str):
        super().__init__(f"Unknown type: {type_name!r}")
        self.type_name = type_name


class UnknownField(ModelError):
    """Raised when a field name is not declared on a record type."""

    def __init__(self, type_name: str, name: str):
        super().__init__(f"{type_name} has no field {name!r}")
        self.type_name = type_name
        self.name = name


class CardinalityViolation(ModelError):
    """Raised when a list is given to a single-valued field or vice versa."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class TypeMismatch(ModelError):
    """Raised when a value does not match the declared kind of a field."""

    def __init__(self, message: str, field: Optional[str] = None, kind: Optional[str] = None):
        super().__init__(message)
        self.field = field
        self.kind = kind


class ParseError(ModelError):
    """Raised when a tree cannot be converted into a record.

    Attributes:
        path: Dotted path to the offending node
    """

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path
        self.reason = message


class MissingRequiredField(ModelError):
    """Raised when required fields are absent and the policy asks for errors.

    Attributes:
        fields: Wire names of the missing fields (``name[x]`` for choice groups)
        violations: Matching findings when raised from ``raise_for_violations``
    """

    def __init__(self, message: str, fields: Optional[list] = None, violations: Optional[list] = None):
        super().__init__(message)
        self.fields = fields or []
        self.violations = violations or []


class InvalidCode(ModelError):
    """Raised by ``raise_for_violations`` for required-binding failures."""

    def __init__(self, message: str, violations: Optional[list] = None):
        super().__init__(message)
        self.violations = violations or []


class SourceNotFoundError(ModelError):
    """Raised when a document source cannot be found or accessed."""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class UnsupportedSourceError(ModelError):
    """Raised when no reader or codec handles the given source format."""

    def __init__(self, message: str, source: Optional[str] = None, adapter: Optional[str] = None):
        super().__init__(message)
        self.source = source
        self.adapter = adapter


def raise_for_violations(violations: Iterable[Violation]) -> None:
    """Raise for the fatal findings in ``violations``.

    Missing required fields take precedence over invalid codes. Warnings and
    informational findings never raise.

    Raises:
        MissingRequiredField: If any missing-required-field finding is present
        InvalidCode: If any error-severity invalid-code finding is present
    """
    fatal = [violation for violation in violations if violation.is_fatal]
    missing = [v for v in fatal if v.kind == ViolationKind.MISSING_REQUIRED_FIELD]
    if missing:
        raise MissingRequiredField(
            f"{len(missing)} required field(s) missing: " + ", ".join(v.path for v in missing),
            fields=[v.field for v in missing],
            violations=missing,
        )
    invalid = [v for v in fatal if v.kind == ViolationKind.INVALID_CODE]
    if invalid:
        raise InvalidCode(
            f"{len(invalid)} code(s) outside required value sets: " + ", ".join(v.path for v in invalid),
            violations=invalid,
        )


# ============================================================================
# Port Interfaces
# ============================================================================

class CodecPort(ABC):
    """Converts records to and from a serialized text form."""

    format_name: str = ""

    @abstractmethod
    def dumps(self, record: "Record") -> str:
        """Serialize a resource record to text."""
        pass

    @abstractmethod
    def loads(self, text: Union[str, bytes], options: Optional[ParseOptions] = None) -> "Record":
        """Parse text into a resource record.

        Raises:
            ParseError: If the text is malformed or does not match the schema
            UnknownType: If the resource type is not registered
        """
        pass


class DocumentPort(ABC):
    """Reads resource records from a file source.

    Implementations yield one Result per document so callers can keep going
    past bad records.
    """

    @abstractmethod
    def read(self, source: Union[str, Path]) -> Iterator[Result["Record"]]:
        """Read records from a source.

        Raises:
            SourceNotFoundError: If the source does not exist
            UnsupportedSourceError: If the reader cannot handle the source
        """
        pass

    @abstractmethod
    def can_read(self, source: Union[str, Path]) -> bool:
        """Check if this reader handles the given source."""
        pass

    def get_source_info(self, source: Union[str, Path]) -> Optional[dict[str, Any]]:
        """Return basic metadata about a source, or None if unavailable."""
        path = Path(source)
        if not path.exists():
            return None
        return {
            "source": str(path),
            "format": path.suffix.lstrip('.').lower(),
            "size_bytes": path.stat().st_size,
        }
