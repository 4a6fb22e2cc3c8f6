"""Primitive value kinds and their lexical rules.

Every leaf value in a record has one of the kinds below. ``parse_primitive`` is
used while reading trees and reports ``ParseError``; ``check_primitive`` is used
by ``Record.set`` and reports ``TypeMismatch``. Both return the coerced value
(decimals always come back as ``Decimal``).
"""

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from fhirmodel.domain.ports import ParseError, TypeMismatch

_YEAR = r"([0-9]([0-9]([0-9][1-9]|[1-9]0)|[1-9]00)|[1-9]000)"
_MONTH = r"(0[1-9]|1[0-2])"
_DAY = r"(0[1-9]|[1-2][0-9]|3[0-1])"
_TIME = r"([01][0-9]|2[0-3]):[0-5][0-9]:([0-5][0-9]|60)(\.[0-9]+)?"
_ZONE = r"(Z|(\+|-)((0[0-9]|1[0-3]):[0-5][0-9]|14:00))"

PATTERNS: dict[str, re.Pattern] = {
    "base64Binary": re.compile(r"(\s*([0-9a-zA-Z\+/=]){4}\s*)+"),
    "canonical": re.compile(r"\S*"),
    "code": re.compile(r"[^\s]+(\s[^\s]+)*"),
    "date": re.compile(rf"{_YEAR}(-{_MONTH}(-{_DAY})?)?"),
    "dateTime": re.compile(rf"{_YEAR}(-{_MONTH}(-{_DAY}(T{_TIME}{_ZONE})?)?)?"),
    "decimal": re.compile(r"-?(0|[1-9][0-9]*)(\.[0-9]+)?([eE][+-]?[0-9]+)?"),
    "id": re.compile(r"[A-Za-z0-9\-\.]{1,64}"),
    "instant": re.compile(rf"{_YEAR}-{_MONTH}-{_DAY}T{_TIME}{_ZONE}"),
    "integer": re.compile(r"-?([0]|([1-9][0-9]*))"),
    "markdown": re.compile(r"[ \r\n\t\S]+"),
    "oid": re.compile(r"urn:oid:[0-2](\.(0|[1-9][0-9]*))+"),
    "positiveInt": re.compile(r"[1-9][0-9]*"),
    "string": re.compile(r"[ \r\n\t\S]+"),
    "time": re.compile(_TIME),
    "unsignedInt": re.compile(r"[0]|([1-9][0-9]*)"),
    "uri": re.compile(r"\S*"),
    "url": re.compile(r"\S*"),
    "uuid": re.compile(r"urn:uuid:[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"),
}

STRING_KINDS = frozenset({
    "base64Binary", "canonical", "code", "date", "dateTime", "id", "instant",
    "markdown", "oid", "string", "time", "uri", "url", "uuid", "xhtml",
})
INTEGER_KINDS = frozenset({"integer", "positiveInt", "unsignedInt"})
PRIMITIVE_KINDS = STRING_KINDS | INTEGER_KINDS | {"boolean", "decimal"}

INT32_MIN = -2 ** 31
INT32_MAX = 2 ** 31 - 1

# kinds whose lexical form may carry a full calendar date
_CALENDAR_KINDS = frozenset({"date", "dateTime", "instant"})


def is_primitive(kind: str) -> bool:
    """Check if ``kind`` names a primitive rather than a complex type."""
    return kind in PRIMITIVE_KINDS


def _coerce(kind: str, value: Any) -> Any:
    """Validate ``value`` against ``kind`` and return the stored form.

    Raises:
        ValueError: With a short reason when the value is not acceptable
    """
    if kind == "boolean":
        if not isinstance(value, bool):
            raise ValueError(f"expected boolean, got {type(value).__name__}")
        return value

    if kind in INTEGER_KINDS:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"expected {kind}, got {type(value).__name__}")
        if not INT32_MIN <= value <= INT32_MAX:
            raise ValueError(f"{value} is outside the 32-bit integer range")
        if kind == "positiveInt" and value < 1:
            raise ValueError(f"positiveInt must be >= 1, got {value}")
        if kind == "unsignedInt" and value < 0:
            raise ValueError(f"unsignedInt must be >= 0, got {value}")
        return value

    if kind == "decimal":
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
            raise ValueError(f"expected decimal, got {type(value).__name__}")
        try:
            result = value if isinstance(value, Decimal) else Decimal(str(value))
        except InvalidOperation as e:
            raise ValueError(f"{value!r} is not a decimal") from e
        if not result.is_finite():
            raise ValueError(f"{value!r} is not a finite decimal")
        return result

    if kind in STRING_KINDS:
        if not isinstance(value, str):
            raise ValueError(f"expected {kind} string, got {type(value).__name__}")
        if kind == "xhtml":
            if not value.strip():
                raise ValueError("xhtml content must not be empty")
            return value
        if not PATTERNS[kind].fullmatch(value):
            raise ValueError(f"{value!r} is not a valid {kind}")
        if kind in _CALENDAR_KINDS and len(value) >= 10:
            try:
                date.fromisoformat(value[:10])
            except ValueError as e:
                raise ValueError(f"{value!r} is not a calendar date") from e
        return value

    raise ValueError(f"{kind!r} is not a primitive kind")


def parse_primitive(kind: str, raw: Any, path: Optional[str] = None) -> Any:
    """Convert a tree leaf into the stored form for ``kind``.

    Parameters:
        kind: Primitive kind name, e.g. ``positiveInt``
        raw: Value as found in the tree
        path: Location used in the error message

    Returns:
        The validated value

    Raises:
        ParseError: If the leaf does not satisfy the kind
    """
    try:
        return _coerce(kind, raw)
    except ValueError as e:
        raise ParseError(str(e), path=path) from e


def check_primitive(kind: str, value: Any, field: Optional[str] = None) -> Any:
    """Validate a value handed to ``Record.set``.

    Raises:
        TypeMismatch: If the value does not satisfy the kind
    """
    try:
        return _coerce(kind, value)
    except ValueError as e:
        raise TypeMismatch(f"{field or kind}: {e}", field=field, kind=kind) from e
