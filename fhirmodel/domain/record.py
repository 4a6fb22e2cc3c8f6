"""Record Runtime - Generic Behaviour Shared by Every FHIR Type.

Every resource, backbone element and datatype is a ``Record`` subclass. The
subclass only declares fields (see ``metadata.element`` and ``metadata.choice``);
this module supplies the behaviour that works off the registry metadata:

    - ``get`` / ``set`` by wire name, python name or logical choice name
    - ``to_tree`` / ``from_tree`` conversion to plain nested dicts and lists
    - ``validate`` for data-quality findings (required fields, code bindings)
    - equality and hashing over the canonical tree

Architecture:
    - Pydantic V2 models with assignment validation
    - Choice slots hold a ``ChoiceValue`` tagged union, so at most one
      alternative can ever be populated
    - Repeating fields always hold a list (empty when absent); an empty list
      and an absent field are the same thing and never reach the tree
"""

import hashlib
import json
import logging
from decimal import Decimal
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, PrivateAttr, ValidationError as PydanticValidationError
from pydantic import field_validator, model_validator
from pydantic.alias_generators import to_camel

from fhirmodel.domain.enums import RequiredFieldPolicy, Severity, UnknownKeyPolicy, ViolationKind
from fhirmodel.domain.metadata import FieldDescriptor, registry
from fhirmodel.domain.ports import (
    CardinalityViolation,
    MissingRequiredField,
    ParseError,
    ParseOptions,
    TypeMismatch,
    Violation,
)
from fhirmodel.domain.primitives import check_primitive, parse_primitive
from fhirmodel.infrastructure.diagnostics_context import record_diagnostic_if_context

logger = logging.getLogger(__name__)

RESOURCE_KIND = "Resource"


class ChoiceValue(BaseModel):
    """The populated alternative of a choice slot.

    Attributes:
        kind: Alternative kind, e.g. ``date`` or ``Period``
        value: The value itself
    """

    model_config = ConfigDict(frozen=True)

    kind: str
    value: Any


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, list) and not value)


def _tree_value(value: Any) -> Any:
    return value.to_tree() if isinstance(value, Record) else value


def _canonical(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value.normalize())
    raise TypeError(f"{type(value).__name__} is not serializable")


class Record(BaseModel):
    """Base class for every registered FHIR type.

    Subclasses set ``type_name`` (the qualified FHIR name, e.g.
    ``Claim.Item.Detail``) and are registered when the class is created.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra="forbid",
    )

    type_name: ClassVar[str] = ""
    is_resource: ClassVar[bool] = False

    _unknown: dict = PrivateAttr(default_factory=dict)

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        if cls.__dict__.get("type_name"):
            registry.register(cls)

    # ------------------------------------------------------------------
    # Construction hooks
    # ------------------------------------------------------------------

    @model_validator(mode="before")
    @classmethod
    def _fold_choice_alternatives(cls, data: Any) -> Any:
        """Accept concrete choice names (``serviced_date=`` or ``servicedDate=``)."""
        if not isinstance(data, dict) or not cls.type_name:
            return data
        folded = dict(data)
        for key in data:
            descriptor = registry.alternative(cls.type_name, key)
            if descriptor is None:
                continue
            value = folded.pop(key)
            if value is None:
                continue
            if any(folded.get(name) is not None for name in (descriptor.attribute, descriptor.choice)):
                raise ValueError(f"only one alternative of {descriptor.display_name} may be populated")
            folded[descriptor.attribute] = ChoiceValue(kind=descriptor.kind, value=value)
        return folded

    @field_validator("*", mode="after")
    @classmethod
    def _check_declared_kind(cls, value: Any, info) -> Any:
        """Hold constructed and assigned values to the same kind rules as ``set``.

        Keyword construction also builds nested records from dicts, on plain
        and choice fields alike.
        """
        if value is None or not cls.type_name:
            return value
        alternatives = registry.resolve(cls.type_name, info.field_name)
        first = alternatives[0]
        if not isinstance(value, ChoiceValue):
            if first.choice is not None or not first.is_primitive:
                return value
            if first.is_list:
                return [_check_kind(cls.type_name, first, item) for item in value]
            return _check_kind(cls.type_name, first, value)
        for descriptor in alternatives:
            if descriptor.kind == value.kind:
                return ChoiceValue(
                    kind=value.kind,
                    value=_check_kind(cls.type_name, descriptor, value.value, build=True),
                )
        raise TypeMismatch(
            f"{cls.type_name}.{alternatives[0].display_name} has no alternative of kind {value.kind!r}",
            field=alternatives[0].display_name,
            kind=value.kind,
        )

    # ------------------------------------------------------------------
    # Field access
    # ------------------------------------------------------------------

    def get(self, name: str) -> Any:
        """Read a field by wire name, python name or logical choice name.

        A concrete choice name returns the value only when that alternative is
        the populated one; a logical name returns the ``ChoiceValue``.

        Raises:
            UnknownField: If the name is not declared on this type
        """
        descriptors = registry.resolve(self.type_name, name)
        first = descriptors[0]
        current = getattr(self, first.attribute)
        if first.choice is None or name in (first.choice, first.attribute):
            return current
        if current is not None and current.kind == first.kind:
            return current.value
        return None

    def set(self, name: str, value: Any) -> None:
        """Write a field, checking kind and cardinality.

        Setting a choice alternative replaces whichever alternative was
        populated before. Setting ``None`` clears the field. Complex kinds
        take record instances only, never dicts; use ``from_tree`` or keyword
        construction to build from plain data.

        Raises:
            UnknownField: If the name is not declared on this type
            CardinalityViolation: If a list is given to a single-valued field or
                a single value to a repeating field
            TypeMismatch: If the value does not match the declared kind
        """
        descriptors = registry.resolve(self.type_name, name)
        first = descriptors[0]
        if value is None:
            setattr(self, first.attribute, [] if first.is_list else None)
            return

        if first.choice is not None:
            logical = name in (first.choice, first.attribute)
            setattr(self, first.attribute, self._choose(descriptors, value, logical))
            return

        if first.is_list:
            if not isinstance(value, (list, tuple)):
                raise CardinalityViolation(
                    f"{self.type_name}.{first.name} is repeating ({first.cardinality}); pass a list",
                    field=first.name,
                )
            value = [_check_kind(self.type_name, first, item) for item in value]
        else:
            if isinstance(value, (list, tuple)):
                raise CardinalityViolation(
                    f"{self.type_name}.{first.name} takes a single value ({first.cardinality})",
                    field=first.name,
                )
            value = _check_kind(self.type_name, first, value)
        setattr(self, first.attribute, value)

    def _choose(self, descriptors: tuple[FieldDescriptor, ...], value: Any, logical: bool) -> ChoiceValue:
        display = descriptors[0].display_name
        if isinstance(value, (list, tuple)):
            raise CardinalityViolation(f"{self.type_name}.{display} takes a single value", field=display)
        if isinstance(value, ChoiceValue):
            for descriptor in descriptors:
                if descriptor.kind == value.kind:
                    return ChoiceValue(kind=value.kind, value=_check_kind(self.type_name, descriptor, value.value))
            raise TypeMismatch(
                f"{self.type_name}.{display} has no alternative of kind {value.kind!r}",
                field=display,
                kind=value.kind,
            )
        if not logical:
            descriptor = descriptors[0]
            return ChoiceValue(kind=descriptor.kind, value=_check_kind(self.type_name, descriptor, value))
        for descriptor in descriptors:
            try:
                return ChoiceValue(kind=descriptor.kind, value=_check_kind(self.type_name, descriptor, value))
            except TypeMismatch:
                continue
        raise TypeMismatch(
            f"{self.type_name}.{display} accepts {', '.join(d.kind for d in descriptors)}; "
            f"got {type(value).__name__}",
            field=display,
        )

    def missing_required(self) -> list[str]:
        """Return display names of required fields that are absent."""
        missing = []
        seen = set()
        for descriptor in registry.fields_of(self.type_name):
            if not descriptor.is_required or descriptor.attribute in seen:
                continue
            seen.add(descriptor.attribute)
            if _is_empty(getattr(self, descriptor.attribute)):
                missing.append(descriptor.display_name)
        return missing

    def populated(self) -> list[tuple[FieldDescriptor, Any]]:
        """Return ``(descriptor, value)`` for every populated field.

        Choice slots yield the descriptor of the populated alternative; lists
        are returned whole.
        """
        result = []
        seen = set()
        for descriptor in registry.fields_of(self.type_name):
            if descriptor.attribute in seen:
                continue
            value = getattr(self, descriptor.attribute)
            if descriptor.choice is not None:
                if value is None or value.kind != descriptor.kind:
                    continue
                seen.add(descriptor.attribute)
                result.append((descriptor, value.value))
                continue
            seen.add(descriptor.attribute)
            if not _is_empty(value):
                result.append((descriptor, value))
        return result

    # ------------------------------------------------------------------
    # Tree conversion
    # ------------------------------------------------------------------

    def to_tree(self) -> dict[str, Any]:
        """Convert to nested dicts and lists keyed by wire name.

        Resources lead with ``resourceType``. Absent fields and empty lists are
        omitted. Decimals stay ``Decimal``. Preserved unknown keys come last.
        """
        tree: dict[str, Any] = {}
        if self.is_resource:
            tree["resourceType"] = self.type_name
        for descriptor, value in self.populated():
            if isinstance(value, list):
                tree[descriptor.name] = [_tree_value(item) for item in value]
            else:
                tree[descriptor.name] = _tree_value(value)
        for key, value in self._unknown.items():
            tree.setdefault(key, value)
        return tree

    @classmethod
    def from_tree(
        cls,
        tree: Any,
        options: Optional[ParseOptions] = None,
        path: Optional[str] = None,
    ) -> "Record":
        """Build a record from nested dicts and lists.

        Parameters:
            tree: Mapping keyed by wire name
            options: Unknown-key and required-field policies
            path: Location prefix for error messages; defaults to the type name

        Returns:
            Record: The populated record

        Raises:
            ParseError: On shape or lexical errors, unknown keys under the
                reject policy, or more than one alternative of a choice group
            MissingRequiredField: If required fields are absent under the
                error policy
            UnknownType: If a contained resource type is not registered
        """
        options = options or ParseOptions()
        path = path or cls.type_name
        if not isinstance(tree, dict):
            raise ParseError(f"expected an object, got {type(tree).__name__}", path=path)
        if cls.is_resource and tree.get("resourceType") != cls.type_name:
            raise ParseError(
                f"expected resourceType {cls.type_name!r}, got {tree.get('resourceType')!r}",
                path=path,
            )

        by_name = {descriptor.name: descriptor for descriptor in registry.fields_of(cls.type_name)}
        values: dict[str, Any] = {}
        unknown: dict[str, Any] = {}

        for key, raw in tree.items():
            if cls.is_resource and key == "resourceType":
                continue
            descriptor = by_name.get(key)
            if descriptor is None:
                if options.unknown_keys == UnknownKeyPolicy.PRESERVE:
                    logger.debug(f"Preserving unknown key {key!r} at {path}")
                    unknown[key] = raw
                    continue
                raise ParseError(f"unknown key {key!r}", path=path)

            field_path = f"{path}.{key}"
            if raw is None:
                raise ParseError("null is not a valid value", path=field_path)

            if descriptor.choice is not None:
                if descriptor.attribute in values:
                    raise ParseError(
                        f"more than one alternative of {descriptor.display_name} is populated",
                        path=path,
                    )
                values[descriptor.attribute] = ChoiceValue(
                    kind=descriptor.kind,
                    value=_parse_value(descriptor, raw, field_path, options),
                )
            elif descriptor.is_list:
                if not isinstance(raw, list):
                    raise ParseError(f"expected an array ({descriptor.cardinality})", path=field_path)
                values[descriptor.attribute] = [
                    _parse_value(descriptor, item, f"{field_path}[{index}]", options)
                    for index, item in enumerate(raw)
                ]
            else:
                if isinstance(raw, list):
                    raise ParseError(f"expected a single value ({descriptor.cardinality})", path=field_path)
                values[descriptor.attribute] = _parse_value(descriptor, raw, field_path, options)

        try:
            record = cls.model_validate(values)
        except PydanticValidationError as e:
            raise ParseError(str(e), path=path) from e
        record._unknown = unknown

        missing = record.missing_required()
        if missing:
            message = f"{path}: missing required field(s) {', '.join(missing)}"
            if options.required_fields == RequiredFieldPolicy.ERROR:
                raise MissingRequiredField(message, fields=missing)
            logger.warning(message, extra={"record_type": cls.type_name, "record_path": path})
            for name in missing:
                record_diagnostic_if_context(Violation(
                    kind=ViolationKind.MISSING_REQUIRED_FIELD,
                    severity=Severity.WARNING,
                    path=f"{path}.{name}",
                    field=name,
                    message=f"required field {name} is missing",
                ))
        return record

    # ------------------------------------------------------------------
    # Validation, equality and hashing
    # ------------------------------------------------------------------

    def validate(self) -> list[Violation]:
        """Collect data-quality findings for this record and everything it holds."""
        from fhirmodel.domain.services import RecordValidator

        return RecordValidator().validate(self)

    def is_valid(self) -> bool:
        """True when ``validate`` reports no error-severity findings."""
        return not any(violation.is_fatal for violation in self.validate())

    def canonical_json(self) -> str:
        """Key-sorted compact JSON of the tree, used for hashing."""
        return json.dumps(self.to_tree(), sort_keys=True, separators=(",", ":"), default=_canonical)

    def fingerprint(self) -> str:
        """SHA-256 hex digest of ``canonical_json``."""
        return hashlib.sha256(self.canonical_json().encode("utf-8")).hexdigest()

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return type(self) is type(other) and self.to_tree() == other.to_tree()

    def __hash__(self) -> int:
        """Hash of the current content.

        Records are mutable, so the hash changes when a field does. Do not
        mutate a record while it is a dict key or set member.
        """
        return hash(self.canonical_json())


def _check_kind(type_name: str, descriptor: FieldDescriptor, value: Any, build: bool = False) -> Any:
    """Check a single value against a field's kind and return the stored form.

    With ``build`` a dict is accepted for a complex kind and validated into
    the record class.
    """
    if descriptor.is_primitive:
        return check_primitive(descriptor.kind, value, f"{type_name}.{descriptor.name}")
    if descriptor.kind == RESOURCE_KIND:
        if isinstance(value, Record) and value.is_resource:
            return value
    else:
        record_cls = registry.record_type(descriptor.kind)
        if isinstance(value, record_cls):
            return value
        if build and isinstance(value, dict):
            try:
                return record_cls.model_validate(value)
            except PydanticValidationError as e:
                raise TypeMismatch(
                    f"{type_name}.{descriptor.name}: {e.error_count()} error(s) building {descriptor.kind}",
                    field=descriptor.name,
                    kind=descriptor.kind,
                ) from e
    raise TypeMismatch(
        f"{type_name}.{descriptor.name} expects {descriptor.kind}, got {type(value).__name__}",
        field=descriptor.name,
        kind=descriptor.kind,
    )


def _parse_value(descriptor: FieldDescriptor, raw: Any, path: str, options: ParseOptions) -> Any:
    if descriptor.is_primitive:
        return parse_primitive(descriptor.kind, raw, path)
    if descriptor.kind == RESOURCE_KIND:
        return registry.parse_resource(raw, options=options, path=path)
    return registry.record_type(descriptor.kind).from_tree(raw, options=options, path=path)
