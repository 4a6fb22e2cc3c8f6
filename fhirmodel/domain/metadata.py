"""Type registry and field metadata.

Record classes declare their fields with ``element`` and ``choice``. Both return
a pydantic ``Field`` whose ``json_schema_extra`` carries the FHIR metadata under
the ``x-fhir`` key, so the metadata also shows up in ``model_json_schema()``.
When a record class is created it registers itself here and its fields are
expanded into ``FieldDescriptor`` entries:

    - plain fields produce one descriptor named by the wire name
    - a choice slot ``value[x]`` produces one descriptor per alternative, named
      logical name + capitalised kind (``valueQuantity``), all sharing
      ``choice="value"``

Lookups by type name cover resources and nested backbone types alike
(``"Claim.Item.Detail.SubDetail"``).
"""

import logging
from typing import Any, Iterable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel, to_snake

from fhirmodel.domain.bindings import CodeBinding
from fhirmodel.domain.enums import BindingStrength
from fhirmodel.domain.ports import ParseError, UnknownField, UnknownType
from fhirmodel.domain.primitives import is_primitive
from fhirmodel.domain.value_sets import get_value_set

logger = logging.getLogger(__name__)

UNBOUNDED = "*"
FHIR_EXTRA_KEY = "x-fhir"

Cardinality = Union[int, Literal["*"]]


def _binding_extra(binding: Optional[CodeBinding]) -> Optional[dict]:
    if binding is None:
        return None
    return {"valueSet": binding.url, "strength": binding.strength.value}


def element(
    kind: str,
    *,
    min: int = 0,
    max: Cardinality = 1,
    binding: Optional[CodeBinding] = None,
    targets: Iterable[str] = (),
    description: Optional[str] = None,
) -> Any:
    """Declare a record field.

    Parameters:
        kind: Primitive kind (``code``) or record type name (``CodeableConcept``)
        min: Minimum cardinality; 1 marks the field required
        max: 1 for a single value, ``UNBOUNDED`` for a list
        binding: Value set binding for coded fields
        targets: Allowed target resource types for Reference fields
        description: Field description

    Returns:
        A pydantic Field defaulting to None, or to an empty list for lists
    """
    meta = {"kind": kind, "min": min, "max": max}
    if binding is not None:
        meta["binding"] = _binding_extra(binding)
    targets = list(targets)
    if targets:
        meta["targetProfiles"] = targets
    extra = {FHIR_EXTRA_KEY: meta}
    if max == 1:
        return Field(default=None, description=description, json_schema_extra=extra)
    return Field(default_factory=list, description=description, json_schema_extra=extra)


def choice(
    *kinds: str,
    min: int = 0,
    binding: Optional[CodeBinding] = None,
    targets: Iterable[str] = (),
    description: Optional[str] = None,
) -> Any:
    """Declare a choice slot (``name[x]``) with its alternatives in order."""
    if len(kinds) < 2:
        raise ValueError("a choice slot needs at least two alternatives")
    meta = {"choice": list(kinds), "min": min, "max": 1}
    if binding is not None:
        meta["binding"] = _binding_extra(binding)
    targets = list(targets)
    if targets:
        meta["targetProfiles"] = targets
    return Field(default=None, description=description, json_schema_extra={FHIR_EXTRA_KEY: meta})


class FieldDescriptor(BaseModel):
    """Metadata for one declared field (or one alternative of a choice slot)."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Wire name, e.g. productOrService or servicedDate")
    attribute: str = Field(..., description="Python attribute holding the value")
    kind: str = Field(..., description="Primitive kind or record type name")
    min: int = Field(default=0, ge=0)
    max: Cardinality = Field(default=1)
    binding: Optional[CodeBinding] = None
    choice: Optional[str] = Field(default=None, description="Logical name when part of a choice group")
    target_profiles: tuple[str, ...] = ()
    description: Optional[str] = None

    @property
    def is_list(self) -> bool:
        return self.max != 1

    @property
    def is_required(self) -> bool:
        return self.min >= 1

    @property
    def is_primitive(self) -> bool:
        return is_primitive(self.kind)

    @property
    def is_choice(self) -> bool:
        return self.choice is not None

    @property
    def nested_type(self) -> Optional[type]:
        """Record class for a complex kind; None for primitives and contained resources."""
        if self.is_primitive:
            return None
        try:
            return registry.record_type(self.kind)
        except UnknownType:
            return None

    @property
    def python_name(self) -> str:
        """Keyword accepted by the record constructor for this field."""
        if self.choice is None:
            return self.attribute
        return f"{self.attribute}_{to_snake(self.kind)}"

    @property
    def display_name(self) -> str:
        """Name used in messages: ``diagnosis[x]`` for choice groups."""
        return f"{self.choice}[x]" if self.choice else self.name

    @property
    def cardinality(self) -> str:
        return f"{self.min}..{self.max}"


class TypeRegistry:
    """Maps type names to record classes and their field descriptors."""

    def __init__(self):
        self._types: dict[str, type] = {}
        self._fields: dict[str, tuple[FieldDescriptor, ...]] = {}
        self._lookup: dict[str, dict[str, tuple[FieldDescriptor, ...]]] = {}

    def register(self, record_cls: type) -> None:
        """Register a record class under its ``type_name``."""
        type_name = record_cls.type_name
        if type_name in self._types and self._types[type_name] is not record_cls:
            logger.debug(f"Replacing registered type {type_name}")
        descriptors = tuple(self._describe(record_cls))
        self._types[type_name] = record_cls
        self._fields[type_name] = descriptors
        self._lookup[type_name] = self._index(descriptors)

    @staticmethod
    def _describe(record_cls: type) -> Iterable[FieldDescriptor]:
        for attribute, info in record_cls.model_fields.items():
            extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
            meta = extra.get(FHIR_EXTRA_KEY)
            if meta is None:
                continue
            wire = info.alias or to_camel(attribute)
            binding = None
            if "binding" in meta:
                value_set = get_value_set(meta["binding"]["valueSet"])
                binding = value_set.bind(BindingStrength(meta["binding"]["strength"]))
            targets = tuple(meta.get("targetProfiles", ()))
            if "choice" in meta:
                for kind in meta["choice"]:
                    yield FieldDescriptor(
                        name=wire + kind[0].upper() + kind[1:],
                        attribute=attribute,
                        kind=kind,
                        min=meta["min"],
                        max=1,
                        binding=binding,
                        choice=wire,
                        target_profiles=targets,
                        description=info.description,
                    )
            else:
                yield FieldDescriptor(
                    name=wire,
                    attribute=attribute,
                    kind=meta["kind"],
                    min=meta["min"],
                    max=meta["max"],
                    binding=binding,
                    target_profiles=targets,
                    description=info.description,
                )

    @staticmethod
    def _index(descriptors: tuple[FieldDescriptor, ...]) -> dict[str, tuple[FieldDescriptor, ...]]:
        index: dict[str, list[FieldDescriptor]] = {}
        for descriptor in descriptors:
            keys = {descriptor.name, descriptor.python_name}
            if descriptor.choice:
                keys |= {descriptor.choice, descriptor.attribute}
            for key in keys:
                index.setdefault(key, []).append(descriptor)
        return {key: tuple(value) for key, value in index.items()}

    def _require(self, type_name: str) -> None:
        if type_name not in self._types:
            raise UnknownType(type_name)

    def fields_of(self, type_name: str) -> tuple[FieldDescriptor, ...]:
        """Return every field descriptor of a type in declaration order.

        Raises:
            UnknownType: If the type is not registered
        """
        self._require(type_name)
        return self._fields[type_name]

    def choice_group(self, type_name: str, logical_name: str) -> frozenset[str]:
        """Return the concrete names of a choice group, or an empty set.

        Raises:
            UnknownType: If the type is not registered
        """
        self._require(type_name)
        return frozenset(
            descriptor.name
            for descriptor in self._fields[type_name]
            if descriptor.choice == logical_name
        )

    def resolve(self, type_name: str, name: str) -> tuple[FieldDescriptor, ...]:
        """Resolve any accepted field name to its descriptors.

        Concrete names (wire or python form) resolve to one descriptor; a
        logical choice name resolves to every alternative.

        Raises:
            UnknownType: If the type is not registered
            UnknownField: If the name is not declared on the type
        """
        self._require(type_name)
        try:
            return self._lookup[type_name][name]
        except KeyError:
            raise UnknownField(type_name, name) from None

    def alternative(self, type_name: str, name: str) -> Optional[FieldDescriptor]:
        """Return the choice alternative named ``name`` (wire or python form), if any."""
        for descriptor in self._lookup.get(type_name, {}).get(name, ()):
            if descriptor.choice and name in (descriptor.name, descriptor.python_name):
                return descriptor
        return None

    def record_type(self, type_name: str) -> type:
        """Return the record class registered under ``type_name``."""
        self._require(type_name)
        return self._types[type_name]

    def resource_type(self, type_name: str) -> type:
        """Return the resource class for a ``resourceType`` value."""
        record_cls = self._types.get(type_name)
        if record_cls is None or not record_cls.is_resource:
            raise UnknownType(type_name)
        return record_cls

    def type_names(self, resources_only: bool = False) -> list[str]:
        """Return registered type names, sorted."""
        return sorted(
            name for name, record_cls in self._types.items()
            if record_cls.is_resource or not resources_only
        )

    def parse_resource(self, tree: Any, options=None, path: Optional[str] = None):
        """Build a resource record from a tree, dispatching on ``resourceType``.

        Raises:
            ParseError: If the tree is not an object or lacks ``resourceType``
            UnknownType: If the resource type is not registered
        """
        if not isinstance(tree, dict):
            raise ParseError(f"expected an object, got {type(tree).__name__}", path=path)
        resource_type = tree.get("resourceType")
        if not isinstance(resource_type, str):
            raise ParseError("missing resourceType", path=path)
        record_cls = self.resource_type(resource_type)
        return record_cls.from_tree(tree, options=options, path=path)


registry = TypeRegistry()


def fields_of(type_name: str) -> tuple[FieldDescriptor, ...]:
    """Module-level shortcut for ``registry.fields_of``."""
    return registry.fields_of(type_name)


def choice_group(type_name: str, logical_name: str) -> frozenset[str]:
    """Module-level shortcut for ``registry.choice_group``."""
    return registry.choice_group(type_name, logical_name)


def parse_resource(tree: Any, options=None, path: Optional[str] = None):
    """Module-level shortcut for ``registry.parse_resource``."""
    return registry.parse_resource(tree, options=options, path=path)
