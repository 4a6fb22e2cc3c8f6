"""XML Codec.

Serializes resource records to FHIR XML and back.

FHIR XML conventions followed here:
    - every element lives in the ``http://hl7.org/fhir`` namespace and the
      root element is named after the ``resourceType``
    - primitive values are carried in a ``value`` attribute
    - repeating fields are repeated elements
    - ``id`` of a non-resource element and ``url`` of an extension are attributes
    - a contained resource is wrapped: ``<contained><Patient>...</Patient></contained>``
    - ``Narrative.div`` is embedded XHTML in the XHTML namespace

Reading is schema-driven: the registry tells whether an element is a list, a
primitive (and which kind) or a nested type, so the resulting tree is the same
one the JSON codec would produce.

Security Impact:
    - Documents are parsed with defusedxml, which rejects entity expansion
      and external entity attacks
"""

import copy
import logging
import xml.etree.ElementTree as ET
from decimal import Decimal
from typing import Any, Optional, Union

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as SafeET

from fhirmodel.domain.metadata import FieldDescriptor, registry
from fhirmodel.domain.ports import CodecPort, ParseError, ParseOptions
from fhirmodel.domain.primitives import INTEGER_KINDS, PATTERNS
from fhirmodel.domain.record import RESOURCE_KIND, Record

logger = logging.getLogger(__name__)

FHIR_NS = "http://hl7.org/fhir"
XHTML_NS = "http://www.w3.org/1999/xhtml"

_EXTENSION_KEYS = ("extension", "modifierExtension")


def _split(tag: str) -> tuple[Optional[str], str]:
    if tag.startswith("{"):
        namespace, _, local = tag[1:].partition("}")
        return namespace, local
    return None, tag


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _unqualified_xhtml(fragment: ET.Element) -> ET.Element:
    """Drop the XHTML namespace from tags and declare it on the fragment root."""
    for element in fragment.iter():
        namespace, local = _split(element.tag)
        if namespace in (None, XHTML_NS):
            element.tag = local
    fragment.attrib = {"xmlns": XHTML_NS, **{k: v for k, v in fragment.attrib.items() if k != "xmlns"}}
    return fragment


class XMLCodec(CodecPort):
    """FHIR XML codec.

    Parameters:
        pretty: Indent the output of ``dumps``
    """

    format_name = "xml"

    def __init__(self, pretty: bool = True):
        self.pretty = pretty

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def dumps(self, record: Record) -> str:
        """Serialize a resource record to an XML document.

        Raises:
            ParseError: If the narrative div is not well-formed XHTML
        """
        tree = record.to_tree()
        # tags stay unqualified under a literal default namespace declaration
        root = ET.Element(tree["resourceType"], xmlns=FHIR_NS)
        fragments: list[tuple[ET.Element, ET.Element, ET.Element]] = []
        self._fill(root, tree, resource=True, extension=False, fragments=fragments)

        if self.pretty:
            ET.indent(root)
        # XHTML is swapped in after indenting so the narrative content is untouched
        for parent, placeholder, fragment in fragments:
            fragment.tail = placeholder.tail
            parent[list(parent).index(placeholder)] = fragment

        return ET.tostring(root, encoding="unicode")

    def _fill(self, node: ET.Element, tree: dict, resource: bool, extension: bool, fragments: list) -> None:
        for key, value in tree.items():
            if key == "resourceType" and resource:
                continue
            if key == "id" and not resource and isinstance(value, str):
                node.set("id", value)
                continue
            if key == "url" and extension and isinstance(value, str):
                node.set("url", value)
                continue
            self._append(node, key, value, fragments)

    def _append(self, parent: ET.Element, name: str, value: Any, fragments: list) -> None:
        if isinstance(value, list):
            for item in value:
                self._append(parent, name, item, fragments)
        elif isinstance(value, dict):
            child = ET.SubElement(parent, name)
            if "resourceType" in value:
                inner = ET.SubElement(child, value["resourceType"])
                self._fill(inner, value, resource=True, extension=False, fragments=fragments)
            else:
                self._fill(child, value, resource=False, extension=name in _EXTENSION_KEYS, fragments=fragments)
        elif name == "div" and isinstance(value, str):
            placeholder = ET.SubElement(parent, "div")
            fragments.append((parent, placeholder, self._xhtml(value)))
        else:
            ET.SubElement(parent, name, value=_text(value))

    @staticmethod
    def _xhtml(markup: str) -> ET.Element:
        try:
            fragment = SafeET.fromstring(markup)
        except (SafeET.ParseError, DefusedXmlException) as e:
            raise ParseError(f"narrative is not well-formed XHTML: {e}", path="Narrative.div") from e
        return _unqualified_xhtml(fragment)

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def loads(self, text: Union[str, bytes], options: Optional[ParseOptions] = None) -> Record:
        """Parse an XML document into a resource record.

        Raises:
            ParseError: If the document is malformed or does not match the schema
            UnknownType: If the resource type is not registered
        """
        try:
            root = SafeET.fromstring(text)
        except (SafeET.ParseError, DefusedXmlException) as e:
            raise ParseError(f"invalid XML: {e}") from e

        namespace, resource_type = _split(root.tag)
        if namespace != FHIR_NS:
            raise ParseError(f"root element {root.tag!r} is not in the FHIR namespace")
        record_cls = registry.resource_type(resource_type)
        tree = self._element_tree(root, resource_type, resource=True, path=resource_type)
        logger.debug(f"Parsed XML document with resourceType {resource_type}")
        return record_cls.from_tree(tree, options=options)

    def to_tree(self, text: Union[str, bytes]) -> dict:
        """Convert an XML document to the equivalent JSON-shaped tree without building a record."""
        try:
            root = SafeET.fromstring(text)
        except (SafeET.ParseError, DefusedXmlException) as e:
            raise ParseError(f"invalid XML: {e}") from e
        _, resource_type = _split(root.tag)
        registry.resource_type(resource_type)
        return self._element_tree(root, resource_type, resource=True, path=resource_type)

    def _element_tree(self, node: ET.Element, type_name: str, resource: bool, path: str) -> dict:
        tree: dict[str, Any] = {}
        if resource:
            tree["resourceType"] = type_name
        by_name = {descriptor.name: descriptor for descriptor in registry.fields_of(type_name)}

        for name, value in node.attrib.items():
            tree[name] = value

        for child in node:
            _, name = _split(child.tag)
            child_path = f"{path}.{name}"
            descriptor = by_name.get(name)
            value = self._generic(child) if descriptor is None else self._node_value(child, descriptor, child_path)

            if descriptor is not None and descriptor.is_list:
                tree.setdefault(name, []).append(value)
            elif name in tree:
                if descriptor is not None:
                    raise ParseError(f"element repeats but {name} is single-valued", path=child_path)
                if not isinstance(tree[name], list):
                    tree[name] = [tree[name]]
                tree[name].append(value)
            else:
                tree[name] = value
        return tree

    def _node_value(self, child: ET.Element, descriptor: FieldDescriptor, path: str) -> Any:
        kind = descriptor.kind
        if kind == "xhtml":
            if _split(child.tag)[0] != XHTML_NS:
                raise ParseError("narrative div is not in the XHTML namespace", path=path)
            fragment = _unqualified_xhtml(copy.deepcopy(child))
            fragment.tail = None
            return ET.tostring(fragment, encoding="unicode")

        if descriptor.is_primitive:
            if len(child):
                raise ParseError("extensions on primitive elements are not supported", path=path)
            if "value" not in child.attrib:
                raise ParseError("primitive element has no value attribute", path=path)
            return self._primitive(kind, child.attrib["value"], path)

        if kind == RESOURCE_KIND:
            inner = list(child)
            if len(inner) != 1:
                raise ParseError("a contained element must hold exactly one resource", path=path)
            _, resource_type = _split(inner[0].tag)
            registry.resource_type(resource_type)
            return self._element_tree(inner[0], resource_type, resource=True, path=f"{path}.{resource_type}")

        return self._element_tree(child, kind, resource=False, path=path)

    @staticmethod
    def _primitive(kind: str, text: str, path: str) -> Any:
        if kind == "boolean":
            if text not in ("true", "false"):
                raise ParseError(f"{text!r} is not a boolean", path=path)
            return text == "true"
        if kind in INTEGER_KINDS:
            if not PATTERNS["integer"].fullmatch(text):
                raise ParseError(f"{text!r} is not an integer", path=path)
            return int(text)
        if kind == "decimal":
            if not PATTERNS["decimal"].fullmatch(text):
                raise ParseError(f"{text!r} is not a decimal", path=path)
            return Decimal(text)
        return text

    def _generic(self, node: ET.Element) -> Any:
        if not len(node) and set(node.attrib) == {"value"}:
            return node.attrib["value"]
        tree: dict[str, Any] = dict(node.attrib)
        for child in node:
            _, name = _split(child.tag)
            value = self._generic(child)
            if name in tree:
                if not isinstance(tree[name], list):
                    tree[name] = [tree[name]]
                tree[name].append(value)
            else:
                tree[name] = value
        return tree
