"""JSON Codec.

Serializes resource records to FHIR JSON and back. Numbers with a fraction or
exponent are read with ``parse_float=Decimal`` so decimal values never pass
through binary floating point on the way in. On the way out simplejson writes
each ``Decimal`` as a JSON number in its exact lexical form, so precision and
trailing zeros (``1.10``) survive.
"""

import json
import logging
from decimal import Decimal
from typing import Optional, Union

import simplejson

from fhirmodel.domain.metadata import parse_resource
from fhirmodel.domain.ports import CodecPort, ParseError, ParseOptions
from fhirmodel.domain.record import Record

logger = logging.getLogger(__name__)


class JSONCodec(CodecPort):
    """FHIR JSON codec.

    Parameters:
        indent: Indentation for ``dumps``; None or 0 writes compact JSON
    """

    format_name = "json"

    def __init__(self, indent: Optional[int] = 2):
        self.indent = indent or None

    def dumps(self, record: Record) -> str:
        """Serialize a resource record to a JSON document."""
        return simplejson.dumps(record.to_tree(), indent=self.indent, ensure_ascii=False, use_decimal=True)

    def loads(self, text: Union[str, bytes], options: Optional[ParseOptions] = None) -> Record:
        """Parse a JSON document into a resource record.

        Raises:
            ParseError: If the text is not JSON or does not match the schema
            UnknownType: If the resource type is not registered
        """
        try:
            tree = json.loads(text, parse_float=Decimal)
        except json.JSONDecodeError as e:
            raise ParseError(f"invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})") from e
        logger.debug(f"Parsed JSON document with resourceType {tree.get('resourceType') if isinstance(tree, dict) else None}")
        return parse_resource(tree, options=options)
