"""JSON Document Reader.

Reads resource records from ``.json`` files (one resource, or an array of
resources) and ``.ndjson`` files (one resource per line).

Architecture:
    - Implements DocumentPort
    - Each document is parsed in isolation; a bad document becomes a failure
      Result and the rest of the file is still read
"""

import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterator, Optional, Union

from fhirmodel.domain.metadata import parse_resource
from fhirmodel.domain.ports import (
    DocumentPort,
    ModelError,
    ParseOptions,
    Result,
    SourceNotFoundError,
    UnsupportedSourceError,
)
from fhirmodel.domain.record import Record

logger = logging.getLogger(__name__)


class JSONReader(DocumentPort):
    """Reader for JSON and NDJSON resource files.

    Parameters:
        options: Parse policies applied to every document
    """

    SUFFIXES = ('.json', '.ndjson')

    def __init__(self, options: Optional[ParseOptions] = None):
        self.options = options or ParseOptions()
        self.adapter_name = "json_reader"

    def can_read(self, source: Union[str, Path]) -> bool:
        return bool(source) and Path(source).suffix.lower() in self.SUFFIXES

    def read(self, source: Union[str, Path]) -> Iterator[Result[Record]]:
        """Read every resource in the file.

        Yields:
            Result[Record]: Success with the record, or failure with
                ``source`` and ``record_index`` in ``error_details``

        Raises:
            SourceNotFoundError: If the file does not exist
            UnsupportedSourceError: If the file is not JSON
        """
        source_path = Path(source)
        if not source_path.exists():
            raise SourceNotFoundError(f"JSON source not found: {source}", source=str(source))
        if not self.can_read(source_path):
            raise UnsupportedSourceError(
                f"Not a JSON source: {source}", source=str(source), adapter=self.adapter_name
            )

        for index, document in self._documents(source_path):
            yield self._parse(document, str(source), index)

    def _documents(self, source_path: Path) -> Iterator[tuple[int, Any]]:
        with open(source_path, 'r', encoding='utf-8') as f:
            if source_path.suffix.lower() == '.ndjson':
                for index, line in enumerate(line for line in f if line.strip()):
                    yield index, self._decode(line, source_path, index)
                return
            raw_data = self._decode(f.read(), source_path, None)

        if isinstance(raw_data, list):
            yield from enumerate(raw_data)
        else:
            yield 0, raw_data

    def _decode(self, text: str, source_path: Path, index: Optional[int]) -> Any:
        try:
            return json.loads(text, parse_float=Decimal)
        except json.JSONDecodeError as e:
            if index is None:
                raise UnsupportedSourceError(
                    f"Invalid JSON format in {source_path}: {str(e)}",
                    source=str(source_path),
                    adapter=self.adapter_name,
                ) from e
            return _InvalidLine(str(e))

    def _parse(self, document: Any, source: str, index: int) -> Result[Record]:
        details = {"source": source, "record_index": index}
        if isinstance(document, _InvalidLine):
            logger.warning(f"Rejected document {index} from {source}: invalid JSON", extra=details)
            return Result.failure_result(f"invalid JSON: {document.error}", error_type="ParseError", error_details=details)
        try:
            record = parse_resource(document, options=self.options)
        except ModelError as e:
            logger.warning(f"Rejected document {index} from {source}: {e}", extra=details)
            return Result.failure_result(e, error_details={**details, "path": getattr(e, "path", None)})
        return Result.success_result(record)


class _InvalidLine:
    """Marker for an NDJSON line that is not valid JSON."""

    def __init__(self, error: str):
        self.error = error
