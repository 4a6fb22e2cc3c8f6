"""XML Document Reader.

Reads a single resource from an ``.xml`` file using the XML codec.
"""

import logging
from pathlib import Path
from typing import Iterator, Optional, Union

from fhirmodel.adapters.codecs.xml_codec import XMLCodec
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


class XMLReader(DocumentPort):
    """Reader for FHIR XML resource files.

    Parameters:
        options: Parse policies applied to the document
    """

    def __init__(self, options: Optional[ParseOptions] = None):
        self.options = options or ParseOptions()
        self.codec = XMLCodec()
        self.adapter_name = "xml_reader"

    def can_read(self, source: Union[str, Path]) -> bool:
        return bool(source) and Path(source).suffix.lower() == '.xml'

    def read(self, source: Union[str, Path]) -> Iterator[Result[Record]]:
        """Read the resource in the file.

        Yields:
            Result[Record]: One result for the document

        Raises:
            SourceNotFoundError: If the file does not exist
            UnsupportedSourceError: If the file is not XML
        """
        source_path = Path(source)
        if not source_path.exists():
            raise SourceNotFoundError(f"XML source not found: {source}", source=str(source))
        if not self.can_read(source_path):
            raise UnsupportedSourceError(
                f"Not an XML source: {source}", source=str(source), adapter=self.adapter_name
            )

        details = {"source": str(source), "record_index": 0}
        try:
            record = self.codec.loads(source_path.read_bytes(), options=self.options)
        except ModelError as e:
            logger.warning(f"Rejected document from {source}: {e}", extra=details)
            yield Result.failure_result(e, error_details={**details, "path": getattr(e, "path", None)})
            return
        yield Result.success_result(record)
