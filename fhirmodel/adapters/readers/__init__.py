"""Document readers for fhirmodel.

Readers implement DocumentPort and yield one Result per resource found in a
file, so a single bad document does not stop a batch.
"""

from pathlib import Path
from typing import Union

from fhirmodel.adapters.readers.json_reader import JSONReader
from fhirmodel.adapters.readers.xml_reader import XMLReader
from fhirmodel.domain.ports import DocumentPort, UnsupportedSourceError

__all__ = ["JSONReader", "XMLReader", "get_reader"]


def get_reader(source: Union[str, Path], **kwargs) -> DocumentPort:
    """Factory function to get the reader for a source.

    Parameters:
        source: File path
        **kwargs: Passed to the reader constructor (``options``)

    Returns:
        DocumentPort: Reader for the file's extension

    Raises:
        UnsupportedSourceError: If no reader handles the source
    """
    for reader_class in (JSONReader, XMLReader):
        reader = reader_class(**kwargs)
        if reader.can_read(source):
            return reader
    raise UnsupportedSourceError(
        f"No reader available for source: {source}. Supported: .json, .ndjson, .xml",
        source=str(source),
    )
