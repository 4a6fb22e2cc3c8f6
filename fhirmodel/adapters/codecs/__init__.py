"""Codecs that convert resource records to and from text."""

from pathlib import Path
from typing import Union

from fhirmodel.adapters.codecs.json_codec import JSONCodec
from fhirmodel.adapters.codecs.xml_codec import XMLCodec
from fhirmodel.domain.ports import CodecPort, UnsupportedSourceError

__all__ = ["JSONCodec", "XMLCodec", "get_codec", "codec_for_path"]

_CODECS = {
    "json": JSONCodec,
    "xml": XMLCodec,
}


def get_codec(format_name: str, **kwargs) -> CodecPort:
    """Return a codec for ``json`` or ``xml``.

    Parameters:
        format_name: Format name, case-insensitive
        **kwargs: Passed to the codec constructor (``indent`` or ``pretty``)

    Raises:
        UnsupportedSourceError: If the format is not supported
    """
    codec_class = _CODECS.get(format_name.lower().lstrip("."))
    if codec_class is None:
        raise UnsupportedSourceError(
            f"Unsupported format: {format_name}. Supported: {sorted(_CODECS)}",
            source=format_name,
        )
    return codec_class(**kwargs)


def codec_for_path(path: Union[str, Path], **kwargs) -> CodecPort:
    """Pick a codec from a file extension."""
    return get_codec(Path(path).suffix or str(path), **kwargs)
