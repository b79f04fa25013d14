"""
Decompression of base64 layer payloads.

=============================================================================
COMPRESSION (with Base64 only)
=============================================================================

Tiled can compress the binary tile stream before Base64-encoding it:

    <data encoding="base64" compression="zlib">
        (base64 of the zlib-compressed tile codes)
    </data>

- zlib: Standard compression, good ratio, fast
- gzip: Similar to zlib with a header, widely compatible
- (absent): The Base64 text holds the raw little-endian tile codes

Any other value (zstd included) is rejected.

=============================================================================
"""

from __future__ import annotations

import gzip
import logging
import zlib
from enum import Enum
from typing import Optional, Union

from .errors import DecodeError, UnsupportedFormatError

logger = logging.getLogger(__name__)


class Compression(Enum):
    """Compression applied to a base64 layer payload."""

    NONE = ""
    ZLIB = "zlib"
    GZIP = "gzip"

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> "Compression":
        """
        Parse the <data compression="..."> attribute.

        An absent or empty attribute means no compression.
        """
        if not tag:
            return cls.NONE
        try:
            return cls(tag)
        except ValueError:
            raise UnsupportedFormatError(
                f"Unsupported compression '{tag}'. "
                f"Only zlib, gzip or no compression are supported."
            ) from None


def inflate_zlib(data: bytes) -> bytes:
    try:
        return zlib.decompress(data)
    except zlib.error as exc:
        raise DecodeError(f"Malformed zlib stream: {exc}") from exc


def decompress_gzip(data: bytes) -> bytes:
    # gzip reports a bad header as OSError and a truncated member as EOFError
    try:
        return gzip.decompress(data)
    except (OSError, EOFError, zlib.error) as exc:
        raise DecodeError(f"Malformed gzip stream: {exc}") from exc


def decompress(tag: Union[str, Compression, None], data: bytes) -> bytes:
    """
    Decompress a layer payload according to its compression tag.

    Parameters:
    -----------
    tag : str, Compression or None
        Value of the compression attribute ("zlib", "gzip", "" or None)
    data : bytes
        Base64-decoded payload

    Returns:
    --------
    bytes : Decompressed payload, or `data` itself when uncompressed

    Raises:
    -------
    UnsupportedFormatError : If the tag is not zlib, gzip or empty
    DecodeError : If the compressed stream is malformed
    """
    compression = tag if isinstance(tag, Compression) else Compression.from_tag(tag)

    if compression is Compression.ZLIB:
        out = inflate_zlib(data)
    elif compression is Compression.GZIP:
        out = decompress_gzip(data)
    else:
        return data

    logger.debug("Decompressed %s payload: %d -> %d bytes",
                 compression.value, len(data), len(out))
    return out
