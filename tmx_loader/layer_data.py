"""
Decoding of a layer's <data> element into raw tile codes.

=============================================================================
DATA ENCODINGS
=============================================================================

TMX supports three encodings for tile data:

1. XML (deprecated):
   <data>
       <tile gid="1"/><tile gid="2"/><tile/>...
   </data>
   A <tile> without gid is the empty tile (GID 0).

2. CSV:
   <data encoding="csv">
       1,2,3,
       4,5,6
   </data>

3. Base64:
   <data encoding="base64">
       AQAAAAIAAAADAAAA
   </data>
   Compact binary (4 bytes per tile, little-endian), optionally compressed.
   See decompression.py.

All three produce the same thing: a flat sequence of unsigned 32-bit codes
in row-major order, flip bits included.

=============================================================================
"""

from __future__ import annotations

import base64
import binascii
import logging
import xml.etree.ElementTree as ET
from enum import Enum
from typing import Iterable, List, Optional, Union

import numpy as np

from .decompression import Compression, decompress
from .errors import FormatError, MissingDataError, UnsupportedFormatError
from .tile_ids import MAX_TILE_CODE, read_tile_codes

logger = logging.getLogger(__name__)


class Encoding(Enum):
    """Encoding of a layer's <data> element."""

    XML = ""
    BASE64 = "base64"
    CSV = "csv"

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> "Encoding":
        """Parse the <data encoding="..."> attribute (absent means XML)."""
        if not tag:
            return cls.XML
        try:
            return cls(tag)
        except ValueError:
            raise UnsupportedFormatError(
                f"Unsupported layer data encoding '{tag}'. "
                f"Only base64, csv or plain XML tiles are supported."
            ) from None


def _parse_tile_code(token: str, where: str) -> int:
    # int() would also accept "+5", "-0" and "1_000"
    if not token.isdigit() or not token.isascii():
        raise FormatError(f"Invalid tile code '{token}' in {where}")
    code = int(token)
    if code > MAX_TILE_CODE:
        raise FormatError(f"Tile code {code} in {where} does not fit in 32 bits")
    return code


def decode_base64(text: Optional[str], compression: Union[str, Compression, None],
                  expected_count: int) -> np.ndarray:
    """
    Decode Base64 text, decompress it and read the tile codes.

    Whitespace anywhere in the text is ignored (Tiled wraps the payload
    in newlines and indentation).
    """
    payload = "".join((text or "").split())
    try:
        raw_data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise FormatError(f"Malformed base64 layer data: {exc}") from exc

    raw_data = decompress(compression, raw_data)
    return read_tile_codes(raw_data, expected_count)


def decode_csv(text: Optional[str]) -> List[int]:
    """
    Parse CSV layer text into tile codes.

    Data looks like: "1,2,3,\\n4,5,6". Blank text and a single trailing
    comma are allowed; every other token, empty ones included, must be a
    non-negative integer.
    """
    tokens = [token.strip() for token in (text or "").split(",")]
    if not tokens[-1]:
        tokens.pop()
    return [_parse_tile_code(token, "CSV layer data") for token in tokens]


def decode_xml_tiles(tiles: Iterable[ET.Element]) -> List[int]:
    """Read the gid attribute of each <tile> element, in document order."""
    codes = []
    for tile_elem in tiles:
        gid = tile_elem.get("gid")
        if gid is None:
            codes.append(0)
        else:
            codes.append(_parse_tile_code(gid.strip(), "<tile gid>"))
    return codes


def decode_layer(data_elem: Optional[ET.Element], expected_count: int) -> np.ndarray:
    """
    Decode a layer's <data> element into raw tile codes.

    Parameters:
    -----------
    data_elem : ET.Element or None
        The <data> child of a <layer>
    expected_count : int
        Number of cells the map declares (map width * height). Only the
        Base64 path checks it here, against the decompressed byte count; the
        grid assembler checks the id count against the layer for every
        encoding.

    Returns:
    --------
    np.ndarray : uint32 array of raw tile codes (flip bits intact)

    Raises:
    -------
    MissingDataError : If the layer has no <data> element
    UnsupportedFormatError : Unknown encoding or compression
    FormatError : Malformed CSV token, gid, base64 or compressed stream
    SizeMismatchError : Decompressed byte count != expected_count * 4
    """
    if data_elem is None:
        raise MissingDataError("Layer does not have a data element")

    encoding = Encoding.from_tag(data_elem.get("encoding"))

    if encoding is Encoding.BASE64:
        compression = Compression.from_tag(data_elem.get("compression"))
        logger.debug("Decoding base64 layer data (compression=%s)",
                     compression.value or "none")
        return decode_base64(data_elem.text, compression, expected_count)

    if encoding is Encoding.CSV:
        logger.debug("Decoding CSV layer data")
        codes = decode_csv(data_elem.text)
    else:
        logger.debug("Decoding XML <tile> layer data")
        codes = decode_xml_tiles(data_elem.findall("tile"))

    return np.array(codes, dtype=np.uint32)
