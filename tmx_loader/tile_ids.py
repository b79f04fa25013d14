"""
Unpacking of binary tile codes and flip-flag extraction.

=============================================================================
TILE CODES
=============================================================================

Every cell of a tile layer is stored as an unsigned 32-bit integer. The low
29 bits are the Global ID (GID); the three high bits tell how the tile is
mirrored:

    bit 31  0x80000000  flipped horizontally
    bit 30  0x40000000  flipped vertically
    bit 29  0x20000000  flipped diagonally (x/y swap)

    code = 0xA0000005
         = 0x80000000 | 0x20000000 | 5
         -> gid 5, flipped horizontally and diagonally

In Base64 payloads each code takes 4 bytes, little-endian:

    05 00 00 A0  -> 0xA0000005

=============================================================================
FLAGS GRID
=============================================================================

The layer's `tile_ids` grid only keeps the stripped GID. The flip bits are
kept on a parallel uint8 grid as `code >> 29`:

    bit 2 (4) = horizontal, bit 1 (2) = vertical, bit 0 (1) = diagonal

=============================================================================
"""

from __future__ import annotations

from collections import namedtuple
from typing import Iterable, Tuple, Union

import numpy as np

from .errors import FormatError, SizeMismatchError

FLIPPED_HORIZONTALLY_FLAG = 0x80000000
FLIPPED_VERTICALLY_FLAG = 0x40000000
FLIPPED_DIAGONALLY_FLAG = 0x20000000
FLIP_FLAGS = FLIPPED_HORIZONTALLY_FLAG | FLIPPED_VERTICALLY_FLAG | FLIPPED_DIAGONALLY_FLAG
TILE_ID_MASK = ~FLIP_FLAGS & 0xFFFFFFFF  # 0x1FFFFFFF

FLAG_SHIFT = 29
MAX_TILE_CODE = 0xFFFFFFFF
TILE_CODE_SIZE = 4

TileFlags = namedtuple(
    "TileFlags", ("flipped_horizontally", "flipped_vertically", "flipped_diagonally")
)
EMPTY_FLAGS = TileFlags(False, False, False)

BytesLike = Union[bytes, bytearray, memoryview]


def flags_from_bits(bits: int) -> TileFlags:
    """Build TileFlags from a 3-bit value of the flags grid."""
    if not bits:
        return EMPTY_FLAGS
    return TileFlags(bool(bits & 4), bool(bits & 2), bool(bits & 1))


def decode_tile_code(code: int) -> Tuple[int, TileFlags]:
    """
    Split a single raw tile code into its GID and flip flags.

    Parameters:
    -----------
    code : int
        Raw unsigned 32-bit tile code

    Returns:
    --------
    (int, TileFlags) : GID with flip bits stripped, and the flags
    """
    if not 0 <= code <= MAX_TILE_CODE:
        raise FormatError(f"Tile code {code} does not fit in 32 bits")

    if code < FLIPPED_DIAGONALLY_FLAG:
        return code, EMPTY_FLAGS

    return code & TILE_ID_MASK, TileFlags(
        code & FLIPPED_HORIZONTALLY_FLAG == FLIPPED_HORIZONTALLY_FLAG,
        code & FLIPPED_VERTICALLY_FLAG == FLIPPED_VERTICALLY_FLAG,
        code & FLIPPED_DIAGONALLY_FLAG == FLIPPED_DIAGONALLY_FLAG,
    )


def read_tile_codes(data: BytesLike, expected_count: int) -> np.ndarray:
    """
    Read `expected_count` little-endian uint32 codes from a byte buffer.

    The buffer must hold exactly `expected_count * 4` bytes; any other
    length means the payload does not match the layer.

    Returns:
    --------
    np.ndarray : uint32 array of raw codes (flip bits intact)

    Raises:
    -------
    SizeMismatchError : If the byte count disagrees with the cell count
    """
    expected_bytes = expected_count * TILE_CODE_SIZE
    if len(data) != expected_bytes:
        raise SizeMismatchError(
            f"Decompressed data is {len(data)} bytes, "
            f"expected {expected_bytes} bytes for {expected_count} tiles"
        )

    # frombuffer gives a read-only view in file byte order; astype copies
    # into a native-order array we own
    return np.frombuffer(data, dtype="<u4").astype(np.uint32)


def split_tile_codes(codes: Iterable[int]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Split raw tile codes into stripped ids and flip-flag bits.

    Returns:
    --------
    (np.ndarray, np.ndarray) : int32 ids and uint8 flags (code >> 29)
    """
    if not isinstance(codes, np.ndarray):
        codes = list(codes)
    codes = np.asarray(codes, dtype=np.uint32)
    ids = (codes & TILE_ID_MASK).astype(np.int32)
    flags = (codes >> FLAG_SHIFT).astype(np.uint8)
    return ids, flags


def unpack(data: BytesLike, expected_count: int) -> np.ndarray:
    """
    Unpack a byte buffer into `expected_count` tile ids.

    Flip flags are stripped from each value and not returned; use
    read_tile_codes() and split_tile_codes() to keep them.

    Example:
        >>> unpack(bytes([0x05, 0x00, 0x00, 0xA0]), 1).tolist()
        [5]
    """
    ids, _ = split_tile_codes(read_tile_codes(data, expected_count))
    return ids
