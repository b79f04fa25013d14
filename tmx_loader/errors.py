"""
Exception hierarchy for TMX loading.

Every failure raised while decoding a map derives from TmxError, so callers
can treat a load attempt as a single fallible operation:

    try:
        tile_map = tmx_loader.load("level1.tmx")
    except TmxError as exc:
        print(f"Cannot load map: {exc}")
"""

from __future__ import annotations


class TmxError(Exception):
    """Base exception for tmx_loader."""


class MissingElementError(TmxError):
    """Raised when a required element is absent (map, data, image)."""


class MissingDataError(MissingElementError):
    """Raised when a <layer> has no <data> child."""


class MissingAttributeError(MissingElementError):
    """Raised when a required attribute is absent from an element."""


class UnsupportedFormatError(TmxError):
    """Raised when an enum-like attribute holds a value we do not support."""


class FormatError(TmxError):
    """Raised when scalar content is malformed (CSV token, base64, number)."""


class DecodeError(FormatError):
    """Raised when a compressed stream cannot be decompressed."""


class SizeMismatchError(TmxError):
    """Raised when decoded data disagrees with the declared width x height."""


class InvalidArgumentError(TmxError, ValueError):
    """Raised when a required constructor input is missing."""
