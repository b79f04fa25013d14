"""
tmx_loader - decode Tiled TMX maps into tile-id grids

Loads orthogonal maps (format version 1.0): map size, tilesets and one
[height][width] GID grid per tile layer, from XML, CSV or Base64
(uncompressed, zlib, gzip) layer data.

Requirements:
    pip install numpy python-dotenv
"""

from .errors import (
    DecodeError, FormatError, InvalidArgumentError, MissingAttributeError,
    MissingDataError, MissingElementError, SizeMismatchError, TmxError,
    UnsupportedFormatError,
)
from .loader import load, loads, parse_document
from .models import MapLayer, MapSize, TileMap, TileSet, TileSetImage
from .settings import LoaderSettings
from .tile_ids import TileFlags, decode_tile_code, unpack

__version__ = "1.0.0"
__all__ = [
    "load",
    "loads",
    "parse_document",
    "LoaderSettings",
    "MapLayer",
    "MapSize",
    "TileMap",
    "TileSet",
    "TileSetImage",
    "TileFlags",
    "decode_tile_code",
    "unpack",
    "TmxError",
    "MissingElementError",
    "MissingDataError",
    "MissingAttributeError",
    "UnsupportedFormatError",
    "FormatError",
    "DecodeError",
    "SizeMismatchError",
    "InvalidArgumentError",
]
