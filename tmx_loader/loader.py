"""
Map assembly: turns a parsed TMX document into a TileMap.

=============================================================================
WHAT IS SUPPORTED
=============================================================================

    <map version="1.0" orientation="orthogonal" width="100" height="100"
         tilewidth="32" tileheight="32">

        <tileset firstgid="1" name="terrain" tilewidth="32" tileheight="32">
            <image source="terrain.png" width="256" height="256"/>
        </tileset>

        <layer name="Ground" width="100" height="100">
            <data encoding="csv">
                1,2,3,4,5,...
            </data>
        </layer>
    </map>

- Map format version 1.0 only
- Orthogonal orientation only
- Embedded tilesets with a spritesheet <image>
- Tile layers in XML, CSV or Base64 (uncompressed, zlib, gzip)

Other elements (objectgroup, imagelayer, properties, ...) are ignored.

=============================================================================
LOADING STEPS
=============================================================================

1. The root element must be <map>
2. version and orientation must be supported
3. Map size from width/height/tilewidth/tileheight
4. Tilesets, in document order
5. Tile layers, in document order: <data> -> raw codes -> ids + flags -> grid

The first failure aborts the load; no partial map is returned.

=============================================================================
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from pathlib import Path
from typing import List, Optional, Union

import numpy as np

from .errors import FormatError, MissingAttributeError, MissingElementError, UnsupportedFormatError
from .grid import assemble
from .layer_data import decode_layer
from .models import MapLayer, MapSize, TileMap, TileSet, TileSetImage
from .settings import LoaderSettings
from .tile_ids import split_tile_codes

logger = logging.getLogger(__name__)

SUPPORTED_VERSION = "1.0"
SUPPORTED_ORIENTATION = "orthogonal"


# =============================================================================
# ATTRIBUTE HELPERS
# =============================================================================

def _required_attr(elem: ET.Element, name: str) -> str:
    value = elem.get(name)
    if value is None:
        raise MissingAttributeError(f"<{elem.tag}> is missing required attribute '{name}'")
    return value


def _int_attr(elem: ET.Element, name: str) -> int:
    """Read a required non-negative integer attribute."""
    raw = _required_attr(elem, name)
    value = raw.strip()
    if not value.isdigit() or not value.isascii():
        raise FormatError(
            f"Attribute '{name}' of <{elem.tag}> must be a non-negative integer, got '{raw}'"
        )
    return int(value)


# =============================================================================
# MAP LEVEL
# =============================================================================

def check_requirements(map_elem: ET.Element):
    """Reject map versions and orientations we cannot decode."""
    version = map_elem.get("version")
    if version != SUPPORTED_VERSION:
        raise UnsupportedFormatError(
            f"Unsupported map version '{version}'. "
            f"Only version '{SUPPORTED_VERSION}' is supported."
        )

    orientation = map_elem.get("orientation")
    if orientation != SUPPORTED_ORIENTATION:
        raise UnsupportedFormatError(
            f"Unsupported orientation '{orientation}'. "
            f"Only '{SUPPORTED_ORIENTATION}' orientation is supported."
        )


def load_map_size(map_elem: ET.Element) -> MapSize:
    return MapSize(
        width=_int_attr(map_elem, "width"),
        height=_int_attr(map_elem, "height"),
        tilewidth=_int_attr(map_elem, "tilewidth"),
        tileheight=_int_attr(map_elem, "tileheight"),
    )


# =============================================================================
# TILESETS
# =============================================================================

def load_tileset_image(img_elem: Optional[ET.Element]) -> TileSetImage:
    if img_elem is None:
        raise MissingElementError("Tile set missing image")

    return TileSetImage(
        source=_required_attr(img_elem, "source"),
        width=_int_attr(img_elem, "width"),
        height=_int_attr(img_elem, "height"),
    )


def load_tileset(elem: ET.Element) -> TileSet:
    """
    Parse an embedded <tileset> element.

    External tilesets (<tileset firstgid="1" source="terrain.tsx"/>) have no
    <image> child and are rejected with MissingElementError.
    """
    image = load_tileset_image(elem.find("image"))
    return TileSet(
        firstgid=_int_attr(elem, "firstgid"),
        name=elem.get("name", ""),
        tilewidth=_int_attr(elem, "tilewidth"),
        tileheight=_int_attr(elem, "tileheight"),
        image=image,
    )


def load_tilesets(map_elem: ET.Element) -> List[TileSet]:
    return [load_tileset(elem) for elem in map_elem.findall("tileset")]


# =============================================================================
# LAYERS
# =============================================================================

def load_layer(elem: ET.Element, map_cells: int) -> MapLayer:
    """
    Parse a <layer> element and decode its tile data.

    `map_cells` is the map's width * height. The decompressed Base64 byte
    count is checked against it; the decoded id count is checked against
    the layer's own width * height by the grid assembler.

    Pipeline:
        <data> --decode_layer--> raw uint32 codes
               --split_tile_codes--> ids (int32) + flip bits (uint8)
               --assemble--> [height][width] grids
    """
    name = elem.get("name", "")
    width = _int_attr(elem, "width")
    height = _int_attr(elem, "height")

    codes = decode_layer(elem.find("data"), map_cells)
    ids, flags = split_tile_codes(codes)

    layer = MapLayer(
        name=name,
        width=width,
        height=height,
        tile_ids=assemble(ids, width, height),
        flags=assemble(flags, width, height, dtype=np.uint8),
    )
    logger.debug("Decoded layer '%s' (%dx%d)", name, width, height)
    return layer


def load_layers(map_elem: ET.Element, size: MapSize,
                settings: LoaderSettings) -> List[MapLayer]:
    """
    Decode every <layer> in document order.

    With more than one worker, layers are decoded on a thread pool. Results
    keep document order, and the error of the first failing layer (in
    document order) is raised.
    """
    layer_elems = map_elem.findall("layer")
    decode = partial(load_layer, map_cells=size.width * size.height)

    if settings.decode_workers > 1 and len(layer_elems) > 1:
        logger.debug("Decoding %d layers with %d workers",
                     len(layer_elems), settings.decode_workers)
        with ThreadPoolExecutor(max_workers=settings.decode_workers) as executor:
            return list(executor.map(decode, layer_elems))

    return [decode(elem) for elem in layer_elems]


# =============================================================================
# ENTRY POINTS
# =============================================================================

def parse_document(document: Union[ET.ElementTree, ET.Element],
                   settings: Optional[LoaderSettings] = None) -> TileMap:
    """
    Build a TileMap from an already-parsed TMX document.

    Parameters:
    -----------
    document : ET.ElementTree or ET.Element
        Parsed document, or its root element
    settings : LoaderSettings, optional
        Loader settings (defaults: sequential decoding)

    Returns:
    --------
    TileMap : Fully decoded map

    Raises:
    -------
    TmxError : Any subclass, see errors.py
    """
    if settings is None:
        settings = LoaderSettings()

    if isinstance(document, ET.ElementTree):
        root = document.getroot()
    else:
        root = document

    if root is None or root.tag != "map":
        raise MissingElementError("Missing 'map' element")

    check_requirements(root)

    size = load_map_size(root)
    tilesets = load_tilesets(root)
    layers = load_layers(root, size, settings)

    logger.info("Loaded %dx%d map with %d tilesets and %d layers",
                size.width, size.height, len(tilesets), len(layers))
    return TileMap(size=size, tilesets=tilesets, layers=layers)


def loads(text: Union[str, bytes], settings: Optional[LoaderSettings] = None) -> TileMap:
    """Parse a TMX document held in memory."""
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise FormatError(f"Malformed TMX document: {exc}") from exc
    return parse_document(root, settings)


def load(filepath: Union[str, Path], settings: Optional[LoaderSettings] = None) -> TileMap:
    """
    Load a TMX file from disk.

    Parameters:
    -----------
    filepath : str or Path
        Path to the .tmx file

    Raises:
    -------
    FileNotFoundError : If TMX file doesn't exist
    FormatError : If XML is malformed
    TmxError : Any other decoding failure
    """
    filepath = Path(filepath)
    logger.debug("Loading %s", filepath)

    try:
        tree = ET.parse(filepath)
    except ET.ParseError as exc:
        raise FormatError(f"Malformed TMX document '{filepath}': {exc}") from exc
    return parse_document(tree, settings)
