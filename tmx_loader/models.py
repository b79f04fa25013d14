"""
Value types of a decoded TMX map.

    TileMap
    ├── size: MapSize              (map and tile dimensions)
    ├── tilesets: (TileSet, ...)   (document order, ascending firstgid)
    │   └── image: TileSetImage
    └── layers: (MapLayer, ...)    (document order, bottom to top)
        ├── tile_ids[y][x]         (GIDs, flip bits stripped)
        └── flags[y][x]            (flip bits, see tile_ids.py)

All of them are built once by the loader and never mutated afterwards. The
layer grids are read-only numpy arrays.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .errors import InvalidArgumentError
from .tile_ids import EMPTY_FLAGS, TileFlags, flags_from_bits


def _require(value, name: str):
    if value is None:
        raise InvalidArgumentError(f"{name} is required")
    return value


@dataclass(frozen=True)
class MapSize:
    """Map size in tiles and tile size in pixels."""
    width: int                     # Map width in tiles
    height: int                    # Map height in tiles
    tilewidth: int                 # Tile width in pixels
    tileheight: int                # Tile height in pixels

    def __post_init__(self):
        for name in ("width", "height", "tilewidth", "tileheight"):
            _require(getattr(self, name), name)


@dataclass(frozen=True)
class TileSetImage:
    """
    Spritesheet image of a tile set.

    source: Path to image file (relative to the TMX file)
    width:  Image width in pixels
    height: Image height in pixels
    """
    source: str
    width: int
    height: int

    def __post_init__(self):
        for name in ("source", "width", "height"):
            _require(getattr(self, name), name)


@dataclass(frozen=True)
class TileSet:
    """
    Tile set - one spritesheet image cut into same-sized tiles.

    The tile set owns GIDs starting at `firstgid`; the next tile set in the
    map starts where this one ends.

        Tileset A (firstgid=1):   tiles 1-100
        Tileset B (firstgid=101): tiles 101-200
    """
    firstgid: int                  # First Global ID
    name: str                      # Tileset name
    tilewidth: int                 # Tile width in pixels
    tileheight: int                # Tile height in pixels
    image: TileSetImage            # Spritesheet image

    def __post_init__(self):
        for name in ("firstgid", "tilewidth", "tileheight", "image"):
            _require(getattr(self, name), name)

    @property
    def tile_count(self) -> int:
        """Number of whole tiles in the image (no spacing or margin)."""
        if self.tilewidth <= 0 or self.tileheight <= 0:
            return 0
        columns = self.image.width // self.tilewidth
        rows = self.image.height // self.tileheight
        return columns * rows


@dataclass(frozen=True, eq=False)
class MapLayer:
    """
    Tile layer - a grid of tile references.

    ==========================================================================
    TILE ACCESS
    ==========================================================================

    Grids are indexed [y][x] (row, then column):

        gid = layer.tile_ids[10, 5]        # column 5, row 10
        gid = layer.get_tile_gid(5, 10)    # same, 0 when out of bounds

    GID 0 = empty (no tile)
    GID > 0 = reference to tileset tile

    `flags` holds the flip bits that were stripped from each GID; when the
    layer was built without them every tile reads as unflipped.

    ==========================================================================
    """
    name: str                            # Layer name
    width: int                           # Width in tiles
    height: int                          # Height in tiles
    tile_ids: np.ndarray                 # int32 [height][width]
    flags: Optional[np.ndarray] = None   # uint8 [height][width]

    def __post_init__(self):
        _require(self.tile_ids, "tile_ids")
        if self.tile_ids.shape != (self.height, self.width):
            raise InvalidArgumentError(
                f"tile_ids shape {self.tile_ids.shape} does not match "
                f"layer size {self.width}x{self.height}"
            )
        if self.flags is not None and self.flags.shape != self.tile_ids.shape:
            raise InvalidArgumentError(
                f"flags shape {self.flags.shape} does not match "
                f"tile_ids shape {self.tile_ids.shape}"
            )

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_tile_gid(self, x: int, y: int) -> int:
        """
        Get the GID of the tile at position (x, y).

        Parameters:
        -----------
        x : int
            Column (0 to width-1)
        y : int
            Row (0 to height-1)

        Returns:
        --------
        int : Global tile ID (0 = empty, >0 = tile reference)
        """
        if self._in_bounds(x, y):
            return int(self.tile_ids[y, x])
        return 0  # Out of bounds = empty

    def get_tile_flags(self, x: int, y: int) -> TileFlags:
        """Get the flip flags of the tile at position (x, y)."""
        if self.flags is None or not self._in_bounds(x, y):
            return EMPTY_FLAGS
        return flags_from_bits(int(self.flags[y, x]))


@dataclass(frozen=True, eq=False)
class TileMap:
    """
    Decoded Tiled map - the root object returned by the loader.

    Loading:
        tile_map = tmx_loader.load("level1.tmx")
        print(f"Map size: {tile_map.size.width}x{tile_map.size.height}")

    Accessing layers:
        ground = tile_map.get_layer_by_name("Ground")
        tile_gid = ground.get_tile_gid(5, 10)
        tileset = tile_map.get_tileset_for_gid(tile_gid)
    """
    size: MapSize
    tilesets: Tuple[TileSet, ...]
    layers: Tuple[MapLayer, ...]

    def __post_init__(self):
        _require(self.size, "size")
        # Freeze whatever sequence the caller handed in
        object.__setattr__(self, "tilesets", tuple(_require(self.tilesets, "tilesets")))
        object.__setattr__(self, "layers", tuple(_require(self.layers, "layers")))

    def get_layer_by_name(self, name: str) -> Optional[MapLayer]:
        """Return the first layer called `name`, or None."""
        for layer in self.layers:
            if layer.name == name:
                return layer
        return None

    def get_tileset_for_gid(self, gid: int) -> Optional[TileSet]:
        """
        Find which tileset contains a given GID.

        A GID belongs to the tileset with the largest firstgid <= gid:

            Tileset A: firstgid=1
            Tileset B: firstgid=101

            GID 50:  50 >= 1, 50 < 101  -> Tileset A
            GID 150: 150 >= 101         -> Tileset B

        GID 0 (empty tile) never resolves.
        """
        if gid <= 0:
            return None
        found = None
        for tileset in self.tilesets:
            if tileset.firstgid <= gid and (found is None or tileset.firstgid > found.firstgid):
                found = tileset
        return found
