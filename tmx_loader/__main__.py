#!/usr/bin/env python3

"""
TMX Loader - print what a Tiled map decodes to

Usage:
    python -m tmx_loader <map.tmx>
    python -m tmx_loader <map.tmx> --layer <name>

Without --layer, prints the map size, tilesets and layers.
With --layer, prints that layer's GID grid, one row per line.

Environment:
    TMX_LOG_LEVEL       - DEBUG, INFO, WARNING (default), ERROR
    TMX_DECODE_WORKERS  - threads used to decode layers (default 1)
"""

import logging
import sys
from pathlib import Path

from .errors import TmxError
from .loader import load
from .models import TileMap
from .settings import LoaderSettings


def print_summary(tile_map: TileMap):
    size = tile_map.size
    print(f"Map: {size.width}x{size.height} tiles of {size.tilewidth}x{size.tileheight} px")

    print(f"Tilesets ({len(tile_map.tilesets)}):")
    for tileset in tile_map.tilesets:
        print(f"  [{tileset.firstgid}] {tileset.name} "
              f"({tileset.tile_count} tiles, {tileset.image.source})")

    print(f"Layers ({len(tile_map.layers)}):")
    for layer in tile_map.layers:
        used = int((layer.tile_ids != 0).sum())
        flipped = int((layer.flags != 0).sum()) if layer.flags is not None else 0
        print(f"  {layer.name}: {layer.width}x{layer.height}, "
              f"{used} tiles set, {flipped} flipped")


def print_layer(tile_map: TileMap, name: str) -> bool:
    layer = tile_map.get_layer_by_name(name)
    if layer is None:
        print(f"Error: No layer named '{name}'")
        return False

    for row in layer.tile_ids:
        print(",".join(str(gid) for gid in row))
    return True


def main(argv=None):
    args = sys.argv[1:] if argv is None else argv

    if not args or args[0] in ("-h", "--help"):
        print(__doc__)
        return 1 if not args else 0

    layer_name = None
    if len(args) == 3 and args[1] == "--layer":
        layer_name = args[2]
    elif len(args) != 1:
        print(__doc__)
        return 1

    source_path = args[0]
    if not Path(source_path).exists():
        print(f"Error: File '{source_path}' not found")
        return 1

    try:
        settings = LoaderSettings.load()
    except TmxError as e:
        print(f"Error: {e}")
        return 1

    logging.basicConfig(
        level=settings.log_level_number,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )

    try:
        tile_map = load(source_path, settings)
    except TmxError as e:
        print(f"Error: {e}")
        return 1

    if layer_name is not None:
        return 0 if print_layer(tile_map, layer_name) else 1

    print_summary(tile_map)
    return 0


if __name__ == "__main__":
    sys.exit(main())
