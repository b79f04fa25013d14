from __future__ import annotations

import dataclasses

import numpy as np
import pytest

from tmx_loader.errors import InvalidArgumentError
from tmx_loader.grid import assemble
from tmx_loader.models import MapLayer, MapSize, TileMap, TileSet, TileSetImage
from tmx_loader.tile_ids import EMPTY_FLAGS, TileFlags


def _tileset(firstgid: int, name: str) -> TileSet:
    return TileSet(firstgid, name, 16, 16, TileSetImage(f"{name}.png", 64, 32))


def _layer(name: str = "Ground") -> MapLayer:
    return MapLayer(
        name=name,
        width=3,
        height=2,
        tile_ids=assemble([1, 2, 3, 4, 5, 6], 3, 2),
        flags=assemble([0, 4, 0, 0, 0, 3], 3, 2, dtype=np.uint8),
    )


def test_models_are_frozen() -> None:
    size = MapSize(10, 10, 16, 16)
    with pytest.raises(dataclasses.FrozenInstanceError):
        size.width = 5  # type: ignore[misc]


def test_tileset_requires_image() -> None:
    with pytest.raises(InvalidArgumentError):
        TileSet(1, "terrain", 16, 16, None)  # type: ignore[arg-type]


@pytest.mark.parametrize("args", [
    (None, "t", 16, 16),
    (1, "t", None, 16),
    (1, "t", 16, None),
])
def test_tileset_requires_gid_and_tile_size(args) -> None:
    with pytest.raises(InvalidArgumentError):
        TileSet(*args, TileSetImage("t.png", 64, 32))


@pytest.mark.parametrize("args", [
    (None, 1, 1, 1),
    (1, None, 1, 1),
    (1, 1, None, 1),
    (1, 1, 1, None),
])
def test_map_size_requires_all_fields(args) -> None:
    with pytest.raises(InvalidArgumentError):
        MapSize(*args)


def test_tileset_image_requires_fields() -> None:
    with pytest.raises(InvalidArgumentError):
        TileSetImage(None, 64, 32)  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError):
        TileSetImage("t.png", None, 32)  # type: ignore[arg-type]


def test_tileset_tile_count() -> None:
    assert _tileset(1, "terrain").tile_count == 8
    assert TileSet(1, "odd", 0, 16, TileSetImage("odd.png", 64, 32)).tile_count == 0


def test_tile_map_requires_inputs() -> None:
    with pytest.raises(InvalidArgumentError):
        TileMap(None, [], [])  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError):
        TileMap(MapSize(1, 1, 1, 1), None, [])  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError):
        TileMap(MapSize(1, 1, 1, 1), [], None)  # type: ignore[arg-type]


def test_layer_requires_matching_grid() -> None:
    with pytest.raises(InvalidArgumentError):
        MapLayer("a", 3, 2, None)  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError):
        MapLayer("a", 2, 3, assemble([1, 2, 3, 4, 5, 6], 3, 2))


def test_layer_tile_access() -> None:
    layer = _layer()
    assert layer.get_tile_gid(0, 0) == 1
    assert layer.get_tile_gid(2, 0) == 3
    assert layer.get_tile_gid(0, 1) == 4
    assert layer.get_tile_gid(3, 0) == 0
    assert layer.get_tile_gid(0, -1) == 0


def test_layer_flag_access() -> None:
    layer = _layer()
    assert layer.get_tile_flags(1, 0) == TileFlags(True, False, False)
    assert layer.get_tile_flags(2, 1) == TileFlags(False, True, True)
    assert layer.get_tile_flags(0, 0) is EMPTY_FLAGS
    assert layer.get_tile_flags(5, 5) is EMPTY_FLAGS


def test_layer_without_flags_reads_unflipped() -> None:
    layer = MapLayer("a", 1, 1, assemble([9], 1, 1))
    assert layer.get_tile_flags(0, 0) is EMPTY_FLAGS


def test_tile_map_lookup_helpers() -> None:
    tile_map = TileMap(
        size=MapSize(3, 2, 16, 16),
        tilesets=[_tileset(1, "terrain"), _tileset(101, "items")],
        layers=[_layer("Ground"), _layer("Top")],
    )
    assert isinstance(tile_map.tilesets, tuple)
    assert isinstance(tile_map.layers, tuple)

    assert tile_map.get_layer_by_name("Top") is tile_map.layers[1]
    assert tile_map.get_layer_by_name("Missing") is None

    assert tile_map.get_tileset_for_gid(0) is None
    assert tile_map.get_tileset_for_gid(50).name == "terrain"
    assert tile_map.get_tileset_for_gid(101).name == "items"
    assert tile_map.get_tileset_for_gid(150).name == "items"


def test_tileset_for_gid_below_first_tileset() -> None:
    tile_map = TileMap(MapSize(1, 1, 16, 16), [_tileset(10, "late")], [])
    assert tile_map.get_tileset_for_gid(5) is None
