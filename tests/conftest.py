from __future__ import annotations

import base64
import struct

import pytest

TILESET = (
    '<tileset firstgid="1" name="terrain" tilewidth="16" tileheight="16">'
    '<image source="terrain.png" width="64" height="32"/>'
    "</tileset>"
)


def pack_codes(codes) -> bytes:
    return struct.pack(f"<{len(codes)}I", *codes)


def b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


def csv_data(codes) -> str:
    return '<data encoding="csv">' + ",".join(str(c) for c in codes) + "</data>"


def xml_data(codes) -> str:
    return "<data>" + "".join(f'<tile gid="{c}"/>' for c in codes) + "</data>"


def base64_data(codes, compression: str | None = None, compress=None) -> str:
    raw = pack_codes(codes)
    if compress is not None:
        raw = compress(raw)
    attr = f' compression="{compression}"' if compression else ""
    return f'<data encoding="base64"{attr}>\n   {b64(raw)}\n  </data>'


def layer(name: str, width: int, height: int, data: str) -> str:
    return f'<layer name="{name}" width="{width}" height="{height}">{data}</layer>'


def tmx(width: int, height: int, body: str, *, version: str = "1.0",
        orientation: str = "orthogonal") -> str:
    return (
        f'<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<map version="{version}" orientation="{orientation}" '
        f'width="{width}" height="{height}" tilewidth="16" tileheight="16">'
        f"{body}</map>"
    )


@pytest.fixture
def simple_map() -> str:
    return tmx(3, 2, TILESET + layer("Ground", 3, 2, csv_data([1, 2, 3, 4, 5, 6])))
