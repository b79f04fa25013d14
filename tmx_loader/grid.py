"""Placement of decoded tile ids into a row-major layer grid."""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

from .errors import SizeMismatchError


def assemble(ids: Union[Sequence[int], np.ndarray], width: int, height: int,
             dtype=np.int32) -> np.ndarray:
    """
    Lay a flat id sequence into a [height][width] grid.

    Tiled stores cells row by row, left to right, top to bottom:

        ids  = [1, 2, 3, 4, 5, 6]     width=3, height=2

        grid = [[1, 2, 3],            grid[y][x] = ids[y * width + x]
                [4, 5, 6]]

    Parameters:
    -----------
    ids : sequence of int
        Decoded ids, exactly width * height of them
    width, height : int
        Layer dimensions in tiles
    dtype : numpy dtype
        Element type of the returned grid (int32 for ids, uint8 for flags)

    Returns:
    --------
    np.ndarray : New read-only array of shape (height, width)

    Raises:
    -------
    SizeMismatchError : If len(ids) != width * height
    """
    flat = np.array(ids, dtype=dtype).ravel()
    expected = width * height
    if flat.size != expected:
        raise SizeMismatchError(
            f"Layer data holds {flat.size} tiles, "
            f"expected {expected} ({width}x{height})"
        )

    # C order reshape is row-major: flat[y * width + x] -> grid[y, x]
    grid = flat.reshape((height, width))
    grid.flags.writeable = False
    return grid
