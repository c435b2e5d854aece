# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

"""Row-major stride arithmetic.

Converts between coordinate tuples and flat offsets for any rank. The leading
extent never takes part in the strides, so a shape whose first axis is still
unknown can be strided as long as the remaining axes are known.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

from ._shape import format_shape
from .errors import ShapeError


def row_major_strides(shape: Sequence[Optional[int]]) -> Tuple[int, ...]:
    """Return the row-major strides of ``shape`` (last axis varies fastest)."""

    ndim = len(shape)
    strides = [1] * ndim
    for axis in range(ndim - 2, -1, -1):
        extent = shape[axis + 1]
        if extent is None:
            raise ShapeError(
                f"cannot compute strides for shape {format_shape(shape)}: "
                f"axis {axis + 1} is unknown"
            )
        strides[axis] = strides[axis + 1] * extent
    return tuple(strides)


def ravel_index(coord: Sequence[int], strides: Sequence[int]) -> int:
    """Flat offset of ``coord`` under ``strides``."""

    if len(coord) != len(strides):
        raise ShapeError(
            f"coordinate {tuple(coord)} does not match rank {len(strides)}"
        )
    return sum(int(c) * s for c, s in zip(coord, strides))


def unravel_index(offset: int, strides: Sequence[int]) -> Tuple[int, ...]:
    """Coordinate tuple of flat ``offset``, most significant axis first."""

    if 0 in strides:
        raise ShapeError("cannot unravel an offset into a shape with zero extents")
    coord = []
    for stride in strides:
        index, offset = divmod(int(offset), stride)
        coord.append(index)
    return tuple(coord)


def ravel_indices(indices: np.ndarray, strides: Sequence[int]) -> np.ndarray:
    """Vectorised :func:`ravel_index` over an ``(n, rank)`` coordinate array."""

    indices = np.asarray(indices, dtype=np.int64)
    if indices.ndim != 2 or indices.shape[1] != len(strides):
        raise ShapeError(
            f"coordinates of shape {indices.shape} do not match rank {len(strides)}"
        )
    return indices @ _int64_strides(strides)


def _int64_strides(strides: Sequence[int]) -> np.ndarray:
    try:
        return np.asarray(strides, dtype=np.int64)
    except OverflowError:
        raise ShapeError(f"strides {tuple(strides)} overflow 64-bit offsets") from None


def unravel_indices(offsets: np.ndarray, strides: Sequence[int]) -> np.ndarray:
    """Vectorised :func:`unravel_index`; returns an ``(n, rank)`` array."""

    if 0 in strides:
        raise ShapeError("cannot unravel offsets into a shape with zero extents")
    remainder = np.asarray(offsets, dtype=np.int64).copy()
    coords = np.empty((remainder.shape[0], len(strides)), dtype=np.int64)
    for axis, stride in enumerate(_int64_strides(strides)):
        coords[:, axis], remainder = np.divmod(remainder, stride)
    return coords


def scatter_flat(
    size: int, offsets: np.ndarray, values: np.ndarray, dtype=np.float64
) -> np.ndarray:
    """Write ``values`` at ``offsets`` into a zero buffer of ``size`` elements.

    Repeated offsets are not summed: the entry stored last wins.
    """

    offsets = np.asarray(offsets, dtype=np.int64)
    values = np.asarray(values)
    out = np.zeros(size, dtype=dtype)
    if offsets.shape[0] == 0:
        return out

    outside = (offsets < 0) | (offsets >= size)
    if outside.any():
        raise ShapeError(
            f"flat offset {int(offsets[outside][0])} is out of bounds for {size} elements"
        )

    # np.unique on the reversed offsets reports the last occurrence of each one.
    _, last_from_end = np.unique(offsets[::-1], return_index=True)
    keep = offsets.shape[0] - 1 - last_from_end
    out[offsets[keep]] = values[keep]
    return out


__all__ = [
    "row_major_strides",
    "ravel_index",
    "unravel_index",
    "ravel_indices",
    "unravel_indices",
    "scatter_flat",
]
