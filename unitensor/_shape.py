# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

"""Shape bookkeeping shared by the dense and sparse layouts.

A shape is a tuple of per-axis extents where ``None`` marks an axis whose
extent is not known yet. The text encoding writes unknown extents as ``-1``;
``as_shape`` accepts either spelling.
"""

from __future__ import annotations

from numbers import Integral
from typing import Iterable, Optional, Sequence, Tuple

from .errors import ShapeError

UNKNOWN_EXTENT = -1

Shape = Tuple[Optional[int], ...]


def _as_extent(value) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise ShapeError(f"shape extents must be integers, got {value!r}")
    value = int(value)
    if value == UNKNOWN_EXTENT:
        return None
    if value < 0:
        raise ShapeError(f"invalid extent {value}; use -1 or None for unknown")
    return value


def as_shape(shape: Iterable) -> Shape:
    """Normalise ``shape`` into a tuple of ``int``/``None`` extents."""

    result = tuple(_as_extent(extent) for extent in shape)
    if not result:
        raise ShapeError("tensors must have at least one axis")
    return result


def is_known(shape: Sequence[Optional[int]]) -> bool:
    """Return ``True`` when every extent of ``shape`` is known."""

    return all(extent is not None for extent in shape)


def numel(shape: Sequence[Optional[int]]) -> int:
    """Total number of elements of a fully known ``shape``."""

    if not is_known(shape):
        raise ShapeError(f"shape {format_shape(shape)} has unknown extents")
    total = 1
    for extent in shape:
        total *= extent
    return total


def shape_to_wire(shape: Sequence[Optional[int]]) -> Tuple[int, ...]:
    """Spell unknown extents as ``-1``, as the text encoding does."""

    return tuple(UNKNOWN_EXTENT if extent is None else extent for extent in shape)


def format_shape(shape: Sequence[Optional[int]]) -> str:
    extents = ["?" if e is None else str(e) for e in shape]
    if len(extents) == 1:
        return f"({extents[0]},)"
    return "(" + ", ".join(extents) + ")"


__all__ = [
    "UNKNOWN_EXTENT",
    "Shape",
    "as_shape",
    "is_known",
    "numel",
    "shape_to_wire",
    "format_shape",
]
