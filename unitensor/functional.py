# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

"""Free-function forms of the tensor transforms and the codec."""

from __future__ import annotations

from typing import Optional, Sequence, Union

from .codec import parse, serialize
from .tensor import DenseTensor, Tensor


def reshape(tensor: Tensor, shape: Union[int, Sequence[Optional[int]]]) -> Tensor:
    """Reinterpret ``tensor`` under ``shape``."""
    if isinstance(shape, int):
        shape = (shape,)
    return tensor.reshape(list(shape))


def view(tensor: Tensor, shape: Union[int, Sequence[Optional[int]]]) -> Tensor:
    """Alias for :func:`reshape`."""
    return reshape(tensor, shape)


def expand_dim(tensor: Tensor, axis: int) -> Tensor:
    """Insert an axis of extent 1 at ``axis``."""
    return tensor.expand_dim(axis)


def to_dense(tensor: Tensor) -> DenseTensor:
    """Return the dense layout of ``tensor``."""
    return tensor.to_dense()


def standardize(tensor: Tensor, mean, stdvar) -> Tensor:
    """Per-channel ``(x - mean) / stdvar``."""
    return tensor.standardize(mean, stdvar)


def normalize(tensor: Tensor, data_min, data_max) -> Tensor:
    """Per-channel ``(x - min) / (max - min)``."""
    return tensor.normalize(data_min, data_max)


__all__ = [
    "reshape",
    "view",
    "expand_dim",
    "to_dense",
    "standardize",
    "normalize",
    "parse",
    "serialize",
]
