# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

from typing import Optional

import numpy as np

from .errors import ShapeError
from .tensor import DenseTensor, SparseTensor, Tensor


def from_numpy(array: "np.ndarray", sparse: bool = False) -> Tensor:
    """Create a tensor from a NumPy array.

    With ``sparse=True`` only the non-zero entries are kept, in row-major
    order, and the result carries the array's shape.
    """

    array = np.asarray(array)
    if array.ndim == 0:
        raise ShapeError("tensors must have at least one axis")
    if not sparse:
        return DenseTensor(array)
    indices = np.argwhere(array)
    return SparseTensor(indices, array[tuple(indices.T)], shape=array.shape)


def asarray(tensor: Tensor, dtype: Optional[str] = None) -> "np.ndarray":
    """Materialise ``tensor`` as a NumPy array of its shape."""
    return tensor.numpy(dtype)


__all__ = ["from_numpy", "asarray"]
