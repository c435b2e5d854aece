# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

"""Rank-1 and rank-2 projections of tensors.

Dense vectors and matrices are plain NumPy arrays. Sparse vectors keep their
entries in storage order; indices are neither sorted nor compacted.
"""

from __future__ import annotations

from typing import Iterator, Optional, Tuple

import numpy as np

from ._config import resolve_dtype
from .errors import RankMismatchError, ShapeError, UnsupportedLayoutError
from .strides import scatter_flat


class SparseVector:
    """Extent plus ordered ``(index, value)`` pairs.

    Args:
        size: Number of positions, or ``None`` when the extent is unknown.
        indices: Integer position of every stored entry.
        values: Value of every stored entry.
        dtype: Value dtype; defaults to the global view dtype.
    """

    def __init__(
        self,
        size: Optional[int],
        indices,
        values,
        dtype: Optional[str] = None,
    ):
        self._size = None if size is None else int(size)
        self._indices = np.asarray(indices, dtype=np.int64).reshape(-1)
        self._values = np.asarray(values, dtype=resolve_dtype(dtype)).reshape(-1)
        if self._indices.shape != self._values.shape:
            raise ShapeError(
                f"sparse vector has {self._indices.shape[0]} indices "
                f"but {self._values.shape[0]} values"
            )

    @property
    def size(self) -> Optional[int]:
        return self._size

    @property
    def indices(self) -> np.ndarray:
        return self._indices

    @property
    def values(self) -> np.ndarray:
        return self._values

    def __len__(self) -> int:
        return self._indices.shape[0]

    def __iter__(self) -> Iterator[Tuple[int, float]]:
        return zip(self._indices.tolist(), self._values.tolist())

    def __eq__(self, other) -> bool:
        if not isinstance(other, SparseVector):
            return NotImplemented
        return (
            self._size == other._size
            and np.array_equal(self._indices, other._indices)
            and np.array_equal(self._values, other._values, equal_nan=True)
        )

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"SparseVector(size={self._size}, indices={self._indices.tolist()}, "
            f"values={self._values.tolist()})"
        )

    def to_dense(self) -> np.ndarray:
        """Materialise the vector; duplicate indices resolve to the last entry."""
        if self._size is None:
            raise ShapeError(
                "the sparse vector can't be made dense because its size is unknown"
            )
        return scatter_flat(
            self._size, self._indices, self._values, dtype=self._values.dtype
        )


def _require_rank(tensor, rank: int, what: str) -> None:
    if tensor.ndim != rank:
        raise RankMismatchError(
            f"a rank-{tensor.ndim} tensor can't be converted to a {what}"
        )


def to_sparse_vector(tensor, dtype: Optional[str] = None) -> SparseVector:
    """Project a rank-1 tensor onto a :class:`SparseVector`.

    Dense tensors report every position, zeros included.
    """

    _require_rank(tensor, 1, "vector")
    if tensor.is_sparse:
        return SparseVector(tensor.shape[0], tensor.indices[:, 0], tensor.data, dtype)
    size = tensor.data.shape[0]
    return SparseVector(size, np.arange(size), tensor.data, dtype)


def to_dense_vector(tensor, dtype: Optional[str] = None) -> np.ndarray:
    """Project a rank-1 tensor onto a 1-D NumPy array."""

    _require_rank(tensor, 1, "vector")
    if tensor.is_sparse:
        if tensor.shape[0] is None:
            raise ShapeError(
                "the data can't be converted to a dense vector because it is "
                "sparse and its size is not specified"
            )
        return to_sparse_vector(tensor, dtype).to_dense()
    return np.array(tensor.data, dtype=resolve_dtype(dtype))


def to_matrix(tensor, dtype: Optional[str] = None) -> np.ndarray:
    """Project a dense rank-2 tensor onto a 2-D NumPy array."""

    _require_rank(tensor, 2, "matrix")
    if tensor.is_sparse:
        raise UnsupportedLayoutError("can't convert a sparse tensor to a dense matrix")
    return np.array(tensor.data, dtype=resolve_dtype(dtype)).reshape(tensor.shape)


__all__ = [
    "SparseVector",
    "to_sparse_vector",
    "to_dense_vector",
    "to_matrix",
]
