# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Dense and sparse tensors sharing one text encoding.
"""

from __future__ import annotations

import logging
from numbers import Integral
from typing import Any, ClassVar, Optional, Sequence, Tuple, Union

import numpy as np

from . import views
from ._config import resolve_dtype
from ._shape import Shape, as_shape, format_shape, is_known, numel
from .errors import ShapeError, UnsupportedLayoutError
from .strides import ravel_indices, row_major_strides, scatter_flat, unravel_indices

logger = logging.getLogger(__name__)

ShapeLike = Union[int, None, Sequence[Optional[int]]]


def _frozen(array: np.ndarray) -> np.ndarray:
    """Mark ``array`` read-only so finished tensors can be shared safely."""
    array.flags.writeable = False
    return array


def _shape_args(shape: Tuple[ShapeLike, ...]) -> Shape:
    """Accept ``reshape(2, 3)`` as well as ``reshape([2, 3])``."""
    if len(shape) == 1 and isinstance(shape[0], (list, tuple)):
        return as_shape(shape[0])
    return as_shape(shape)


def _resolve_leading(shape: Shape, count: int) -> Shape:
    """Infer the leading extent of a dense shape from its element count."""

    rest = shape[1:]
    if not is_known(rest):
        raise ShapeError(
            f"only the leading axis of a dense tensor may be unknown, got {format_shape(shape)}"
        )
    block = numel(rest) if rest else 1

    if block == 0:
        if count:
            raise ShapeError(
                f"{count} values can't fill a dense tensor of shape {format_shape(shape)}"
            )
        leading = 0 if shape[0] is None else shape[0]
    elif count % block:
        raise ShapeError(
            f"{count} values is not a multiple of {block} for shape {format_shape(shape)}"
        )
    else:
        leading = count // block

    if shape[0] is not None and shape[0] != leading:
        raise ShapeError(
            f"{count} values give a leading extent of {leading}, not {shape[0]}"
        )
    return (leading,) + rest


def _as_statistics(first, second, names: Tuple[str, str]) -> Tuple[np.ndarray, np.ndarray]:
    a = np.asarray(first, dtype=np.float64).reshape(-1)
    b = np.asarray(second, dtype=np.float64).reshape(-1)
    if a.shape != b.shape:
        raise ShapeError(
            f"{names[0]} and {names[1]} must have the same length, "
            f"got {a.shape[0]} and {b.shape[0]}"
        )
    if a.shape[0] == 0:
        raise ShapeError(f"{names[0]} and {names[1]} must not be empty")
    return a, b


class Tensor:
    """
    A rank-N numeric container in either dense or sparse layout.

    ``Tensor`` itself is abstract: build a :class:`DenseTensor` or a
    :class:`SparseTensor`, or decode one with :meth:`Tensor.parse`. Tensors are
    values. Transforms never modify the receiver, they return a new tensor of
    the same layout (``to_dense`` switches layout), so calls chain::

        >>> t = Tensor.parse("$2,3$0:0:1,0:2:3,1:2:6")
        >>> t.to_dense().standardize([0.0], [2.0]).serialize()
        '$2,3$0.5,0.0,1.5,0.0,0.0,3.0'
    """

    is_sparse: ClassVar[bool]

    _shape: Shape
    _data: np.ndarray

    def __new__(cls, *args, **kwargs):
        if cls is Tensor:
            raise TypeError("Tensor is abstract; construct a DenseTensor or a SparseTensor")
        return super().__new__(cls)

    @classmethod
    def _wrap(cls, shape: Shape, data: np.ndarray, indices: Optional[np.ndarray] = None):
        """Instantiate ``cls`` from already validated parts."""

        instance = cls.__new__(cls)
        instance._shape = shape
        instance._data = _frozen(data)
        if indices is not None:
            instance._indices = _frozen(indices)
        return instance

    # Core properties
    @property
    def shape(self) -> Shape:
        """Per-axis extents; ``None`` marks an unknown extent."""
        return self._shape

    @property
    def ndim(self) -> int:
        """Number of axes."""
        return len(self._shape)

    @property
    def data(self) -> np.ndarray:
        """Read-only float64 buffer (row-major values, or one value per entry)."""
        return self._data

    def dim(self) -> int:
        """Get number of dimensions."""
        return self.ndim

    # Codec
    @classmethod
    def parse(cls, text: str) -> "Tensor":
        """Decode the text encoding of a tensor."""
        from . import codec

        return codec.parse(text)

    def serialize(self) -> str:
        """Encode the tensor in its canonical text form."""
        from . import codec

        return codec.serialize(self)

    def __str__(self) -> str:
        return self.serialize()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(shape={format_shape(self._shape)}, {self.serialize()!r})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Tensor):
            return NotImplemented
        if self.is_sparse != other.is_sparse or self._shape != other._shape:
            return False
        if self.is_sparse and not np.array_equal(self._indices, other._indices):
            return False
        return np.array_equal(self._data, other._data, equal_nan=True)

    __hash__ = None

    # Transforms
    def reshape(self, *shape: ShapeLike) -> "Tensor":
        """Reinterpret the tensor under a new shape."""
        raise NotImplementedError

    def view(self, *shape: ShapeLike) -> "Tensor":
        """Alias for reshape."""
        return self.reshape(*shape)

    def expand_dim(self, axis: int) -> "Tensor":
        """Insert an axis of extent 1 at ``axis``."""
        raise NotImplementedError

    def to_dense(self) -> "DenseTensor":
        """Return the dense layout of this tensor."""
        raise NotImplementedError

    def _channels(self, count: int) -> np.ndarray:
        raise NotImplementedError

    def _with_data(self, data: np.ndarray) -> "Tensor":
        raise NotImplementedError

    def _affine(self, shift: np.ndarray, scale: np.ndarray) -> "Tensor":
        channels = self._channels(shift.shape[0])
        # A zero scale is reported as inf/nan in the result.
        with np.errstate(divide="ignore", invalid="ignore"):
            data = (self._data - shift[channels]) / scale[channels]
        return self._with_data(data)

    def standardize(self, mean, stdvar) -> "Tensor":
        """Compute ``(x - mean[c]) / stdvar[c]`` per channel ``c``.

        With a single statistic every element shares channel 0. Otherwise a
        dense buffer is split into ``len(mean)`` equal contiguous blocks, and a
        sparse entry uses its first coordinate as channel.
        """

        mean, stdvar = _as_statistics(mean, stdvar, ("mean", "stdvar"))
        return self._affine(mean, stdvar)

    def normalize(self, data_min, data_max) -> "Tensor":
        """Compute ``(x - min[c]) / (max[c] - min[c])`` per channel ``c``.

        Channels are assigned as in :meth:`standardize`.
        """

        data_min, data_max = _as_statistics(data_min, data_max, ("min", "max"))
        with np.errstate(invalid="ignore", over="ignore"):
            spread = data_max - data_min
        return self._affine(data_min, spread)

    # Views
    def to_dense_vector(self, dtype: Optional[str] = None) -> np.ndarray:
        """Rank-1 tensor as a 1-D NumPy array."""
        return views.to_dense_vector(self, dtype)

    def to_sparse_vector(self, dtype: Optional[str] = None) -> views.SparseVector:
        """Rank-1 tensor as a :class:`~unitensor.views.SparseVector`."""
        return views.to_sparse_vector(self, dtype)

    def to_matrix(self, dtype: Optional[str] = None) -> np.ndarray:
        """Dense rank-2 tensor as a 2-D NumPy array."""
        return views.to_matrix(self, dtype)

    # NumPy interop
    def numpy(self, dtype: Optional[str] = None) -> np.ndarray:
        """Materialise the tensor as a NumPy array of its shape."""
        dense = self.to_dense()
        return dense._data.reshape(dense._shape).astype(resolve_dtype(dtype))

    def __array__(self, dtype: Optional["np.dtype"] = None, copy: Optional[bool] = None) -> np.ndarray:
        """Support NumPy's array protocol; the result is always a fresh copy."""
        if copy is False:
            raise ValueError("a Tensor can't be exposed as a NumPy array without copying")
        return self.numpy(dtype)

    def tolist(self) -> Any:
        """Convert to nested Python lists."""
        return self.numpy("float64").tolist()


class DenseTensor(Tensor):
    """
    Row-major dense tensor.

    Args:
        data: Values as a flat sequence or any array-like. Without ``shape`` the
            array's own shape is used.
        shape: Optional shape. The leading extent may be ``None``/``-1`` and is
            resolved from the number of values; every other extent must be known.

    Examples:
        >>> DenseTensor([1, 2, 0, 3, 0]).shape
        (5,)
        >>> DenseTensor(range(6), shape=(-1, 3)).shape
        (2, 3)
    """

    is_sparse = False

    def __init__(self, data: Any, shape: Optional[Sequence[Optional[int]]] = None):
        array = np.array(data, dtype=np.float64)
        if shape is None:
            if array.ndim == 0:
                raise ShapeError("tensors must have at least one axis")
            resolved = as_shape(array.shape)
        else:
            resolved = _resolve_leading(as_shape(shape), array.size)
        self._shape = resolved
        self._data = _frozen(array.reshape(-1))

    @property
    def size(self) -> int:
        """Total number of elements."""
        return self._data.shape[0]

    def numel(self) -> int:
        """Get total number of elements."""
        return self.size

    def reshape(self, *shape: ShapeLike) -> "DenseTensor":
        """Reshape tensor to new shape; the buffer is shared, not copied."""
        new_shape = _resolve_leading(_shape_args(shape), self.size)
        return DenseTensor._wrap(new_shape, self._data)

    def expand_dim(self, axis: int) -> "DenseTensor":
        """Insert an axis of extent 1; ``-1`` appends after the last axis."""
        if isinstance(axis, bool) or not isinstance(axis, Integral):
            raise TypeError("axis must be an integer")
        ndim = self.ndim
        position = ndim + 1 + int(axis) if axis < 0 else int(axis)
        if position < 0 or position > ndim:
            raise ShapeError(f"invalid axis {axis} for a rank-{ndim} tensor")
        shape = self._shape[:position] + (1,) + self._shape[position:]
        return DenseTensor._wrap(shape, self._data)

    def to_dense(self) -> "DenseTensor":
        return self

    def _channels(self, count: int) -> np.ndarray:
        size = self.size
        if count == 1:
            return np.zeros(size, dtype=np.int64)
        if size % count:
            raise ShapeError(
                f"{size} values can't be split into {count} equal channels"
            )
        if size == 0:
            return np.zeros(0, dtype=np.int64)
        return np.arange(size, dtype=np.int64) // (size // count)

    def _with_data(self, data: np.ndarray) -> "DenseTensor":
        return DenseTensor._wrap(self._shape, data)


class SparseTensor(Tensor):
    """
    Coordinate-list sparse tensor; positions that are not listed are zero.

    Args:
        indices: ``(nnz, rank)`` integer coordinates. A flat sequence is read as
            rank-1 coordinates.
        data: One value per coordinate.
        shape: Optional shape; unknown extents are ``None``/``-1``. Without it
            every extent is unknown and the rank comes from ``indices``.

    Coordinates are not bounds-checked here; :meth:`to_dense` rejects entries
    that fall outside the buffer.

    Examples:
        >>> t = SparseTensor([[0, 0], [0, 2], [1, 2]], [1, 3, 6], shape=(2, 3))
        >>> t.to_dense().data.tolist()
        [1.0, 0.0, 3.0, 0.0, 0.0, 6.0]
    """

    is_sparse = True

    _indices: np.ndarray

    def __init__(
        self,
        indices: Any,
        data: Any,
        shape: Optional[Sequence[Optional[int]]] = None,
    ):
        values = np.array(data, dtype=np.float64).reshape(-1)
        coords = np.array(indices, dtype=np.int64)
        resolved = None if shape is None else as_shape(shape)

        if coords.size == 0:
            if resolved is not None:
                rank = len(resolved)
            elif coords.ndim == 2 and coords.shape[1]:
                rank = coords.shape[1]
            else:
                rank = 1
            coords = np.zeros((0, rank), dtype=np.int64)
        elif coords.ndim == 1:
            coords = coords.reshape(-1, 1)

        if coords.ndim != 2:
            raise ShapeError(f"indices must be 2-D, got an array of shape {coords.shape}")
        if resolved is None:
            resolved = (None,) * coords.shape[1]
        elif len(resolved) != coords.shape[1]:
            raise ShapeError(
                f"rank-{coords.shape[1]} coordinates don't match shape {format_shape(resolved)}"
            )
        if coords.shape[0] != values.shape[0]:
            raise ShapeError(
                f"{coords.shape[0]} coordinates but {values.shape[0]} values"
            )

        self._shape = resolved
        self._indices = _frozen(coords)
        self._data = _frozen(values)

    @classmethod
    def empty(cls, shape: Optional[Sequence[Optional[int]]] = None) -> "SparseTensor":
        """All-zero sparse tensor; the shape defaults to one unknown axis."""
        resolved = (None,) if shape is None else as_shape(shape)
        return cls._wrap(
            resolved,
            np.zeros(0, dtype=np.float64),
            np.zeros((0, len(resolved)), dtype=np.int64),
        )

    @property
    def indices(self) -> np.ndarray:
        """Read-only ``(nnz, rank)`` coordinate array."""
        return self._indices

    @property
    def nnz(self) -> int:
        """Number of stored entries."""
        return self._data.shape[0]

    def __iter__(self):
        """Iterate over ``(coordinate, value)`` pairs in storage order."""
        return zip(map(tuple, self._indices.tolist()), self._data.tolist())

    def reshape(self, *shape: ShapeLike) -> "SparseTensor":
        """Remap every coordinate through its flat offset into the new shape."""
        new_shape = _shape_args(shape)
        offsets = ravel_indices(self._indices, row_major_strides(self._shape))
        indices = unravel_indices(offsets, row_major_strides(new_shape))
        return SparseTensor._wrap(new_shape, self._data, indices)

    def expand_dim(self, axis: int) -> "SparseTensor":
        raise UnsupportedLayoutError("expand_dim is not implemented for sparse tensors")

    def to_dense(self) -> DenseTensor:
        """Scatter the entries into a zero buffer; the last duplicate wins."""
        if not is_known(self._shape):
            raise ShapeError(
                f"can't convert to a dense tensor because shape {format_shape(self._shape)} is unknown"
            )
        size = numel(self._shape)
        offsets = ravel_indices(self._indices, row_major_strides(self._shape))
        logger.debug(
            "densifying %d entries into shape %s", self.nnz, format_shape(self._shape)
        )
        return DenseTensor._wrap(self._shape, scatter_flat(size, offsets, self._data))

    def _channels(self, count: int) -> np.ndarray:
        if count == 1:
            return np.zeros(self.nnz, dtype=np.int64)
        channels = self._indices[:, 0]
        outside = (channels < 0) | (channels >= count)
        if outside.any():
            raise ShapeError(
                f"leading coordinate {int(channels[outside][0])} has no statistics "
                f"among {count} channels"
            )
        return channels

    def _with_data(self, data: np.ndarray) -> "SparseTensor":
        return SparseTensor._wrap(self._shape, data, self._indices)


__all__ = [
    "Tensor",
    "DenseTensor",
    "SparseTensor",
]
