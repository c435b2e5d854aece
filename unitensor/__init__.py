# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

from typing import Iterable

from . import codec, functional, numpy_compat, strides, views
from ._config import default_dtype, get_default_dtype, set_default_dtype
from .errors import (
    FormatError,
    RankMismatchError,
    ShapeError,
    TensorError,
    UnsupportedLayoutError,
)
from .tensor import DenseTensor, SparseTensor, Tensor
from .views import SparseVector

try:
    from ._version import __version__, __version_tuple__
except ImportError:  # pragma: no cover - fallback for source checkouts
    __version__ = "0.1.0"
    __version_tuple__ = (0, 1, 0)


# Tensor factories map directly to the concrete layouts.
dense = DenseTensor
sparse = SparseTensor
empty = SparseTensor.empty
from_numpy = numpy_compat.from_numpy
asarray = numpy_compat.asarray

_FUNCTIONAL_FORWARDERS: Iterable[str] = (
    "parse",
    "serialize",
    "reshape",
    "view",
    "expand_dim",
    "to_dense",
    "standardize",
    "normalize",
)

for _name in _FUNCTIONAL_FORWARDERS:
    globals()[_name] = getattr(functional, _name)


__all__ = [
    "Tensor",
    "DenseTensor",
    "SparseTensor",
    "SparseVector",
    "codec",
    "functional",
    "numpy_compat",
    "strides",
    "views",
    "dense",
    "sparse",
    "empty",
    "from_numpy",
    "asarray",
    "parse",
    "serialize",
    "reshape",
    "view",
    "expand_dim",
    "to_dense",
    "standardize",
    "normalize",
    "TensorError",
    "FormatError",
    "ShapeError",
    "RankMismatchError",
    "UnsupportedLayoutError",
    "set_default_dtype",
    "get_default_dtype",
    "default_dtype",
]
