# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

from contextlib import contextmanager
from threading import RLock
from typing import Dict, Iterator

import numpy as np

# Storage is always float64; this only selects the dtype of materialised views.
_SUPPORTED_DTYPES: Dict[str, np.dtype] = {
    "float32": np.dtype(np.float32),
    "float64": np.dtype(np.float64),
}

_DTYPE_LOCK = RLock()
_default_dtype = "float64"


def set_default_dtype(dtype: str) -> None:
    """Set the global dtype used for vector, matrix and NumPy views."""

    global _default_dtype

    if dtype not in _SUPPORTED_DTYPES:
        supported = ", ".join(sorted(_SUPPORTED_DTYPES))
        raise ValueError(f"Unsupported dtype '{dtype}' (expected one of {supported})")
    with _DTYPE_LOCK:
        _default_dtype = dtype


def get_default_dtype() -> str:
    """Get the current global view dtype."""

    with _DTYPE_LOCK:
        return _default_dtype


def resolve_dtype(dtype=None) -> np.dtype:
    """Return ``dtype`` as a NumPy dtype, defaulting to the global setting."""

    if dtype is None:
        return _SUPPORTED_DTYPES[get_default_dtype()]
    return np.dtype(dtype)


@contextmanager
def default_dtype(dtype: str) -> Iterator[None]:
    """Temporarily switch the global view dtype."""

    previous = get_default_dtype()
    set_default_dtype(dtype)
    try:
        yield
    finally:
        set_default_dtype(previous)


__all__ = [
    "set_default_dtype",
    "get_default_dtype",
    "resolve_dtype",
    "default_dtype",
]
