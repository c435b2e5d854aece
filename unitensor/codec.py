# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Text encoding of tensors.

Vectors, matrices and higher-rank tensors share one comma separated form::

    1,2,0,3,0                  dense vector
    0:1,1:2,3:3                sparse vector of unknown size
    $2,3$1,0,3,0,0,6           dense 2x3 matrix
    $2,3$0:0:1,0:2:3,1:2:6     sparse 2x3 matrix

The optional ``$...$`` prefix holds the shape (``-1`` for an unknown extent).
A body is sparse when its first entry contains ``:``; each sparse entry lists
one coordinate per axis followed by the value.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

import numpy as np

from ._shape import Shape, as_shape, shape_to_wire
from .errors import FormatError, TensorError
from .tensor import DenseTensor, SparseTensor, Tensor

logger = logging.getLogger(__name__)

SHAPE_DELIMITER = "$"
ENTRY_SEPARATOR = ","
COORD_SEPARATOR = ":"

_INTEGER = re.compile(r"\s*[+-]?\d+\s*")


def _parse_int(token: str) -> int:
    if not _INTEGER.fullmatch(token):
        raise FormatError(f"invalid integer {token!r}")
    return int(token)


def _parse_float(token: str) -> float:
    # float() would also accept digit-group underscores
    if "_" in token:
        raise FormatError(f"invalid number {token!r}")
    try:
        return float(token)
    except ValueError:
        raise FormatError(f"invalid number {token!r}") from None


def _parse_shape(prefix: str) -> Shape:
    if not prefix.strip():
        raise FormatError("empty shape prefix")
    return as_shape(_parse_int(token) for token in prefix.split(ENTRY_SEPARATOR))


def _decode_sparse(entries: List[str], shape: Optional[Shape]) -> SparseTensor:
    if shape is None:
        rank = entries[0].count(COORD_SEPARATOR)
        shape = (None,) * rank
    else:
        rank = len(shape)

    indices = np.empty((len(entries), rank), dtype=np.int64)
    data = np.empty(len(entries), dtype=np.float64)
    for row, entry in enumerate(entries):
        fields = entry.split(COORD_SEPARATOR)
        if len(fields) != rank + 1:
            raise FormatError(
                f"entry {entry!r} has {len(fields) - 1} coordinates, expected {rank}"
            )
        indices[row] = [_parse_int(field) for field in fields[:-1]]
        data[row] = _parse_float(fields[-1])
    return SparseTensor(indices, data, shape)


def _decode_dense(entries: List[str], shape: Optional[Shape]) -> DenseTensor:
    data = [_parse_float(entry) for entry in entries]
    if shape is None:
        shape = (len(data),)
    else:
        # the leading extent is always re-derived from the value count
        shape = (None,) + shape[1:]
    return DenseTensor(data, shape)


def _decode(text: str) -> Tensor:
    shape = None
    if text.startswith(SHAPE_DELIMITER):
        end = text.rfind(SHAPE_DELIMITER)
        if end == 0:
            raise FormatError("unterminated shape prefix")
        shape = _parse_shape(text[1:end])
        text = text[end + 1 :].strip()

    if not text:
        return SparseTensor.empty(shape)

    entries = text.split(ENTRY_SEPARATOR)
    if COORD_SEPARATOR in entries[0]:
        return _decode_sparse(entries, shape)
    return _decode_dense(entries, shape)


def parse(text: str) -> Tensor:
    """Decode ``text`` into a :class:`DenseTensor` or :class:`SparseTensor`.

    Raises:
        FormatError: if the text is malformed or describes an impossible shape.
            The original text is available as ``error.text``.
    """

    if not isinstance(text, str):
        raise TypeError(f"parse() expects a str, got {type(text).__name__}")
    try:
        return _decode(text.strip())
    except (TensorError, ValueError, OverflowError) as exc:
        logger.debug("failed to parse tensor %r: %s", text, exc)
        raise FormatError(f"fail to parse tensor ({exc})", text) from exc


def _format_value(value: float) -> str:
    return repr(float(value))


def serialize(tensor: Tensor) -> str:
    """Encode ``tensor`` in canonical text form.

    The shape prefix is written for sparse tensors and dense tensors of rank
    above one, unless every extent is unknown.
    """

    shape = tensor.shape
    with_shape = (tensor.is_sparse or len(shape) > 1) and any(
        extent is not None for extent in shape
    )

    prefix = ""
    if with_shape:
        prefix = (
            SHAPE_DELIMITER
            + ENTRY_SEPARATOR.join(str(extent) for extent in shape_to_wire(shape))
            + SHAPE_DELIMITER
        )

    if tensor.is_sparse:
        body = ENTRY_SEPARATOR.join(
            "".join(f"{c}{COORD_SEPARATOR}" for c in coord) + _format_value(value)
            for coord, value in zip(tensor.indices.tolist(), tensor.data.tolist())
        )
    else:
        body = ENTRY_SEPARATOR.join(_format_value(v) for v in tensor.data.tolist())
    return prefix + body


__all__ = ["parse", "serialize"]
