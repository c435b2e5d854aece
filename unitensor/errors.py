# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

"""Exception types raised by unitensor.

Each error also derives from the builtin exception callers would naturally
catch for it, so ``except ValueError`` keeps working around parsing code.
"""

from __future__ import annotations

from typing import Optional


class TensorError(Exception):
    """Base class for every error raised by unitensor."""


class FormatError(TensorError, ValueError):
    """Malformed text encoding of a tensor."""

    def __init__(self, message: str, text: Optional[str] = None):
        if text is not None:
            message = f'{message}: "{text}"'
        super().__init__(message)
        self.text = text


class ShapeError(TensorError, ValueError):
    """Invalid shape, axis position or unresolvable extent."""


class RankMismatchError(TensorError, RuntimeError):
    """Operation requested against a tensor of the wrong rank or layout."""


class UnsupportedLayoutError(RankMismatchError):
    """Operation not defined for the tensor's layout (sparse or dense)."""


__all__ = [
    "TensorError",
    "FormatError",
    "ShapeError",
    "RankMismatchError",
    "UnsupportedLayoutError",
]
