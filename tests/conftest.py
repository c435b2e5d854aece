# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import unitensor as ut  # noqa: E402


@pytest.fixture(autouse=True)
def _restore_default_dtype():
    original = ut.get_default_dtype()
    yield
    ut.set_default_dtype(original)


@pytest.fixture
def sparse_matrix():
    """The 2x3 matrix [[1, 0, 3], [0, 0, 6]] in sparse layout."""
    return ut.SparseTensor([[0, 0], [0, 2], [1, 2]], [1.0, 3.0, 6.0], shape=(2, 3))
