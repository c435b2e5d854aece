# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

import numpy as np
import pytest

from unitensor import DenseTensor, ShapeError, SparseTensor
from unitensor import functional as F
from unitensor import reshape, view
from unitensor.codec import parse
from unitensor.numpy_compat import from_numpy


def test_dense_reshape_keeps_buffer():
    t = DenseTensor(np.arange(24.0))
    r = t.reshape(2, 3, 4)
    assert r.shape == (2, 3, 4)
    assert r.data is t.data
    assert t.shape == (24,)
    np.testing.assert_array_equal(r.numpy(), np.arange(24.0).reshape(2, 3, 4))


def test_dense_reshape_accepts_sequence_and_unknown_leading():
    t = DenseTensor(np.arange(12.0))
    assert t.reshape([3, 4]).shape == (3, 4)
    assert t.reshape((-1, 6)).shape == (2, 6)
    assert t.view(None, 2, 2).shape == (3, 2, 2)


def test_dense_reshape_incompatible_size():
    t = DenseTensor(np.arange(12.0))
    with pytest.raises(ShapeError):
        t.reshape(5, 3)
    with pytest.raises(ShapeError):
        t.reshape(-1, 5)


def test_sparse_reshape_with_overflowing_extent_fails():
    t = parse("$2,99999999999999999999$0:1:1")
    with pytest.raises(ShapeError):
        t.reshape(-1)


def test_sparse_reshape_remaps_coordinates(sparse_matrix):
    r = sparse_matrix.reshape(6)
    assert r.shape == (6,)
    np.testing.assert_array_equal(r.indices, [[0], [2], [5]])
    np.testing.assert_array_equal(r.data, sparse_matrix.data)
    np.testing.assert_array_equal(r.to_dense().data, sparse_matrix.to_dense().data)


def test_sparse_reshape_to_higher_rank(sparse_matrix):
    r = sparse_matrix.reshape(3, 2, 1)
    np.testing.assert_array_equal(r.indices, [[0, 0, 0], [1, 0, 0], [2, 1, 0]])
    np.testing.assert_array_equal(
        r.to_dense().numpy(), sparse_matrix.to_dense().numpy().reshape(3, 2, 1)
    )


def test_sparse_reshape_round_trip_restores_entries():
    rng = np.random.default_rng(3)
    dense = rng.integers(0, 3, size=(4, 3, 5)).astype(np.float64)
    t = from_numpy(dense, sparse=True)
    back = t.reshape(6, 10).reshape(2, 30).reshape(4, 3, 5)
    assert back == t


def test_sparse_reshape_preserves_storage_order():
    t = SparseTensor([[1, 1], [0, 0], [1, 0]], [1.0, 2.0, 3.0], shape=(2, 2))
    r = t.reshape(4)
    np.testing.assert_array_equal(r.indices[:, 0], [3, 0, 2])
    np.testing.assert_array_equal(r.data, [1.0, 2.0, 3.0])


def test_sparse_reshape_with_unknown_leading_axis():
    t = SparseTensor([[0, 2], [3, 1]], [1.0, 2.0], shape=(-1, 4))
    r = t.reshape(-1, 2)
    assert r.shape == (None, 2)
    np.testing.assert_array_equal(r.indices, [[1, 0], [6, 1]])


def test_sparse_reshape_needs_known_inner_axes():
    t = SparseTensor([[0, 1]], [1.0])
    with pytest.raises(ShapeError):
        t.reshape(2)
    with pytest.raises(ShapeError):
        SparseTensor([[0]], [1.0]).reshape(2, None)


def test_reshape_does_not_modify_original(sparse_matrix):
    sparse_matrix.reshape(6)
    assert sparse_matrix.shape == (2, 3)
    assert sparse_matrix.indices.shape == (3, 2)


def test_functional_reshape():
    t = DenseTensor(np.arange(24.0))
    r = F.reshape(t, (4, 6))
    assert r.shape == (4, 6)
    assert F.reshape(t, 24).shape == (24,)


def test_top_level_reshape_and_view(sparse_matrix):
    assert reshape(sparse_matrix, (3, 2)) == sparse_matrix.reshape(3, 2)
    assert view(sparse_matrix, [6]).shape == (6,)
