# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

import numpy as np
import pytest

import unitensor as ut

pytest.importorskip("pytest_benchmark")


@pytest.fixture(scope="module")
def sparse_text():
    rng = np.random.default_rng(0)
    dense = np.where(rng.random((50, 40)) < 0.1, rng.normal(size=(50, 40)), 0.0)
    return ut.from_numpy(dense, sparse=True).serialize()


def test_bench_parse_sparse(benchmark, sparse_text):
    t = benchmark(ut.parse, sparse_text)
    assert t.shape == (50, 40)


def test_bench_serialize_dense(benchmark):
    t = ut.dense(np.linspace(0.0, 1.0, 2000), shape=(-1, 20))
    text = benchmark(t.serialize)
    assert text.startswith("$100,20$")


def test_bench_to_dense(benchmark, sparse_text):
    t = ut.parse(sparse_text)
    d = benchmark(t.to_dense)
    assert d.shape == (50, 40)
