# Copyright (c) 2025 Soumyadip Sarkar.
# All rights reserved.
#
# This source code is licensed under the Apache-style license found in the
# LICENSE file in the root directory of this source tree.

import logging
import math

import numpy as np
import pytest

import unitensor as ut
from unitensor import DenseTensor, FormatError, ShapeError, SparseTensor, Tensor
from unitensor.codec import parse, serialize


def test_parse_dense_vector():
    t = parse("1,2,0,3,0")
    assert isinstance(t, DenseTensor)
    assert t.shape == (5,)
    np.testing.assert_array_equal(t.data, [1, 2, 0, 3, 0])
    assert serialize(t) == "1.0,2.0,0.0,3.0,0.0"


def test_parse_sparse_vector_of_unknown_size():
    t = parse("0:1,1:2,3:3")
    assert isinstance(t, SparseTensor)
    assert t.shape == (None,)
    np.testing.assert_array_equal(t.indices, [[0], [1], [3]])
    np.testing.assert_array_equal(t.data, [1, 2, 3])


def test_parse_sparse_matrix_with_shape():
    t = parse("$2,3$0:0:1,0:2:3,1:2:6")
    assert t.is_sparse
    assert t.shape == (2, 3)
    assert list(t) == [((0, 0), 1.0), ((0, 2), 3.0), ((1, 2), 6.0)]
    np.testing.assert_array_equal(t.to_dense().data, [1, 0, 3, 0, 0, 6])


def test_parse_sparse_matrix_infers_rank():
    t = parse("0:0:1,0:2:3,1:2:6")
    assert t.shape == (None, None)
    assert t.indices.shape == (3, 2)


def test_parse_dense_matrix():
    t = parse("$2,3$1,0,3,0,0,6")
    assert not t.is_sparse
    assert t.shape == (2, 3)
    np.testing.assert_array_equal(t.to_matrix(), [[1, 0, 3], [0, 0, 6]])


def test_parse_dense_rederives_leading_axis():
    assert parse("$-1,3$1,2,3,4,5,6").shape == (2, 3)
    assert parse("$9,3$1,2,3,4,5,6").shape == (2, 3)
    assert parse("$7$1,2,3").shape == (3,)


def test_parse_empty():
    t = parse("")
    assert isinstance(t, SparseTensor)
    assert t.shape == (None,)
    assert t.nnz == 0
    with pytest.raises(ShapeError):
        t.to_dense()


def test_parse_whitespace_only_is_empty():
    assert parse("   \n") == SparseTensor.empty()


def test_parse_shape_prefix_without_body():
    t = parse("$2,-1$")
    assert t.is_sparse
    assert t.shape == (2, None)
    assert t.nnz == 0


def test_parse_trims_tokens():
    t = parse("  $ 2 , 3 $ 0 : 1 : 4.5 , 1:0: -2 ")
    assert t.shape == (2, 3)
    assert list(t) == [((0, 1), 4.5), ((1, 0), -2.0)]
    assert parse(" 1.5 , 2 ").data.tolist() == [1.5, 2.0]


def test_parse_special_values():
    t = parse("nan,inf,-Infinity,1e-5,1.0E10")
    assert math.isnan(t.data[0])
    assert t.data[1] == math.inf
    assert t.data[2] == -math.inf
    assert t.data[3] == 1e-5
    assert t.data[4] == 1e10


def test_parse_negative_coordinates_are_kept():
    t = parse("$3$-1:2")
    np.testing.assert_array_equal(t.indices, [[-1]])


@pytest.mark.parametrize(
    "text",
    [
        "1,abc,3",
        "1,,3",
        "1,2,",
        "$2,3",
        "$$1,2",
        "$2,x$1,2",
        "$2,1.5$1,2,3",
        "$2,-4$0:0:1",
        "0:1:2,1:3",
        "$2,3$0:1",
        "$3$0:0:1",
        "0.5:1",
        "0:1_0",
        "$-1,4$1,2,3",
        "1,2:3",
        "99999999999999999999:1",
    ],
)
def test_parse_errors(text):
    with pytest.raises(FormatError) as info:
        parse(text)
    assert info.value.text == text
    assert text in str(info.value)


def test_parse_error_is_value_error_and_chained():
    with pytest.raises(ValueError) as info:
        parse("$4,3$1,2")
    assert isinstance(info.value.__cause__, ShapeError)


def test_parse_rejects_non_strings():
    with pytest.raises(TypeError):
        parse(b"1,2")


def test_parse_failure_is_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="unitensor.codec"):
        with pytest.raises(FormatError):
            parse("1,oops")
    assert "1,oops" in caplog.text


def test_serialize_prefix_rules():
    assert serialize(DenseTensor([1, 2])) == "1.0,2.0"
    assert serialize(DenseTensor([[1, 2]])) == "$1,2$1.0,2.0"
    assert serialize(SparseTensor([0], [1.0], shape=(4,))) == "$4$0:1.0"
    assert serialize(SparseTensor([0], [1.0])) == "0:1.0"
    assert serialize(SparseTensor([[0, 1]], [1.0], shape=(-1, 3))) == "$-1,3$0:1:1.0"
    assert serialize(SparseTensor([[0, 1]], [1.0])) == "0:1:1.0"
    assert serialize(SparseTensor.empty()) == ""
    assert serialize(SparseTensor.empty((2, 2))) == "$2,2$"


def test_serialize_number_formatting():
    t = DenseTensor([0.1, -0.0, 1e-7, 1e16, float("nan"), float("-inf")])
    assert serialize(t) == "0.1,-0.0,1e-07,1e+16,nan,-inf"


def test_serialize_keeps_storage_order():
    t = SparseTensor([[1, 2], [0, 0], [1, 2]], [6.0, 1.0, 7.0], shape=(2, 3))
    assert serialize(t) == "$2,3$1:2:6.0,0:0:1.0,1:2:7.0"


def test_tensor_parse_and_serialize_methods():
    t = Tensor.parse("$2,2$1,2,3,4")
    assert t.serialize() == "$2,2$1.0,2.0,3.0,4.0"
    assert ut.parse(str(t)) == t
    assert ut.serialize(t) == t.serialize()


ROUND_TRIP_CASES = [
    DenseTensor([1.0, 2.0, 0.0, 3.0, 0.0]),
    DenseTensor(np.arange(24.0).reshape(2, 3, 4)),
    DenseTensor([[0.1, 1 / 3], [2 ** -30, 123456789.125]]),
    DenseTensor(np.linspace(-1, 1, 12), shape=(-1, 1, 3)),
    SparseTensor([[0, 0], [0, 2], [1, 2]], [1.0, 3.0, 6.0], shape=(2, 3)),
    SparseTensor([[1, 0, 3], [0, 2, 1]], [-2.5, 1e-12], shape=(2, 3, 4)),
    SparseTensor([4, 0, 4], [1.0, 2.0, 3.0], shape=(5,)),
    SparseTensor.empty((3, 3)),
    DenseTensor([1.0, float("nan"), -0.5]),
    SparseTensor([[0, 1], [1, 0]], [float("nan"), 2.0], shape=(2, 2)),
]


@pytest.mark.parametrize("tensor", ROUND_TRIP_CASES, ids=repr)
def test_round_trip(tensor):
    decoded = parse(serialize(tensor))
    assert decoded == tensor


def test_round_trip_random_dense():
    rng = np.random.default_rng(7)
    values = rng.normal(size=(3, 4, 5))
    t = DenseTensor(values)
    decoded = parse(t.serialize())
    assert decoded.shape == (3, 4, 5)
    np.testing.assert_array_equal(decoded.numpy(), values)


def test_round_trip_does_not_recover_unknown_shape():
    t = SparseTensor([[0, 1]], [2.0])
    decoded = parse(serialize(t))
    assert decoded.shape == (None, None)
    assert decoded == t
