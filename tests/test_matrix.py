import numpy as np
import pytest

from integersnf.errors import (
    DimensionMismatchError,
    IntegerOverflowError,
    MalformedInputError,
    NonIntegerEntryError,
)
from integersnf.matrix import MAX_SAFE_INT, IntegerMatrix, exact_product, multiply


def test_from_rows_stores_int64():
    M = IntegerMatrix.from_rows([[1, -2, 3], [4, 5, -6]])

    assert M.shape == (2, 3)
    assert M.data.dtype == np.int64
    assert M.to_rows() == [[1, -2, 3], [4, 5, -6]]


def test_ragged_rows_are_rejected():
    with pytest.raises(MalformedInputError):
        IntegerMatrix.from_rows([[1, 2], [3]])


@pytest.mark.parametrize("entry", [1.5, 2.0, "3", True, None])
def test_non_integer_entries_are_rejected(entry):
    with pytest.raises(NonIntegerEntryError):
        IntegerMatrix.from_rows([[1, entry]])


def test_numpy_integers_are_accepted():
    M = IntegerMatrix.from_rows([[np.int32(7), np.int64(-8)]])
    assert M.to_rows() == [[7, -8]]


def test_entries_outside_safe_range_are_rejected():
    with pytest.raises(IntegerOverflowError):
        IntegerMatrix.from_rows([[MAX_SAFE_INT + 1]])
    with pytest.raises(IntegerOverflowError):
        IntegerMatrix(np.array([[np.iinfo(np.int64).min]], dtype=np.int64))


def test_int64_array_is_not_copied():
    arr = np.array([[1, 2], [3, 4]], dtype=np.int64)
    M = IntegerMatrix(arr)
    assert M.data is arr


def test_float_array_is_rejected():
    with pytest.raises(NonIntegerEntryError):
        IntegerMatrix(np.array([[1.0, 2.0]]))


def test_identity_and_diagonal():
    assert IntegerMatrix.identity(3).to_rows() == [[1, 0, 0], [0, 1, 0], [0, 0, 1]]
    assert IntegerMatrix.diagonal([2, 6], 2, 3).to_rows() == [[2, 0, 0], [0, 6, 0]]
    with pytest.raises(DimensionMismatchError):
        IntegerMatrix.diagonal([1, 2, 3], 2, 2)


def test_copy_is_independent():
    M = IntegerMatrix.from_rows([[1, 2], [3, 4]])
    C = M.copy()
    C.data[0, 0] = 99

    assert M.data[0, 0] == 1


def test_freeze_makes_data_read_only():
    M = IntegerMatrix.from_rows([[1, 2]]).freeze()
    with pytest.raises(ValueError):
        M.data[0, 0] = 5


def test_equality_checks_shape_then_entries():
    A = IntegerMatrix.from_rows([[1, 0], [0, 1]])

    assert A == IntegerMatrix.identity(2)
    assert A != IntegerMatrix.from_rows([[1, 0], [0, 2]])
    assert A != IntegerMatrix.from_rows([[1, 0, 0], [0, 1, 0]])
    assert IntegerMatrix.zeros(0, 0) == IntegerMatrix.zeros(0, 0)


def test_multiply():
    A = IntegerMatrix.from_rows([[1, 2, 3], [2, -5, 0]])
    B = IntegerMatrix.from_rows([[1, 0], [0, 1], [1, -1]])

    assert (A @ B).to_rows() == [[4, -1], [2, -5]]
    assert multiply(IntegerMatrix.identity(2), A) == A


def test_multiply_dimension_mismatch():
    A = IntegerMatrix.from_rows([[1, 2, 3]])
    with pytest.raises(DimensionMismatchError):
        A @ A


def test_multiply_checks_partial_sums():
    """The final entry fits, but an intermediate sum does not."""
    big = 2 ** 62
    A = IntegerMatrix.from_rows([[big, big, -big]])
    B = IntegerMatrix.from_rows([[1], [1], [1]])

    with pytest.raises(IntegerOverflowError):
        A @ B


def test_is_zero_with_offset():
    M = IntegerMatrix.from_rows([[5, 1, 0], [0, 0, 0], [0, 0, 0]])

    assert not M.is_zero()
    assert M.is_zero(1)


def test_exact_product_has_no_range_limit():
    big = 2 ** 62
    A = IntegerMatrix.from_rows([[big, big, -big], [big, big, big]])
    B = IntegerMatrix.from_rows([[1], [1], [1]])

    C = exact_product(A, B)

    assert C.dtype == object
    assert C.tolist() == [[big], [3 * big]]


def test_exact_product_dimension_mismatch():
    with pytest.raises(DimensionMismatchError):
        exact_product(IntegerMatrix.identity(2), IntegerMatrix.identity(3))


def test_to_sympy_round_trip():
    sp = pytest.importorskip("sympy")
    M = IntegerMatrix.from_rows([[1, -2], [3, 4]])

    assert M.to_sympy() == sp.Matrix([[1, -2], [3, 4]])
