from dataclasses import dataclass
from numbers import Integral
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from .errors import (
    DimensionMismatchError,
    IntegerOverflowError,
    MalformedInputError,
    NonIntegerEntryError,
)

# Symmetric int64 range, so that negating an entry never overflows.
MAX_SAFE_INT = int(np.iinfo(np.int64).max)


def exact_int(value: Any) -> int:
    """Return ``value`` as a Python int inside the safe range."""
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, Integral):
        raise NonIntegerEntryError(f"Entry {value!r} is not an exact integer")
    value = int(value)
    if abs(value) > MAX_SAFE_INT:
        raise IntegerOverflowError(f"Entry {value} exceeds the safe integer range")
    return value


def checked_int64(values: Any) -> np.ndarray:
    """Convert exact Python-int results into int64, refusing overflow."""
    arr = np.asarray(values, dtype=object)
    for x in arr.flat:
        if abs(x) > MAX_SAFE_INT:
            raise IntegerOverflowError(f"Result {x} exceeds the safe integer range")
    return arr.astype(np.int64)


def _rows_to_array(rows: Sequence[Sequence[Any]]) -> np.ndarray:
    if len(rows) == 0:
        return np.zeros((0, 0), dtype=np.int64)
    ncols = len(rows[0])
    for row in rows:
        if len(row) != ncols:
            raise MalformedInputError("All rows must have the same length")
    converted = [[exact_int(x) for x in row] for row in rows]
    return np.array(converted, dtype=np.int64).reshape(len(rows), ncols)


@dataclass(eq=False)
class IntegerMatrix:
    """Dense integer matrix stored as an ``int64`` numpy array.

    An ``int64`` array handed to the constructor is used as is (no copy),
    which is what lets a caller give its buffer away to a reduction.
    """

    data: Any

    def __post_init__(self):
        data = self.data
        if isinstance(data, np.ndarray):
            if data.ndim != 2:
                raise MalformedInputError(
                    f"Expected a 2-D array, got {data.ndim} dimension(s)"
                )
            if data.dtype == np.int64:
                if data.size and data.min() < -MAX_SAFE_INT:
                    raise IntegerOverflowError(
                        "Entry -2**63 is outside the safe integer range"
                    )
                return
            if data.dtype.kind in "iu":
                self.data = checked_int64(data.astype(object))
                return
            data = data.tolist()
        self.data = _rows_to_array(data)

    @property
    def nrows(self) -> int:
        return self.data.shape[0]

    @property
    def ncols(self) -> int:
        return self.data.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.nrows, self.ncols

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "IntegerMatrix":
        try:
            data = [list(row) for row in rows]
        except TypeError as exc:
            raise MalformedInputError("Matrix rows must be sequences") from exc
        return cls(data=data)

    @classmethod
    def identity(cls, n: int) -> "IntegerMatrix":
        return cls(np.eye(n, dtype=np.int64))

    @classmethod
    def zeros(cls, nrows: int, ncols: int) -> "IntegerMatrix":
        return cls(np.zeros((nrows, ncols), dtype=np.int64))

    @classmethod
    def diagonal(
        cls,
        diag: Sequence[int],
        nrows: Optional[int] = None,
        ncols: Optional[int] = None,
    ) -> "IntegerMatrix":
        """Matrix with ``diag`` on the main diagonal, zero elsewhere.

        The shape defaults to square; a rectangular shape must be at least
        ``len(diag)`` in both directions.
        """
        k = len(diag)
        nrows = k if nrows is None else nrows
        ncols = nrows if ncols is None else ncols
        if k > min(nrows, ncols):
            raise DimensionMismatchError(
                f"{k} diagonal entries do not fit a {nrows}x{ncols} matrix"
            )
        out = cls.zeros(nrows, ncols)
        for i, v in enumerate(diag):
            out.data[i, i] = exact_int(v)
        return out

    def copy(self) -> "IntegerMatrix":
        return IntegerMatrix(self.data.copy())

    def freeze(self) -> "IntegerMatrix":
        """Mark the underlying array read-only and return ``self``."""
        self.data.setflags(write=False)
        return self

    def is_zero(self, offset: int = 0) -> bool:
        """True when the submatrix starting at ``(offset, offset)`` is all zero."""
        return not np.any(self.data[offset:, offset:])

    def to_rows(self) -> List[List[int]]:
        return self.data.tolist()

    def __matmul__(self, other: "IntegerMatrix") -> "IntegerMatrix":
        return multiply(self, other)

    def __eq__(self, other) -> bool:
        if not isinstance(other, IntegerMatrix):
            return NotImplemented
        return equal(self, other)

    __hash__ = None

    def to_sympy(self):
        import sympy as sp
        return sp.Matrix(self.to_rows())


def multiply(left: IntegerMatrix, right: IntegerMatrix) -> IntegerMatrix:
    """Exact product ``left @ right``.

    Every partial sum is checked against the safe range, not just the final
    entries.
    """
    rA, cA = left.shape
    rB, cB = right.shape

    if cA != rB:
        raise DimensionMismatchError(f"Dimension mismatch: {cA} != {rB}")

    A = left.data.tolist()
    B = right.data.tolist()

    # Pre-allocate result
    C = [[0] * cB for _ in range(rA)]

    for i in range(rA):
        Ai = A[i]
        Ci = C[i]
        for k in range(cA):
            aik = Ai[k]
            if aik == 0:
                continue
            Bk = B[k]
            for j in range(cB):
                acc = Ci[j] + aik * Bk[j]
                if abs(acc) > MAX_SAFE_INT:
                    raise IntegerOverflowError(
                        f"Partial sum at ({i}, {j}) exceeds the safe integer range"
                    )
                Ci[j] = acc

    return IntegerMatrix(np.array(C, dtype=np.int64).reshape(rA, cB))


def exact_product(left: IntegerMatrix, right: IntegerMatrix) -> np.ndarray:
    """Unbounded product ``left @ right`` as an object array of Python ints."""
    if left.ncols != right.nrows:
        raise DimensionMismatchError(
            f"Dimension mismatch: {left.ncols} != {right.nrows}"
        )
    return left.data.astype(object) @ right.data.astype(object)


def equal(left: IntegerMatrix, right: IntegerMatrix) -> bool:
    if left.shape != right.shape:
        return False
    return bool(np.array_equal(left.data, right.data))
