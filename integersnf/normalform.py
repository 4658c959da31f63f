"""Smith normal form of an integer matrix by elementary operations.

:class:`NormalForm` reduces a copy (or, on request, the caller's own buffer)
of an ``n x m`` integer matrix ``A`` to a diagonal matrix ``D`` whose
nonzero diagonal entries ``d_0 | d_1 | ... | d_k`` are the invariant factors
of ``A``. Alongside ``D`` it keeps two unimodular matrices:

* ``P`` (``m x m``), collecting every column operation,
* ``Q`` (``n x n``), collecting the inverse of every row operation,

so that ``A @ P == Q @ D`` holds after every single elementary step.
On request, ``Qinv`` is kept equal to the inverse of ``Q`` on the fly,
which avoids inverting ``Q`` at the end.

The reduction walks the diagonal one offset at a time:

1. ``improve_pivot`` shrinks the smallest nonzero entry of the remaining
   submatrix with Euclid-style replacements until it divides every entry,
2. ``move_pivot`` brings it to ``(offset, offset)`` and makes it positive,
3. ``diagonalize_pivot`` clears its row and column with exact quotients.

Because the pivot divides the whole remaining submatrix before clearing,
every later pivot is a multiple of it, which gives the divisibility chain.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, List, Optional, Tuple

import numpy as np

from .elementary import (
    exchange_cols,
    exchange_rows,
    replace_col,
    replace_row,
    scale_col,
    scale_row,
)
from .errors import (
    AllZeroInputError,
    EmptyInputError,
    MalformedInputError,
    ReductionInvariantViolation,
)
from .matrix import IntegerMatrix, exact_product
from .pivot import find_anti_pivot, find_pivot

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalFormConfig:
    """Options of a reduction.

    Attributes:
        copy: Work on a private copy instead of the caller's matrix.
        change_bases: Track ``P``, ``Q`` (and ``Qinv``).
        record_steps: Log every operation applied to ``D`` in ``steps``.
        track_inverse: Keep ``Qinv`` alongside ``Q``. Its entries grow much
            faster than those of ``Q`` and may leave the int64 range on
            inputs whose ``D``, ``P`` and ``Q`` fit, so it is off by default.
        check: Verify ``A @ P == Q @ D`` once the reduction is done.
    """

    copy: bool = True
    change_bases: bool = True
    record_steps: bool = False
    track_inverse: bool = False
    check: bool = True


@dataclass(frozen=True)
class Step:
    """One elementary operation applied to ``D``, with ``D`` right after it."""

    kind: str
    operands: Tuple[int, ...]
    offset: int
    snapshot: Optional[Tuple[Tuple[int, ...], ...]] = None


def _as_matrix(matrix: Any, copy: bool) -> IntegerMatrix:
    if not isinstance(matrix, IntegerMatrix):
        if len(matrix) == 0:
            raise EmptyInputError("Matrix is empty")
        if isinstance(matrix, np.ndarray):
            matrix = IntegerMatrix(matrix)
        else:
            matrix = IntegerMatrix.from_rows(matrix)
    if matrix.nrows == 0:
        raise EmptyInputError("Matrix is empty")
    if matrix.ncols == 0:
        raise MalformedInputError("Matrix has rows of length zero")
    return matrix.copy() if copy else matrix


class NormalForm:
    """Reduction of one integer matrix to Smith normal form.

    All the work happens in the constructor; afterwards the object only
    exposes the results.

    Args:
        matrix: Rows of integers, an integer ndarray, or an
            :class:`IntegerMatrix`. With ``copy=False`` an ``IntegerMatrix``
            or ``int64`` ndarray is reduced in place and becomes ``D``.
        config: Base options; keyword arguments override single fields.

    Raises:
        EmptyInputError: If the matrix has no rows.
        MalformedInputError: If rows are empty or of unequal length.
        NonIntegerEntryError: If an entry is not an exact integer.
        AllZeroInputError: If every entry is zero.
        IntegerOverflowError: If an entry leaves the int64 range.
        ReductionInvariantViolation: If the final self-check fails.
    """

    def __init__(
        self,
        matrix: Any,
        config: Optional[NormalFormConfig] = None,
        *,
        copy: Optional[bool] = None,
        change_bases: Optional[bool] = None,
        record_steps: Optional[bool] = None,
        track_inverse: Optional[bool] = None,
        check: Optional[bool] = None,
    ):
        overrides = {
            "copy": copy,
            "change_bases": change_bases,
            "record_steps": record_steps,
            "track_inverse": track_inverse,
            "check": check,
        }
        config = config or NormalFormConfig()
        config = replace(config, **{k: v for k, v in overrides.items() if v is not None})
        self.config = config

        D = _as_matrix(matrix, config.copy)
        if D.is_zero():
            raise AllZeroInputError("Matrix has all zero entries")

        self.A = D.copy().freeze()
        self.n, self.m = D.shape
        self.D = D
        self.diag: List[int] = []
        self.steps: List[Step] = []

        empty = IntegerMatrix.zeros(0, 0)
        if config.change_bases:
            self.P = IntegerMatrix.identity(self.m)
            self.Q = IntegerMatrix.identity(self.n)
            self.Qinv = IntegerMatrix.identity(self.n) if config.track_inverse else empty
        else:
            self.P, self.Q, self.Qinv = empty, empty.copy(), empty.copy()

        self.reduce()
        LOG.info(f"Reduced {self.n}x{self.m} matrix: rank {self.rank}, "
                 f"invariant factors {self.diag}")

        if config.change_bases and config.check:
            self.verify()

    @property
    def rank(self) -> int:
        return len(self.diag)

    @property
    def _tracks_inverse(self) -> bool:
        return self.config.change_bases and self.config.track_inverse

    # Main reduction method
    def reduce(self) -> None:
        offset = 0
        bound = min(self.n, self.m)

        while offset < bound and not self.D.is_zero(offset):
            pivot = self.improve_pivot(offset)
            self.move_pivot(pivot, offset)
            self.diagonalize_pivot(offset)

            self.diag.append(int(self.D.data[offset, offset]))
            LOG.debug(f"offset {offset}: invariant factor {self.diag[-1]}")
            offset += 1

    def improve_pivot(self, offset: int) -> Tuple[int, int]:
        """Shrink the pivot until it divides the whole remaining submatrix.

        Each pass either reduces an entry in the pivot's column or row modulo
        the pivot, or (when the offending entry shares neither) first merges
        its row into the pivot row so a column replacement can reach it.
        The pivot's absolute value strictly decreases over the passes, so
        the loop ends.

        Returns:
            Position of the improved pivot.
        """
        D = self.D.data

        while True:
            i, j = find_pivot(self.D, offset)
            anti = find_anti_pivot((i, j), self.D, offset)
            if anti is None:
                return i, j

            s, t = anti
            LOG.debug(f"offset {offset}: pivot {(i, j)} = {D[i, j]}, "
                      f"anti-pivot {(s, t)} = {D[s, t]}")
            if j == t:
                self._reduce_in_column(s, i, j, offset)
            elif i == s:
                self._reduce_in_row(i, j, t, offset)
            else:
                if D[s, j] != 0:
                    self._reduce_in_column(s, i, j, offset)
                # D[s, t] is out of reach of the pivot row and column; fold
                # row s into the pivot row first.
                self._replace_row(i, s, 1, offset)
                self._reduce_in_row(i, j, t, offset)

    def move_pivot(self, pivot: Tuple[int, int], offset: int) -> None:
        """Bring the pivot to ``(offset, offset)`` and make it positive."""
        i, j = pivot
        if i != offset:
            self._exchange_rows(offset, i, offset)
        if j != offset:
            self._exchange_cols(offset, j, offset)
        if self.D.data[offset, offset] < 0:
            self._scale_row(offset, -1, offset)

    def diagonalize_pivot(self, offset: int) -> None:
        """Zero the pivot's column and row; all quotients are exact."""
        D = self.D.data
        pivot = int(D[offset, offset])

        # Make offset col zero
        for i in range(offset + 1, self.n):
            if D[i, offset] == 0:
                continue
            self._replace_row(i, offset, -(int(D[i, offset]) // pivot), offset)

        # Make offset row zero
        for j in range(offset + 1, self.m):
            if D[offset, j] == 0:
                continue
            self._replace_col(j, offset, -(int(D[offset, j]) // pivot), offset)

    def _reduce_in_column(self, s: int, i: int, j: int, offset: int) -> None:
        """Row ``s`` -= floor(D[s, j] / D[i, j]) * row ``i``."""
        D = self.D.data
        q = -(int(D[s, j]) // int(D[i, j]))
        self._replace_row(s, i, q, offset)

    def _reduce_in_row(self, i: int, j: int, t: int, offset: int) -> None:
        """Column ``t`` -= floor(D[i, t] / D[i, j]) * column ``j``."""
        D = self.D.data
        q = -(int(D[i, t]) // int(D[i, j]))
        self._replace_col(t, j, q, offset)

    # Row operations: D <- E @ D, so Q <- Q @ E^-1 and Qinv <- E @ Qinv.
    # Qinv goes first: if it overflows, D and Q have not been touched yet.

    def _exchange_rows(self, i: int, k: int, offset: int) -> None:
        if self._tracks_inverse:
            exchange_rows(self.Qinv, i, k)
        exchange_rows(self.D, i, k, offset=offset)
        if self.config.change_bases:
            exchange_cols(self.Q, i, k)
        self._record("exchange_rows", (i, k), offset)

    def _replace_row(self, i: int, k: int, q: int, offset: int) -> None:
        if self._tracks_inverse:
            replace_row(self.Qinv, i, k, q)
        replace_row(self.D, i, k, q, offset=offset)
        if self.config.change_bases:
            replace_col(self.Q, k, i, -q)
        self._record("replace_row", (i, k, q), offset)

    def _scale_row(self, i: int, q: int, offset: int) -> None:
        if self._tracks_inverse:
            scale_row(self.Qinv, i, q)
        scale_row(self.D, i, q, offset=offset)
        if self.config.change_bases:
            scale_col(self.Q, i, q)
        self._record("scale_row", (i, q), offset)

    # Column operations: D <- D @ E, so P <- P @ E.

    def _exchange_cols(self, j: int, k: int, offset: int) -> None:
        exchange_cols(self.D, j, k, offset=offset)
        if self.config.change_bases:
            exchange_cols(self.P, j, k)
        self._record("exchange_cols", (j, k), offset)

    def _replace_col(self, j: int, k: int, q: int, offset: int) -> None:
        replace_col(self.D, j, k, q, offset=offset)
        if self.config.change_bases:
            replace_col(self.P, j, k, q)
        self._record("replace_col", (j, k, q), offset)

    def _record(self, kind: str, operands: Tuple[int, ...], offset: int) -> None:
        if not self.config.record_steps:
            return
        snapshot = tuple(tuple(row) for row in self.D.to_rows())
        self.steps.append(Step(kind, operands, offset, snapshot))

    def is_valid(self) -> bool:
        """Check ``A @ P == Q @ D`` (and ``Q @ Qinv == I`` when tracked).

        The products are taken over Python integers, so an intermediate sum
        outside the int64 range cannot make a correct reduction fail.
        """
        if not self.config.change_bases:
            raise ValueError("Base change matrices were not tracked")
        if not np.array_equal(exact_product(self.A, self.P),
                              exact_product(self.Q, self.D)):
            return False
        if self._tracks_inverse:
            return np.array_equal(exact_product(self.Q, self.Qinv),
                                  np.eye(self.n, dtype=np.int64))
        return True

    def verify(self) -> None:
        """Like :meth:`is_valid`, but raise on failure."""
        if not self.is_valid():
            raise ReductionInvariantViolation(
                f"A @ P != Q @ D after reducing a {self.n}x{self.m} matrix"
            )


@dataclass(frozen=True)
class SmithResult:
    """Plain-list result of :func:`smith_normal_form`."""

    D: List[List[int]]
    P: List[List[int]]
    Q: List[List[int]]
    Qinv: List[List[int]]
    diag: List[int]


def smith_normal_form(matrix: Any, **options: Any) -> SmithResult:
    """Compute the Smith normal form of ``matrix`` and return plain lists.

    ``options`` are the fields of :class:`NormalFormConfig`. ``P``, ``Q`` and
    ``Qinv`` are empty lists when ``change_bases=False``.
    """
    nf = NormalForm(matrix, **options)
    return SmithResult(
        D=nf.D.to_rows(),
        P=nf.P.to_rows(),
        Q=nf.Q.to_rows(),
        Qinv=nf.Qinv.to_rows(),
        diag=list(nf.diag),
    )
