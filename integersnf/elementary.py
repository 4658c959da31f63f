"""Elementary row and column operations over the integers.

Every operation acts in place on an :class:`IntegerMatrix` and only touches
the index range ``[offset, end)`` of the other axis. Rows and columns before
``offset`` belong to pivots that are already final, so their entries in the
remaining lines are zero and skipping them changes nothing.

Row operations correspond to left multiplication ``D <- E @ D`` and column
operations to right multiplication ``D <- D @ E``. With ``track=True`` each
call also returns ``(E, E_inv)``; the full elementary matrix is only built
in that case.
"""

from typing import Optional, Tuple

from .matrix import IntegerMatrix, checked_int64, exact_int

Elementary = Optional[Tuple[IntegerMatrix, IntegerMatrix]]


def _check_unit(q: int) -> int:
    if q not in (1, -1):
        raise ValueError(f"Only 1 and -1 are units over the integers, got {q}")
    return q


def exchange_rows(M: IntegerMatrix, i: int, k: int,
                  offset: int = 0, track: bool = False) -> Elementary:
    """Swap rows ``i`` and ``k``."""
    if i != k:
        M.data[[i, k], offset:] = M.data[[k, i], offset:]
    if not track:
        return None
    E = IntegerMatrix.identity(M.nrows)
    exchange_rows(E, i, k)
    return E, E.copy()


def exchange_cols(M: IntegerMatrix, j: int, k: int,
                  offset: int = 0, track: bool = False) -> Elementary:
    """Swap columns ``j`` and ``k``."""
    if j != k:
        M.data[offset:, [j, k]] = M.data[offset:, [k, j]]
    if not track:
        return None
    E = IntegerMatrix.identity(M.ncols)
    exchange_cols(E, j, k)
    return E, E.copy()


def replace_row(M: IntegerMatrix, i: int, k: int, q: int,
                offset: int = 0, track: bool = False) -> Elementary:
    """Row ``i`` <- row ``i`` + ``q`` * row ``k``."""
    if i == k:
        raise ValueError("replace_row needs two distinct rows")
    q = exact_int(q)
    if q != 0:
        row_i = M.data[i, offset:].astype(object)
        row_k = M.data[k, offset:].astype(object)
        M.data[i, offset:] = checked_int64(row_i + q * row_k)
    if not track:
        return None
    E = IntegerMatrix.identity(M.nrows)
    E_inv = IntegerMatrix.identity(M.nrows)
    replace_row(E, i, k, q)
    replace_row(E_inv, i, k, -q)
    return E, E_inv


def replace_col(M: IntegerMatrix, j: int, k: int, q: int,
                offset: int = 0, track: bool = False) -> Elementary:
    """Column ``j`` <- column ``j`` + ``q`` * column ``k``."""
    if j == k:
        raise ValueError("replace_col needs two distinct columns")
    q = exact_int(q)
    if q != 0:
        col_j = M.data[offset:, j].astype(object)
        col_k = M.data[offset:, k].astype(object)
        M.data[offset:, j] = checked_int64(col_j + q * col_k)
    if not track:
        return None
    E = IntegerMatrix.identity(M.ncols)
    E_inv = IntegerMatrix.identity(M.ncols)
    replace_col(E, j, k, q)
    replace_col(E_inv, j, k, -q)
    return E, E_inv


def scale_row(M: IntegerMatrix, i: int, q: int,
              offset: int = 0, track: bool = False) -> Elementary:
    """Row ``i`` <- ``q`` * row ``i`` for a unit ``q``."""
    q = _check_unit(exact_int(q))
    if q == -1:
        M.data[i, offset:] = -M.data[i, offset:]
    if not track:
        return None
    E = IntegerMatrix.identity(M.nrows)
    scale_row(E, i, q)
    return E, E.copy()


def scale_col(M: IntegerMatrix, j: int, q: int,
              offset: int = 0, track: bool = False) -> Elementary:
    """Column ``j`` <- ``q`` * column ``j`` for a unit ``q``."""
    q = _check_unit(exact_int(q))
    if q == -1:
        M.data[offset:, j] = -M.data[offset:, j]
    if not track:
        return None
    E = IntegerMatrix.identity(M.ncols)
    scale_col(E, j, q)
    return E, E.copy()
