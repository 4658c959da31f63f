"""Pivot selection for the integer Smith normal form reduction.

Both searches scan ``D[offset:, offset:]`` in row-major order and return
positions in the coordinates of the full matrix. Ties always go to the
first entry in scan order, so the reduction is deterministic.
"""

from typing import Optional, Tuple

import numpy as np

from .errors import AllZeroSubmatrixError, NonIntegerEntryError
from .matrix import IntegerMatrix

Position = Tuple[int, int]


def _block(D: IntegerMatrix, offset: int) -> np.ndarray:
    if D.data.dtype.kind not in "iu":
        raise NonIntegerEntryError(
            f"Pivot search needs integer entries, got dtype {D.data.dtype}"
        )
    return D.data[offset:, offset:]


def find_pivot(D: IntegerMatrix, offset: int = 0) -> Position:
    """Locate the nonzero entry of smallest absolute value.

    Raises:
        AllZeroSubmatrixError: If the submatrix has no nonzero entry.
    """
    block = _block(D, offset)
    # nonzero() lists positions in row-major order; argmin keeps the first.
    rows, cols = np.nonzero(block)
    if rows.size == 0:
        raise AllZeroSubmatrixError(f"Submatrix at offset {offset} is zero")

    best = int(np.argmin(np.abs(block[rows, cols])))
    return int(rows[best]) + offset, int(cols[best]) + offset


def find_anti_pivot(pivot: Position, D: IntegerMatrix,
                    offset: int = 0) -> Optional[Position]:
    """Locate the first entry not divisible by the pivot, or ``None``."""
    block = _block(D, offset)
    alpha = abs(int(D.data[pivot]))
    reducible = block % alpha != 0
    if not reducible.any():
        return None
    r, c = np.unravel_index(int(np.argmax(reducible)), block.shape)
    return int(r) + offset, int(c) + offset
