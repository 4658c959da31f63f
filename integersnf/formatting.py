"""Typeset output for matrices, vectors and changed bases."""

from typing import Any, List, Sequence

from .errors import DimensionMismatchError
from .matrix import IntegerMatrix, exact_int


def _as_matrix(matrix: Any) -> IntegerMatrix:
    if isinstance(matrix, IntegerMatrix):
        return matrix
    return IntegerMatrix.from_rows(matrix)


def matrix_to_latex(matrix: Any) -> str:
    """LaTeX for ``matrix`` between round brackets (needs sympy)."""
    import sympy as sp
    return sp.latex(_as_matrix(matrix).to_sympy(), mat_delim="(")


def vector_to_latex(vector: Sequence[int]) -> str:
    return r"\left(" + ", ".join(str(exact_int(x)) for x in vector) + r"\right)"


def change_basis(old_basis: Sequence[str], matrix: Any) -> List[str]:
    """Express the columns of a base change matrix in terms of ``old_basis``.

    Column ``j`` of ``matrix`` holds the coordinates of the ``j``-th new
    basis vector, so with ``old_basis = ["e1", "e2"]`` and
    ``matrix = [[1, 2], [-1, 0]]`` the result is ``["e1-e2", "2e1"]``.
    """
    M = _as_matrix(matrix)
    dim = len(old_basis)
    if M.shape != (dim, dim):
        raise DimensionMismatchError(
            f"Basis of size {dim} does not match a {M.nrows}x{M.ncols} matrix"
        )

    new_basis = []
    for j in range(dim):
        terms = []
        for i in range(dim):
            entry = int(M.data[i, j])
            if entry == 0:
                continue
            sign = "+" if entry > 0 else "-"
            coeff = "" if abs(entry) == 1 else str(abs(entry))
            terms.append(f"{sign}{coeff}{old_basis[i]}")
        # Unimodular matrices never have a zero column.
        new_basis.append("".join(terms).lstrip("+") or "0")
    return new_basis
