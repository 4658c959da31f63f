import math
import random
from itertools import combinations

import numpy as np

from integersnf.matrix import IntegerMatrix, exact_product
from integersnf.normalform import NormalForm


def _rows(M) -> list[list[int]]:
    if isinstance(M, IntegerMatrix):
        return M.to_rows()
    return [list(row) for row in M]


def det_integer_matrix(M) -> int:
    """
    Exact determinant by fraction-free elimination (Bareiss).
    Accepts an IntegerMatrix or a list of rows.
    """
    a = _rows(M)
    n = len(a)
    if n == 0:
        return 1
    assert all(len(row) == n for row in a)

    sign = 1
    prev = 1
    for k in range(n - 1):
        if a[k][k] == 0:
            for r in range(k + 1, n):
                if a[r][k] != 0:
                    a[k], a[r] = a[r], a[k]
                    sign = -sign
                    break
            else:
                return 0
        for i in range(k + 1, n):
            for j in range(k + 1, n):
                a[i][j] = (a[i][j] * a[k][k] - a[i][k] * a[k][j]) // prev
        prev = a[k][k]
    return sign * a[n - 1][n - 1]


def invariants_from_minors(M) -> list[int]:
    """
    Invariant factors from determinantal divisors:
    d_k = gcd of all k x k minors, s_k = d_k / d_{k-1}.
    Brute force; only for small matrices.
    """
    a = _rows(M)
    n, m = len(a), len(a[0])
    factors = []
    prev = 1
    for k in range(1, min(n, m) + 1):
        d_k = 0
        for rows in combinations(range(n), k):
            for cols in combinations(range(m), k):
                minor = [[a[r][c] for c in cols] for r in rows]
                d_k = math.gcd(d_k, det_integer_matrix(minor))
        if d_k == 0:
            break
        factors.append(d_k // prev)
        prev = d_k
    return factors


def assert_valid_snf(nf: NormalForm, expected_diag: list[int] | None = None) -> None:
    """Assert the structural SNF properties of a finished reduction."""
    D = nf.D.data
    n, m = nf.n, nf.m

    # 1. D is diagonal and matches diag
    for r in range(n):
        for c in range(m):
            if r != c or r >= nf.rank:
                assert D[r, c] == 0, f"Unexpected entry ({r},{c}) = {D[r, c]}"
    assert [int(D[i, i]) for i in range(nf.rank)] == nf.diag

    # 2. Non-negative divisibility chain
    for i, d in enumerate(nf.diag):
        assert d > 0
        if i + 1 < nf.rank:
            assert nf.diag[i + 1] % d == 0, f"Chain break: {d} !| {nf.diag[i + 1]}"

    # 3. Reconstruction and unimodularity
    if nf.config.change_bases:
        # Python-int products: intermediate sums may leave int64.
        AP = exact_product(nf.A, nf.P)
        QD = exact_product(nf.Q, nf.D)
        assert np.array_equal(AP, QD), "A @ P != Q @ D"
        assert abs(det_integer_matrix(nf.P)) == 1
        assert abs(det_integer_matrix(nf.Q)) == 1
        if nf.config.track_inverse:
            assert np.array_equal(exact_product(nf.Q, nf.Qinv), np.eye(n, dtype=np.int64))

    if expected_diag is not None:
        assert nf.diag == expected_diag, f"{nf.diag} != {expected_diag}"


def make_random_matrix(
    nrows: int,
    ncols: int,
    low: int = -9,
    high: int = 9,
) -> IntegerMatrix:
    """Generate a random integer matrix that is never all zero."""
    data = [
        [random.randint(low, high) for _ in range(ncols)]
        for _ in range(nrows)
    ]
    if not any(any(row) for row in data):
        data[0][0] = 1
    return IntegerMatrix.from_rows(data)
