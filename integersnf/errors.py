"""Exceptions raised while building and reducing integer matrices."""


class SmithFormError(ValueError):
    """Base class for every error raised by ``integersnf``."""


class EmptyInputError(SmithFormError):
    """The input matrix has no rows."""


class MalformedInputError(SmithFormError):
    """Rows of unequal length, or a row with no entries."""


class AllZeroInputError(SmithFormError):
    """Every entry of the input matrix is zero."""


class NonIntegerEntryError(SmithFormError, TypeError):
    """An entry is not an exact integer."""


class IntegerOverflowError(SmithFormError, OverflowError):
    """A value left the safe exact-integer range."""


class DimensionMismatchError(SmithFormError):
    """Two matrices (or a matrix and a basis) have incompatible shapes."""


class AllZeroSubmatrixError(SmithFormError):
    """A pivot was requested from a submatrix with no nonzero entry."""


class ReductionInvariantViolation(SmithFormError, AssertionError):
    """``A @ P == Q @ D`` failed after a reduction.

    This is never a user error: it means a basis matrix drifted out of
    sync with the working matrix.
    """
