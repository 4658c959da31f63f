import logging as _logging

from .errors import (
    AllZeroInputError,
    AllZeroSubmatrixError,
    DimensionMismatchError,
    EmptyInputError,
    IntegerOverflowError,
    MalformedInputError,
    NonIntegerEntryError,
    ReductionInvariantViolation,
    SmithFormError,
)
from .matrix import IntegerMatrix
from .normalform import NormalForm, NormalFormConfig, SmithResult, Step, smith_normal_form

__all__ = [
    "IntegerMatrix",
    "NormalForm",
    "NormalFormConfig",
    "SmithResult",
    "Step",
    "smith_normal_form",
    "SmithFormError",
    "EmptyInputError",
    "MalformedInputError",
    "AllZeroInputError",
    "NonIntegerEntryError",
    "IntegerOverflowError",
    "DimensionMismatchError",
    "AllZeroSubmatrixError",
    "ReductionInvariantViolation",
]

_logging.getLogger(__name__).addHandler(_logging.NullHandler())
