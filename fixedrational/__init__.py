"""Exact rational arithmetic over fixed-width integers."""

from .arrays import as_rational_array, to_float_array, zeros, zeros_like
from .policy import AbortOnZero, DivisionByZero, Permissive, Policy
from .rational import DEFAULT_DTYPE, Rational
from .storage import IntegerStorage, reduce

__all__ = [
    "Rational",
    "DEFAULT_DTYPE",
    "Policy",
    "Permissive",
    "AbortOnZero",
    "DivisionByZero",
    "IntegerStorage",
    "reduce",
    "as_rational_array",
    "to_float_array",
    "zeros",
    "zeros_like",
]
