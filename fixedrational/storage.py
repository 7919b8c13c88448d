"""Fixed-width integer storage and canonical reduction."""
from __future__ import annotations

import math
from typing import Any, Tuple

import numpy as np

# Storage narrower than this is widened for intermediate products.
_PROMOTED = np.dtype(np.int32)


class IntegerStorage:
    """Bounds of the NumPy integer type backing a rational.

    Fields are kept as scalars of ``dtype``. Intermediate products live in the
    working type: ``int32`` for anything narrower, ``dtype`` itself otherwise.
    Leaving either range raises :class:`OverflowError`.
    """

    __slots__ = ("dtype", "type", "bounds", "working_bounds")

    def __init__(self, dtype: Any) -> None:
        dtype = np.dtype(dtype)
        if dtype.kind not in ("i", "u"):
            raise TypeError(
                f"Rational storage must be a fixed-width integer type, got {dtype}"
            )
        working = _PROMOTED if dtype.itemsize < _PROMOTED.itemsize else dtype
        info = np.iinfo(dtype)
        working_info = np.iinfo(working)

        self.dtype = dtype
        self.type = dtype.type
        self.bounds = (int(info.min), int(info.max))
        self.working_bounds = (int(working_info.min), int(working_info.max))

    def narrow(self, value: int) -> np.integer:
        """Return *value* as a storage scalar."""
        low, high = self.bounds
        if not low <= value <= high:
            raise OverflowError(
                f"{value} does not fit in {self.dtype} [{low}, {high}]"
            )
        return self.type(value)

    def check(self, value: int) -> int:
        """Return *value* unchanged if it fits the working type."""
        low, high = self.working_bounds
        if not low <= value <= high:
            raise OverflowError(
                f"intermediate value {value} overflows the working range of {self.dtype}"
            )
        return value

    def __repr__(self) -> str:
        return f"IntegerStorage({self.dtype.name})"


def reduce(numerator: int, denominator: int) -> Tuple[int, int]:
    """Return the canonical ``(numerator, denominator)`` pair.

    The gcd is taken over both magnitudes and the sign is moved onto the
    numerator. With a zero denominator this yields ``(0, 0)``, ``(1, 0)`` or
    ``(-1, 0)``, since ``gcd(n, 0) == |n|``.
    """
    gcd = math.gcd(numerator, denominator)
    if gcd == 0:
        return 0, 0
    numerator //= gcd
    denominator //= gcd
    if denominator < 0:
        numerator, denominator = -numerator, -denominator
    return numerator, denominator


__all__ = ["IntegerStorage", "reduce"]
