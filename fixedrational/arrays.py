"""NumPy object arrays of :class:`~fixedrational.rational.Rational` values."""
from __future__ import annotations

from typing import Any, Optional, Tuple, Union

import numpy as np

from .rational import Rational

Shape = Union[int, Tuple[int, ...]]


def _element_type(values: Any) -> Optional[type]:
    for item in np.asarray(values, dtype=object).flat:
        if isinstance(item, Rational):
            return type(item)
    return None


def as_rational_array(
    values: Any,
    rational_type: type = Rational,
    *,
    copy: bool = True,
) -> np.ndarray:
    """Return a ``numpy.ndarray`` of ``rational_type`` values.

    ``values`` can be any iterable of integers and rationals or an existing
    NumPy array. Integers are converted with ``rational_type(value)``; rationals
    of another specialisation are rejected. When ``copy`` is ``False`` and
    ``values`` is already an object array holding only ``rational_type``
    elements, that array is returned as is.
    """
    if not (isinstance(rational_type, type) and issubclass(rational_type, Rational)):
        raise TypeError(f"{rational_type!r} is not a Rational type")

    def convert(item: Any) -> Rational:
        if type(item) is rational_type:
            return item if not copy else +item
        if isinstance(item, Rational):
            raise TypeError(f"cannot mix {type(item).__name__} into a {rational_type.__name__} array")
        return rational_type(item)

    if isinstance(values, np.ndarray):
        if (
            not copy
            and values.dtype == object
            and all(type(item) is rational_type for item in values.flat)
        ):
            return values
        array = values.astype(object, copy=True)
    elif isinstance(values, (list, tuple)):
        array = np.array(values, dtype=object)
    else:
        return as_rational_array(list(values), rational_type, copy=copy)

    if array.size == 0:
        return array
    vectorised = np.vectorize(convert, otypes=[object])
    return vectorised(array)


def zeros(shape: Shape, rational_type: type = Rational) -> np.ndarray:
    """Return an object array of ``shape`` filled with distinct zero values."""
    array = np.empty(shape, dtype=object)
    for index in np.ndindex(array.shape):
        array[index] = rational_type(0)
    return array


def zeros_like(values: Any, rational_type: Optional[type] = None) -> np.ndarray:
    """Return a zero-filled array that matches the shape of ``values``.

    The element type defaults to the type of the first rational in ``values``.
    """
    if rational_type is None:
        rational_type = _element_type(values) or Rational
    return zeros(np.shape(values), rational_type)


def to_float_array(values: Any, dtype: Any = np.float64) -> np.ndarray:
    """Convert an array of rationals to a floating point array.

    Sentinels become ``inf``, ``-inf`` and ``nan``.
    """
    array = np.asarray(values, dtype=object)
    result = np.empty(array.shape, dtype=dtype)
    for index in np.ndindex(array.shape):
        result[index] = array[index].as_float(dtype)
    return result


__all__ = ["as_rational_array", "to_float_array", "zeros", "zeros_like"]
