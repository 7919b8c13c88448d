"""Exact rational numbers over fixed-width NumPy integers."""
from __future__ import annotations

import functools
import logging
import math
import numbers
import operator
from fractions import Fraction
from typing import Any, Callable, Optional, Tuple, Union

import numpy as np

from .policy import DEFAULT_POLICY, is_policy
from .storage import IntegerStorage, reduce

LOG = logging.getLogger(__name__)

IntegerLike = Union[int, np.integer]
Pair = Tuple[int, int]

DEFAULT_DTYPE = np.dtype(np.int64)


def _is_integer_operand(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _ensure_int(value: Any, *, name: str) -> int:
    """Convert *value* to ``int`` when it represents an integer."""
    if _is_integer_operand(value):
        return int(value)
    raise TypeError(f"{name} must be an integer, got {type(value)!r}")


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _is_nan(num: int, den: int) -> bool:
    return num == 0 and den == 0


def _extended_sum(ln: int, ld: int, rn: int, rd: int) -> Pair:
    """Sum where at least one operand is a sentinel.

    ``rn`` already carries the sign of the operation, so subtraction arrives
    here as the sum with the negated right operand.
    """
    if _is_nan(ln, ld) or _is_nan(rn, rd):
        return 0, 0
    if ld == 0 and rd == 0:
        return (ln, 0) if ln == rn else (0, 0)
    if ld == 0:
        return ln, 0
    return _sign(rn), 0


def _extended_product(ln: int, ld: int, rn: int, rd: int) -> Pair:
    """Product where at least one operand is a sentinel."""
    if _is_nan(ln, ld) or _is_nan(rn, rd):
        return 0, 0
    # infinity times zero
    if ln == 0 or rn == 0:
        return 0, 0
    return _sign(ln) * _sign(rn), 0


def _less(ln: int, ld: int, rn: int, rd: int) -> bool:
    d = math.gcd(ld, rd)
    if d == 0:
        # Both operands are sentinels; NaN is unordered.
        return ln != 0 and rn != 0 and ln < rn
    return ln * (rd // d) < rn * (ld // d)


class Rational:
    """Ratio of two fixed-width integers kept in lowest terms.

    ``Rational`` stores ``int64`` components and uses the
    :class:`~fixedrational.policy.Permissive` policy. Other storage types and
    policies are selected by subscripting::

        Strict16 = Rational[np.int16, AbortOnZero]
        Strict16(1, 2) + 1

    Under ``Permissive`` a zero denominator is a legal sentinel: ``(1, 0)`` is
    +infinity, ``(-1, 0)`` is -infinity and ``(0, 0)`` is NaN.
    """

    __slots__ = ("_numerator", "_denominator")
    __array_priority__ = 1000.0  # Prefer Rational semantics in NumPy expressions.

    storage = IntegerStorage(DEFAULT_DTYPE)
    policy = DEFAULT_POLICY
    _sentinels = DEFAULT_POLICY.allows_zero_denominator
    _on_zero = staticmethod(DEFAULT_POLICY.division_by_zero)

    def __init__(
        self,
        numerator: IntegerLike = 0,
        denominator: Optional[IntegerLike] = None,
    ) -> None:
        num = _ensure_int(numerator, name="numerator")
        if denominator is None:
            self._assign(num, 1)
            return

        den = _ensure_int(denominator, name="denominator")
        self.storage.narrow(num)
        self.storage.narrow(den)
        if den == 0 and not self._sentinels:
            self._on_zero()
        self._assign(*reduce(num, den))

    def __class_getitem__(cls, params: Any) -> type:
        if cls is not Rational:
            raise TypeError(f"{cls.__name__} is already specialised")
        if not isinstance(params, tuple):
            params = (params,)
        if len(params) == 1:
            dtype, policy = params[0], DEFAULT_POLICY
        elif len(params) == 2:
            dtype, policy = params
        else:
            raise TypeError("Rational[...] takes an integer type and an optional policy")
        return _specialise(np.dtype(dtype), policy)

    # ------------------------------------------------------------------
    # Constructors
    @classmethod
    def _from_pair(cls, numerator: int, denominator: int) -> "Rational":
        """Build the canonical value of an arithmetic result."""
        result = cls.__new__(cls)
        result._assign(*reduce(numerator, denominator))
        return result

    @classmethod
    def from_fraction(cls, value: Fraction) -> "Rational":
        """Create a value from :class:`fractions.Fraction`."""
        return cls(value.numerator, value.denominator)

    # ------------------------------------------------------------------
    # Properties and helpers
    @property
    def numerator(self) -> np.integer:
        return self._numerator

    @property
    def denominator(self) -> np.integer:
        return self._denominator

    def is_valid(self) -> bool:
        """``False`` for the infinity and NaN sentinels."""
        return bool(self._denominator != 0)

    def is_integer(self) -> bool:
        return bool(self._denominator == 1)

    def as_fraction(self) -> Fraction:
        """Return a :class:`Fraction` with the same value."""
        if not self.is_valid():
            raise ValueError(f"cannot convert {self!r} to Fraction")
        return Fraction(int(self._numerator), int(self._denominator))

    def _assign(self, numerator: int, denominator: int) -> None:
        storage = self.storage
        self._numerator, self._denominator = (
            storage.narrow(numerator),
            storage.narrow(denominator),
        )

    def _components(self) -> Pair:
        return int(self._numerator), int(self._denominator)

    def _coerce(self, value: Any) -> Optional["Rational"]:
        if type(value) is type(self):
            return value
        if _is_integer_operand(value):
            return type(self)(value)
        return None

    def _coerce_scalar(self, value: Any) -> "Rational":
        coerced = self._coerce(value)
        if coerced is None:
            raise TypeError(f"Cannot interpret {type(value)!r} as {type(self).__name__}")
        return coerced

    # ------------------------------------------------------------------
    # Numeric conversion
    def as_float(self, dtype: Any = np.float64) -> np.floating:
        """Divide the components after promoting both to the floating *dtype*.

        Sentinels come out as ``inf``, ``-inf`` and ``nan``.
        """
        ftype = np.dtype(dtype)
        if ftype.kind != "f":
            raise TypeError(f"{ftype} is not a floating point type")
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            return ftype.type(self._numerator) / ftype.type(self._denominator)

    def __float__(self) -> float:
        return float(self.as_float())

    def __bool__(self) -> bool:
        return bool(self._numerator != 0)

    # ------------------------------------------------------------------
    # Representation
    def __repr__(self) -> str:
        return f"{type(self).__name__}({int(self._numerator)}, {int(self._denominator)})"

    # ------------------------------------------------------------------
    # Arithmetic engine
    def _add(self, other: "Rational", sign: int = 1) -> "Rational":
        ln, ld = self._components()
        rn, rd = other._components()
        if self._sentinels and (ld == 0 or rd == 0):
            return self._from_pair(*_extended_sum(ln, ld, sign * rn, rd))

        check = self.storage.check
        d1 = math.gcd(ld, rd)
        if d1 == 1:
            num = check(check(ln * rd) + sign * check(rn * ld))
            den = check(ld * rd)
        else:
            t = check(check(ln * (rd // d1)) + sign * check(rn * (ld // d1)))
            d2 = math.gcd(t, d1)
            num = t // d2
            den = check((ld // d1) * (rd // d2))
        return self._from_pair(num, den)

    def _sub(self, other: "Rational") -> "Rational":
        return self._add(other, -1)

    def _multiply(self, rn: int, rd: int) -> "Rational":
        ln, ld = self._components()
        if self._sentinels and (ld == 0 or rd == 0):
            return self._from_pair(*_extended_product(ln, ld, rn, rd))

        check = self.storage.check
        d1 = math.gcd(ln, rd)
        d2 = math.gcd(ld, rn)
        num = check((ln // d1) * (rn // d2))
        den = check((ld // d2) * (rd // d1))
        return self._from_pair(num, den)

    def _mul(self, other: "Rational") -> "Rational":
        return self._multiply(*other._components())

    def _truediv(self, other: "Rational") -> "Rational":
        rn, rd = other._components()
        if rn == 0 and not self._sentinels:
            self._on_zero()
        # Reciprocal with the divisor's sign kept on the numerator.
        return self._multiply(rd if rn >= 0 else -rd, abs(rn))

    def _binary_operation(self, other: Any, op: Callable[["Rational", "Rational"], "Rational"]):
        if isinstance(other, np.ndarray):
            vectorised = np.vectorize(
                lambda x: op(self, self._coerce_scalar(x)),
                otypes=[object],
            )
            return vectorised(other)
        coerced = self._coerce(other)
        if coerced is None:
            return NotImplemented
        return op(self, coerced)

    def _reflected_operation(self, other: Any, op: Callable[["Rational", "Rational"], "Rational"]):
        coerced = self._coerce(other)
        if coerced is None:
            return NotImplemented
        return op(coerced, self)

    def _inplace_operation(self, other: Any, op: Callable[[Any, Any], Any]):
        result = op(self, other)
        if type(result) is not type(self):
            return result
        self._numerator, self._denominator = result._numerator, result._denominator
        return self

    def __add__(self, other: Any) -> Any:
        return self._binary_operation(other, Rational._add)

    def __radd__(self, other: Any) -> Any:
        return self._reflected_operation(other, Rational._add)

    def __iadd__(self, other: Any) -> Any:
        return self._inplace_operation(other, operator.add)

    def __sub__(self, other: Any) -> Any:
        return self._binary_operation(other, Rational._sub)

    def __rsub__(self, other: Any) -> Any:
        return self._reflected_operation(other, Rational._sub)

    def __isub__(self, other: Any) -> Any:
        return self._inplace_operation(other, operator.sub)

    def __mul__(self, other: Any) -> Any:
        return self._binary_operation(other, Rational._mul)

    def __rmul__(self, other: Any) -> Any:
        return self._reflected_operation(other, Rational._mul)

    def __imul__(self, other: Any) -> Any:
        return self._inplace_operation(other, operator.mul)

    def __truediv__(self, other: Any) -> Any:
        return self._binary_operation(other, Rational._truediv)

    def __rtruediv__(self, other: Any) -> Any:
        return self._reflected_operation(other, Rational._truediv)

    def __itruediv__(self, other: Any) -> Any:
        return self._inplace_operation(other, operator.truediv)

    def __neg__(self) -> "Rational":
        num, den = self._components()
        return self._from_pair(-num, den)

    def __pos__(self) -> "Rational":
        return self._from_pair(*self._components())

    def __abs__(self) -> "Rational":
        num, den = self._components()
        return self._from_pair(abs(num), den)

    # ------------------------------------------------------------------
    # Comparisons
    def __eq__(self, other: Any) -> bool:
        if _is_integer_operand(other):
            return bool(self._denominator == 1) and int(self._numerator) == int(other)
        if type(other) is not type(self):
            return NotImplemented
        return bool(
            self._numerator == other._numerator
            and self._denominator == other._denominator
        )

    def __ne__(self, other: Any) -> bool:
        equal = self.__eq__(other)
        if equal is NotImplemented:
            return NotImplemented
        return not equal

    # Augmented assignment mutates the receiver.
    __hash__ = None  # type: ignore[assignment]

    def __lt__(self, other: Any) -> bool:
        num, den = self._components()
        if _is_integer_operand(other):
            k = int(self.storage.narrow(int(other)))
            return num < k * den
        if type(other) is not type(self):
            return NotImplemented
        return _less(num, den, *other._components())

    def __gt__(self, other: Any) -> bool:
        num, den = self._components()
        if _is_integer_operand(other):
            k = int(self.storage.narrow(int(other)))
            return k * den < num
        if type(other) is not type(self):
            return NotImplemented
        return _less(*other._components(), num, den)

    def __le__(self, other: Any) -> bool:
        less = self.__lt__(other)
        if less is NotImplemented:
            return NotImplemented
        return less or self == other

    def __ge__(self, other: Any) -> bool:
        greater = self.__gt__(other)
        if greater is NotImplemented:
            return NotImplemented
        return greater or self == other

    # ------------------------------------------------------------------
    # NumPy interoperability
    _UFUNC_DISPATCH = {
        np.add: operator.add,
        np.subtract: operator.sub,
        np.multiply: operator.mul,
        np.divide: operator.truediv,
        np.true_divide: operator.truediv,
        np.negative: operator.neg,
        np.positive: operator.pos,
        np.absolute: abs,
        np.equal: operator.eq,
        np.not_equal: operator.ne,
        np.less: operator.lt,
        np.less_equal: operator.le,
        np.greater: operator.gt,
        np.greater_equal: operator.ge,
    }
    _UFUNC_COMPARISONS = frozenset(
        (np.equal, np.not_equal, np.less, np.less_equal, np.greater, np.greater_equal)
    )

    def __array_ufunc__(self, ufunc, method, *inputs, **kwargs):
        if method != "__call__":
            return NotImplemented
        if kwargs.get("out") is not None:
            raise NotImplementedError("`out` argument is not supported for Rational ufuncs")
        op = self._UFUNC_DISPATCH.get(ufunc)
        if op is None:
            return NotImplemented

        # Comparison operators take integers directly.
        if ufunc in self._UFUNC_COMPARISONS:
            def coerce(value: Any) -> Any:
                return int(value) if _is_integer_operand(value) else self._coerce_scalar(value)
        else:
            coerce = self._coerce_scalar

        coerced = []
        has_array = False
        for value in inputs:
            if isinstance(value, np.ndarray):
                vectorised = np.vectorize(coerce, otypes=[object])
                coerced.append(vectorised(value))
                has_array = True
            else:
                coerced.append(coerce(value))
        if has_array:
            vectorised = np.vectorize(lambda *args: op(*args), otypes=[object])
            return vectorised(*coerced)
        return op(*coerced)


@functools.lru_cache(maxsize=None)
def _specialise(dtype: np.dtype, policy: Any) -> type:
    """Return the ``Rational`` subclass bound to *dtype* and *policy*."""
    if not is_policy(policy):
        raise TypeError(f"{policy!r} is not a zero-denominator policy")
    storage = IntegerStorage(dtype)
    if storage.dtype == DEFAULT_DTYPE and policy is DEFAULT_POLICY:
        return Rational

    name = f"Rational[{storage.dtype.name}, {policy.__name__}]"
    LOG.debug("creating %s", name)
    return type(
        name,
        (Rational,),
        {
            "__slots__": (),
            "__module__": Rational.__module__,
            "__qualname__": name,
            "storage": storage,
            "policy": policy,
            "_sentinels": bool(getattr(policy, "allows_zero_denominator", False)),
            "_on_zero": staticmethod(policy.division_by_zero),
        },
    )


__all__ = ["DEFAULT_DTYPE", "IntegerLike", "Rational"]
