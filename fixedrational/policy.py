"""Zero-denominator policies for :class:`~fixedrational.rational.Rational`."""
from __future__ import annotations

import logging
from typing import NoReturn

LOG = logging.getLogger(__name__)


class DivisionByZero(ZeroDivisionError):
    """A denominator would become zero and the active policy forbids it."""


class Policy:
    """Strategy deciding what a zero denominator means.

    A policy is never instantiated. ``Rational[dtype, policy]`` binds the
    class-level :meth:`division_by_zero` hook and the
    ``allows_zero_denominator`` flag when the specialisation is created.
    Custom policies override the hook, which must not return.
    """

    allows_zero_denominator = False

    @staticmethod
    def division_by_zero() -> NoReturn:
        raise NotImplementedError("policies must implement division_by_zero()")


class Permissive(Policy):
    """Represent zero-denominator results as infinity and NaN sentinels."""

    allows_zero_denominator = True

    @staticmethod
    def division_by_zero() -> NoReturn:  # pragma: no cover - never invoked
        raise AssertionError("Permissive never rejects a zero denominator")


class AbortOnZero(Policy):
    """Raise :class:`DivisionByZero` as soon as a denominator would be zero."""

    @staticmethod
    def division_by_zero() -> NoReturn:
        LOG.debug("zero denominator rejected by AbortOnZero")
        raise DivisionByZero("division by zero")


DEFAULT_POLICY = Permissive


def is_policy(candidate: object) -> bool:
    """Return ``True`` when *candidate* can act as a zero-denominator policy."""
    return isinstance(candidate, type) and callable(
        getattr(candidate, "division_by_zero", None)
    )


__all__ = [
    "AbortOnZero",
    "DEFAULT_POLICY",
    "DivisionByZero",
    "Permissive",
    "Policy",
    "is_policy",
]
