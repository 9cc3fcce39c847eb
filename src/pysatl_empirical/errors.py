"""
Error Types
===========

Typed failures raised by empirical models and estimators.

Every error derives from :class:`EmpiricalError` and from the builtin exception
that describes the same class of failure, so callers that catch
``ValueError`` or ``RuntimeError`` keep working.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from typing import Any


class EmpiricalError(Exception):
    """Base class for all pysatl-empirical errors."""


class EmptySampleError(EmpiricalError, ValueError):
    """Raised when a sample without observations is supplied."""

    def __init__(self, message: str = "Empirical distribution requires at least one observation."):
        super().__init__(message)


class NonFiniteValueError(EmpiricalError, ValueError):
    """
    Raised when an observation or evaluation point is NaN or infinite.

    Parameters
    ----------
    name : str
        Name of the offending argument.
    value : float
        The offending value.
    """

    def __init__(self, name: str, value: float):
        self.name = name
        self.value = value
        super().__init__(f"'{name}' must be finite, got {value!r}")


class InvalidProbabilityError(EmpiricalError, ValueError):
    """
    Raised when a probability argument lies outside its admissible range.

    Parameters
    ----------
    name : str
        Name of the argument (``p``, ``q``, ``confidence_level``).
    value : float
        The offending value.
    admissible : str, default "[0, 1]"
        Admissible range as shown in the message.
    """

    def __init__(self, name: str, value: float, admissible: str = "[0, 1]"):
        self.name = name
        self.value = value
        super().__init__(f"'{name}' must lie in {admissible}, got {value!r}")


class InsufficientSamplesError(EmpiricalError, ValueError):
    """
    Raised when an estimator needs more observations than available.

    Parameters
    ----------
    required : int
        Minimal number of observations.
    actual : int
        Number of observations supplied.
    reason : str
        What needs the observations.
    """

    def __init__(self, required: int, actual: int, reason: str):
        self.required = required
        self.actual = actual
        super().__init__(f"{reason} requires at least {required} observations, got {actual}")


class MismatchedSupportError(EmpiricalError, TypeError):
    """Raised when two models with incompatible supports are combined."""


class NumericDivergenceError(EmpiricalError, RuntimeError):
    """
    Raised when a numerical procedure fails to converge.

    Parameters
    ----------
    message : str
        Human-readable description.
    diagnostics : Mapping[str, Any], optional
        Solver diagnostics (error estimate, number of evaluations, message).
    """

    def __init__(self, message: str, diagnostics: Mapping[str, Any] | None = None):
        self.diagnostics = dict(diagnostics or {})
        super().__init__(message)


class UnknownEstimatorError(EmpiricalError, LookupError):
    """
    Raised when an estimator name or option cannot be resolved.

    Parameters
    ----------
    name : str
        Requested name.
    known : Iterable[str]
        Names that would have been accepted.
    """

    def __init__(self, name: str, known: Iterable[str]):
        self.name = name
        self.known = tuple(sorted(known))
        super().__init__(f"Unknown estimator {name!r}; expected one of {', '.join(self.known)}")


__all__ = [
    "EmpiricalError",
    "EmptySampleError",
    "NonFiniteValueError",
    "InvalidProbabilityError",
    "InsufficientSamplesError",
    "MismatchedSupportError",
    "NumericDivergenceError",
    "UnknownEstimatorError",
]
