"""
Numerical Integration
=====================

Quadrature over one-dimensional intervals with explicit convergence
diagnostics.

- :func:`integrate` — evaluate an integral and report whether it converged.
- :func:`integrate_or_raise` — same, but raise
  :class:`~pysatl_empirical.errors.NumericDivergenceError` on failure.

Notes
-----
``rule="quad"`` wraps :func:`scipy.integrate.quad` (adaptive QUADPACK) and
accepts infinite endpoints. ``rule="simpson"`` evaluates the integrand on a
uniform grid with :func:`scipy.integrate.simpson` and compares the result with
the half-resolution estimate; it requires a finite interval.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import logging
from dataclasses import dataclass, field
from math import isfinite
from typing import TYPE_CHECKING, Any

import numpy as np
from scipy import integrate as _sp_integrate

from pysatl_empirical.config import get_config
from pysatl_empirical.errors import NumericDivergenceError
from pysatl_empirical.types import IntegrationRule, Interval1D

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pysatl_empirical.types import ScalarFunc

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IntegrationResult:
    """
    Value of an integral together with convergence diagnostics.

    Parameters
    ----------
    value : float
        Integral estimate.
    converged : bool
        Whether the requested accuracy was reached.
    abserr : float
        Estimate of the absolute error.
    diagnostics : Mapping[str, Any]
        Rule-specific details (number of evaluations, solver message).
    """

    value: float
    converged: bool
    abserr: float
    diagnostics: Mapping[str, Any] = field(default_factory=dict)


def _as_bounds(interval: Interval1D | tuple[float, float]) -> tuple[float, float]:
    if isinstance(interval, Interval1D):
        a, b = interval.left, interval.right
    else:
        a, b = interval
    a, b = float(a), float(b)
    if not a <= b:
        raise ValueError(f"Integration interval is empty: [{a}, {b}]")
    return a, b


def _quad(f: ScalarFunc, a: float, b: float, limit: int, epsabs: float, epsrel: float) -> IntegrationResult:
    out = _sp_integrate.quad(
        f, a, b, full_output=1, limit=limit, epsabs=epsabs, epsrel=epsrel
    )
    value, abserr, info = float(out[0]), float(out[1]), out[2]
    message = out[3] if len(out) > 3 else ""

    # QUADPACK may flag roundoff while the error estimate is already tiny.
    converged = not message or abserr <= max(epsabs, epsrel * abs(value))
    return IntegrationResult(
        value=value,
        converged=converged,
        abserr=abserr,
        diagnostics={"rule": IntegrationRule.QUAD, "neval": int(info["neval"]), "message": message},
    )


def _simpson(f: ScalarFunc, a: float, b: float, limit: int, epsabs: float, epsrel: float) -> IntegrationResult:
    if not (isfinite(a) and isfinite(b)):
        raise ValueError("Simpson rule requires a finite interval.")

    size = limit if limit % 2 == 1 else limit + 1
    grid = np.linspace(a, b, size)
    values = np.array([f(float(x)) for x in grid], dtype=float)

    full = float(_sp_integrate.simpson(values, x=grid))
    half = float(_sp_integrate.simpson(values[::2], x=grid[::2]))
    # Richardson estimate for a fourth-order rule.
    abserr = abs(full - half) / 15.0
    return IntegrationResult(
        value=full,
        converged=abserr <= max(epsabs, epsrel * abs(full)),
        abserr=abserr,
        diagnostics={"rule": IntegrationRule.SIMPSON, "neval": size},
    )


def integrate(
    f: ScalarFunc,
    interval: Interval1D | tuple[float, float],
    *,
    rule: IntegrationRule | str | None = None,
    limit: int | None = None,
    epsabs: float = 1.49e-8,
    epsrel: float = 1.49e-8,
) -> IntegrationResult:
    """
    Integrate a scalar function over an interval.

    Parameters
    ----------
    f : Callable[[float], float]
        Integrand.
    interval : Interval1D or tuple[float, float]
        Integration bounds. Endpoint closure is irrelevant.
    rule : IntegrationRule or str, optional
        ``"quad"`` or ``"simpson"``; defaults to the configured rule.
    limit : int, optional
        Subinterval limit for ``quad`` or grid size for ``simpson``; defaults
        to the configured limit.
    epsabs, epsrel : float
        Requested absolute and relative accuracy.

    Returns
    -------
    IntegrationResult
        Integral value and diagnostics. Failure to converge is reported, not
        raised.
    """
    config = get_config()
    rule = IntegrationRule(rule or config.integration_rule)
    limit = int(limit or config.integration_limit)
    a, b = _as_bounds(interval)

    if a == b:
        return IntegrationResult(value=0.0, converged=True, abserr=0.0, diagnostics={"rule": rule})

    if rule is IntegrationRule.QUAD:
        result = _quad(f, a, b, limit, epsabs, epsrel)
    else:
        result = _simpson(f, a, b, limit, epsabs, epsrel)

    logger.debug(
        "Integrated over [%g, %g] with %s: value=%g abserr=%g converged=%s",
        a,
        b,
        rule,
        result.value,
        result.abserr,
        result.converged,
    )
    return result


def integrate_or_raise(
    f: ScalarFunc,
    interval: Interval1D | tuple[float, float],
    **options: Any,
) -> float:
    """
    Integrate and return the value, raising when the integral did not converge.

    Raises
    ------
    NumericDivergenceError
        If the quadrature did not reach the requested accuracy.
    """
    result = integrate(f, interval, **options)
    if not result.converged:
        raise NumericDivergenceError(
            f"Integration did not converge (value={result.value:g}, abserr={result.abserr:g})",
            diagnostics={"abserr": result.abserr, **result.diagnostics},
        )
    return result.value


__all__ = [
    "IntegrationResult",
    "integrate",
    "integrate_or_raise",
]
