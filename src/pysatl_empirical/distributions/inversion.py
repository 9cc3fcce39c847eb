"""
Monotone Inversion
==================

Root finding for quantiles of continuous empirical models: ``ppf`` inverts the
CDF and ``isf`` inverts the survival function over a finite bracket (the
effective support of the density estimate).
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING

from scipy import optimize as _sp_optimize

from pysatl_empirical.errors import NumericDivergenceError

if TYPE_CHECKING:
    from pysatl_empirical.types import Interval1D, ScalarFunc


def invert_monotone(
    func: ScalarFunc,
    target: float,
    bracket: Interval1D,
    *,
    increasing: bool = True,
    x_tol: float = 1e-12,
    max_iter: int = 200,
) -> float:
    """
    Solve ``func(x) = target`` for a monotone ``func`` on a finite bracket.

    Parameters
    ----------
    func : Callable[[float], float]
        Monotone scalar function (CDF or survival function).
    target : float
        Level to reach.
    bracket : Interval1D
        Finite search interval.
    increasing : bool, default True
        Direction of monotonicity.
    x_tol : float, default 1e-12
        Relative tolerance in ``x`` passed to :func:`scipy.optimize.brentq`.
    max_iter : int, default 200
        Maximum number of solver iterations.

    Returns
    -------
    float
        The root, or the bracket endpoint when ``target`` lies beyond the
        values taken on the bracket.

    Raises
    ------
    NumericDivergenceError
        If the solver does not converge.
    """
    sign = 1.0 if increasing else -1.0
    left, right = bracket.left, bracket.right

    def residual(x: float) -> float:
        return sign * (float(func(x)) - target)

    f_left = residual(left)
    if f_left >= 0.0:
        return left
    f_right = residual(right)
    if f_right <= 0.0:
        return right

    root, info = _sp_optimize.brentq(
        residual, left, right, xtol=x_tol * max(1.0, abs(left), abs(right)), maxiter=max_iter,
        full_output=True, disp=False,
    )
    if not info.converged:
        raise NumericDivergenceError(
            f"Quantile search did not converge for level {target:g}",
            diagnostics={"iterations": info.iterations, "flag": info.flag},
        )
    return float(root)


__all__ = [
    "invert_monotone",
]
