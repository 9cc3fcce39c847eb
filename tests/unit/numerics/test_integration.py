from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from math import exp, inf, lgamma, pi, sqrt

import pytest

from pysatl_empirical.config import configure
from pysatl_empirical.errors import NumericDivergenceError
from pysatl_empirical.numerics import digamma, integrate, integrate_or_raise, log_gamma
from pysatl_empirical.types import IntegrationRule, Interval1D


def _step(x: float) -> float:
    return 1.0 if x > 0.35 else 0.0


class TestIntegrate:
    @pytest.mark.parametrize("rule", ["quad", "simpson"], ids=["quad", "simpson"])
    def test_polynomial(self, rule: str) -> None:
        result = integrate(lambda x: x * x, (0.0, 1.0), rule=rule)
        assert result.converged
        assert result.value == pytest.approx(1.0 / 3.0, abs=1e-10)
        assert result.diagnostics["rule"] == IntegrationRule(rule)

    def test_accepts_interval(self) -> None:
        result = integrate(lambda x: 1.0, Interval1D(-1.0, 2.0))
        assert result.value == pytest.approx(3.0)

    def test_infinite_bounds_with_quad(self) -> None:
        result = integrate(lambda x: exp(-0.5 * x * x), (-inf, inf), rule="quad")
        assert result.converged
        assert result.value == pytest.approx(sqrt(2.0 * pi))

    def test_simpson_rejects_infinite_bounds(self) -> None:
        with pytest.raises(ValueError, match="finite"):
            integrate(lambda x: 1.0, (0.0, inf), rule="simpson")

    def test_degenerate_interval(self) -> None:
        result = integrate(lambda x: 1.0, (2.0, 2.0))
        assert result.value == 0.0
        assert result.converged

    def test_empty_interval_rejected(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            integrate(lambda x: 1.0, (1.0, 0.0))

    def test_configured_rule_is_default(self) -> None:
        configure(integration_rule="simpson", integration_limit=11)
        result = integrate(lambda x: x, (0.0, 1.0))
        assert result.diagnostics["rule"] is IntegrationRule.SIMPSON
        assert result.diagnostics["neval"] == 11

    def test_non_convergence_is_reported(self) -> None:
        result = integrate(_step, (0.0, 1.0), rule="simpson", limit=11)
        assert not result.converged
        assert result.abserr > 0.0


class TestIntegrateOrRaise:
    def test_returns_value(self) -> None:
        assert integrate_or_raise(lambda x: 2.0 * x, (0.0, 1.0)) == pytest.approx(1.0)

    def test_raises_with_diagnostics(self) -> None:
        with pytest.raises(NumericDivergenceError) as excinfo:
            integrate_or_raise(_step, (0.0, 1.0), rule="simpson", limit=11)
        assert excinfo.value.diagnostics["rule"] is IntegrationRule.SIMPSON
        assert excinfo.value.diagnostics["abserr"] > 0.0


class TestSpecialFunctions:
    @pytest.mark.parametrize(
        "x, expected",
        [(1.0, -0.5772156649015329), (2.0, 1.0 - 0.5772156649015329), (0.5, -1.9635100260214235)],
        ids=["one", "two", "half"],
    )
    def test_digamma(self, x: float, expected: float) -> None:
        assert digamma(x) == pytest.approx(expected)

    @pytest.mark.parametrize("x", [0.5, 1.0, 4.0, 10.5])
    def test_log_gamma(self, x: float) -> None:
        assert log_gamma(x) == pytest.approx(lgamma(x))
