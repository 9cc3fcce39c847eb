from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from math import inf, pi, sqrt

import numpy as np
import pytest
from scipy import integrate as _sp_integrate
from scipy import stats

from pysatl_empirical.distributions import kde as kde_module
from pysatl_empirical.distributions.kde import (
    LIKELIHOOD_MULTIPLIERS,
    GaussianKDE,
    likelihood_bandwidth,
    select_bandwidth,
    silverman_bandwidth,
)
from pysatl_empirical.types import BandwidthRule


class TestGaussianKDE:
    kde = GaussianKDE([-1.0, 1.0], bandwidth=1.0)

    def test_pdf_is_kernel_mixture(self) -> None:
        expected = 0.5 * (np.exp(-0.5) + np.exp(-0.5)) / sqrt(2.0 * pi)
        assert float(self.kde.pdf(0.0)) == pytest.approx(expected)

    def test_logpdf_matches_pdf(self) -> None:
        grid = np.linspace(-4.0, 4.0, 9)
        np.testing.assert_allclose(self.kde.logpdf(grid), np.log(self.kde.pdf(grid)))

    def test_pdf_integrates_to_one(self) -> None:
        value, _ = _sp_integrate.quad(lambda x: float(self.kde.pdf(x)), -inf, inf)
        assert value == pytest.approx(1.0, abs=1e-8)

    def test_cdf_closed_form(self) -> None:
        assert float(self.kde.cdf(0.0)) == pytest.approx(0.5)
        assert float(self.kde.cdf(-inf)) == 0.0
        assert float(self.kde.cdf(inf)) == 1.0
        grid = np.linspace(-5.0, 5.0, 101)
        values = self.kde.cdf(grid)
        assert np.all(np.diff(values) >= 0.0)
        np.testing.assert_allclose(values + self.kde.sf(grid), 1.0)

    def test_array_shapes(self) -> None:
        assert self.kde.pdf(np.zeros((3, 2))).shape == (3, 2)
        assert np.ndim(self.kde.cdf(0.0)) == 0

    def test_leave_one_out(self) -> None:
        loo = self.kde.loo_pdf()
        expected = np.exp(-0.5 * 4.0) / sqrt(2.0 * pi)
        np.testing.assert_allclose(loo, [expected, expected])
        assert self.kde.loo_log_likelihood() == pytest.approx(2.0 * np.log(expected))

    def test_leave_one_out_requires_two_points(self) -> None:
        with pytest.raises(ValueError, match="two observations"):
            GaussianKDE([0.0], 1.0).loo_pdf()

    def test_effective_support(self) -> None:
        support = self.kde.effective_support(8.0)
        assert (support.left, support.right) == (-9.0, 9.0)

    def test_resample(self) -> None:
        drawn = self.kde.resample(1000, np.random.default_rng(3))
        assert drawn.shape == (1000,)
        assert abs(float(drawn.mean())) < 0.2

    def test_blockwise_evaluation_matches_direct_sums(self, monkeypatch) -> None:
        data = np.array([-2.0, -0.5, 0.0, 0.3, 1.1, 2.5, 4.0])
        kde = GaussianKDE(data, bandwidth=0.8)
        grid = np.linspace(-3.0, 5.0, 11).reshape(11, 1)
        z = (grid - data) / 0.8
        pdf = np.exp(-0.5 * z * z).sum(axis=-1) / (7 * 0.8 * sqrt(2.0 * pi))
        cdf = stats.norm.cdf(z).mean(axis=-1)
        pairwise = np.exp(-0.5 * ((data[:, None] - data) / 0.8) ** 2)
        loo = (pairwise.sum(axis=1) - 1.0) / (6 * 0.8 * sqrt(2.0 * pi))

        monkeypatch.setattr(kde_module, "BLOCK_ELEMENTS", 10)
        np.testing.assert_allclose(kde.pdf(grid.ravel()), pdf)
        np.testing.assert_allclose(kde.logpdf(grid.ravel()), np.log(pdf))
        np.testing.assert_allclose(kde.cdf(grid.ravel()), cdf)
        np.testing.assert_allclose(kde.sf(grid.ravel()), 1.0 - cdf)
        np.testing.assert_allclose(kde.loo_pdf(), loo)
        assert kde.pdf(grid).shape == (11, 1)
        assert np.ndim(kde.cdf(0.3)) == 0

    def test_large_sample_leave_one_out(self, rng) -> None:
        data = rng.normal(size=10_000)
        loo = GaussianKDE(data, silverman_bandwidth(data)).loo_pdf()
        assert loo.shape == (10_000,)
        assert np.all(loo > 0.0)
        assert float(np.median(loo)) == pytest.approx(0.3, abs=0.1)

    @pytest.mark.parametrize("bandwidth", [0.0, -1.0, inf], ids=["zero", "negative", "inf"])
    def test_invalid_bandwidth(self, bandwidth: float) -> None:
        with pytest.raises(ValueError):
            GaussianKDE([0.0, 1.0], bandwidth)


class TestBandwidthSelection:
    def test_silverman(self, normal_samples) -> None:
        expected = 1.06 * np.std(normal_samples, ddof=1) * normal_samples.size ** (-0.2)
        assert silverman_bandwidth(normal_samples) == pytest.approx(expected)

    @pytest.mark.parametrize("data", [[1.0], [2.0, 2.0, 2.0]], ids=["single", "constant"])
    def test_silverman_degenerate(self, data) -> None:
        assert silverman_bandwidth(data) == 1.0

    def test_likelihood_is_multiple_of_silverman(self, normal_samples) -> None:
        ratio = likelihood_bandwidth(normal_samples) / silverman_bandwidth(normal_samples)
        assert min(abs(ratio - m) for m in LIKELIHOOD_MULTIPLIERS) < 1e-12

    @pytest.mark.parametrize(
        "rule",
        ["silverman", BandwidthRule.SILVERMAN],
        ids=["string", "enum"],
    )
    def test_select_rule(self, normal_samples, rule) -> None:
        assert select_bandwidth(normal_samples, rule) == silverman_bandwidth(normal_samples)

    def test_select_explicit_value(self, normal_samples) -> None:
        assert select_bandwidth(normal_samples, 0.3) == 0.3

    @pytest.mark.parametrize("rule", [0.0, -0.5, "scott"], ids=["zero", "negative", "unknown"])
    def test_select_invalid(self, normal_samples, rule) -> None:
        with pytest.raises(ValueError):
            select_bandwidth(normal_samples, rule)
