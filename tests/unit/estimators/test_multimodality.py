from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import numpy as np
import pytest

from pysatl_empirical.config import configure
from pysatl_empirical.distributions.classification import classify
from pysatl_empirical.estimators.multimodality import (
    count_local_maxima,
    dip_statistic,
    is_likely_multimodal,
)

EVEN_GRID = np.linspace(-1.0, 1.0, 21)
TWO_CLUSTERS = np.concatenate([np.linspace(0.0, 1.0, 25), np.linspace(10.0, 11.0, 25)])


def _convex_minorant(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """Greatest convex minorant at every ``x``: lowest chord over pairs enclosing the point."""
    result = y.copy()
    for i in range(x.size):
        for j in range(i + 1):
            for k in range(i + 1, x.size):
                chord = y[j] + (y[k] - y[j]) * (x[i] - x[j]) / (x[k] - x[j])
                result[i] = min(result[i], chord)
    return result


class TestDipStatistic:
    def test_evenly_spaced_sample(self) -> None:
        assert dip_statistic(EVEN_GRID) == pytest.approx(1.0 / 42.0)

    def test_single_distinct_value(self) -> None:
        assert dip_statistic([2.0, 2.0, 2.0]) == 0.0

    def test_two_clusters(self) -> None:
        dip = dip_statistic(TWO_CLUSTERS)
        assert 0.2 < dip <= 0.5

    def test_invariant_under_affine_maps(self) -> None:
        assert dip_statistic(3.0 * TWO_CLUSTERS - 7.0) == pytest.approx(dip_statistic(TWO_CLUSTERS))

    def test_large_sample_is_thinned(self, rng) -> None:
        data = rng.uniform(size=2000)
        dip = dip_statistic(data)
        assert 0.0 < dip < 0.05

    def test_matches_pointwise_hulls(self, rng) -> None:
        data = np.round(rng.normal(size=40), 1)
        values, counts = np.unique(data, return_counts=True)
        hi = np.cumsum(counts) / data.size
        lo = hi - counts / data.size
        expected = min(
            max(
                np.max(hi[: m + 1] - _convex_minorant(values[: m + 1], lo[: m + 1])),
                np.max(-_convex_minorant(values[m:], -hi[m:]) - lo[m:]),
            )
            for m in range(values.size)
        )
        assert dip_statistic(data) == pytest.approx(expected / 2.0)

    def test_very_large_samples(self, rng) -> None:
        uniform = rng.uniform(size=50_000)
        assert dip_statistic(uniform) < 0.01
        mixture = np.concatenate([rng.normal(-4.0, 1.0, 25_000), rng.normal(4.0, 1.0, 25_000)])
        assert dip_statistic(mixture) > 0.05


class TestCountLocalMaxima:
    @pytest.mark.parametrize(
        "frequencies, expected",
        [
            ([], 0),
            ([0, 0, 0], 0),
            ([0, 3, 0], 1),
            ([0, 2, 2, 0], 1),
            ([0, 1, 0, 1, 0], 2),
            ([0, 1, 2, 3, 2, 1, 0], 1),
        ],
        ids=["empty", "flat", "single_peak", "plateau", "two_peaks", "triangle"],
    )
    def test_cases(self, frequencies: list[int], expected: int) -> None:
        assert count_local_maxima(frequencies) == expected


class TestIsLikelyMultimodal:
    def test_evenly_spaced_is_unimodal(self) -> None:
        assert not is_likely_multimodal(EVEN_GRID)

    def test_separated_clusters(self) -> None:
        assert is_likely_multimodal(TWO_CLUSTERS)

    def test_small_samples_are_never_flagged(self) -> None:
        assert not is_likely_multimodal([0.0, 10.0, 10.5, 20.0])

    def test_discrete_with_gap(self) -> None:
        assert is_likely_multimodal([0, 0, 0, 1, 4, 4, 4])

    def test_discrete_single_peak(self) -> None:
        assert not is_likely_multimodal([1, 2, 2, 3, 3, 3, 4, 4, 5])

    def test_precomputed_classification(self) -> None:
        data = [0, 0, 0, 1, 4, 4, 4]
        assert is_likely_multimodal(data, classify(data))

    def test_explicit_threshold(self) -> None:
        assert is_likely_multimodal(EVEN_GRID, threshold=0.0)
        assert not is_likely_multimodal(TWO_CLUSTERS, threshold=0.5)

    def test_configured_scale(self) -> None:
        configure(dip_scale=10.0)
        assert not is_likely_multimodal(TWO_CLUSTERS)
