from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from math import inf

import numpy as np
import pytest

from pysatl_empirical.distributions.support import (
    ContinuousSupport,
    DiscreteSupport,
    LatticeDiscreteSupport,
    Support,
)
from pysatl_empirical.types import Interval1D


class TestContinuousSupport:
    support_example = ContinuousSupport(left=0.0, right=1.0)

    @pytest.mark.parametrize(
        "point, expected_result",
        [
            (0, True),
            (1, True),
            (0.5, True),
            (-0.1, False),
            (inf, False),
            (-inf, False),
        ],
        ids=["left_bound", "right_bound", "inside_interval", "outside_interval", "+inf", "-inf"],
    )
    def test_contains_scalar(self, point, expected_result) -> None:
        assert (point in self.support_example) is expected_result
        assert self.support_example.contains(point) is expected_result

    def test_contains_array(self) -> None:
        result = self.support_example.contains(np.array([-1.0, 0.0, 0.5, 2.0]))
        assert isinstance(result, np.ndarray)
        assert result.tolist() == [False, True, True, False]

    def test_is_support(self) -> None:
        assert isinstance(self.support_example, Support)
        assert self.support_example.width == 1.0

    def test_degenerate_interval(self) -> None:
        point = Interval1D(2.0, 2.0)
        assert 2.0 in point
        assert point.width == 0.0

    @pytest.mark.parametrize(
        "left, right", [(1.0, 0.0), (float("nan"), 1.0)], ids=["reversed", "nan"]
    )
    def test_invalid_interval(self, left: float, right: float) -> None:
        with pytest.raises(ValueError, match="Invalid interval"):
            Interval1D(left, right)


class TestLatticeDiscreteSupport:
    support_example = LatticeDiscreteSupport([3.0, 0.0, 1.0, 1.0], step=1.0, origin=0.0)

    def test_points_are_sorted_and_unique(self) -> None:
        np.testing.assert_array_equal(self.support_example.points, [0.0, 1.0, 3.0])
        assert len(self.support_example) == 3
        assert list(self.support_example) == [0.0, 1.0, 3.0]
        assert isinstance(self.support_example, DiscreteSupport)

    @pytest.mark.parametrize(
        "point, expected_result",
        [(0.0, True), (1.0, True), (2.0, False), (3.0, True), (0.5, False), (-1.0, False)],
        ids=["first", "inner", "unobserved_node", "last", "off_lattice", "below"],
    )
    def test_contains(self, point: float, expected_result: bool) -> None:
        assert (point in self.support_example) is expected_result

    def test_tolerance_matches_nearby_points(self) -> None:
        support = LatticeDiscreteSupport([0.0, 0.5, 1.0], step=0.5, origin=0.0, tolerance=1e-9)
        assert 0.5 + 1e-12 in support
        assert 0.5 + 1e-6 not in support
        np.testing.assert_array_equal(support.index_of(np.array([0.0, 0.25, 1.0])), [0, -1, 2])

    @pytest.mark.parametrize(
        "x, expected",
        [(-1.0, 0), (0.0, 1), (2.0, 2), (3.0, 3), (10.0, 3)],
        ids=["below", "first", "gap", "last", "above"],
    )
    def test_count_leq(self, x: float, expected: int) -> None:
        assert int(self.support_example.count_leq(x)) == expected

    def test_bounds(self) -> None:
        assert self.support_example.bounds == Interval1D(0.0, 3.0)
        assert LatticeDiscreteSupport([2.0], step=1.0, origin=0.0).bounds == Interval1D(2.0, 2.0)

    @pytest.mark.parametrize(
        "kwargs",
        [{"points": [], "step": 1.0, "origin": 0.0}, {"points": [1.0], "step": 0.0, "origin": 0.0}],
        ids=["empty", "zero_step"],
    )
    def test_invalid_construction(self, kwargs) -> None:
        with pytest.raises(ValueError):
            LatticeDiscreteSupport(**kwargs)
