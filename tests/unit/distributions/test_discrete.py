from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from math import inf, log, nan

import numpy as np
import pytest

from pysatl_empirical.config import EstimationConfig, configure
from pysatl_empirical.distributions.classification import Classification, classify
from pysatl_empirical.distributions.discrete import DiscreteEmpiricalModel, FrequencyTable
from pysatl_empirical.distributions.sampling import EmpiricalSample
from pysatl_empirical.errors import InvalidProbabilityError, NonFiniteValueError
from pysatl_empirical.types import CharacteristicName, Kind

WORKED_EXAMPLE = [1, 2, 2, 4]
DENOMINATOR = 5.5
PROBS = {1.0: 1.5 / DENOMINATOR, 2.0: 2.5 / DENOMINATOR, 4.0: 1.5 / DENOMINATOR}


def make_discrete(data, **kwargs) -> DiscreteEmpiricalModel:
    sample = EmpiricalSample(data)
    return DiscreteEmpiricalModel(sample, classify(sample), **kwargs)


class TestFrequencyTable:
    table = FrequencyTable.from_sample(EmpiricalSample(WORKED_EXAMPLE), 0.5)

    def test_counts_and_denominator(self) -> None:
        np.testing.assert_array_equal(self.table.values, [1.0, 2.0, 4.0])
        np.testing.assert_array_equal(self.table.counts, [1, 2, 1])
        assert self.table.n == 4
        assert self.table.unique_count == 3
        assert self.table.denominator == DENOMINATOR

    def test_probabilities_sum_to_one(self) -> None:
        np.testing.assert_allclose(self.table.probabilities, list(PROBS.values()))
        assert self.table.probabilities.sum() == pytest.approx(1.0)

    @pytest.mark.parametrize(
        "x, expected",
        [(2.0, 2.5 / DENOMINATOR), (3.0, 0.5 / DENOMINATOR), (100.0, 0.5 / DENOMINATOR)],
        ids=["observed", "unseen_inner", "unseen_outer"],
    )
    def test_probability_of(self, x: float, expected: float) -> None:
        assert self.table.probability_of(x) == pytest.approx(expected)


class TestDiscreteModelWorkedExample:
    model = make_discrete(WORKED_EXAMPLE)

    def test_kind_and_lattice(self) -> None:
        assert self.model.kind is Kind.DISCRETE
        assert self.model.is_discrete
        assert self.model.lattice_step == 1.0
        assert self.model.lattice_origin == 1.0
        assert self.model.alpha == 0.5

    @pytest.mark.parametrize(
        "x, expected",
        [(1.0, PROBS[1.0]), (2.0, PROBS[2.0]), (3.0, 0.0), (4.0, PROBS[4.0]), (0.0, 0.0), (2.5, 0.0)],
        ids=["first", "mode", "unobserved_node", "last", "below", "off_lattice"],
    )
    def test_pdf(self, x: float, expected: float) -> None:
        assert self.model.pdf(x) == pytest.approx(expected)
        assert self.model.pmf(x) == pytest.approx(expected)

    def test_pmf_sums_to_one_over_support(self) -> None:
        assert sum(self.model.pmf(x) for x in self.model.support) == pytest.approx(1.0)

    @pytest.mark.parametrize(
        "x, expected",
        [
            (-inf, 0.0),
            (0.0, 0.0),
            (1.0, 1.5 / DENOMINATOR),
            (2.0, 4.0 / DENOMINATOR),
            (3.0, 4.0 / DENOMINATOR),
            (4.0, 1.0),
            (inf, 1.0),
        ],
        ids=["-inf", "below", "first", "mode", "gap", "last", "+inf"],
    )
    def test_cdf_and_sf(self, x: float, expected: float) -> None:
        assert self.model.cdf(x) == pytest.approx(expected)
        assert self.model.sf(x) == pytest.approx(1.0 - expected)

    @pytest.mark.parametrize(
        "p, expected",
        [(0.0, 1.0), (1.5 / DENOMINATOR, 1.0), (0.5, 2.0), (0.75, 4.0), (1.0, 4.0)],
        ids=["zero", "first_mass", "median", "upper", "one"],
    )
    def test_quantile(self, p: float, expected: float) -> None:
        assert self.model.quantile(p) == expected
        assert self.model.ppf(p) == expected

    @pytest.mark.parametrize(
        "q, expected",
        [(0.0, 4.0), (0.2, 2.0), (0.5, 1.0), (1.0, 1.0)],
        ids=["zero_is_max", "upper_tail", "middle", "one_is_min"],
    )
    def test_quantile_complement(self, q: float, expected: float) -> None:
        assert self.model.quantile_complement(q) == expected
        assert self.model.isf(q) == expected

    def test_array_arguments(self) -> None:
        result = self.model.ppf(np.array([0.0, 0.5, 1.0]))
        assert isinstance(result, np.ndarray)
        np.testing.assert_array_equal(result, [1.0, 2.0, 4.0])
        np.testing.assert_allclose(self.model.cdf([1.0, 4.0]), [1.5 / DENOMINATOR, 1.0])

    def test_hazard_and_chf_sentinels(self) -> None:
        assert self.model.hazard(2.0) == pytest.approx(5.0 / 3.0)
        assert self.model.hazard(3.0) == 0.0
        assert self.model.hazard(4.0) == inf
        assert self.model.chf(1.0) == pytest.approx(-log(4.0 / DENOMINATOR))
        assert self.model.chf(4.0) == inf

    def test_log_pdf(self) -> None:
        assert self.model.log_pdf(2.0) == pytest.approx(log(PROBS[2.0]))
        assert self.model.log_pdf(3.0) == -inf

    def test_moments(self) -> None:
        values = np.array(list(PROBS))
        probs = np.array(list(PROBS.values()))
        mean = float(np.sum(values * probs))
        variance = float(np.sum((values - mean) ** 2 * probs))
        third = float(np.sum((values - mean) ** 3 * probs))
        fourth = float(np.sum((values - mean) ** 4 * probs))

        assert self.model.mean == pytest.approx(12.5 / DENOMINATOR)
        assert self.model.variance == pytest.approx(variance)
        assert self.model.skewness == pytest.approx(third / variance**1.5)
        assert self.model.kurtosis == pytest.approx(fourth / variance**2)
        assert self.model.kurtosis_excess == pytest.approx(fourth / variance**2 - 3.0)

    def test_mode_and_median(self) -> None:
        assert self.model.mode == 2.0
        assert self.model.median == 2.0

    def test_entropy_is_miller_madow(self) -> None:
        probs = np.array(list(PROBS.values()))
        expected = -float(np.sum(probs * np.log(probs))) + (3 - 1) / (2 * 4)
        assert self.model.entropy == pytest.approx(expected)

    def test_support(self) -> None:
        assert list(self.model.support) == [1.0, 2.0, 4.0]
        assert self.model.support_bounds.left == 1.0
        assert self.model.support_bounds.right == 4.0

    def test_characteristic_lookup(self) -> None:
        computations = self.model.analytical_computations
        assert CharacteristicName.PMF in computations
        assert self.model.calculate_characteristic("pmf", 2.0) == pytest.approx(PROBS[2.0])
        assert self.model.query_method("cdf")(4.0) == pytest.approx(1.0)
        with pytest.raises(RuntimeError, match="not provided"):
            self.model.query_method("bogus")


class TestDiscreteModelValidation:
    model = make_discrete(WORKED_EXAMPLE)

    @pytest.mark.parametrize("p", [-0.1, 1.1, nan], ids=["negative", "above_one", "nan"])
    def test_invalid_probability(self, p: float) -> None:
        with pytest.raises(InvalidProbabilityError):
            self.model.ppf(p)
        with pytest.raises(InvalidProbabilityError):
            self.model.isf(p)

    def test_nan_point(self) -> None:
        with pytest.raises(NonFiniteValueError):
            self.model.pdf(nan)
        with pytest.raises(NonFiniteValueError):
            self.model.cdf([1.0, nan])

    def test_requires_discrete_classification(self) -> None:
        with pytest.raises(ValueError, match="discrete classification"):
            DiscreteEmpiricalModel(EmpiricalSample([1.0, 2.0]), Classification.continuous())

    def test_alpha_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="alpha"):
            make_discrete(WORKED_EXAMPLE, alpha=0.0)


class TestDiscreteModelBehaviour:
    def test_custom_alpha(self) -> None:
        model = make_discrete(WORKED_EXAMPLE, alpha=1.0)
        assert model.pdf(2.0) == pytest.approx(3.0 / 7.0)

    def test_probability_tolerance_from_config(self) -> None:
        default = make_discrete(WORKED_EXAMPLE)
        assert default.ppf(0.3) == 2.0
        assert default.isf(0.28) == 1.0

        loose = make_discrete(WORKED_EXAMPLE, config=EstimationConfig(probability_tolerance=0.1))
        assert loose.ppf(0.3) == 1.0
        assert loose.isf(0.28) == 2.0

    def test_configured_probability_tolerance(self) -> None:
        configure(probability_tolerance=0.1)
        assert make_discrete(WORKED_EXAMPLE).ppf(0.3) == 1.0

    def test_order_independent(self) -> None:
        a = make_discrete([4, 2, 1, 2])
        b = make_discrete(WORKED_EXAMPLE)
        grid = np.linspace(0.0, 5.0, 11)
        np.testing.assert_array_equal(a.cdf(grid), b.cdf(grid))
        assert a.entropy == b.entropy

    def test_single_value(self) -> None:
        model = make_discrete([5, 5, 5])
        assert model.pdf(5.0) == 1.0
        assert model.cdf(4.9) == 0.0
        assert model.cdf(5.0) == 1.0
        assert model.ppf(0.3) == 5.0
        assert model.variance == 0.0
        assert model.skewness is None
        assert model.kurtosis is None
        assert model.kurtosis_excess is None
        assert model.entropy == pytest.approx(0.0)

    def test_refit_on_same_lattice(self) -> None:
        model = make_discrete(WORKED_EXAMPLE)
        other = model.refit([1.0, 1.0, 2.0])
        assert isinstance(other, DiscreteEmpiricalModel)
        assert other.classification == model.classification
        assert other.pdf(1.0) == pytest.approx(2.5 / 4.0)

    def test_refit_rejects_off_lattice_values(self) -> None:
        with pytest.raises(ValueError, match="lattice"):
            make_discrete(WORKED_EXAMPLE).refit([1.5, 2.0])

    def test_draw_uses_observed_values(self) -> None:
        drawn = make_discrete(WORKED_EXAMPLE).draw(200, np.random.default_rng(1))
        assert drawn.shape == (200,)
        assert set(np.unique(drawn)) <= {1.0, 2.0, 4.0}
