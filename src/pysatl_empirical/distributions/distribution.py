"""
Distribution Interfaces and the Empirical Model Base
====================================================

This module defines the public :class:`Distribution` protocol and the abstract
base shared by discrete and continuous empirical models:

- :class:`Distribution` protocol – interface used by the estimators.
- :class:`EmpiricalModel` – base class implementing the characteristics that
  follow from ``pdf`` and ``cdf`` (``sf``, ``hazard``, ``chf``, ``median``)
  together with argument validation and characteristic lookup.

Notes
-----
- Characteristics accept a scalar or an array; scalar input returns a Python
  ``float``.
- ``hazard`` and ``chf`` return documented sentinels where ``sf(x) = 0``:
  ``hazard`` is ``0`` where ``pdf(x) = 0`` and ``+inf`` otherwise, ``chf`` is
  ``+inf``.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable

import numpy as np

from pysatl_empirical.config import get_config
from pysatl_empirical.distributions.computation import AnalyticalComputation
from pysatl_empirical.errors import InvalidProbabilityError, NonFiniteValueError
from pysatl_empirical.types import CharacteristicName

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    import numpy.typing as npt

    from pysatl_empirical.config import EstimationConfig
    from pysatl_empirical.distributions.classification import Classification
    from pysatl_empirical.distributions.sampling import EmpiricalSample
    from pysatl_empirical.distributions.support import Support
    from pysatl_empirical.types import FloatArray, GenericCharacteristicName, Interval1D, Kind

    type Points = float | npt.ArrayLike


@runtime_checkable
class Distribution(Protocol):
    """Public distribution interface used by the estimators."""

    @property
    def kind(self) -> Kind: ...

    @property
    def analytical_computations(
        self,
    ) -> Mapping[GenericCharacteristicName, AnalyticalComputation[Any, Any]]: ...

    @property
    def support(self) -> Support: ...

    def query_method(
        self, characteristic_name: GenericCharacteristicName
    ) -> AnalyticalComputation[Any, Any]:
        try:
            return self.analytical_computations[characteristic_name]
        except KeyError as e:
            raise RuntimeError(
                f"Characteristic '{characteristic_name}' is not provided by {type(self).__name__}."
            ) from e

    def calculate_characteristic(
        self, characteristic_name: GenericCharacteristicName, value: Any, **options: Any
    ) -> Any:
        return self.query_method(characteristic_name)(value, **options)


def as_points(x: Points, name: str = "x") -> FloatArray:
    """
    Convert evaluation points to a float array, rejecting NaN.

    Raises
    ------
    NonFiniteValueError
        If any point is NaN. Infinite points are accepted.
    """
    arr = np.asarray(x, dtype=np.float64)
    nan = np.isnan(arr)
    if nan.any():
        raise NonFiniteValueError(name, float("nan"))
    return arr


def as_probabilities(p: Points, name: str = "p") -> FloatArray:
    """
    Convert probability arguments to a float array within ``[0, 1]``.

    Raises
    ------
    InvalidProbabilityError
        If any value is NaN or lies outside ``[0, 1]``.
    """
    arr = np.asarray(p, dtype=np.float64)
    bad = ~((arr >= 0.0) & (arr <= 1.0))
    if bad.any():
        raise InvalidProbabilityError(name, float(np.asarray(arr)[bad].flat[0]))
    return arr


def as_output(result: FloatArray, x: Points) -> float | FloatArray:
    """Return a Python float for scalar input and an array otherwise."""
    if np.ndim(x) == 0:
        return float(result)
    return np.asarray(result, dtype=np.float64)


class EmpiricalModel(Distribution, ABC):
    """
    Base class of empirical probability models.

    Subclasses implement the array kernels ``_pdf``, ``_cdf``, ``_ppf`` and
    ``_isf`` together with moments, mode and entropy; validation, scalar
    handling and the derived characteristics live here.

    Parameters
    ----------
    sample : EmpiricalSample
        Observations the model is built from.
    classification : Classification
        Classification of ``sample``.
    config : EstimationConfig, optional
        Defaults; the active configuration when omitted.
    """

    kind: ClassVar[Kind]

    def __init__(
        self,
        sample: EmpiricalSample,
        classification: Classification,
        config: EstimationConfig | None = None,
    ) -> None:
        self._sample = sample
        self._classification = classification
        self._config = config or get_config()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(n={self._sample.n})"

    @property
    def sample(self) -> EmpiricalSample:
        return self._sample

    @property
    def classification(self) -> Classification:
        return self._classification

    @property
    def config(self) -> EstimationConfig:
        return self._config

    @property
    def is_discrete(self) -> bool:
        return self._classification.is_discrete

    # --- kernels ------------------------------------------------------------

    @abstractmethod
    def _pdf(self, x: FloatArray) -> FloatArray: ...

    @abstractmethod
    def _cdf(self, x: FloatArray) -> FloatArray: ...

    def _sf(self, x: FloatArray) -> FloatArray:
        return 1.0 - self._cdf(x)

    @abstractmethod
    def _ppf(self, p: FloatArray) -> FloatArray: ...

    @abstractmethod
    def _isf(self, q: FloatArray) -> FloatArray: ...

    # --- abstract summaries ---------------------------------------------------

    @property
    @abstractmethod
    def support(self) -> Support: ...

    @property
    @abstractmethod
    def support_bounds(self) -> Interval1D: ...

    @property
    @abstractmethod
    def mean(self) -> float: ...

    @property
    @abstractmethod
    def variance(self) -> float: ...

    @property
    @abstractmethod
    def skewness(self) -> float | None: ...

    @property
    @abstractmethod
    def kurtosis(self) -> float | None: ...

    @property
    @abstractmethod
    def mode(self) -> float: ...

    @property
    @abstractmethod
    def entropy(self) -> float: ...

    @abstractmethod
    def refit(self, data: npt.ArrayLike) -> EmpiricalModel:
        """Build a model of the same kind and settings from other observations."""

    @abstractmethod
    def draw(self, n: int, rng: np.random.Generator) -> FloatArray:
        """Draw ``n`` values from the fitted model."""

    # --- public characteristics -----------------------------------------------

    def pdf(self, x: Points) -> float | FloatArray:
        """Density (probability mass for discrete models) at ``x``."""
        return as_output(self._pdf(as_points(x)), x)

    def log_pdf(self, x: Points) -> float | FloatArray:
        """Natural logarithm of :meth:`pdf` (``-inf`` outside the support)."""
        with np.errstate(divide="ignore"):
            return as_output(np.log(self._pdf(as_points(x))), x)

    def cdf(self, x: Points) -> float | FloatArray:
        """Cumulative distribution function ``P(X <= x)``."""
        return as_output(self._cdf(as_points(x)), x)

    def sf(self, x: Points) -> float | FloatArray:
        """Survival function ``P(X > x)``."""
        return as_output(self._sf(as_points(x)), x)

    def hazard(self, x: Points) -> float | FloatArray:
        """
        Hazard rate ``pdf(x) / sf(x)``.

        Returns ``0`` where ``pdf(x) = 0`` and ``+inf`` where ``sf(x) = 0`` with
        positive density.
        """
        arr = as_points(x)
        dens = self._pdf(arr)
        surv = self._sf(arr)
        safe = np.where(surv > 0.0, surv, 1.0)
        rate = np.where(dens <= 0.0, 0.0, np.where(surv > 0.0, dens / safe, np.inf))
        return as_output(rate, x)

    def chf(self, x: Points) -> float | FloatArray:
        """Cumulative hazard ``-ln sf(x)``; ``+inf`` where ``sf(x) = 0``."""
        surv = self._sf(as_points(x))
        safe = np.where(surv > 0.0, surv, 1.0)
        return as_output(np.where(surv > 0.0, -np.log(safe), np.inf), x)

    def ppf(self, p: Points) -> float | FloatArray:
        """
        Quantile function.

        Raises
        ------
        InvalidProbabilityError
            If ``p`` lies outside ``[0, 1]``.
        """
        return as_output(self._ppf(as_probabilities(p, "p")), p)

    def isf(self, q: Points) -> float | FloatArray:
        """
        Inverse survival function (upper-tail quantile).

        Raises
        ------
        InvalidProbabilityError
            If ``q`` lies outside ``[0, 1]``.
        """
        return as_output(self._isf(as_probabilities(q, "q")), q)

    quantile = ppf
    quantile_complement = isf

    @property
    def median(self) -> float:
        return float(self._ppf(np.asarray(0.5)))

    @property
    def kurtosis_excess(self) -> float | None:
        kurt = self.kurtosis
        return None if kurt is None else kurt - 3.0

    # --- characteristic lookup ------------------------------------------------

    def _computations(self) -> dict[str, Callable[[Any], Any]]:
        return {
            CharacteristicName.PDF: self.pdf,
            CharacteristicName.CDF: self.cdf,
            CharacteristicName.SF: self.sf,
            CharacteristicName.PPF: self.ppf,
            CharacteristicName.ISF: self.isf,
            CharacteristicName.HAZARD: self.hazard,
            CharacteristicName.CHF: self.chf,
        }

    @property
    def analytical_computations(
        self,
    ) -> Mapping[GenericCharacteristicName, AnalyticalComputation[Any, Any]]:
        def _bind(method: Callable[[Any], Any]) -> Callable[..., Any]:
            def _call(data: Any, **_: Any) -> Any:
                return method(data)

            return _call

        return {
            str(name): AnalyticalComputation(target=str(name), func=_bind(method))
            for name, method in self._computations().items()
        }


__all__ = [
    "Distribution",
    "EmpiricalModel",
    "as_points",
    "as_probabilities",
    "as_output",
]
