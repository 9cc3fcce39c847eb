"""
Estimator Selection
===================

Typed estimator variants for entropy and divergence estimation and the alias
table resolving their string names.

- :class:`AutomaticEstimator` — k-NN when the sample is large enough, KDE
  otherwise.
- :class:`KDEEstimator` — Gaussian kernel plug-in, optional bandwidth.
- :class:`KNNEstimator` — k-nearest-neighbour estimator of order ``k``.

String names are resolved through :data:`ESTIMATOR_ALIASES`; a parameter can be
appended after a colon (``"knn:5"``, ``"kde:0.25"``, ``"kde:likelihood"``).
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from dataclasses import dataclass
from math import isfinite
from typing import TYPE_CHECKING

from pysatl_empirical.errors import UnknownEstimatorError
from pysatl_empirical.types import BandwidthRule

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping


@dataclass(frozen=True, slots=True)
class AutomaticEstimator:
    """Let the estimator pick k-NN or KDE from the sample size."""


@dataclass(frozen=True, slots=True)
class KDEEstimator:
    """
    Gaussian kernel density plug-in estimator.

    Parameters
    ----------
    bandwidth : BandwidthRule, str or float, optional
        Bandwidth rule or explicit value; the model's own bandwidth when omitted.
    """

    bandwidth: BandwidthRule | str | float | None = None

    def __post_init__(self) -> None:
        bw = self.bandwidth
        if bw is None:
            return
        if isinstance(bw, str):
            object.__setattr__(self, "bandwidth", BandwidthRule(bw))
        elif not (isfinite(bw) and bw > 0):
            raise ValueError(f"bandwidth must be positive and finite, got {bw!r}")


@dataclass(frozen=True, slots=True)
class KNNEstimator:
    """
    k-nearest-neighbour estimator.

    Parameters
    ----------
    k : int, default 3
        Neighbour order.
    """

    k: int = 3

    def __post_init__(self) -> None:
        if isinstance(self.k, bool) or int(self.k) != self.k or self.k < 1:
            raise ValueError(f"k must be a positive integer, got {self.k!r}")


type Estimator = AutomaticEstimator | KDEEstimator | KNNEstimator
"""Tagged union of estimator variants."""


def _kde_from_option(option: str | None) -> KDEEstimator:
    if option is None:
        return KDEEstimator()
    if option in BandwidthRule:
        return KDEEstimator(BandwidthRule(option))
    return KDEEstimator(float(option))


def _knn_from_option(option: str | None) -> KNNEstimator:
    return KNNEstimator() if option is None else KNNEstimator(int(option))


def _auto_from_option(option: str | None) -> AutomaticEstimator:
    if option is not None:
        raise ValueError("automatic estimator takes no parameter")
    return AutomaticEstimator()


ESTIMATOR_ALIASES: Mapping[str, Callable[[str | None], Estimator]] = {
    "auto": _auto_from_option,
    "automatic": _auto_from_option,
    "kde": _kde_from_option,
    "kde_gaussian": _kde_from_option,
    "gaussian_kde": _kde_from_option,
    "kernel": _kde_from_option,
    "knn": _knn_from_option,
    "k_nn": _knn_from_option,
    "nearest_neighbor": _knn_from_option,
    "kozachenko_leonenko": _knn_from_option,
}
"""Alias table mapping lower-case names to variant constructors."""


def resolve_estimator(estimator: Estimator | str | None) -> Estimator:
    """
    Resolve an estimator variant.

    Parameters
    ----------
    estimator : Estimator, str or None
        A variant instance, an alias (optionally ``"name:parameter"``) or
        ``None`` for :class:`AutomaticEstimator`.

    Returns
    -------
    Estimator
        The resolved variant.

    Raises
    ------
    UnknownEstimatorError
        If the alias is unknown or its parameter is invalid.
    """
    if estimator is None:
        return AutomaticEstimator()
    if isinstance(estimator, AutomaticEstimator | KDEEstimator | KNNEstimator):
        return estimator
    if not isinstance(estimator, str):
        raise TypeError(f"Cannot interpret {estimator!r} as an estimator")

    name, sep, option = estimator.strip().lower().partition(":")
    name = name.strip().replace("-", "_")
    factory = ESTIMATOR_ALIASES.get(name)
    if factory is None:
        raise UnknownEstimatorError(estimator, ESTIMATOR_ALIASES)

    try:
        return factory(option.strip() if sep else None)
    except ValueError as e:
        raise UnknownEstimatorError(estimator, ESTIMATOR_ALIASES) from e


__all__ = [
    "AutomaticEstimator",
    "KDEEstimator",
    "KNNEstimator",
    "Estimator",
    "ESTIMATOR_ALIASES",
    "resolve_estimator",
]
