"""
Estimation Defaults
===================

Package-wide defaults for empirical models and estimators.

- :class:`EstimationConfig` — frozen, validated set of defaults.
- :func:`get_config` — current defaults (built lazily, cached).
- :func:`configure` — replace selected defaults for the whole process.
- :func:`reset_config` — restore the built-in defaults.

Notes
-----
Every public operation also accepts explicit arguments; the configuration only
supplies the values used when an argument is omitted.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import logging
from dataclasses import dataclass, fields, replace
from functools import lru_cache
from typing import TYPE_CHECKING

from pysatl_empirical.types import BandwidthRule, BootstrapMethod, IntegrationRule

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EstimationConfig:
    """
    Defaults for empirical estimation.

    Parameters
    ----------
    smoothing_alpha : float, default 0.5
        Additive (Laplace) pseudo-count for discrete frequencies.
    lattice_tolerance : float, default 1e-6
        Lattice fit tolerance relative to the detected step.
    knn_k : int, default 3
        Neighbour order for k-NN estimators.
    bandwidth_rule : BandwidthRule, default ``silverman``
        KDE bandwidth rule.
    support_extension : float, default 8.0
        Number of bandwidths added on each side of the observed range to form
        the effective support of the KDE.
    integration_rule : IntegrationRule, default ``quad``
        Quadrature used for KDE plug-in functionals.
    integration_limit : int, default 200
        Subinterval limit (``quad``) or grid size (``simpson``).
    bootstrap_resamples : int, default 200
        Default number of bootstrap replicates.
    confidence_level : float, default 0.95
        Default bootstrap confidence level.
    bootstrap_method : BootstrapMethod, default ``percentile``
        Default interval construction.
    workers : int, default 1
        Threads used for bootstrap trials.
    dip_scale : float, default 0.54
        Multimodality threshold is ``dip_scale / sqrt(n)``.
    mode_grid_size : int, default 512
        Coarse grid size for the continuous mode search.
    probability_tolerance : float, default 1e-12
        Slack applied when a probability is matched against the cumulative
        masses of a discrete model, so ``ppf(cdf(x)) == x`` survives rounding.
    """

    smoothing_alpha: float = 0.5
    lattice_tolerance: float = 1e-6
    knn_k: int = 3
    bandwidth_rule: BandwidthRule = BandwidthRule.SILVERMAN
    support_extension: float = 8.0
    integration_rule: IntegrationRule = IntegrationRule.QUAD
    integration_limit: int = 200
    bootstrap_resamples: int = 200
    confidence_level: float = 0.95
    bootstrap_method: BootstrapMethod = BootstrapMethod.PERCENTILE
    workers: int = 1
    dip_scale: float = 0.54
    mode_grid_size: int = 512
    probability_tolerance: float = 1e-12

    def __post_init__(self) -> None:
        object.__setattr__(self, "bandwidth_rule", BandwidthRule(self.bandwidth_rule))
        object.__setattr__(self, "integration_rule", IntegrationRule(self.integration_rule))
        object.__setattr__(self, "bootstrap_method", BootstrapMethod(self.bootstrap_method))

        if self.smoothing_alpha <= 0:
            raise ValueError("smoothing_alpha must be positive.")
        if not 0 < self.lattice_tolerance < 0.5:
            raise ValueError("lattice_tolerance must lie in (0, 0.5).")
        if self.knn_k < 1:
            raise ValueError("knn_k must be a positive integer.")
        if self.support_extension < 0:
            raise ValueError("support_extension must be non-negative.")
        if self.integration_limit < 2:
            raise ValueError("integration_limit must be at least 2.")
        if self.bootstrap_resamples < 0:
            raise ValueError("bootstrap_resamples must be non-negative.")
        if not 0 < self.confidence_level < 1:
            raise ValueError("confidence_level must lie in (0, 1).")
        if self.workers < 1:
            raise ValueError("workers must be a positive integer.")
        if self.dip_scale <= 0:
            raise ValueError("dip_scale must be positive.")
        if self.mode_grid_size < 3:
            raise ValueError("mode_grid_size must be at least 3.")
        if not 0 <= self.probability_tolerance < 0.5:
            raise ValueError("probability_tolerance must lie in [0, 0.5).")


_overrides: dict[str, Any] = {}


@lru_cache(maxsize=1)
def get_config() -> EstimationConfig:
    """
    Return the cached process-wide configuration.

    Returns
    -------
    EstimationConfig
        Built-in defaults updated with the overrides passed to :func:`configure`.
    """
    return EstimationConfig(**_overrides)


def configure(**overrides: Any) -> EstimationConfig:
    """
    Override selected defaults.

    Parameters
    ----------
    **overrides
        Field names of :class:`EstimationConfig` with new values.

    Returns
    -------
    EstimationConfig
        The new active configuration.

    Raises
    ------
    TypeError
        If an unknown field is given.
    ValueError
        If a value fails validation; the previous configuration stays active.
    """
    known = {f.name for f in fields(EstimationConfig)}
    unknown = set(overrides) - known
    if unknown:
        raise TypeError(f"Unknown configuration fields: {', '.join(sorted(unknown))}")

    candidate = replace(get_config(), **overrides)
    _overrides.update(overrides)
    get_config.cache_clear()
    logger.debug("Estimation defaults updated: %s", overrides)
    return candidate


def reset_config() -> None:
    """Restore the built-in defaults."""
    _overrides.clear()
    get_config.cache_clear()


__all__ = [
    "EstimationConfig",
    "get_config",
    "configure",
    "reset_config",
]
