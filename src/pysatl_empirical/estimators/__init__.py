"""
Estimators subpackage

Functionals of empirical models:

- estimator variants and their aliases (:mod:`.options`);
- bootstrap confidence intervals (:mod:`.bootstrap`);
- entropy (:mod:`.entropy`);
- Kullback–Leibler divergence (:mod:`.divergence`);
- multimodality detection (:mod:`.multimodality`).
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from .bootstrap import BootstrapResult, EntropyEstimate, bca_interval, bootstrap, percentile_interval
from .divergence import (
    discrete_kl,
    kde_kl,
    kl_divergence,
    kl_divergence_estimate,
    kl_divergence_to_reference,
    knn_kl,
)
from .entropy import (
    discrete_entropy,
    entropy_of,
    estimate_entropy,
    kde_entropy,
    kde_loo_entropy,
    knn_distances,
    knn_entropy,
)
from .multimodality import count_local_maxima, dip_statistic, is_likely_multimodal
from .options import (
    ESTIMATOR_ALIASES,
    AutomaticEstimator,
    Estimator,
    KDEEstimator,
    KNNEstimator,
    resolve_estimator,
)

__all__ = [
    # variants
    "Estimator",
    "AutomaticEstimator",
    "KDEEstimator",
    "KNNEstimator",
    "ESTIMATOR_ALIASES",
    "resolve_estimator",
    # bootstrap
    "BootstrapResult",
    "EntropyEstimate",
    "bootstrap",
    "percentile_interval",
    "bca_interval",
    # entropy
    "discrete_entropy",
    "knn_distances",
    "knn_entropy",
    "kde_entropy",
    "kde_loo_entropy",
    "entropy_of",
    "estimate_entropy",
    # divergence
    "discrete_kl",
    "knn_kl",
    "kde_kl",
    "kl_divergence",
    "kl_divergence_estimate",
    "kl_divergence_to_reference",
    # multimodality
    "dip_statistic",
    "count_local_maxima",
    "is_likely_multimodal",
]
