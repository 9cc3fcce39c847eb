"""
Multimodality Detection
=======================

Heuristic flag for samples that are unlikely to come from a unimodal law.

- Continuous samples: Hartigan-style dip statistic. For each candidate mode
  the empirical CDF left of it is compared with its greatest convex minorant
  and the part right of it with its least concave majorant; the dip is half
  the smallest achievable maximum deviation. The sample is flagged when the
  dip exceeds ``dip_scale / sqrt(n)``.
- Discrete samples: local maxima of the observed frequencies along the
  lattice, unobserved lattice points counting as zero mass. More than one
  maximum flags the sample.

Samples with fewer than five observations are never flagged.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import logging
from math import sqrt
from typing import TYPE_CHECKING

import numpy as np

from pysatl_empirical.config import get_config
from pysatl_empirical.distributions.classification import classify
from pysatl_empirical.distributions.sampling import as_sample

if TYPE_CHECKING:
    import numpy.typing as npt

    from pysatl_empirical.distributions.classification import Classification
    from pysatl_empirical.distributions.sampling import EmpiricalSample
    from pysatl_empirical.types import FloatArray

logger = logging.getLogger(__name__)

MIN_SAMPLES = 5
_MAX_MODE_CANDIDATES = 256


def _cross(o: tuple[float, float], a: tuple[float, float], b: tuple[float, float]) -> float:
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def _prefix_deviations(
    x: FloatArray, y: FloatArray, reference: FloatArray, stops: npt.NDArray[np.intp]
) -> dict[int, float]:
    """
    Distance from ``reference`` to the greatest convex minorant of each prefix.

    Parameters
    ----------
    x, y : numpy.ndarray
        Points with strictly increasing ``x``.
    reference : numpy.ndarray
        Values compared with the minorant at every ``x``.
    stops : numpy.ndarray
        Prefix ends ``s``; the prefix is ``x[: s + 1]``.

    Returns
    -------
    dict[int, float]
        ``max |reference - minorant|`` over each requested prefix.

    Notes
    -----
    Andrew's monotone chain only appends to the right, so one pass yields
    the hull of every prefix.
    """
    wanted = set(stops.tolist())
    deviations: dict[int, float] = {}
    stack: list[tuple[float, float]] = []
    for i, point in enumerate(zip(x.tolist(), y.tolist(), strict=True)):
        while len(stack) >= 2 and _cross(stack[-2], stack[-1], point) <= 0.0:
            stack.pop()
        stack.append(point)
        if i in wanted:
            hull = np.asarray(stack, dtype=np.float64)
            minorant = np.interp(x[: i + 1], hull[:, 0], hull[:, 1])
            deviations[i] = float(np.max(np.abs(reference[: i + 1] - minorant)))
    return deviations


def _mode_candidates(size: int) -> npt.NDArray[np.intp]:
    if size <= _MAX_MODE_CANDIDATES:
        return np.arange(size)
    return np.unique(np.linspace(0, size - 1, _MAX_MODE_CANDIDATES).astype(np.intp))


def dip_statistic(samples: npt.ArrayLike) -> float:
    """
    Dip of the empirical distribution from the closest unimodal law.

    Parameters
    ----------
    samples : array_like
        Observations.

    Returns
    -------
    float
        Statistic in ``[0, 1/2]``; ``0`` for a single distinct value.

    Notes
    -----
    Candidate modes are the distinct observed values, thinned to at most
    256 evenly spaced positions for large samples.
    """
    sample = as_sample(samples)
    values = sample.unique
    if values.size < 2:
        return 0.0

    hi = np.cumsum(sample.counts) / sample.n
    lo = hi - sample.counts / sample.n

    candidates = _mode_candidates(values.size)
    last = values.size - 1
    # the concave majorant of a suffix is the convex minorant of its point reflection
    left = _prefix_deviations(values, lo, hi, candidates)
    right = _prefix_deviations(-values[::-1], -hi[::-1], -lo[::-1], last - candidates)

    best = min(max(left[m], right[last - m]) for m in candidates.tolist())
    return best / 2.0


def _lattice_frequencies(sample: EmpiricalSample, classification: Classification) -> list[int]:
    step = float(classification.lattice_step)  # type: ignore[arg-type]
    origin = float(classification.lattice_origin)  # type: ignore[arg-type]
    nodes = np.rint((sample.unique - origin) / step).astype(np.int64)

    # a run of unobserved nodes behaves like a single empty node
    frequencies = [0]
    previous = None
    for node, count in zip(nodes.tolist(), sample.counts.tolist(), strict=True):
        if previous is not None and node - previous > 1:
            frequencies.append(0)
        frequencies.append(int(count))
        previous = node
    frequencies.append(0)
    return frequencies


def count_local_maxima(frequencies: list[int]) -> int:
    """Interior positions not lower than the left neighbour and above the right one."""
    return sum(
        1
        for i in range(1, len(frequencies) - 1)
        if frequencies[i] >= frequencies[i - 1] and frequencies[i] > frequencies[i + 1]
    )


def is_likely_multimodal(
    samples: npt.ArrayLike,
    classification: Classification | None = None,
    threshold: float | None = None,
) -> bool:
    """
    Flag a sample as likely multimodal.

    Parameters
    ----------
    samples : array_like
        Observations.
    classification : Classification, optional
        Precomputed classification of ``samples``.
    threshold : float, optional
        Dip threshold for continuous samples; defaults to
        ``config.dip_scale / sqrt(n)``.

    Returns
    -------
    bool
        ``True`` when more than one mode is likely.
    """
    sample = as_sample(samples)
    if sample.n < MIN_SAMPLES:
        return False

    classification = classification or classify(sample)
    if classification.is_discrete:
        maxima = count_local_maxima(_lattice_frequencies(sample, classification))
        logger.debug("Discrete multimodality check: %d local maxima", maxima)
        return maxima > 1

    limit = get_config().dip_scale / sqrt(sample.n) if threshold is None else float(threshold)
    dip = dip_statistic(sample)
    logger.debug("Dip statistic %.6g against threshold %.6g (n=%d)", dip, limit, sample.n)
    return dip > limit


__all__ = [
    "dip_statistic",
    "count_local_maxima",
    "is_likely_multimodal",
]
