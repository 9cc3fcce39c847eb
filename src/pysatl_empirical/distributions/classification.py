"""
Sample Classification
=====================

Decide whether a sample is lattice-valued (discrete) or continuous.

A sample is discrete when it contains repeated observations and every distinct
value lies on the arithmetic lattice ``origin + k * step``, where ``origin`` is
the minimum and ``step`` the smallest gap between consecutive distinct values.
A single distinct value is discrete with a unit step; a sample without
repeated values is continuous.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from pysatl_empirical.config import get_config
from pysatl_empirical.distributions.sampling import as_sample
from pysatl_empirical.types import Kind

if TYPE_CHECKING:
    import numpy.typing as npt

    from pysatl_empirical.config import EstimationConfig
    from pysatl_empirical.distributions.sampling import EmpiricalSample

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Classification:
    """
    Outcome of sample classification.

    Parameters
    ----------
    kind : Kind
        Discrete or continuous.
    lattice_step : float, optional
        Lattice step; present iff the sample is discrete.
    lattice_origin : float, optional
        Lattice origin; present iff the sample is discrete.
    tolerance : float, default 0.0
        Absolute tolerance used to match values to lattice nodes.
    """

    kind: Kind
    lattice_step: float | None = None
    lattice_origin: float | None = None
    tolerance: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", Kind(self.kind))
        has_lattice = self.lattice_step is not None and self.lattice_origin is not None
        if self.kind is Kind.DISCRETE and not has_lattice:
            raise ValueError("Discrete classification requires lattice step and origin.")
        if self.kind is Kind.CONTINUOUS and (
            self.lattice_step is not None or self.lattice_origin is not None
        ):
            raise ValueError("Continuous classification cannot carry a lattice.")
        if self.lattice_step is not None and self.lattice_step <= 0:
            raise ValueError("lattice_step must be positive.")

    @property
    def is_discrete(self) -> bool:
        return self.kind is Kind.DISCRETE

    @classmethod
    def continuous(cls) -> Classification:
        return cls(Kind.CONTINUOUS)

    @classmethod
    def discrete(cls, step: float, origin: float, tolerance: float = 0.0) -> Classification:
        return cls(Kind.DISCRETE, float(step), float(origin), float(tolerance))


def fits_lattice(values: npt.ArrayLike, step: float, origin: float, tolerance: float) -> bool:
    """
    Check that every value lies within ``tolerance`` of a lattice node.

    Parameters
    ----------
    values : array_like
        Values to check.
    step : float
        Lattice step (positive).
    origin : float
        Lattice origin.
    tolerance : float
        Absolute tolerance.

    Returns
    -------
    bool
        ``True`` when ``|round((x - origin) / step) * step + origin - x| < tolerance``
        for every ``x``.
    """
    arr = np.asarray(values, dtype=np.float64)
    nodes = np.round((arr - origin) / step) * step + origin
    return bool(np.all(np.abs(nodes - arr) < tolerance))


def classify(
    samples: EmpiricalSample | npt.ArrayLike,
    tolerance: float | None = None,
    *,
    config: EstimationConfig | None = None,
) -> Classification:
    """
    Classify a sample as discrete (lattice-valued) or continuous.

    Parameters
    ----------
    samples : EmpiricalSample or array_like
        Observations.
    tolerance : float, optional
        Absolute lattice tolerance. Defaults to
        ``config.lattice_tolerance * step``.
    config : EstimationConfig, optional
        Defaults to :func:`~pysatl_empirical.config.get_config`.

    Returns
    -------
    Classification
        Kind and, for discrete samples, the detected lattice.

    Raises
    ------
    EmptySampleError
        If ``samples`` is empty.
    """
    sample = as_sample(samples)
    config = config or get_config()
    unique = sample.unique

    if unique.size == 1:
        tol = config.lattice_tolerance if tolerance is None else float(tolerance)
        result = Classification.discrete(1.0, float(unique[0]), tol)
        logger.debug("Single distinct value %g: discrete with unit step", unique[0])
        return result

    if unique.size == sample.n:
        logger.debug("No repeated observations among %d values: continuous", sample.n)
        return Classification.continuous()

    origin = float(unique[0])
    step = float(np.min(np.diff(unique)))
    tol = config.lattice_tolerance * step if tolerance is None else float(tolerance)

    if fits_lattice(unique, step, origin, tol):
        logger.debug("Lattice fits (step=%g, origin=%g, tol=%g): discrete", step, origin, tol)
        return Classification.discrete(step, origin, tol)

    logger.debug("Values off lattice (step=%g, origin=%g, tol=%g): continuous", step, origin, tol)
    return Classification.continuous()


__all__ = [
    "Classification",
    "classify",
    "fits_lattice",
]
