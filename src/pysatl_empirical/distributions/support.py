"""
Supports
========

Support descriptions of empirical models.

- :class:`ContinuousSupport` — closed interval (the effective support of a
  kernel density estimate).
- :class:`LatticeDiscreteSupport` — observed points of an arithmetic lattice.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING, Protocol, cast, overload, runtime_checkable

import numpy as np

from pysatl_empirical.types import BoolArray, Interval1D, Number, NumericArray

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    import numpy.typing as npt

    from pysatl_empirical.types import FloatArray


@runtime_checkable
class Support(Protocol):
    @overload
    def contains(self, x: Number) -> bool: ...
    @overload
    def contains(self, x: NumericArray) -> BoolArray: ...


class ContinuousSupport(Interval1D, Support): ...


@runtime_checkable
class DiscreteSupport(Support, Protocol):
    def iter_points(self) -> Iterator[Number]: ...


class LatticeDiscreteSupport(DiscreteSupport):
    """
    Finite set of observed points lying on the lattice ``origin + k * step``.

    Parameters
    ----------
    points : Iterable[Number]
        Observed lattice points (duplicates are removed).
    step : float
        Lattice step.
    origin : float
        Lattice origin.
    tolerance : float, default 0.0
        Absolute distance within which a query matches a support point.
    assume_sorted : bool, default False
        Skip sorting when ``points`` are already ascending.
    """

    __slots__ = ("_points", "_step", "_origin", "_tolerance")

    def __init__(
        self,
        points: Iterable[Number],
        step: float,
        origin: float,
        tolerance: float = 0.0,
        assume_sorted: bool = False,
    ) -> None:
        arr = np.array(points, dtype=np.float64)

        if arr.size == 0:
            raise ValueError("Points must be non-empty")
        if step <= 0:
            raise ValueError("step must be positive")

        if not assume_sorted:
            arr.sort()

        unique_mask = np.empty(arr.size, dtype=bool)
        unique_mask[0] = True
        unique_mask[1:] = arr[1:] != arr[:-1]

        self._points = arr[unique_mask]
        self._step = float(step)
        self._origin = float(origin)
        self._tolerance = float(tolerance)

    @property
    def step(self) -> float:
        return self._step

    @property
    def origin(self) -> float:
        return self._origin

    def index_of(self, x: Number | NumericArray) -> npt.NDArray[np.intp]:
        """
        Index of the support point matching each query, ``-1`` for non-members.

        Parameters
        ----------
        x : Number or NumericArray
            Query point(s).

        Returns
        -------
        numpy.ndarray
            Integer indices with the shape of ``x``.
        """
        arr = np.asarray(x, dtype=np.float64)
        size = self._points.size

        right = np.clip(np.searchsorted(self._points, arr, side="left"), 0, size - 1)
        left = np.clip(right - 1, 0, size - 1)
        dist_right = np.abs(self._points[right] - arr)
        dist_left = np.abs(self._points[left] - arr)
        nearest = np.where(dist_left < dist_right, left, right)
        dist = np.minimum(dist_left, dist_right)

        return cast("npt.NDArray[np.intp]", np.where(dist <= self._tolerance, nearest, -1))

    @overload
    def contains(self, x: Number) -> bool: ...
    @overload
    def contains(self, x: NumericArray) -> BoolArray: ...

    def contains(self, x: Number | NumericArray) -> bool | BoolArray:
        result = self.index_of(x) >= 0

        if np.ndim(x) == 0:
            return bool(result)
        return cast(BoolArray, result)

    def __contains__(self, x: object) -> bool:
        return bool(self.contains(cast(Number, x)))

    def __len__(self) -> int:
        return int(self._points.size)

    def iter_points(self) -> Iterator[Number]:
        return iter(self._points)

    def count_leq(self, x: Number | NumericArray) -> npt.NDArray[np.intp]:
        """Number of support points not exceeding ``x`` (up to the tolerance)."""
        arr = np.asarray(x, dtype=np.float64)
        return np.searchsorted(self._points, arr + self._tolerance, side="right")

    @property
    def points(self) -> FloatArray:
        return self._points.copy()

    @property
    def bounds(self) -> Interval1D:
        """Closed interval spanned by the support."""
        return Interval1D(float(self._points[0]), float(self._points[-1]))

    __iter__ = iter_points


__all__ = [
    "Support",
    "ContinuousSupport",
    "DiscreteSupport",
    "LatticeDiscreteSupport",
]
