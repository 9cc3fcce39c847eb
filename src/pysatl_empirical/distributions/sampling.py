"""
Sample Containers
=================

This module defines the sample protocol and the immutable one-dimensional
sample from which empirical models are built.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from typing import TYPE_CHECKING, Protocol

import numpy as np

from pysatl_empirical.errors import EmptySampleError, NonFiniteValueError

if TYPE_CHECKING:
    from collections.abc import Iterator
    from typing import Any

    import numpy.typing as npt

    from pysatl_empirical.types import FloatArray


class Sample(Protocol):
    """
    Protocol for sample containers.

    Attributes
    ----------
    array : numpy.ndarray
        Array representation of the samples.
    shape : tuple[int, ...]
        Shape of the sample array.
    """

    def __len__(self) -> int: ...
    @property
    def array(self) -> npt.NDArray[np.floating[Any]]: ...
    @property
    def shape(self) -> tuple[int, ...]: ...


class EmpiricalSample:
    """
    Immutable one-dimensional sample of finite real observations.

    The input is copied once into a read-only ``float64`` array, whatever its
    original real dtype (integers, ``float32``, ``longdouble``).

    Parameters
    ----------
    data : array_like
        Scalar or 1D sequence of observations.

    Raises
    ------
    EmptySampleError
        If ``data`` holds no observations.
    NonFiniteValueError
        If an observation is NaN or infinite.
    ValueError
        If ``data`` is not one-dimensional.
    """

    __slots__ = ("_values", "_sorted", "_unique", "_counts")

    def __init__(self, data: npt.ArrayLike) -> None:
        arr = np.array(data, dtype=np.float64)
        if arr.ndim == 0:
            arr = arr.reshape(1)
        if arr.ndim != 1:
            raise ValueError("EmpiricalSample expects a 1D sequence of observations.")
        if arr.size == 0:
            raise EmptySampleError()

        finite = np.isfinite(arr)
        if not finite.all():
            raise NonFiniteValueError("samples", float(arr[~finite][0]))

        arr.setflags(write=False)
        self._values = arr

        ordered = np.sort(arr)
        ordered.setflags(write=False)
        self._sorted = ordered

        unique, counts = np.unique(ordered, return_counts=True)
        unique.setflags(write=False)
        counts.setflags(write=False)
        self._unique = unique
        self._counts = counts

    def __len__(self) -> int:
        """Return the number of observations (n)."""
        return int(self._values.size)

    def __iter__(self) -> Iterator[float]:
        """Iterate over observations in input order."""
        return (float(v) for v in self._values)

    def __array__(self, dtype: Any = None, copy: bool | None = None) -> FloatArray:
        arr = self._values if dtype is None else self._values.astype(dtype)
        return arr.copy() if copy else arr

    def __repr__(self) -> str:
        return f"{type(self).__name__}(n={self.n}, min={self.min:g}, max={self.max:g})"

    @property
    def n(self) -> int:
        """Number of observations."""
        return len(self)

    @property
    def array(self) -> FloatArray:
        """Observations in input order (read-only)."""
        return self._values

    @property
    def shape(self) -> tuple[int, ...]:
        """Shape of the sample array ``(n,)``."""
        return (self.n,)

    @property
    def sorted(self) -> FloatArray:
        """Observations in ascending order (read-only)."""
        return self._sorted

    @property
    def unique(self) -> FloatArray:
        """Distinct observed values in ascending order (read-only)."""
        return self._unique

    @property
    def counts(self) -> npt.NDArray[np.intp]:
        """Multiplicities of :attr:`unique` values."""
        return self._counts

    @property
    def unique_count(self) -> int:
        """Number of distinct observed values."""
        return int(self._unique.size)

    @property
    def min(self) -> float:
        return float(self._sorted[0])

    @property
    def max(self) -> float:
        return float(self._sorted[-1])

    @property
    def range(self) -> float:
        """Width ``max - min`` of the observed range."""
        return self.max - self.min

    def mean(self) -> float:
        return float(self._values.mean())

    def std(self, ddof: int = 1) -> float:
        """Sample standard deviation (0 when fewer than ``ddof + 1`` observations)."""
        if self.n <= ddof:
            return 0.0
        return float(self._values.std(ddof=ddof))

    def resample(self, rng: np.random.Generator, size: int | None = None) -> FloatArray:
        """
        Draw observations with replacement.

        Parameters
        ----------
        rng : numpy.random.Generator
            Source of randomness.
        size : int, optional
            Resample size; defaults to ``n``.

        Returns
        -------
        numpy.ndarray
            Resampled observations.
        """
        return rng.choice(self._values, size=self.n if size is None else size, replace=True)


def as_sample(data: EmpiricalSample | npt.ArrayLike) -> EmpiricalSample:
    """Return ``data`` unchanged when it is already an :class:`EmpiricalSample`."""
    if isinstance(data, EmpiricalSample):
        return data
    return EmpiricalSample(data)


__all__ = [
    "Sample",
    "EmpiricalSample",
    "as_sample",
]
