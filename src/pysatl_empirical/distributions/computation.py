"""
Computation Primitives
======================

Model characteristics exposed as named callables. Every empirical model maps
characteristic names to :class:`AnalyticalComputation` objects wrapping its
own bound methods.

Notes
-----
Callables accept a scalar or an array of points and return a value of the same
shape; scalar input yields a Python ``float``.
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"


from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from mypy_extensions import KwArg

from pysatl_empirical.types import GenericCharacteristicName


@dataclass(frozen=True, slots=True)
class AnalyticalComputation[In, Out]:
    """Computation provided directly by an empirical model.

    Parameters
    ----------
    target : str
        Characteristic name (e.g., ``"pdf"``).
    func : Callable[[In, KwArg(Any)], Out]
        Bound model method evaluating the characteristic.
    """

    target: GenericCharacteristicName
    func: Callable[[In, KwArg(Any)], Out]

    def __call__(self, data: In, **options: Any) -> Out:
        """Evaluate the characteristic."""
        return self.func(data, **options)


__all__ = [
    "AnalyticalComputation",
]
