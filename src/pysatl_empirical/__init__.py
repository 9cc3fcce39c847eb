"""
PySATL Empirical
================

Empirical probability models estimated directly from a finite real sample:
discrete/continuous classification, smoothed frequency and kernel density
models, entropy and Kullback–Leibler divergence estimators with bootstrap
confidence intervals, and a multimodality heuristic.
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import logging
from importlib.metadata import version

from .config import *
from .config import __all__ as _config_all
from .distributions import *
from .distributions import __all__ as _distr_all
from .empirical import *
from .empirical import __all__ as _empirical_all
from .errors import *
from .errors import __all__ as _errors_all
from .estimators import *
from .estimators import __all__ as _estim_all
from .types import *
from .types import __all__ as _types_all

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = version("pysatl-empirical")
__all__ = [
    "__version__",
    *_config_all,
    *_distr_all,
    *_estim_all,
    *_empirical_all,
    *_errors_all,
    *_types_all,
]

del _config_all
del _distr_all
del _estim_all
del _empirical_all
del _errors_all
del _types_all
