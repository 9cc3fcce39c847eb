from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from collections.abc import Generator
from typing import Any

import numpy as np
import pytest

from pysatl_empirical.config import reset_config

pytest.importorskip("scipy")


@pytest.fixture(autouse=True)
def _fresh_config() -> Generator[None, Any, None]:
    reset_config()
    yield
    reset_config()


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(20250101)


@pytest.fixture
def normal_samples(rng: np.random.Generator) -> np.ndarray:
    return rng.normal(0.0, 1.0, size=500)
