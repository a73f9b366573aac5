from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .base import Benchmark


@dataclass
class BraninBenchmark(Benchmark):
    """Branin-Hoo function on [-5, 10] x [0, 15]; three global minima of 0.397887."""

    name: str = "branin"

    def n_vars(self) -> int:
        return 2

    def bounds(self) -> List[Tuple[float, float]]:
        return [(-5.0, 10.0), (0.0, 15.0)]

    def oracle(self, x: np.ndarray) -> float:
        x1, x2 = float(x[0]), float(x[1])
        b = 5.1 / (4.0 * np.pi**2)
        c = 5.0 / np.pi
        t = 1.0 / (8.0 * np.pi)
        return float((x2 - b * x1**2 + c * x1 - 6.0) ** 2 + 10.0 * (1.0 - t) * np.cos(x1) + 10.0)
