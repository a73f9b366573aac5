from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .base import Benchmark


@dataclass
class RosenbrockBenchmark(Benchmark):
    """Rosenbrock valley; minimum 0 at (1, ..., 1)."""

    d: int = 2
    lower: float = -2.0
    upper: float = 2.0

    def __post_init__(self):
        if self.d < 2:
            raise ValueError("Rosenbrock needs d >= 2")
        self.name = f"rosenbrock_d{self.d}"

    def n_vars(self) -> int:
        return self.d

    def bounds(self) -> List[Tuple[float, float]]:
        return [(self.lower, self.upper)] * self.d

    def oracle(self, x: np.ndarray) -> float:
        return float(np.sum(100.0 * (x[1:] - x[:-1] ** 2) ** 2 + (1.0 - x[:-1]) ** 2))
