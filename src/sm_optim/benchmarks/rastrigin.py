from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .base import Benchmark


@dataclass
class RastriginBenchmark(Benchmark):
    """Highly multimodal Rastrigin function; minimum 0 at the origin."""

    d: int = 2
    A: float = 10.0

    def __post_init__(self):
        self.name = f"rastrigin_d{self.d}"

    def n_vars(self) -> int:
        return self.d

    def bounds(self) -> List[Tuple[float, float]]:
        return [(-5.12, 5.12)] * self.d

    def oracle(self, x: np.ndarray) -> float:
        return float(self.A * self.d + np.sum(x * x - self.A * np.cos(2.0 * np.pi * x)))
