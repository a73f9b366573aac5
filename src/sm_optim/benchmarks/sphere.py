from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .base import Benchmark


@dataclass
class SphereBenchmark(Benchmark):
    """Sum of squared coordinates; minimum 0 at the origin."""

    d: int = 2
    bound: float = 5.0

    def __post_init__(self):
        self.name = f"sphere_d{self.d}"

    def n_vars(self) -> int:
        return self.d

    def bounds(self) -> List[Tuple[float, float]]:
        return [(-self.bound, self.bound)] * self.d

    def oracle(self, x: np.ndarray) -> float:
        return float(np.sum(x * x))
