from __future__ import annotations

from typing import Dict, List, Tuple

import numpy as np


class Benchmark:
    """A black-box objective over a box-shaped continuous domain."""

    name: str

    def n_vars(self) -> int:
        raise NotImplementedError

    def bounds(self) -> List[Tuple[float, float]]:
        raise NotImplementedError

    def oracle(self, x: np.ndarray) -> float:
        """Objective to minimize."""
        raise NotImplementedError

    def __call__(self, x: np.ndarray) -> float:
        return self.oracle(np.asarray(x, dtype=np.float64))

    def info(self) -> Dict:
        return {"name": getattr(self, "name", self.__class__.__name__), "d": self.n_vars(), "bounds": self.bounds()}
