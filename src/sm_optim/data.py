from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from .errors import DimensionMismatch
from .infill import InfillBatch, InfillType


@dataclass
class DataBuffer:
    """Append-only store of the initial plan and every infill batch.

    Batches are kept as separate arrays and only joined on read, so appending
    never copies earlier data. All four infill accumulators grow together, one
    batch at a time.
    """

    dim: int
    initial_plan: np.ndarray = field(default=None)
    initial_samples: np.ndarray = field(default=None)

    plans: List[np.ndarray] = field(default_factory=list)
    samples: List[np.ndarray] = field(default_factory=list)
    types: List[Tuple[InfillType, ...]] = field(default_factory=list)
    predictions: List[np.ndarray] = field(default_factory=list)

    def set_initial(self, plan: np.ndarray, samples: np.ndarray) -> None:
        if self.initial_plan is not None:
            raise RuntimeError("initial data is already set")
        plan, samples = self._check(plan, samples)
        self.initial_plan = plan
        self.initial_samples = samples

    def add_batch(self, batch: InfillBatch, samples: np.ndarray) -> None:
        plan, samples = self._check(batch.plan, samples)
        self.plans.append(plan)
        self.samples.append(samples)
        self.types.append(tuple(batch.types))
        self.predictions.append(np.asarray(batch.predictions, dtype=np.float64))

    def _check(self, plan: np.ndarray, samples: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        plan = np.asarray(plan, dtype=np.float64)
        samples = np.asarray(samples, dtype=np.float64).reshape(-1)
        if plan.ndim != 2 or plan.shape[0] != self.dim:
            raise DimensionMismatch(f"plan must have shape ({self.dim}, n); got {plan.shape}")
        if plan.shape[1] != len(samples):
            raise DimensionMismatch(f"plan has {plan.shape[1]} columns but {len(samples)} samples")
        return plan, samples

    def n_batches(self) -> int:
        return len(self.plans)

    def size(self) -> int:
        n0 = 0 if self.initial_samples is None else len(self.initial_samples)
        return n0 + sum(len(s) for s in self.samples)

    def infill_plan(self) -> np.ndarray:
        if not self.plans:
            return np.zeros((self.dim, 0), dtype=np.float64)
        return np.concatenate(self.plans, axis=1)

    def infill_samples(self) -> np.ndarray:
        if not self.samples:
            return np.zeros((0,), dtype=np.float64)
        return np.concatenate(self.samples)

    def infill_types(self) -> Tuple[InfillType, ...]:
        return tuple(t for batch in self.types for t in batch)

    def infill_predictions(self) -> np.ndarray:
        if not self.predictions:
            return np.zeros((0,), dtype=np.float64)
        return np.concatenate(self.predictions)

    def get_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        """Combined (plan, samples): initial data followed by every infill batch."""
        if self.initial_plan is None:
            raise RuntimeError("initial data is not set")
        plan = np.concatenate([self.initial_plan, self.infill_plan()], axis=1)
        samples = np.concatenate([self.initial_samples, self.infill_samples()])
        return plan, samples

    def best(self) -> float:
        _, y = self.get_arrays()
        return float(np.min(y))
