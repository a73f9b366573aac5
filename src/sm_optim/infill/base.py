from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

import numpy as np

from ..errors import DimensionMismatch
from ..options import Options
from ..space import SearchSpace
from ..surrogate import SurrogateModel


class InfillType(str, Enum):
    EXPLORATION = "exploration"
    EXPLOITATION = "exploitation"


@dataclass(frozen=True)
class InfillBatch:
    plan: np.ndarray                 # (d, k) new points, one per column
    types: Tuple[InfillType, ...]    # one tag per column
    predictions: np.ndarray          # (k,) surrogate values at the new points

    def __post_init__(self):
        plan = np.asarray(self.plan, dtype=np.float64)
        predictions = np.asarray(self.predictions, dtype=np.float64).reshape(-1)
        types = tuple(InfillType(t) for t in self.types)
        if plan.ndim != 2:
            raise DimensionMismatch(f"infill plan must be 2D (d, k); got shape {plan.shape}")
        k = plan.shape[1]
        if len(types) != k or len(predictions) != k:
            raise DimensionMismatch(
                f"infill batch misaligned: {k} points, {len(types)} types, {len(predictions)} predictions"
            )
        object.__setattr__(self, "plan", plan)
        object.__setattr__(self, "predictions", predictions)
        object.__setattr__(self, "types", types)

    @property
    def size(self) -> int:
        return int(self.plan.shape[1])


class InfillSelector:
    """Proposes the next batch of points to evaluate from the current surrogate.

    ``select`` returns the batch together with the options to use from the next
    iteration on (the same instance when nothing changes).
    """

    name: str = "base"

    def select(
        self,
        space: SearchSpace,
        plan: np.ndarray,
        samples: np.ndarray,
        surrogate: SurrogateModel,
        options: Options,
    ) -> Tuple[InfillBatch, Options]:
        raise NotImplementedError
