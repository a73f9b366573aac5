from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import numpy as np
import pandas as pd

from .infill import InfillType
from .options import Options
from .surrogate import SurrogateModel


def _frozen(a: np.ndarray) -> np.ndarray:
    out = np.array(a, dtype=np.float64, copy=True)
    out.setflags(write=False)
    return out


@dataclass(frozen=True)
class Result:
    """Complete trace of one optimization run.

    ``surrogate`` and ``fit_result`` come from the last iteration and are
    ``None`` when the run had zero iterations.
    """

    initial_samples: np.ndarray
    initial_plan: np.ndarray
    surrogate: Optional[SurrogateModel]
    fit_result: Any
    infill_samples: np.ndarray
    infill_types: Tuple[InfillType, ...]
    infill_plan: np.ndarray
    infill_predictions: np.ndarray
    options: Options
    iteration_log: Tuple[Dict[str, Any], ...] = field(default=())

    def __post_init__(self):
        for name in ("initial_samples", "initial_plan", "infill_samples", "infill_plan", "infill_predictions"):
            object.__setattr__(self, name, _frozen(getattr(self, name)))
        object.__setattr__(self, "infill_types", tuple(self.infill_types))
        object.__setattr__(self, "iteration_log", tuple(dict(r) for r in self.iteration_log))

    @property
    def dim(self) -> int:
        return int(self.initial_plan.shape[0])

    @property
    def plan_all(self) -> np.ndarray:
        return np.concatenate([self.initial_plan, self.infill_plan], axis=1)

    @property
    def samples_all(self) -> np.ndarray:
        return np.concatenate([self.initial_samples, self.infill_samples])

    @property
    def n_evaluations(self) -> int:
        return int(len(self.initial_samples) + len(self.infill_samples))

    @property
    def best_index(self) -> int:
        return int(np.argmin(self.samples_all))

    @property
    def best_y(self) -> float:
        return float(self.samples_all[self.best_index])

    @property
    def best_x(self) -> np.ndarray:
        return self.plan_all[:, self.best_index].copy()

    def history(self) -> pd.DataFrame:
        """One row per evaluated point, initial points first, in evaluation order."""
        n0 = len(self.initial_samples)
        n1 = len(self.infill_samples)

        iteration = np.zeros(n0 + n1, dtype=np.int64)
        offset = n0
        for row in self.iteration_log:
            k = int(row["batch_size"])
            iteration[offset : offset + k] = int(row["iter"])
            offset += k

        df = pd.DataFrame(self.plan_all.T, columns=[f"x{i}" for i in range(self.dim)])
        df.insert(0, "iteration", iteration)
        df.insert(0, "phase", ["initial"] * n0 + ["infill"] * n1)
        df["y"] = self.samples_all
        df["infill_type"] = [None] * n0 + [t.value for t in self.infill_types]
        df["prediction"] = np.concatenate([np.full(n0, np.nan), self.infill_predictions])
        df["best_y"] = np.minimum.accumulate(self.samples_all)
        return df

    def iteration_frame(self) -> pd.DataFrame:
        return pd.DataFrame(list(self.iteration_log))
