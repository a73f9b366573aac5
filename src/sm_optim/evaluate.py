from __future__ import annotations

from typing import Callable, Optional

import numpy as np

from .errors import EvaluationFailure
from .report import ProgressReporter

ObjectiveFn = Callable[[np.ndarray], float]


def _evaluate_point(objective: ObjectiveFn, x: np.ndarray, column: int) -> float:
    try:
        raw = objective(x)
    except Exception as exc:
        raise EvaluationFailure(f"objective raised at column {column}: {exc!r}", column, x) from exc

    try:
        arr = np.asarray(raw, dtype=np.float64).reshape(-1)
    except (TypeError, ValueError) as exc:
        raise EvaluationFailure(f"objective returned a non-numeric value at column {column}: {raw!r}", column, x) from exc
    if arr.size != 1:
        raise EvaluationFailure(f"objective must return one scalar; got {arr.size} values at column {column}", column, x)

    y = float(arr[0])
    if not np.isfinite(y):
        raise EvaluationFailure(f"objective returned a non-finite value ({y}) at column {column}", column, x)
    return y


def evaluate_plan(
    objective: ObjectiveFn,
    plan: np.ndarray,
    history: Optional[np.ndarray] = None,
    reporter: Optional[ProgressReporter] = None,
) -> np.ndarray:
    """Evaluate ``objective`` on every column of a (d, n) plan, in column order.

    ``history`` holds all samples observed before this batch. Without it the
    trace reports the batch max/min; with it the trace also shows each value,
    the combined max/min and the improvement over the best prior sample.
    Any failing column aborts the whole batch with :class:`EvaluationFailure`.
    """
    plan = np.asarray(plan, dtype=np.float64)
    if plan.ndim != 2:
        raise ValueError(f"plan must be 2D (d, n); got shape {plan.shape}")
    n = plan.shape[1]

    if reporter is not None:
        reporter.evaluating(n)

    # each point is handed over as a copy so the objective cannot alter the plan
    new_samples = np.array([_evaluate_point(objective, plan[:, j].copy(), j) for j in range(n)], dtype=np.float64)

    if reporter is not None:
        if history is None:
            reporter.initial_samples(new_samples)
        else:
            reporter.infill_samples(new_samples, np.asarray(history, dtype=np.float64).reshape(-1))
    return new_samples
