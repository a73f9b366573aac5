from __future__ import annotations

from typing import Optional

import numpy as np


class OptimizationError(Exception):
    """Base class for every error raised by an optimization run."""


class InvalidSearchSpace(OptimizationError, ValueError):
    """Search space is empty or a bound pair has lower >= upper."""


class DimensionMismatch(OptimizationError, ValueError):
    """Plan rows / columns disagree with the search space or with the samples."""


class EvaluationFailure(OptimizationError, RuntimeError):
    """The objective raised or returned a non-finite value for one plan column."""

    def __init__(self, message: str, column: int, point: Optional[np.ndarray] = None):
        super().__init__(message)
        self.column = int(column)
        self.point = None if point is None else np.array(point, dtype=np.float64)


class SurrogateFitFailure(OptimizationError, RuntimeError):
    """The surrogate could not be fitted to the observed data."""
