from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

import numpy as np

from .errors import DimensionMismatch, InvalidSearchSpace


@dataclass(frozen=True)
class SearchSpace:
    """Box-shaped continuous search space, one ``(lower, upper)`` pair per dimension."""

    bounds: Tuple[Tuple[float, float], ...]

    def __post_init__(self):
        pairs = []
        for i, pair in enumerate(self.bounds):
            try:
                lo, hi = pair
                lo, hi = float(lo), float(hi)
            except (TypeError, ValueError) as exc:
                raise InvalidSearchSpace(f"bound {i} is not a (lower, upper) pair: {pair!r}") from exc
            if not (np.isfinite(lo) and np.isfinite(hi)):
                raise InvalidSearchSpace(f"bound {i} is not finite: ({lo}, {hi})")
            if not lo < hi:
                raise InvalidSearchSpace(f"bound {i} needs lower < upper; got ({lo}, {hi})")
            pairs.append((lo, hi))
        if not pairs:
            raise InvalidSearchSpace("search space has no dimensions")
        object.__setattr__(self, "bounds", tuple(pairs))

    @classmethod
    def coerce(cls, space: "SearchSpace | Iterable[Sequence[float]]") -> "SearchSpace":
        if isinstance(space, SearchSpace):
            return space
        return cls(tuple(tuple(b) for b in space))

    @property
    def dim(self) -> int:
        return len(self.bounds)

    @property
    def lower(self) -> np.ndarray:
        return np.array([b[0] for b in self.bounds], dtype=np.float64)

    @property
    def upper(self) -> np.ndarray:
        return np.array([b[1] for b in self.bounds], dtype=np.float64)

    @property
    def width(self) -> np.ndarray:
        return self.upper - self.lower

    def diameter(self) -> float:
        return float(np.linalg.norm(self.width))

    def from_unit(self, U: np.ndarray) -> np.ndarray:
        """Map a (d, n) plan from the unit cube into the box."""
        U = np.asarray(U, dtype=np.float64)
        self.check_plan(U)
        return self.lower[:, None] + U * self.width[:, None]

    def to_unit(self, plan: np.ndarray) -> np.ndarray:
        plan = np.asarray(plan, dtype=np.float64)
        self.check_plan(plan)
        return (plan - self.lower[:, None]) / self.width[:, None]

    def contains(self, plan: np.ndarray) -> bool:
        plan = np.asarray(plan, dtype=np.float64)
        self.check_plan(plan)
        return bool(np.all(plan >= self.lower[:, None]) and np.all(plan <= self.upper[:, None]))

    def check_plan(self, plan: np.ndarray) -> None:
        if plan.ndim != 2 or plan.shape[0] != self.dim:
            raise DimensionMismatch(f"plan must have shape ({self.dim}, n); got {plan.shape}")
