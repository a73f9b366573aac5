"""Space-filling initial sampling plans.

The default plan is a Latin hypercube whose points sit at bin midpoints of the
unit cube. It is improved with a (1+1) evolutionary search on the
Morris-Mitchell criterion

    phi_p(X) = (sum_{i<j} d_ij^-p) ^ (1/p)

(smaller is better) by swapping two coordinates of one dimension per generation,
and finally scaled into the search box.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

import numpy as np
from scipy.spatial.distance import pdist

from .space import SearchSpace

logger = logging.getLogger(__name__)

SamplingPlanGenerator = Callable[[SearchSpace, int, int, Optional[int]], np.ndarray]


def morris_mitchell_phi(points: np.ndarray, p: float = 2.0) -> float:
    """Morris-Mitchell phi_p of a (d, n) plan; 0.0 for fewer than two points."""
    X = np.asarray(points, dtype=np.float64).T
    n = len(X)
    if n < 2:
        return 0.0
    D = pdist(X)
    if np.any(D == 0.0):
        return float("inf")
    return float(np.sum(D ** (-float(p))) ** (1.0 / float(p)))


def random_latin_hypercube(d: int, n: int, rng: np.random.Generator) -> np.ndarray:
    """(d, n) Latin hypercube on the unit cube, one point per bin midpoint."""
    perms = np.stack([rng.permutation(n) for _ in range(d)], axis=0)
    return (perms.astype(np.float64) + 0.5) / float(n)


def optimize_latin_hypercube(
    U: np.ndarray,
    gens: int,
    rng: np.random.Generator,
    p: float = 2.0,
) -> np.ndarray:
    d, n = U.shape
    best = np.array(U, copy=True)
    if n < 2 or gens <= 0:
        return best

    best_phi = morris_mitchell_phi(best, p)
    for _ in range(int(gens)):
        cand = best.copy()
        k = int(rng.integers(d))
        i, j = rng.choice(n, size=2, replace=False)
        cand[k, i], cand[k, j] = cand[k, j], cand[k, i]

        phi = morris_mitchell_phi(cand, p)
        # accept ties to keep drifting across plateaus
        if phi <= best_phi:
            best, best_phi = cand, phi
    return best


def latin_hypercube_plan(
    space: SearchSpace,
    n: int,
    gens: int,
    seed: Optional[int] = None,
) -> np.ndarray:
    """Optimized Latin hypercube plan of shape (space.dim, n) inside ``space``."""
    if int(n) < 1:
        raise ValueError(f"sampling plan needs n >= 1; got {n}")
    rng = np.random.default_rng(seed)
    U = random_latin_hypercube(space.dim, int(n), rng)
    U = optimize_latin_hypercube(U, int(gens), rng)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("latin hypercube d=%d n=%d gens=%d phi=%.6g", space.dim, n, gens, morris_mitchell_phi(U))
    return space.from_unit(U)
