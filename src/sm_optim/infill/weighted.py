from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from ..options import Options
from ..space import SearchSpace
from ..surrogate import SurrogateModel
from ..utils import derive_seed, pairwise_distances, rotate
from .base import InfillBatch, InfillSelector, InfillType

logger = logging.getLogger(__name__)


def _scale01(v: np.ndarray) -> np.ndarray:
    lo, hi = float(np.min(v)), float(np.max(v))
    if hi == lo:
        return np.ones_like(v)
    return (v - lo) / (hi - lo)


def weighted_score(scaled_value: np.ndarray, dist: np.ndarray, weight: float) -> np.ndarray:
    """w * s(x) + (1 - w) * (1 - d(x)), with s and d scaled to [0, 1] over the pool.

    Small surrogate values (exploitation) and large distances to observed
    points (exploration) both lower the score.
    """
    return float(weight) * scaled_value + (1.0 - float(weight)) * (1.0 - _scale01(dist))


def sample_candidates(
    space: SearchSpace,
    best_x: np.ndarray,
    n: int,
    sigma: float,
    rng: np.random.Generator,
) -> np.ndarray:
    """(n, d) candidates: half uniform in the box, half Gaussian around ``best_x``."""
    d = space.dim
    n_local = n // 2
    n_global = n - n_local
    lower, upper, width = space.lower, space.upper, space.width

    X_global = lower[None, :] + rng.random((n_global, d)) * width[None, :]
    X_local = best_x[None, :] + float(sigma) * width[None, :] * rng.standard_normal((n_local, d))
    X_local = np.clip(X_local, lower[None, :], upper[None, :])
    return np.concatenate([X_global, X_local], axis=0)


@dataclass
class WeightedInfill(InfillSelector):
    """Candidate search balancing surrogate value against distance to known points.

    Each pick ``i`` in a batch uses ``w = weight_pattern[i % len]``; picks with
    ``w >= exploitation_threshold`` are tagged exploitation, the rest
    exploration. The pattern is rotated by the batch size in the returned
    options so the next iteration continues the cycle, and the seed (when set)
    is advanced by one.
    """

    name: str = "weighted"

    def select(
        self,
        space: SearchSpace,
        plan: np.ndarray,
        samples: np.ndarray,
        surrogate: SurrogateModel,
        options: Options,
    ) -> Tuple[InfillBatch, Options]:
        plan = np.asarray(plan, dtype=np.float64)
        samples = np.asarray(samples, dtype=np.float64).reshape(-1)
        space.check_plan(plan)

        rng = np.random.default_rng(derive_seed(options.seed, 7919 * len(samples)))
        best_x = plan[:, int(np.argmin(samples))]
        X = sample_candidates(space, best_x, int(options.num_candidates), options.perturbation_sigma, rng)

        pred = surrogate.predict(X.T)
        scaled_value = _scale01(pred)
        dist = np.min(pairwise_distances(X, plan.T), axis=1)
        tol = float(options.min_distance_rtol) * space.diameter()

        picked: List[int] = []
        types: List[InfillType] = []
        pattern = options.weight_pattern
        for i in range(int(options.num_infill_points)):
            w = pattern[i % len(pattern)]
            score = weighted_score(scaled_value, dist, w)
            score[dist < tol] = np.inf
            j = int(np.argmin(score))
            if not np.isfinite(score[j]):
                logger.debug("all candidates within %.3g of known points; batch ends at %d", tol, len(picked))
                break
            picked.append(j)
            types.append(InfillType.EXPLOITATION if w >= options.exploitation_threshold else InfillType.EXPLORATION)
            dist = np.minimum(dist, pairwise_distances(X, X[j : j + 1])[:, 0])

        batch = InfillBatch(
            plan=X[picked].T.reshape(space.dim, len(picked)),
            types=tuple(types),
            predictions=pred[picked],
        )
        # advance the seed on every call, empty batches included
        new_options = options.evolve(
            weight_pattern=rotate(pattern, len(picked)),
            seed=derive_seed(options.seed, 1),
        )
        return batch, new_options
