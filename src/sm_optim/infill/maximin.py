from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from ..options import Options
from ..space import SearchSpace
from ..surrogate import SurrogateModel
from ..utils import derive_seed, pairwise_distances
from .base import InfillBatch, InfillSelector, InfillType


@dataclass
class MaximinInfill(InfillSelector):
    """Pure exploration baseline: greedily pick uniform candidates farthest from all known points.

    The surrogate is only used to report predictions. Options are returned unchanged.
    """

    name: str = "maximin"

    def select(
        self,
        space: SearchSpace,
        plan: np.ndarray,
        samples: np.ndarray,
        surrogate: SurrogateModel,
        options: Options,
    ) -> Tuple[InfillBatch, Options]:
        plan = np.asarray(plan, dtype=np.float64)
        space.check_plan(plan)

        rng = np.random.default_rng(derive_seed(options.seed, 7919 * plan.shape[1]))
        n = int(options.num_candidates)
        X = space.lower[None, :] + rng.random((n, space.dim)) * space.width[None, :]
        dist = np.min(pairwise_distances(X, plan.T), axis=1)

        picked: List[int] = []
        for _ in range(int(options.num_infill_points)):
            j = int(np.argmax(dist))
            if dist[j] <= 0.0:
                break
            picked.append(j)
            dist = np.minimum(dist, pairwise_distances(X, X[j : j + 1])[:, 0])

        X_new = X[picked]
        batch = InfillBatch(
            plan=X_new.T.reshape(space.dim, len(picked)),
            types=tuple(InfillType.EXPLORATION for _ in picked),
            predictions=surrogate.predict(X_new.T) if picked else np.zeros((0,)),
        )
        return batch, options
