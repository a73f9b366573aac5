from __future__ import annotations

from dataclasses import dataclass
from types import SimpleNamespace

import numpy as np
import pytest

from sm_optim.errors import DimensionMismatch
from sm_optim.infill import InfillBatch, InfillType, MaximinInfill, WeightedInfill, build_infill
from sm_optim.options import Options
from sm_optim.sampling import latin_hypercube_plan
from sm_optim.space import SearchSpace
from sm_optim.surrogate import SurrogateModel
from sm_optim.utils import pairwise_distances, rotate


@dataclass
class SphereInterpolant:
    """Exact stand-in for a fitted surrogate of the sphere function."""

    def predict(self, plan: np.ndarray) -> np.ndarray:
        plan = np.asarray(plan, dtype=np.float64)
        return np.sum(plan * plan, axis=0)


SPACE = SearchSpace.coerce([(-5, 5), (-5, 5)])
SURROGATE = SurrogateModel(interpolant=SphereInterpolant(), fit_result={"kind": "exact"})


def _observed(n: int = 8):
    plan = latin_hypercube_plan(SPACE, n, gens=50, seed=2)
    return plan, np.sum(plan * plan, axis=0)


def test_weighted_batch_is_aligned_and_inside_bounds():
    plan, samples = _observed()
    opts = Options(num_infill_points=4, num_candidates=300, seed=5)
    batch, new_opts = WeightedInfill().select(SPACE, plan, samples, SURROGATE, opts)

    assert batch.plan.shape == (2, 4)
    assert len(batch.types) == len(batch.predictions) == batch.size == 4
    assert SPACE.contains(batch.plan)
    assert np.allclose(batch.predictions, SURROGATE.predict(batch.plan))
    assert isinstance(new_opts, Options)


def test_weighted_rotates_weight_pattern_without_touching_input_options():
    plan, samples = _observed()
    opts = Options(num_infill_points=2, num_candidates=200, weight_pattern=(0.1, 0.5, 0.9), seed=0)
    _, new_opts = WeightedInfill().select(SPACE, plan, samples, SURROGATE, opts)

    assert new_opts.weight_pattern == (0.9, 0.1, 0.5)
    assert opts.weight_pattern == (0.1, 0.5, 0.9)
    assert new_opts == opts.evolve(weight_pattern=rotate(opts.weight_pattern, 2), seed=1)


def test_weighted_tags_follow_the_weight_schedule():
    plan, samples = _observed()
    opts = Options(num_infill_points=3, num_candidates=200, weight_pattern=(0.2, 0.9), seed=1)
    batch, _ = WeightedInfill().select(SPACE, plan, samples, SURROGATE, opts)
    assert batch.types == (InfillType.EXPLORATION, InfillType.EXPLOITATION, InfillType.EXPLORATION)


def test_pure_exploitation_picks_low_predictions():
    plan, samples = _observed()
    opts = Options(num_infill_points=1, num_candidates=500, weight_pattern=(1.0,), seed=3)
    batch, _ = WeightedInfill().select(SPACE, plan, samples, SURROGATE, opts)

    assert batch.types == (InfillType.EXPLOITATION,)
    # the sphere surrogate is minimized near the origin, better than any observed point
    assert batch.predictions[0] <= np.min(samples)


def test_selected_points_keep_minimum_distance_from_known_points():
    plan, samples = _observed()
    opts = Options(num_infill_points=5, num_candidates=300, min_distance_rtol=0.05, seed=9)
    batch, _ = WeightedInfill().select(SPACE, plan, samples, SURROGATE, opts)

    tol = 0.05 * SPACE.diameter()
    known = plan.T
    for x in batch.plan.T:
        assert np.min(pairwise_distances(x[None, :], known)) >= tol
        known = np.vstack([known, x])


def test_weighted_is_reproducible_for_a_fixed_seed():
    plan, samples = _observed()
    opts = Options(num_infill_points=3, num_candidates=100, seed=42)
    a, _ = WeightedInfill().select(SPACE, plan, samples, SURROGATE, opts)
    b, _ = WeightedInfill().select(SPACE, plan, samples, SURROGATE, opts)
    assert np.array_equal(a.plan, b.plan)


def test_threaded_options_draw_fresh_candidates_on_unchanged_data():
    plan, samples = _observed()
    opts = Options(num_infill_points=2, num_candidates=100, weight_pattern=(0.5,), seed=42)
    first, opts2 = WeightedInfill().select(SPACE, plan, samples, SURROGATE, opts)
    second, opts3 = WeightedInfill().select(SPACE, plan, samples, SURROGATE, opts2)

    assert (opts2.seed, opts3.seed) == (43, 44)
    assert not np.array_equal(first.plan, second.plan)


def test_seed_advance_happens_for_an_empty_batch():
    plan, samples = _observed()
    opts = Options(num_infill_points=2, num_candidates=50, min_distance_rtol=2.0, seed=5)
    batch, new_opts = WeightedInfill().select(SPACE, plan, samples, SURROGATE, opts)

    assert batch.size == 0
    assert batch.plan.shape == (2, 0)
    assert new_opts.seed == 6
    assert new_opts.weight_pattern == opts.weight_pattern


def test_unseeded_options_stay_unseeded():
    plan, samples = _observed()
    _, new_opts = WeightedInfill().select(SPACE, plan, samples, SURROGATE, Options(num_candidates=50))
    assert new_opts.seed is None


def test_maximin_explores_and_keeps_options():
    plan, samples = _observed()
    opts = Options(infill_kind="maximin", num_infill_points=3, num_candidates=200, seed=4)
    batch, new_opts = MaximinInfill().select(SPACE, plan, samples, SURROGATE, opts)

    assert batch.size == 3
    assert all(t is InfillType.EXPLORATION for t in batch.types)
    assert new_opts is opts
    assert np.min(pairwise_distances(batch.plan.T, plan.T)) > 0.0


def test_build_infill_dispatches_on_kind():
    assert isinstance(build_infill(Options()), WeightedInfill)
    assert isinstance(build_infill(Options(infill_kind="maximin")), MaximinInfill)
    with pytest.raises(ValueError, match="Unknown infill kind"):
        build_infill(SimpleNamespace(infill_kind="bogus"))


def test_infill_batch_rejects_misaligned_parts():
    with pytest.raises(DimensionMismatch):
        InfillBatch(plan=np.zeros((2, 2)), types=(InfillType.EXPLORATION,), predictions=np.zeros(2))
    with pytest.raises(DimensionMismatch):
        InfillBatch(plan=np.zeros((2, 1)), types=("exploration",), predictions=np.zeros(3))

    batch = InfillBatch(plan=np.zeros((2, 1)), types=("exploitation",), predictions=[1.0])
    assert batch.types == (InfillType.EXPLOITATION,)
