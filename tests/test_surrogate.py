from __future__ import annotations

import numpy as np
import pytest

from sm_optim.errors import DimensionMismatch, SurrogateFitFailure
from sm_optim.options import Options
from sm_optim.rbf import RbfInterpolant
from sm_optim.sampling import latin_hypercube_plan
from sm_optim.space import SearchSpace
from sm_optim.surrogate import SurrogateModel, build_surrogate


def _sphere_data(n: int = 12, seed: int = 0):
    space = SearchSpace.coerce([(-5, 5), (-5, 5)])
    plan = latin_hypercube_plan(space, n, gens=100, seed=seed)
    samples = np.sum(plan * plan, axis=0)
    return space, plan, samples


@pytest.mark.parametrize("kernel", ["gaussian", "multiquadric", "inverse_multiquadric"])
def test_rbf_interpolates_training_points(kernel):
    _, plan, samples = _sphere_data()
    opts = Options(rbf_kernel=kernel, rbf_eps=3.0, rbf_smooth=0.0, rbf_opt_gens=0)
    model = build_surrogate(plan, samples, opts)

    assert isinstance(model, SurrogateModel)
    assert isinstance(model.interpolant, RbfInterpolant)
    assert np.allclose(model.predict(plan), samples, rtol=1e-5, atol=1e-5)
    assert model.fit_result["kernel"] == kernel
    assert model.fit_result["n_points"] == len(samples)
    assert model.fit_result["train_rmse"] < 1e-4


def test_shape_parameter_training_runs_and_reports_loocv():
    _, plan, samples = _sphere_data(n=15)
    model = build_surrogate(plan, samples, Options(rbf_opt_gens=25, rbf_patience=5))

    info = model.fit_result
    assert info["steps"] >= 1
    assert np.isfinite(info["loocv_mse"])
    assert info["eps"] > 0.0


def test_prediction_shape_for_new_points():
    _, plan, samples = _sphere_data()
    model = build_surrogate(plan, samples, Options(rbf_opt_gens=10))
    new = np.array([[0.0, 1.0, -2.0], [0.0, 1.0, 3.0]])
    pred = model.predict(new)
    assert pred.shape == (3,)
    assert np.all(np.isfinite(pred))
    assert np.isfinite(model.interpolant(np.array([0.5, 0.5])))


def test_single_point_fits_a_constant_surrogate():
    plan = np.array([[1.0], [2.0]])
    samples = np.array([7.5])
    model = build_surrogate(plan, samples, Options(rbf_eps=2.0))

    pred = model.predict(np.array([[1.0, -4.0, 3.0], [2.0, 4.0, 0.0]]))
    assert np.allclose(pred, 7.5)
    assert model.fit_result["eps"] == 2.0
    assert model.fit_result["steps"] == 0


def test_coincident_points_fail_to_fit():
    plan = np.array([[0.0, 1.0, 0.0], [0.0, 1.0, 0.0]])
    samples = np.array([1.0, 2.0, 1.0])
    with pytest.raises(SurrogateFitFailure):
        build_surrogate(plan, samples, Options())


def test_non_finite_samples_fail_to_fit():
    _, plan, samples = _sphere_data(n=5)
    samples = samples.copy()
    samples[2] = np.nan
    with pytest.raises(SurrogateFitFailure):
        build_surrogate(plan, samples, Options())


def test_misaligned_plan_and_samples_are_rejected():
    _, plan, samples = _sphere_data(n=5)
    with pytest.raises(DimensionMismatch):
        build_surrogate(plan, samples[:-1], Options())


def test_prediction_rejects_wrong_dimension():
    _, plan, samples = _sphere_data(n=5)
    model = build_surrogate(plan, samples, Options(rbf_opt_gens=0))
    with pytest.raises(DimensionMismatch):
        model.predict(np.zeros((3, 2)))
