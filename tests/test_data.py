from __future__ import annotations

import numpy as np
import pytest

from sm_optim.data import DataBuffer
from sm_optim.errors import DimensionMismatch
from sm_optim.infill import InfillBatch, InfillType


def _batch(cols, pred=None, kind="exploration"):
    plan = np.asarray(cols, dtype=np.float64)
    k = plan.shape[1]
    return InfillBatch(plan=plan, types=(kind,) * k, predictions=np.zeros(k) if pred is None else pred)


def test_empty_infill_accumulators_have_consistent_shapes():
    data = DataBuffer(dim=3)
    data.set_initial(np.zeros((3, 2)), np.array([1.0, 2.0]))

    assert data.infill_plan().shape == (3, 0)
    assert data.infill_samples().shape == (0,)
    assert data.infill_predictions().shape == (0,)
    assert data.infill_types() == ()
    assert data.n_batches() == 0
    assert data.size() == 2


def test_batches_are_appended_in_order():
    data = DataBuffer(dim=2)
    data.set_initial(np.array([[0.0, 1.0], [0.0, 1.0]]), np.array([5.0, 4.0]))
    data.add_batch(_batch([[2.0], [2.0]], pred=[3.5]), np.array([3.0]))
    data.add_batch(_batch([[3.0, 4.0], [3.0, 4.0]], kind="exploitation"), np.array([2.0, 6.0]))

    plan, samples = data.get_arrays()
    assert np.array_equal(plan[0], [0.0, 1.0, 2.0, 3.0, 4.0])
    assert np.array_equal(samples, [5.0, 4.0, 3.0, 2.0, 6.0])
    assert plan.shape[1] == len(samples)

    assert data.infill_types() == (InfillType.EXPLORATION, InfillType.EXPLOITATION, InfillType.EXPLOITATION)
    assert np.array_equal(data.infill_predictions(), [3.5, 0.0, 0.0])
    assert data.n_batches() == 2
    assert data.best() == 2.0


def test_earlier_data_is_not_altered_by_reads():
    data = DataBuffer(dim=1)
    data.set_initial(np.array([[0.0]]), np.array([1.0]))
    plan, samples = data.get_arrays()
    plan[0, 0] = 99.0
    samples[0] = 99.0
    again_plan, again_samples = data.get_arrays()
    assert again_plan[0, 0] == 0.0
    assert again_samples[0] == 1.0


def test_misaligned_data_is_rejected():
    data = DataBuffer(dim=2)
    with pytest.raises(DimensionMismatch):
        data.set_initial(np.zeros((3, 2)), np.zeros(2))
    with pytest.raises(DimensionMismatch):
        data.set_initial(np.zeros((2, 2)), np.zeros(3))

    data.set_initial(np.zeros((2, 2)), np.zeros(2))
    with pytest.raises(DimensionMismatch):
        data.add_batch(_batch([[1.0], [1.0]]), np.array([1.0, 2.0]))
    assert data.n_batches() == 0


def test_initial_data_can_only_be_set_once():
    data = DataBuffer(dim=1)
    data.set_initial(np.zeros((1, 1)), np.zeros(1))
    with pytest.raises(RuntimeError):
        data.set_initial(np.zeros((1, 1)), np.zeros(1))
