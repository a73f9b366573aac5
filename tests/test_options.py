from __future__ import annotations

import dataclasses

import pytest

from sm_optim.options import Options, load_options


def test_defaults_are_valid_and_hashable():
    opts = Options()
    assert opts.num_start_samples >= 1
    assert isinstance(opts.weight_pattern, tuple)
    hash(opts)


@pytest.mark.parametrize(
    "changes",
    [
        {"num_start_samples": 0},
        {"sampling_plan_opt_gens": -1},
        {"iterations": -1},
        {"rbf_kernel": "cubic"},
        {"rbf_eps": 0.0},
        {"infill_kind": "random"},
        {"num_infill_points": 0},
        {"num_candidates": 1, "num_infill_points": 2},
        {"weight_pattern": ()},
        {"weight_pattern": (0.5, 1.5)},
    ],
)
def test_invalid_values_are_rejected(changes):
    with pytest.raises(ValueError):
        Options(**changes)


def test_options_are_frozen_and_evolve_returns_a_copy():
    opts = Options(iterations=3)
    with pytest.raises(dataclasses.FrozenInstanceError):
        opts.iterations = 4  # type: ignore[misc]

    evolved = opts.evolve(iterations=7)
    assert evolved.iterations == 7
    assert opts.iterations == 3
    assert evolved is not opts


def test_from_dict_coerces_lists_and_rejects_unknown_keys():
    opts = Options.from_dict({"iterations": 2, "weight_pattern": [0.1, 0.9]})
    assert opts.weight_pattern == (0.1, 0.9)

    with pytest.raises(ValueError, match="Unknown option"):
        Options.from_dict({"iterations": 2, "not_an_option": 1})


def test_to_dict_round_trips():
    opts = Options(num_start_samples=7, seed=3, weight_pattern=(0.25, 1.0))
    assert Options.from_dict(opts.to_dict()) == opts


def test_load_options_reads_flat_and_nested_yaml(tmp_path):
    flat = tmp_path / "flat.yaml"
    flat.write_text("iterations: 4\ntrace: true\n", encoding="utf-8")
    assert load_options(flat) == Options(iterations=4, trace=True)

    nested = tmp_path / "nested.yaml"
    nested.write_text(
        "benchmark:\n  kind: sphere\noptions:\n  num_start_samples: 9\n  weight_pattern: [0.5]\n",
        encoding="utf-8",
    )
    opts = load_options(nested)
    assert opts.num_start_samples == 9
    assert opts.weight_pattern == (0.5,)


def test_yaml_values_are_type_checked(tmp_path):
    path = tmp_path / "opts.yaml"
    path.write_text('trace: "false"\n', encoding="utf-8")
    with pytest.raises(ValueError, match="trace"):
        load_options(path)

    with pytest.raises(ValueError, match="iterations"):
        Options.from_dict({"iterations": "3"})
    with pytest.raises(ValueError, match="num_infill_points"):
        Options.from_dict({"num_infill_points": True})
    with pytest.raises(ValueError, match="rbf_eps"):
        Options.from_dict({"rbf_eps": "1.0"})
    with pytest.raises(ValueError, match="seed"):
        Options.from_dict({"seed": 1.5})


def test_numeric_values_are_coerced():
    opts = Options.from_dict({"iterations": 3.0, "rbf_eps": 2, "seed": 7.0, "weight_pattern": [1]})
    assert opts.iterations == 3 and isinstance(opts.iterations, int)
    assert opts.rbf_eps == 2.0 and isinstance(opts.rbf_eps, float)
    assert opts.seed == 7 and isinstance(opts.seed, int)
    assert opts.weight_pattern == (1.0,)
