from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

import numpy as np
import yaml

from .benchmarks import BraninBenchmark, RastriginBenchmark, RosenbrockBenchmark, SphereBenchmark
from .data import DataBuffer
from .errors import DimensionMismatch
from .evaluate import ObjectiveFn, evaluate_plan
from .infill import InfillSelector, InfillType, build_infill
from .options import Options
from .report import ProgressReporter
from .result import Result
from .sampling import SamplingPlanGenerator, latin_hypercube_plan
from .space import SearchSpace
from .surrogate import SurrogateModel, SurrogateModelBuilder, build_surrogate
from .utils import ensure_dir, save_json, set_global_seed

logger = logging.getLogger(__name__)


def build_benchmark(cfg: Dict[str, Any]):
    kind = cfg["kind"].lower()
    if kind == "sphere":
        return SphereBenchmark(d=int(cfg.get("d", 2)), bound=float(cfg.get("bound", 5.0)))
    if kind == "rosenbrock":
        return RosenbrockBenchmark(
            d=int(cfg.get("d", 2)),
            lower=float(cfg.get("lower", -2.0)),
            upper=float(cfg.get("upper", 2.0)),
        )
    if kind == "branin":
        return BraninBenchmark()
    if kind == "rastrigin":
        return RastriginBenchmark(d=int(cfg.get("d", 2)), A=float(cfg.get("A", 10.0)))
    raise ValueError(f"Unknown benchmark kind: {kind}")


def optimize(
    objective: ObjectiveFn,
    search_space: SearchSpace | Iterable[Sequence[float]],
    options: Optional[Options] = None,
    *,
    sampler: Optional[SamplingPlanGenerator] = None,
    surrogate_builder: Optional[SurrogateModelBuilder] = None,
    infill_selector: Optional[InfillSelector] = None,
    reporter: Optional[ProgressReporter] = None,
) -> Result:
    """Minimize ``objective`` over ``search_space`` with an RBF surrogate.

    A space-filling plan of ``num_start_samples`` points is evaluated first.
    Each of the ``iterations`` rounds then fits a surrogate to every point seen
    so far, asks the infill selector for a new batch (and for the options of the
    next round), evaluates that batch and appends it. Exactly
    ``num_start_samples + sum(batch sizes)`` objective calls are made.

    Any error aborts the run; no partial result is returned.
    """
    options = options if options is not None else Options()
    space = SearchSpace.coerce(search_space)
    sampler = sampler if sampler is not None else latin_hypercube_plan
    surrogate_builder = surrogate_builder if surrogate_builder is not None else build_surrogate
    # a default selector follows infill_kind, an injected one is kept for the whole run
    follow_kind = infill_selector is None
    infill_selector = infill_selector if infill_selector is not None else build_infill(options)
    reporter = reporter if reporter is not None else ProgressReporter(enabled=options.trace)

    # --- Initial sampling plan
    lhc_plan = np.asarray(
        sampler(space, int(options.num_start_samples), int(options.sampling_plan_opt_gens), options.seed),
        dtype=np.float64,
    )
    space.check_plan(lhc_plan)
    if lhc_plan.shape[1] != int(options.num_start_samples):
        raise DimensionMismatch(
            f"sampling plan has {lhc_plan.shape[1]} columns; expected {options.num_start_samples}"
        )
    reporter.sampling_plan(space.to_unit(lhc_plan), options.sampling_plan_opt_gens)

    lhc_samples = evaluate_plan(objective, lhc_plan, reporter=reporter)

    data = DataBuffer(dim=space.dim)
    data.set_initial(lhc_plan, lhc_samples)

    surrogate: Optional[SurrogateModel] = None
    rows = []
    n_iters = int(options.iterations)

    for it in range(1, n_iters + 1):
        t0 = time.time()
        reporter.iteration(it, n_iters)

        plan_all, samples_all = data.get_arrays()
        surrogate = surrogate_builder(plan_all, samples_all, options)

        batch, options = infill_selector.select(space, plan_all, samples_all, surrogate, options)
        if follow_kind and options.infill_kind != infill_selector.name:
            logger.debug("infill kind %s -> %s from iteration %d", infill_selector.name, options.infill_kind, it + 1)
            infill_selector = build_infill(options)
        space.check_plan(batch.plan)
        reporter.infill_selected(batch.predictions, batch.types)

        infill_samples = evaluate_plan(objective, batch.plan, history=samples_all, reporter=reporter)
        data.add_batch(batch, infill_samples)

        dt = time.time() - t0
        row = {
            "iter": it,
            "n_samples": data.size(),
            "batch_size": batch.size,
            "n_exploration": sum(1 for t in batch.types if t is InfillType.EXPLORATION),
            "n_exploitation": sum(1 for t in batch.types if t is InfillType.EXPLOITATION),
            "batch_min": float(np.min(infill_samples)) if batch.size else float("nan"),
            "best_y": data.best(),
            "time_sec": dt,
        }
        if isinstance(surrogate.fit_result, Mapping):
            row.update({f"fit_{k}": v for k, v in surrogate.fit_result.items()})
        rows.append(row)
        logger.debug("iter %d/%d: batch=%d best_y=%.6g (%.3fs)", it, n_iters, batch.size, row["best_y"], dt)

    result = Result(
        initial_samples=lhc_samples,
        initial_plan=lhc_plan,
        surrogate=surrogate,
        fit_result=None if surrogate is None else surrogate.fit_result,
        infill_samples=data.infill_samples(),
        infill_types=data.infill_types(),
        infill_plan=data.infill_plan(),
        infill_predictions=data.infill_predictions(),
        options=options,
        iteration_log=tuple(rows),
    )
    reporter.summary(result.best_y, result.n_evaluations)
    return result


def run_experiment(config: Dict[str, Any], out_dir: str | Path) -> Path:
    out_dir = ensure_dir(out_dir)

    seed = config.get("seed")
    if seed is not None:
        set_global_seed(int(seed))

    bench = build_benchmark(config["benchmark"])
    save_json(out_dir / "benchmark.json", bench.info())

    opt_cfg = dict(config.get("options", {}))
    if seed is not None:
        opt_cfg.setdefault("seed", int(seed))
    options = Options.from_dict(opt_cfg)

    t0 = time.time()
    result = optimize(bench, bench.bounds(), options)
    dt = time.time() - t0

    result.history().to_csv(out_dir / "history.csv", index=False)
    result.iteration_frame().to_csv(out_dir / "iterations.csv", index=False)

    save_json(
        out_dir / "best.json",
        {
            "best_y": result.best_y,
            "best_x": result.best_x.tolist(),
            "oracle_calls": result.n_evaluations,
            "time_sec": dt,
        },
    )
    # save config copy as yaml
    (out_dir / "config.yaml").write_text(yaml.safe_dump(config, sort_keys=False), encoding="utf-8")

    print(f"[done] {bench.name}: best_y={result.best_y:.6g} | oracle_calls={result.n_evaluations} | {dt:.1f}s")
    return out_dir
