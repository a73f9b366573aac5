#!/usr/bin/env python
from __future__ import annotations

import argparse
import copy
import datetime as dt
from pathlib import Path

import pandas as pd
import yaml

import sys
sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from sm_optim.loop import run_experiment
from sm_optim.utils import ensure_dir, load_json


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--config", required=True, help="Base YAML config")
    ap.add_argument("--seeds", default="0,1,2,3,4", help="Comma-separated seeds")
    ap.add_argument("--infill_kinds", default="weighted,maximin", help="Comma-separated infill kinds")
    ap.add_argument("--out_root", default="results", help="Output root directory")
    args = ap.parse_args()

    base_cfg = yaml.safe_load(Path(args.config).read_text(encoding="utf-8"))
    seeds = [int(s.strip()) for s in args.seeds.split(",") if s.strip()]
    kinds = [s.strip() for s in args.infill_kinds.split(",") if s.strip()]

    out_root = Path(args.out_root)
    ensure_dir(out_root)

    runs = []
    for s in seeds:
        for kind in kinds:
            cfg = copy.deepcopy(base_cfg)
            cfg["seed"] = s
            cfg.setdefault("options", {})
            cfg["options"]["infill_kind"] = kind
            cfg["options"]["seed"] = s
            stamp = dt.datetime.now().strftime("%Y%m%d_%H%M%S")
            run_name = f"{cfg['benchmark']['kind']}_{kind}_seed{s}_{stamp}"
            out_dir = out_root / run_name
            ensure_dir(out_dir)
            run_experiment(cfg, out_dir)

            best = load_json(out_dir / "best.json")
            runs.append(
                {
                    "run_name": run_name,
                    "infill_kind": kind,
                    "seed": s,
                    "best_y": float(best["best_y"]),
                    "oracle_calls": int(best["oracle_calls"]),
                    "out_dir": str(out_dir),
                }
            )

    df = pd.DataFrame(runs)
    summary_path = out_root / f"sweep_summary_{dt.datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"
    df.to_csv(summary_path, index=False)
    print(df.groupby("infill_kind")["best_y"].describe())
    print(f"Saved sweep summary: {summary_path}")


if __name__ == "__main__":
    main()
