#!/usr/bin/env python
from __future__ import annotations

import argparse
import datetime as dt
from pathlib import Path

import yaml

# Allow running without installing package:
import sys
sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from sm_optim.loop import run_experiment
from sm_optim.utils import ensure_dir


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--config", required=True, help="Path to YAML config")
    ap.add_argument("--out", default=None, help="Output directory (default: results/<run_name>)")
    ap.add_argument("--iterations", type=int, default=None, help="Override options.iterations")
    ap.add_argument("--infill_kind", default=None, help="Override options.infill_kind (weighted, maximin)")
    ap.add_argument("--trace", action="store_true", help="Print the per-iteration trace")
    args = ap.parse_args()

    cfg_path = Path(args.config)
    cfg = yaml.safe_load(cfg_path.read_text(encoding="utf-8"))
    cfg.setdefault("options", {})

    if args.iterations is not None:
        cfg["options"]["iterations"] = int(args.iterations)
    if args.infill_kind is not None:
        cfg["options"]["infill_kind"] = str(args.infill_kind).lower()
    if args.trace:
        cfg["options"]["trace"] = True

    run_name = cfg.get("run_name")
    if not run_name:
        stamp = dt.datetime.now().strftime("%Y%m%d_%H%M%S")
        run_name = f"{cfg['benchmark']['kind']}_{stamp}"

    out_dir = Path(args.out) if args.out else Path("results") / run_name
    ensure_dir(out_dir)

    print(f"[run] config={cfg_path} -> out={out_dir}")
    run_experiment(cfg, out_dir)


if __name__ == "__main__":
    main()
