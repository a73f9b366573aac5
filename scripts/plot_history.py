#!/usr/bin/env python
from __future__ import annotations

import argparse
from pathlib import Path

import pandas as pd
import matplotlib.pyplot as plt


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--history", required=True, help="Path to history.csv")
    args = ap.parse_args()

    hist = pd.read_csv(args.history)

    x = range(1, len(hist) + 1)
    plt.figure()
    plt.plot(x, hist["best_y"].values, marker="o", label="best so far")
    infill = hist[hist["phase"] == "infill"]
    for kind, marker in (("exploration", "^"), ("exploitation", "v")):
        sel = infill[infill["infill_type"] == kind]
        plt.scatter(sel.index + 1, sel["y"].values, marker=marker, label=kind)
    n0 = int((hist["phase"] == "initial").sum())
    plt.axvline(n0 + 0.5, color="grey", linestyle="--", linewidth=1)
    plt.xlabel("evaluation")
    plt.ylabel("objective (lower is better)")
    plt.title("Objective value per evaluation")
    plt.legend()
    plt.grid(True)
    out = Path(args.history).with_suffix("").as_posix() + "_plot.png"
    plt.savefig(out, dpi=150, bbox_inches="tight")
    print(f"saved plot to: {out}")


if __name__ == "__main__":
    main()
