from __future__ import annotations

import json
import random
from pathlib import Path
from typing import Any, Optional

import numpy as np
from scipy.spatial.distance import cdist, pdist


def set_global_seed(seed: int) -> None:
    """Seed Python + NumPy + Torch for reproducibility."""
    import torch

    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)


def ensure_dir(path: str | Path) -> Path:
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def save_json(path: str | Path, obj: Any) -> None:
    Path(path).write_text(json.dumps(obj, indent=2, sort_keys=True), encoding="utf-8")


def load_json(path: str | Path) -> Any:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def derive_seed(seed: Optional[int], offset: int) -> Optional[int]:
    """Per-step seed for a run seeded with ``seed`` (None stays unseeded)."""
    if seed is None:
        return None
    return int(seed) + int(offset)


def pairwise_distances(A: np.ndarray, B: np.ndarray) -> np.ndarray:
    """Euclidean distances between rows of A (m, d) and rows of B (n, d) -> (m, n)."""
    A = np.asarray(A, dtype=np.float64)
    B = np.asarray(B, dtype=np.float64)
    if A.ndim != 2 or B.ndim != 2 or A.shape[1] != B.shape[1]:
        raise ValueError(f"pairwise_distances: incompatible shapes {A.shape} and {B.shape}")
    return cdist(A, B)


def min_pairwise_distance(X: np.ndarray) -> float:
    """Smallest distance between two distinct rows of X (inf for fewer than 2 rows)."""
    X = np.asarray(X, dtype=np.float64)
    if X.ndim != 2:
        raise ValueError("X must be 2D")
    if len(X) < 2:
        return float("inf")
    return float(np.min(pdist(X)))


def rotate(seq: tuple, n: int) -> tuple:
    """Rotate a tuple left by ``n`` positions."""
    if not seq:
        return seq
    k = int(n) % len(seq)
    return tuple(seq[k:]) + tuple(seq[:k])
