from __future__ import annotations

import dataclasses
import numbers
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

RBF_KERNELS = ("gaussian", "multiquadric", "inverse_multiquadric")
INFILL_KINDS = ("weighted", "maximin")

_INT_FIELDS = (
    "num_start_samples",
    "sampling_plan_opt_gens",
    "iterations",
    "rbf_opt_gens",
    "rbf_patience",
    "num_infill_points",
    "num_candidates",
)
_FLOAT_FIELDS = ("rbf_eps", "rbf_smooth", "rbf_lr", "perturbation_sigma", "min_distance_rtol", "exploitation_threshold")


def _as_int(name: str, value: Any) -> int:
    # YAML gives ints, but 5.0 is also accepted; bools and strings are not
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer; got {value!r}")
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real) and float(value).is_integer():
        return int(value)
    raise ValueError(f"{name} must be an integer; got {value!r}")


def _as_float(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValueError(f"{name} must be a number; got {value!r}")
    return float(value)


@dataclass(frozen=True)
class Options:
    """Configuration of one optimization run.

    The driver reads ``num_start_samples``, ``sampling_plan_opt_gens``,
    ``iterations``, ``trace`` and ``seed``. The remaining fields belong to the
    surrogate builder and the infill selector. An infill selector may hand back
    an evolved copy (see :meth:`evolve`) that is used from the next iteration on.
    """

    num_start_samples: int = 5
    sampling_plan_opt_gens: int = 1000
    iterations: int = 5
    trace: bool = False
    seed: Optional[int] = None

    # RBF surrogate
    rbf_kernel: str = "gaussian"
    rbf_eps: float = 1.0
    rbf_smooth: float = 1e-10
    rbf_opt_gens: int = 100
    rbf_lr: float = 5e-2
    rbf_patience: int = 20

    # Infill
    infill_kind: str = "weighted"
    num_infill_points: int = 1
    num_candidates: int = 500
    weight_pattern: Tuple[float, ...] = field(default=(0.2, 0.4, 0.6, 0.9, 0.95, 1.0))
    perturbation_sigma: float = 0.2
    min_distance_rtol: float = 1e-3
    exploitation_threshold: float = 0.5

    def __post_init__(self):
        # lists from YAML are accepted; store a tuple so the instance stays hashable
        object.__setattr__(self, "weight_pattern", tuple(_as_float("weight_pattern", w) for w in self.weight_pattern))
        for name in _INT_FIELDS:
            object.__setattr__(self, name, _as_int(name, getattr(self, name)))
        for name in _FLOAT_FIELDS:
            object.__setattr__(self, name, _as_float(name, getattr(self, name)))
        if self.seed is not None:
            object.__setattr__(self, "seed", _as_int("seed", self.seed))
        if not isinstance(self.trace, bool):
            raise ValueError(f"trace must be true or false; got {self.trace!r}")

        if int(self.num_start_samples) < 1:
            raise ValueError(f"num_start_samples must be >= 1; got {self.num_start_samples}")
        if int(self.sampling_plan_opt_gens) < 0:
            raise ValueError(f"sampling_plan_opt_gens must be >= 0; got {self.sampling_plan_opt_gens}")
        if int(self.iterations) < 0:
            raise ValueError(f"iterations must be >= 0; got {self.iterations}")
        if self.rbf_kernel not in RBF_KERNELS:
            raise ValueError(f"Unknown rbf_kernel: {self.rbf_kernel} (expected one of {RBF_KERNELS})")
        if not float(self.rbf_eps) > 0.0:
            raise ValueError(f"rbf_eps must be > 0; got {self.rbf_eps}")
        if float(self.rbf_smooth) < 0.0:
            raise ValueError(f"rbf_smooth must be >= 0; got {self.rbf_smooth}")
        if int(self.rbf_opt_gens) < 0:
            raise ValueError(f"rbf_opt_gens must be >= 0; got {self.rbf_opt_gens}")
        if self.infill_kind not in INFILL_KINDS:
            raise ValueError(f"Unknown infill_kind: {self.infill_kind} (expected one of {INFILL_KINDS})")
        if int(self.num_infill_points) < 1:
            raise ValueError(f"num_infill_points must be >= 1; got {self.num_infill_points}")
        if int(self.num_candidates) < int(self.num_infill_points):
            raise ValueError("num_candidates must be >= num_infill_points")
        if not self.weight_pattern:
            raise ValueError("weight_pattern must not be empty")
        if any(not (0.0 <= w <= 1.0) for w in self.weight_pattern):
            raise ValueError(f"weight_pattern values must lie in [0, 1]; got {self.weight_pattern}")

    def evolve(self, **changes: Any) -> "Options":
        """Return a copy with ``changes`` applied; the instance itself never changes."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        out = dataclasses.asdict(self)
        out["weight_pattern"] = list(self.weight_pattern)
        return out

    @classmethod
    def from_dict(cls, cfg: Optional[Mapping[str, Any]]) -> "Options":
        cfg = dict(cfg or {})
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(cfg) - known)
        if unknown:
            raise ValueError(f"Unknown option(s): {', '.join(unknown)}")
        return cls(**cfg)


def load_options(path: str | Path) -> Options:
    """Read options from a YAML file (either flat or under an ``options:`` key)."""
    cfg = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    if "options" in cfg:
        cfg = cfg["options"] or {}
    return Options.from_dict(cfg)
