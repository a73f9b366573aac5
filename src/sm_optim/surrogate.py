from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

import numpy as np

from .errors import DimensionMismatch
from .options import Options
from .rbf import RbfTrainConfig, train_rbf

logger = logging.getLogger(__name__)


class Interpolant(Protocol):
    def predict(self, plan: np.ndarray) -> np.ndarray:
        """Predict values for a (d, m) plan."""
        ...


@dataclass(frozen=True)
class SurrogateModel:
    """A fitted interpolant paired with the diagnostics of its fit.

    The driver only calls ``predict`` (through the infill selector) and passes
    ``fit_result`` through to the result, so any surrogate family fits here.
    When ``fit_result`` is a mapping its entries also land in the iteration log
    as ``fit_<key>`` columns.
    """

    interpolant: Interpolant
    fit_result: Any = field(default_factory=dict)

    def predict(self, plan: np.ndarray) -> np.ndarray:
        return np.asarray(self.interpolant.predict(plan), dtype=np.float64).reshape(-1)


SurrogateModelBuilder = Callable[[np.ndarray, np.ndarray, Options], SurrogateModel]


def rbf_config_from_options(options: Options) -> RbfTrainConfig:
    return RbfTrainConfig(
        kernel=options.rbf_kernel,
        eps=float(options.rbf_eps),
        smooth=float(options.rbf_smooth),
        steps=int(options.rbf_opt_gens),
        lr=float(options.rbf_lr),
        patience=int(options.rbf_patience),
    )


def build_surrogate(plan: np.ndarray, samples: np.ndarray, options: Options) -> SurrogateModel:
    """Fit the default RBF surrogate to a (d, n) plan and its n samples."""
    plan = np.asarray(plan, dtype=np.float64)
    samples = np.asarray(samples, dtype=np.float64).reshape(-1)
    if plan.ndim != 2:
        raise DimensionMismatch(f"plan must be 2D (d, n); got shape {plan.shape}")
    if plan.shape[1] != len(samples):
        raise DimensionMismatch(f"plan has {plan.shape[1]} columns but {len(samples)} samples")

    model, info = train_rbf(plan.T, samples, rbf_config_from_options(options))
    logger.debug(
        "rbf fit: n=%d kernel=%s eps=%.6g loocv_mse=%.6g steps=%d",
        info["n_points"], info["kernel"], info["eps"], info["loocv_mse"], info["steps"],
    )
    return SurrogateModel(interpolant=model, fit_result=info)
