from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

import numpy as np
import torch

from .errors import DimensionMismatch, SurrogateFitFailure
from .utils import min_pairwise_distance, pairwise_distances


def _kernel_np(kind: str, r: np.ndarray, eps: float) -> np.ndarray:
    er2 = (eps * r) ** 2
    if kind == "gaussian":
        return np.exp(-er2)
    if kind == "multiquadric":
        return np.sqrt(1.0 + er2)
    if kind == "inverse_multiquadric":
        return 1.0 / np.sqrt(1.0 + er2)
    raise ValueError(f"Unknown rbf kernel: {kind}")


def _kernel_torch(kind: str, r: torch.Tensor, eps: torch.Tensor) -> torch.Tensor:
    er2 = (eps * r) ** 2
    if kind == "gaussian":
        return torch.exp(-er2)
    if kind == "multiquadric":
        return torch.sqrt(1.0 + er2)
    if kind == "inverse_multiquadric":
        return torch.rsqrt(1.0 + er2)
    raise ValueError(f"Unknown rbf kernel: {kind}")


@dataclass(frozen=True)
class RbfTrainConfig:
    kernel: str = "gaussian"
    eps: float = 1.0
    smooth: float = 1e-10
    steps: int = 100
    lr: float = 5e-2
    patience: int = 20


@dataclass(frozen=True)
class RbfInterpolant:
    """Radial basis function interpolant.

    Inputs are normalized to the unit box spanned by the training plan and
    targets are standardized, so that

        s(x) = y_mean + y_std * sum_i w_i phi(eps * ||u(x) - u_i||)

    A single training point gives the constant predictor ``y_mean``.
    """

    kernel: str
    eps: float
    centers: np.ndarray   # (n, d) normalized training points
    weights: np.ndarray   # (n,)
    x_lower: np.ndarray   # (d,)
    x_scale: np.ndarray   # (d,)
    y_mean: float
    y_std: float

    @property
    def dim(self) -> int:
        return int(self.centers.shape[1])

    def _normalize(self, X: np.ndarray) -> np.ndarray:
        return (X - self.x_lower[None, :]) / self.x_scale[None, :]

    def predict(self, plan: np.ndarray) -> np.ndarray:
        """Predict values for a (d, m) plan; returns shape (m,)."""
        plan = np.asarray(plan, dtype=np.float64)
        if plan.ndim == 1:
            plan = plan.reshape(-1, 1)
        if plan.shape[0] != self.dim:
            raise DimensionMismatch(f"plan must have {self.dim} rows; got {plan.shape}")
        U = self._normalize(plan.T)
        Phi = _kernel_np(self.kernel, pairwise_distances(U, self.centers), self.eps)
        return self.y_mean + self.y_std * (Phi @ self.weights)

    def __call__(self, x: np.ndarray) -> float:
        return float(self.predict(np.asarray(x, dtype=np.float64).reshape(-1, 1))[0])


def _normalize_plan(X: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    lower = np.min(X, axis=0)
    scale = np.max(X, axis=0) - lower
    scale = np.where(scale > 0.0, scale, 1.0)
    return (X - lower[None, :]) / scale[None, :], lower, scale


def _loocv_loss(R: torch.Tensor, y: torch.Tensor, log_eps: torch.Tensor, kernel: str, smooth: float) -> torch.Tensor:
    """Rippa's closed-form leave-one-out error, mean of e_i^2 with e_i = c_i / (A^-1)_ii."""
    n = R.shape[0]
    A = _kernel_torch(kernel, R, torch.exp(log_eps))
    A = A + smooth * torch.eye(n, dtype=A.dtype)
    A_inv = torch.linalg.inv(A)
    c = A_inv @ y
    e = c / torch.diagonal(A_inv)
    return torch.mean(e * e)


def train_rbf(
    X: np.ndarray,
    y: np.ndarray,
    cfg: RbfTrainConfig,
) -> Tuple[RbfInterpolant, Dict[str, Any]]:
    """Fit an RBF interpolant to rows X (n, d) and values y (n,).

    With at least 3 points the log shape parameter is trained with Adam on the
    leave-one-out error, keeping the best state (early stopping on ``patience``).
    Returns the interpolant and fit diagnostics.
    """
    X = np.asarray(X, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64).reshape(-1)
    if X.ndim != 2:
        raise ValueError("X must be 2D")
    if len(X) != len(y):
        raise DimensionMismatch(f"X and y length mismatch: {len(X)} vs {len(y)}")
    if len(X) < 1:
        raise SurrogateFitFailure("Need at least 1 point to fit an RBF surrogate")
    if not np.all(np.isfinite(X)) or not np.all(np.isfinite(y)):
        raise SurrogateFitFailure("training data contains non-finite values")

    n = len(X)
    U, lower, scale = _normalize_plan(X)
    if min_pairwise_distance(U) < 1e-12:
        raise SurrogateFitFailure("coincident points in the training plan; RBF system is singular")

    # Standardize targets for stability
    y_mean = float(np.mean(y))
    y_std = float(np.std(y))
    if not y_std > 1e-12:
        y_std = 1.0
    y_s = (y - y_mean) / y_std

    eps = float(cfg.eps)
    best_loss = float("nan")
    steps = 0

    if n >= 3 and cfg.steps > 0:
        R = torch.tensor(pairwise_distances(U, U), dtype=torch.float64)
        y_t = torch.tensor(y_s, dtype=torch.float64)
        log_eps = torch.tensor(np.log(eps), dtype=torch.float64, requires_grad=True)
        opt = torch.optim.Adam([log_eps], lr=cfg.lr)

        best_loss = float("inf")
        best_log_eps = float(np.log(eps))
        bad = 0

        for step in range(int(cfg.steps)):
            opt.zero_grad(set_to_none=True)
            try:
                loss = _loocv_loss(R, y_t, log_eps, cfg.kernel, float(cfg.smooth))
            except RuntimeError:
                # singular system for this eps; keep the best eps seen so far
                break
            loss_val = float(loss.item())
            if not np.isfinite(loss_val):
                break
            steps = step + 1

            if loss_val < best_loss - 1e-12:
                best_loss = loss_val
                best_log_eps = float(log_eps.detach().item())
                bad = 0
            else:
                bad += 1
                if bad >= cfg.patience:
                    break

            loss.backward()
            opt.step()

        eps = float(np.exp(best_log_eps))
        if not np.isfinite(best_loss):
            best_loss = float("nan")

    Phi = _kernel_np(cfg.kernel, pairwise_distances(U, U), eps) + float(cfg.smooth) * np.eye(n)
    try:
        weights = np.linalg.solve(Phi, y_s)
    except np.linalg.LinAlgError as exc:
        raise SurrogateFitFailure(f"RBF system is singular (kernel={cfg.kernel}, eps={eps:.6g})") from exc
    if not np.all(np.isfinite(weights)):
        raise SurrogateFitFailure(f"RBF weights are not finite (kernel={cfg.kernel}, eps={eps:.6g})")

    model = RbfInterpolant(
        kernel=cfg.kernel,
        eps=eps,
        centers=U,
        weights=weights,
        x_lower=lower,
        x_scale=scale,
        y_mean=y_mean,
        y_std=y_std,
    )

    resid = model.predict(X.T) - y
    info: Dict[str, Any] = {
        "kernel": cfg.kernel,
        "eps": float(eps),
        "loocv_mse": float(best_loss),
        "train_rmse": float(np.sqrt(np.mean(resid * resid))),
        "n_points": int(n),
        "steps": int(steps),
    }
    return model, info
