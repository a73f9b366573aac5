from __future__ import annotations

import functools
import logging
from typing import Optional, Sequence

import numpy as np
from rich.console import Console
from rich.text import Text

from .sampling import morris_mitchell_phi

logger = logging.getLogger(__name__)

SEPARATOR = "-" * 63


def improvement(new_samples: np.ndarray, prior_samples: np.ndarray) -> Optional[float]:
    """How much the batch minimum beats the best prior sample, or None if it does not."""
    new_samples = np.asarray(new_samples, dtype=np.float64).reshape(-1)
    prior_samples = np.asarray(prior_samples, dtype=np.float64).reshape(-1)
    if new_samples.size == 0 or prior_samples.size == 0:
        return None
    new_min = float(np.min(new_samples))
    old_min = float(np.min(prior_samples))
    if new_min < old_min:
        return old_min - new_min
    return None


def _best_effort(fn):
    """Trace output must never abort an optimization run."""

    @functools.wraps(fn)
    def wrapper(self, *args, **kwargs):
        if not self.enabled:
            return None
        try:
            return fn(self, *args, **kwargs)
        except Exception:
            logger.debug("trace output failed in %s", fn.__name__, exc_info=True)
            return None

    return wrapper


class ProgressReporter:
    """Human-readable trace of an optimization run, printed with rich.

    Stateless apart from the console it writes to; nothing it does feeds back
    into the optimization.
    """

    def __init__(self, enabled: bool = True, console: Optional[Console] = None):
        self.enabled = bool(enabled)
        self.console = console if console is not None else Console(highlight=False)

    @_best_effort
    def sampling_plan(self, unit_plan: np.ndarray, gens: int) -> None:
        """Size and Morris-Mitchell criterion of a plan already scaled to the unit cube."""
        unit_plan = np.asarray(unit_plan, dtype=np.float64)
        phi = morris_mitchell_phi(unit_plan)
        self.console.print(
            f"Sampling plan: {unit_plan.shape[1]} points, {gens} optimization generations, phi_p = {phi:.7g}"
        )

    @_best_effort
    def iteration(self, i: int, iterations: int) -> None:
        line = Text("\n\n\n\tIteration ")
        line.append(str(i), style="bold")
        line.append(f" out of {iterations}")
        self.console.print(line)

    @_best_effort
    def evaluating(self, n: int) -> None:
        self.console.print(f"Evaluating function {n} times ...")

    @_best_effort
    def initial_samples(self, samples: np.ndarray) -> None:
        samples = np.asarray(samples, dtype=np.float64)
        line = Text("Max and min sample value: ")
        line.append(f"{np.max(samples):.7g}", style="bright_red")
        line.append("\t")
        line.append(f"{np.min(samples):.7g}", style="bold bright_green")
        self.console.print(line)

    @_best_effort
    def infill_samples(self, new_samples: np.ndarray, prior_samples: np.ndarray) -> None:
        new_samples = np.asarray(new_samples, dtype=np.float64)
        prior_samples = np.asarray(prior_samples, dtype=np.float64)
        if new_samples.size == 0:
            self.console.print("No infill points were evaluated")
            return

        line = Text()
        j_min = int(np.argmin(new_samples))
        for j, v in enumerate(new_samples):
            line.append("%-15.7g" % v, style="bold bright_green" if j == j_min else None)
        line.append("\t actual value")
        self.console.print(line)
        self.console.print(SEPARATOR)

        all_samples = np.concatenate([new_samples, prior_samples])
        line = Text("Max and min sample value: ")
        line.append(f"{np.max(all_samples):.7g}", style="bright_red")
        line.append("\t")
        line.append(f"{np.min(all_samples):.7g}", style="bold green")
        delta = improvement(new_samples, prior_samples)
        if delta is None:
            line.append("\t (Improvement from last iteration N/A)")
        else:
            line.append(f"\t (Improvement from last iteration {delta:.7g})")
        self.console.print(line)

    @_best_effort
    def infill_selected(self, predictions: np.ndarray, types: Sequence[str]) -> None:
        line = Text()
        for v, t in zip(np.asarray(predictions, dtype=np.float64), types):
            line.append("%-15.7g" % v, style="cyan")
        line.append("\t predicted value")
        self.console.print(line)
        self.console.print("".join("%-15s" % getattr(t, "value", t) for t in types) + "\t infill type")

    @_best_effort
    def summary(self, best_y: float, n_evaluations: int) -> None:
        line = Text(f"\nFinished after {n_evaluations} evaluations, best value ")
        line.append(f"{best_y:.7g}", style="bold bright_green")
        self.console.print(line)
