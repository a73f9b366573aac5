"""Sequential surrogate-model optimization of expensive black-box functions."""

from .errors import (
    DimensionMismatch,
    EvaluationFailure,
    InvalidSearchSpace,
    OptimizationError,
    SurrogateFitFailure,
)
from .infill import InfillBatch, InfillSelector, InfillType, MaximinInfill, WeightedInfill, build_infill
from .loop import optimize, run_experiment
from .options import Options, load_options
from .result import Result
from .space import SearchSpace
from .surrogate import SurrogateModel, build_surrogate

__version__ = "0.1.0"
