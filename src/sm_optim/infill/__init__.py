from .base import InfillBatch, InfillSelector, InfillType
from .maximin import MaximinInfill
from .weighted import WeightedInfill


def build_infill(options) -> InfillSelector:
    kind = str(options.infill_kind).lower()
    if kind == "weighted":
        return WeightedInfill()
    if kind == "maximin":
        return MaximinInfill()
    raise ValueError(f"Unknown infill kind: {kind}")
