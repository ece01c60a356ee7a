from squish.engine import EngineState, ReductionEngine, reduce
from squish.errors import DataFormatError, PreconditionViolation
from squish.points import TrajectoryPoint
from squish.sed import sed

__all__ = [
    "DataFormatError",
    "EngineState",
    "PreconditionViolation",
    "ReductionEngine",
    "TrajectoryPoint",
    "reduce",
    "sed",
]
