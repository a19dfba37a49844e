"""Heavy Metal Pollution Index (HMPI) computation engine."""
from hmpi.aggregator import aggregate
from hmpi.classifier import RiskBand, RiskThresholds, classify
from hmpi.engine import assess, assess_request
from hmpi.errors import (
    DuplicateMetal,
    EmptyInput,
    HMPIError,
    InvalidLimit,
    InvalidReading,
    InvalidThresholds,
    UnsupportedUnit,
)
from hmpi.models import AggregateResult, Assessment, MetalLimit, MetalReading, SubIndex
from hmpi.normalizer import normalize, quality_index
from hmpi.standards import LimitTable, available_standards, get_standard, load_standard_file
from hmpi.units import to_mg_per_l

__version__ = "0.1.0"

__all__ = [
    "AggregateResult",
    "Assessment",
    "DuplicateMetal",
    "EmptyInput",
    "HMPIError",
    "InvalidLimit",
    "InvalidReading",
    "InvalidThresholds",
    "LimitTable",
    "MetalLimit",
    "MetalReading",
    "RiskBand",
    "RiskThresholds",
    "SubIndex",
    "UnsupportedUnit",
    "aggregate",
    "assess",
    "assess_request",
    "available_standards",
    "classify",
    "get_standard",
    "load_standard_file",
    "normalize",
    "quality_index",
    "to_mg_per_l",
]
