"""
Error taxonomy for the HMPI engine.

Every failure is a local validation error on the caller's input. None of
them is transient, so nothing here is retried: fix the input and resubmit.
"""
from typing import Any, Optional


class HMPIError(ValueError):
    """Base class for all HMPI validation errors."""


class InvalidReading(HMPIError):
    """Concentration is negative, non-numeric or not finite."""

    def __init__(self, message: str, metal: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.metal = metal
        self.value = value


class InvalidLimit(HMPIError):
    """Limit table entry is missing or malformed."""

    def __init__(self, message: str, metal: Optional[str] = None):
        super().__init__(message)
        self.metal = metal


class UnsupportedUnit(HMPIError):
    """Unit cannot be converted to mg/L."""

    def __init__(self, unit: Any):
        super().__init__(f"Unsupported unit: {unit!r}")
        self.unit = unit


class EmptyInput(HMPIError):
    """No readings to aggregate."""


class DuplicateMetal(HMPIError):
    """The same metal appears more than once in one reading set."""

    def __init__(self, metal: str):
        super().__init__(f"Metal {metal!r} appears more than once in the reading set")
        self.metal = metal


class InvalidThresholds(HMPIError):
    """Risk band table is not strictly increasing or does not cover [0, inf)."""
