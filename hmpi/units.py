"""Concentration unit handling. Everything is converted to mg/L."""
import math
from typing import Any, Optional

from hmpi.errors import InvalidReading, UnsupportedUnit

CANONICAL_UNIT = "mg/L"

# divide by this to get mg/L
_DIVISORS = {
    "mg/l": 1.0,
    "ppm": 1.0,
    "ppb": 1000.0,
    "ug/l": 1000.0,
    "µg/l": 1000.0,  # micro sign
    "μg/l": 1000.0,  # greek mu
}


def normalize_unit(unit: Any) -> str:
    """Return the lookup key for a unit string, raising UnsupportedUnit if unknown."""
    if not isinstance(unit, str):
        raise UnsupportedUnit(unit)
    key = unit.strip().lower().replace(" ", "")
    if key not in _DIVISORS:
        raise UnsupportedUnit(unit)
    return key


def coerce_number(value: Any, metal: Optional[str] = None, field: str = "concentration") -> float:
    """
    Cast a raw value to a finite float.

    Strings holding numbers are accepted (CSV cells often arrive that way);
    booleans, NaN and infinities are not.
    """
    if isinstance(value, bool):
        raise InvalidReading(f"{field} for {metal or 'reading'} must be a number, got {value!r}", metal, value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidReading(f"{field} for {metal or 'reading'} is not numeric: {value!r}", metal, value) from None
    if not math.isfinite(number):
        raise InvalidReading(f"{field} for {metal or 'reading'} must be finite, got {value!r}", metal, value)
    return number


def to_mg_per_l(value: float, unit: str = CANONICAL_UNIT) -> float:
    """Convert a concentration to mg/L. ppm is 1:1, ppb and ug/L divide by 1000."""
    return float(value) / _DIVISORS[normalize_unit(unit)]
