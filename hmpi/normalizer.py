"""
Normalizer

Turns one reading and its limit entry into a sub-index:

    Q_i = ((M_i - I_i) / (S_i - I_i)) * 100

where M_i is the measured concentration, S_i the permissible limit and I_i
the ideal value. A reading at the limit gives exactly 100. Readings below
the ideal value give a negative Q_i, which is kept as is so the aggregate
stays linear in the inputs.
"""
import math
from typing import Optional

from hmpi.errors import InvalidLimit, InvalidReading
from hmpi.models import MetalLimit, MetalReading, SubIndex

DEFAULT_WEIGHT_CONSTANT = 1.0


def quality_index(concentration: float, permissible_limit: float, ideal_value: float = 0.0) -> float:
    """Compute Q_i for plain numbers (mg/L)."""
    if not math.isfinite(concentration):
        raise InvalidReading(f"Concentration must be a finite number, got {concentration}", value=concentration)
    if not (math.isfinite(permissible_limit) and math.isfinite(ideal_value)):
        raise InvalidLimit(f"Limit values must be finite, got {permissible_limit} and {ideal_value}")
    if concentration < 0:
        raise InvalidReading(f"Concentration must be non-negative, got {concentration}", value=concentration)
    span = permissible_limit - ideal_value
    if span == 0:
        raise InvalidLimit(f"Permissible limit equals ideal value ({permissible_limit})")
    if span < 0:
        raise InvalidLimit(f"Permissible limit ({permissible_limit}) is below ideal value ({ideal_value})")
    return ((concentration - ideal_value) / span) * 100.0


def unit_weight(limit: MetalLimit, k: float = DEFAULT_WEIGHT_CONSTANT) -> float:
    """W_i = K / S_i, or the standard-defined weight when the entry carries one."""
    if limit.weight is not None:
        return limit.weight
    if not math.isfinite(k) or k <= 0:
        raise ValueError(f"Weight constant must be a positive finite number, got {k}")
    return k / limit.permissible_limit


def normalize(reading: MetalReading, limit: MetalLimit, k: Optional[float] = None) -> SubIndex:
    """Build the SubIndex for one reading against its limit entry."""
    if reading.metal_name != limit.metal_name:
        raise InvalidLimit(
            f"Limit entry for {limit.metal_name} used for a {reading.metal_name} reading", reading.metal_name
        )
    try:
        q = quality_index(reading.concentration, limit.permissible_limit, limit.ideal_value)
    except InvalidReading as exc:
        raise InvalidReading(str(exc), reading.metal_name, reading.concentration) from exc
    except InvalidLimit as exc:
        raise InvalidLimit(f"{reading.metal_name}: {exc}", reading.metal_name) from exc

    return SubIndex(
        metal_name=reading.metal_name,
        concentration=reading.concentration,
        permissible_limit=limit.permissible_limit,
        ideal_value=limit.ideal_value,
        quality_index=q,
        weight=unit_weight(limit, DEFAULT_WEIGHT_CONSTANT if k is None else k),
    )
