"""
Data model for the HMPI engine.

All types are frozen: a reading set is fixed once submitted and results are
recomputed rather than mutated.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from hmpi.errors import InvalidLimit, InvalidReading
from hmpi.metals import canonical_metal
from hmpi.units import CANONICAL_UNIT, coerce_number, to_mg_per_l


@dataclass(frozen=True)
class MetalReading:
    """One measured concentration (mg/L) of one metal."""
    metal_name: str
    concentration: float

    @classmethod
    def from_raw(cls, metal_name: Any, concentration: Any, unit: str = CANONICAL_UNIT) -> "MetalReading":
        """Validate a raw (metal, value, unit) triple and convert it to mg/L."""
        metal = canonical_metal(metal_name) if metal_name is not None else ""
        if not metal:
            raise InvalidReading("Reading has no metal name", value=concentration)
        value = coerce_number(concentration, metal)
        if value < 0:
            raise InvalidReading(f"Concentration for {metal} must be non-negative, got {value}", metal, value)
        return cls(metal_name=metal, concentration=to_mg_per_l(value, unit))


@dataclass(frozen=True)
class MetalLimit:
    """Permissible limit and ideal (background) value of one metal, in mg/L."""
    metal_name: str
    permissible_limit: float
    ideal_value: float = 0.0
    weight: Optional[float] = None  # standard-defined weight, overrides K / limit

    @classmethod
    def from_raw(
        cls,
        metal_name: Any,
        permissible_limit: Any,
        ideal_value: Any = 0.0,
        unit: str = CANONICAL_UNIT,
        weight: Any = None,
    ) -> "MetalLimit":
        metal = canonical_metal(metal_name) if metal_name is not None else ""
        if not metal:
            raise InvalidLimit("Limit entry has no metal name")
        try:
            limit = coerce_number(permissible_limit, metal, "permissible_limit")
            ideal = coerce_number(ideal_value, metal, "ideal_value")
            weight_value = None if weight is None else coerce_number(weight, metal, "weight")
        except InvalidReading as exc:
            raise InvalidLimit(str(exc), metal) from exc

        if ideal < 0:
            raise InvalidLimit(f"Ideal value for {metal} must be non-negative, got {ideal}", metal)
        if limit <= ideal:
            raise InvalidLimit(
                f"Permissible limit for {metal} ({limit}) must be greater than its ideal value ({ideal})", metal
            )
        if weight_value is not None and weight_value <= 0:
            raise InvalidLimit(f"Weight for {metal} must be positive, got {weight_value}", metal)

        return cls(
            metal_name=metal,
            permissible_limit=to_mg_per_l(limit, unit),
            ideal_value=to_mg_per_l(ideal, unit),
            weight=weight_value,
        )


@dataclass(frozen=True)
class SubIndex:
    """Per-metal sub-index Q_i with the weight it enters the aggregate with."""
    metal_name: str
    concentration: float
    permissible_limit: float
    ideal_value: float
    quality_index: float
    weight: float

    @property
    def exceeded(self) -> bool:
        """True when the concentration is above the permissible limit."""
        return self.concentration > self.permissible_limit

    @property
    def contribution(self) -> float:
        """Q_i * W_i, the numerator term of this metal."""
        return self.quality_index * self.weight

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metal_name": self.metal_name,
            "concentration": self.concentration,
            "permissible_limit": self.permissible_limit,
            "ideal_value": self.ideal_value,
            "quality_index": self.quality_index,
            "weight": self.weight,
            "contribution": self.contribution,
            "exceeded": self.exceeded,
        }


@dataclass(frozen=True)
class AggregateResult:
    """Overall index for one location at one point in time."""
    overall_index: float
    risk_level: str
    location: Optional[str] = None
    timestamp: Optional[datetime] = None
    standard: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall_index": self.overall_index,
            "risk_level": self.risk_level,
            "location": self.location,
            "timestamp": self.timestamp.isoformat() if self.timestamp is not None else None,
            "standard": self.standard,
        }


@dataclass(frozen=True)
class Assessment:
    """Engine output: the aggregate result and every sub-index behind it."""
    result: AggregateResult
    sub_indices: Tuple[SubIndex, ...]

    @property
    def overall_index(self) -> float:
        return self.result.overall_index

    @property
    def risk_level(self) -> str:
        return self.result.risk_level

    @property
    def exceeded_metals(self) -> Tuple[str, ...]:
        return tuple(s.metal_name for s in self.sub_indices if s.exceeded)

    def sub_index(self, metal_name: str) -> SubIndex:
        metal = canonical_metal(metal_name)
        for s in self.sub_indices:
            if s.metal_name == metal:
                return s
        raise KeyError(metal_name)

    def to_dict(self) -> Dict[str, Any]:
        data = self.result.to_dict()
        data["sub_indices"] = [s.to_dict() for s in self.sub_indices]
        return data
