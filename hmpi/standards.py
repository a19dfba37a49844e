"""
Limit tables

A LimitTable maps metal symbols to their MetalLimit under one named
standard. Built-in tables cover WHO guideline values, the Indian drinking
water standard and the illustrative demo limits; others are loaded from
JSON files.
"""
import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, Optional, Union

from pydantic import ValidationError

from hmpi.classifier import RiskThresholds
from hmpi.errors import InvalidLimit
from hmpi.metals import canonical_metal
from hmpi.models import MetalLimit
from hmpi.schemas import LimitEntry, StandardFile

logger = logging.getLogger(__name__)

# WHO Guidelines for Drinking-water Quality, mg/L.
# Zn has no health-based value; 3 mg/L is the taste threshold.
WHO_LIMITS = {
    "As": 0.01,
    "Cd": 0.003,
    "Cr": 0.05,
    "Cu": 2.0,
    "Hg": 0.006,
    "Mn": 0.08,
    "Ni": 0.07,
    "Pb": 0.01,
    "Se": 0.04,
    "Zn": 3.0,
}

# IS 10500:2012, mg/L. Permissible limit in the absence of an alternate
# source; where it is relaxed above the acceptable limit, the acceptable
# limit is the ideal value.
BIS_LIMITS = {
    "As": {"permissible_limit": 0.01},
    "Cd": {"permissible_limit": 0.003},
    "Cr": {"permissible_limit": 0.05},
    "Cu": {"permissible_limit": 1.5, "ideal_value": 0.05},
    "Fe": {"permissible_limit": 0.3},
    "Hg": {"permissible_limit": 0.001},
    "Mn": {"permissible_limit": 0.3, "ideal_value": 0.1},
    "Ni": {"permissible_limit": 0.02},
    "Pb": {"permissible_limit": 0.01},
    "Se": {"permissible_limit": 0.01},
    "Zn": {"permissible_limit": 15.0, "ideal_value": 5.0},
}

# Illustrative defaults, not a regulatory standard.
DEMO_LIMITS = {
    "Pb": 0.01,
    "Cd": 0.003,
    "Cr": 0.05,
    "Ni": 0.02,
    "Zn": 5.0,
    "Cu": 2.0,
}

LimitSpec = Union[float, int, Dict[str, Any], LimitEntry, MetalLimit]


def _to_limit(metal: str, spec: LimitSpec) -> MetalLimit:
    if isinstance(spec, MetalLimit):
        return spec
    if isinstance(spec, LimitEntry):
        spec = spec.model_dump()
    if isinstance(spec, dict):
        if "permissible_limit" not in spec:
            raise InvalidLimit(f"Limit entry for {metal} has no permissible_limit", metal)
        return MetalLimit.from_raw(
            metal,
            spec["permissible_limit"],
            spec.get("ideal_value", 0.0),
            spec.get("unit", "mg/L"),
            spec.get("weight"),
        )
    return MetalLimit.from_raw(metal, spec)


class LimitTable(Mapping):
    """Read-only mapping of metal symbol -> MetalLimit for one standard."""

    def __init__(self, name: str, limits: Iterable[MetalLimit], thresholds: Optional[RiskThresholds] = None):
        self.name = name
        self.thresholds = thresholds
        self._limits: Dict[str, MetalLimit] = {}
        for limit in limits:
            if limit.metal_name in self._limits:
                raise InvalidLimit(f"Standard {name!r} lists {limit.metal_name} more than once", limit.metal_name)
            self._limits[limit.metal_name] = limit

    @classmethod
    def from_dict(
        cls,
        name: str,
        limits: Mapping,
        thresholds: Optional[RiskThresholds] = None,
    ) -> "LimitTable":
        """
        Build a table from {metal: limit} where each limit is a number
        (mg/L, ideal 0) or a dict/LimitEntry with permissible_limit,
        ideal_value, unit and weight.
        """
        return cls(name, [_to_limit(metal, spec) for metal, spec in limits.items()], thresholds)

    def lookup(self, metal_name: str) -> MetalLimit:
        """Limit entry for a metal, raising InvalidLimit if the standard has none."""
        metal = canonical_metal(metal_name)
        try:
            return self._limits[metal]
        except KeyError:
            raise InvalidLimit(f"Standard {self.name!r} has no limit for {metal}", metal) from None

    def __getitem__(self, metal_name: str) -> MetalLimit:
        return self._limits[canonical_metal(metal_name)]

    def __contains__(self, metal_name: object) -> bool:
        return isinstance(metal_name, str) and canonical_metal(metal_name) in self._limits

    def __iter__(self) -> Iterator[str]:
        return iter(self._limits)

    def __len__(self) -> int:
        return len(self._limits)

    def __repr__(self) -> str:
        return f"LimitTable({self.name!r}, metals={sorted(self._limits)})"


_BUILTIN = {
    "WHO": LimitTable.from_dict("WHO", WHO_LIMITS),
    "BIS 10500:2012": LimitTable.from_dict("BIS 10500:2012", BIS_LIMITS),
    "DEMO": LimitTable.from_dict("DEMO", DEMO_LIMITS),
}
_ALIASES = {
    "who": "WHO",
    "bis": "BIS 10500:2012",
    "is 10500": "BIS 10500:2012",
    "bis 10500:2012": "BIS 10500:2012",
    "demo": "DEMO",
}


def available_standards():
    return sorted(_BUILTIN)


def get_standard(name: str) -> LimitTable:
    """Return a built-in limit table by name (case-insensitive)."""
    key = _ALIASES.get(str(name).strip().lower(), name)
    try:
        return _BUILTIN[key]
    except KeyError:
        raise InvalidLimit(f"Unknown standard {name!r}; available: {', '.join(available_standards())}") from None


def load_standard_file(path: Union[str, Path]) -> LimitTable:
    """Load a limit table (and optional risk bands) from a JSON standards file."""
    with open(path, "r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise InvalidLimit(f"Standards file {path} is not valid JSON: {exc}") from exc
    try:
        parsed = StandardFile.model_validate(raw)
    except ValidationError as exc:
        raise InvalidLimit(f"Malformed standards file {path}: {exc}") from exc

    thresholds = RiskThresholds(parsed.risk_bands) if parsed.risk_bands is not None else None
    table = LimitTable.from_dict(parsed.name, parsed.limits, thresholds)
    logger.info("Loaded standard %r with %d metals from %s", table.name, len(table), path)
    return table
