"""
Classifier

Maps an overall HMPI value to a risk level. Bands are closed below and
open above; the last band has no upper bound. The band table is an input,
so a different regulatory scheme can be plugged in without code changes.
"""
import math
import numbers
from bisect import bisect_right
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from hmpi.errors import InvalidReading, InvalidThresholds

SAFE = "Safe"
MODERATE_RISK = "Moderate Risk"
HIGH_RISK = "High Risk"

DEFAULT_BANDS: Tuple[Tuple[float, str], ...] = (
    (0.0, SAFE),
    (50.0, MODERATE_RISK),
    (100.0, HIGH_RISK),
)


@dataclass(frozen=True)
class RiskBand:
    """One band: lower <= index < upper (upper is None for the last band)."""
    lower: float
    label: str
    upper: Optional[float] = None

    def contains(self, index: float) -> bool:
        if index < self.lower:
            return False
        return self.upper is None or index < self.upper


class RiskThresholds:
    """
    Ordered, non-overlapping band table covering [0, inf).

    Built from (lower_bound, label) pairs. Raises InvalidThresholds unless
    the first lower bound is 0 and the bounds are finite and strictly
    increasing, with unique non-empty labels.
    """

    def __init__(self, bands: Iterable[Sequence]):
        pairs = []
        for band in bands:
            try:
                lower, label = band
            except (TypeError, ValueError):
                raise InvalidThresholds(f"Band must be a (lower_bound, label) pair, got {band!r}") from None
            pairs.append((lower, label))
        self._bands = tuple(self._validate(pairs))
        self._lowers = [b.lower for b in self._bands]

    @staticmethod
    def _validate(pairs: List[Tuple]) -> List[RiskBand]:
        if not pairs:
            raise InvalidThresholds("Risk band table is empty")

        lowers = []
        for lower, _ in pairs:
            if isinstance(lower, bool):
                raise InvalidThresholds(f"Band bound must be a number, got {lower!r}")
            try:
                value = float(lower)
            except (TypeError, ValueError):
                raise InvalidThresholds(f"Band bound must be a number, got {lower!r}") from None
            if not math.isfinite(value):
                raise InvalidThresholds(f"Band bound must be finite, got {lower!r}")
            lowers.append(value)

        if lowers[0] != 0.0:
            raise InvalidThresholds(f"First band must start at 0, got {lowers[0]}")
        for prev, cur in zip(lowers, lowers[1:]):
            if cur <= prev:
                raise InvalidThresholds(f"Band bounds must be strictly increasing ({prev} then {cur})")

        labels = [label for _, label in pairs]
        for label in labels:
            if not isinstance(label, str) or not label.strip():
                raise InvalidThresholds(f"Band label must be a non-empty string, got {label!r}")
        if len(set(labels)) != len(labels):
            raise InvalidThresholds(f"Band labels must be unique: {labels}")

        uppers = lowers[1:] + [None]
        return [RiskBand(lower=lo, label=label, upper=up) for lo, label, up in zip(lowers, labels, uppers)]

    @classmethod
    def default(cls) -> "RiskThresholds":
        return cls(DEFAULT_BANDS)

    @property
    def bands(self) -> Tuple[RiskBand, ...]:
        return self._bands

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(b.label for b in self._bands)

    def band_for(self, index: float) -> RiskBand:
        """Return the band holding index. Values below 0 fall into the first band."""
        if isinstance(index, bool) or not isinstance(index, numbers.Real) or not math.isfinite(index):
            raise InvalidReading(f"Index must be a finite number, got {index!r}", value=index)
        position = bisect_right(self._lowers, index) - 1
        return self._bands[max(position, 0)]

    def classify(self, index: float) -> str:
        return self.band_for(index).label

    def to_list(self) -> List[List]:
        return [[b.lower, b.label] for b in self._bands]

    def __eq__(self, other) -> bool:
        if not isinstance(other, RiskThresholds):
            return NotImplemented
        return self._bands == other._bands

    def __hash__(self) -> int:
        return hash(self._bands)

    def __repr__(self) -> str:
        return f"RiskThresholds({self.to_list()!r})"


def classify(index: float, thresholds: Optional[RiskThresholds] = None) -> str:
    """Risk level of an overall index under the given (or default) band table."""
    return (thresholds or RiskThresholds.default()).classify(index)
