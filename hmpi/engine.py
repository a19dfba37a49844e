"""
HMPI Engine

Request/response boundary around the three pipeline stages:

    readings -> unit conversion -> Normalizer -> Aggregator -> Classifier

`assess` returns a complete Assessment or raises one HMPIError. Nothing is
cached between calls; every input is passed in explicitly.
"""
import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Iterable, List, Optional, Union

from pydantic import ValidationError

from hmpi.aggregator import aggregate, ordered_by_metal
from hmpi.classifier import RiskThresholds
from hmpi.errors import HMPIError, InvalidLimit, InvalidReading, InvalidThresholds
from hmpi.models import AggregateResult, Assessment, MetalReading
from hmpi.normalizer import DEFAULT_WEIGHT_CONSTANT, normalize
from hmpi.schemas import AssessmentRequest
from hmpi.standards import LimitTable, get_standard
from hmpi.units import CANONICAL_UNIT

logger = logging.getLogger(__name__)

ReadingsInput = Union[Mapping, Iterable[Any]]

# request field -> error raised when that field fails validation
_FIELD_ERRORS = {
    "limits": InvalidLimit,
    "risk_bands": InvalidThresholds,
}


def parse_readings(readings: ReadingsInput) -> List[MetalReading]:
    """
    Turn the accepted reading shapes into MetalReadings (mg/L).

    Accepts {metal: concentration} (mg/L), or an iterable of MetalReading,
    (metal, concentration) or (metal, concentration, unit).
    """
    if isinstance(readings, Mapping):
        return [MetalReading.from_raw(metal, value) for metal, value in readings.items()]

    parsed = []
    for item in readings:
        if isinstance(item, MetalReading):
            parsed.append(item)
            continue
        if isinstance(item, (str, bytes)) or not isinstance(item, (tuple, list)) or len(item) not in (2, 3):
            raise InvalidReading(f"Reading must be (metal, concentration[, unit]), got {item!r}", value=item)
        metal, value = item[0], item[1]
        unit = item[2] if len(item) == 3 else CANONICAL_UNIT
        parsed.append(MetalReading.from_raw(metal, value, unit))
    return parsed


def resolve_limits(limits: Union[LimitTable, Mapping, None], standard: Optional[str]) -> LimitTable:
    if isinstance(limits, LimitTable):
        return limits
    if limits is not None:
        return LimitTable.from_dict(standard or "custom", limits)
    if standard is None:
        raise InvalidLimit("No limit table given and no standard named")
    return get_standard(standard)


def assess(
    readings: ReadingsInput,
    limits: Union[LimitTable, Mapping, None] = None,
    *,
    location: Optional[str] = None,
    timestamp: Optional[datetime] = None,
    standard: Optional[str] = None,
    thresholds: Optional[RiskThresholds] = None,
    weight_constant: float = DEFAULT_WEIGHT_CONSTANT,
) -> Assessment:
    """
    Compute the HMPI of one reading set.

    Args:
        readings: {metal: mg/L} or iterable of (metal, value[, unit]).
        limits: LimitTable or {metal: limit} mapping; if omitted the
            built-in table named by `standard` is used.
        location, timestamp: provenance, copied to the result.
        standard: name recorded on the result; defaults to the table name.
        thresholds: risk band table; defaults to the table's own bands,
            then to Safe / Moderate Risk / High Risk at 0 / 50 / 100.
        weight_constant: K in W_i = K / S_i.

    Returns:
        Assessment with the aggregate result and per-metal sub-indices
        ordered by metal name.
    """
    parsed = parse_readings(readings)
    table = resolve_limits(limits, standard)
    bands = thresholds or table.thresholds or RiskThresholds.default()

    # reject empty and duplicate sets before touching the limit table
    ordered = ordered_by_metal(parsed)

    sub_indices = tuple(
        normalize(reading, table.lookup(reading.metal_name), weight_constant) for reading in ordered
    )
    overall = aggregate(sub_indices)
    level = bands.classify(overall)

    result = AggregateResult(
        overall_index=overall,
        risk_level=level,
        location=location,
        timestamp=timestamp,
        standard=table.name if limits is None else (standard or table.name),
    )
    logger.debug(
        "Assessed %s under %s: HMPI=%.4f (%s), exceeded=%s",
        location or "<unnamed>", result.standard, overall, level,
        [s.metal_name for s in sub_indices if s.exceeded],
    )
    return Assessment(result=result, sub_indices=sub_indices)


def _request_error(exc: ValidationError) -> HMPIError:
    """Map a request ValidationError to the error of the field that failed first."""
    errors = exc.errors()
    field = errors[0]["loc"][0] if errors and errors[0]["loc"] else None
    error_cls = _FIELD_ERRORS.get(field, InvalidReading)
    return error_cls(f"Malformed assessment request: {exc}")


def assess_request(request: Union[AssessmentRequest, Mapping]) -> Assessment:
    """Assess a request model or its JSON-like dict form."""
    if not isinstance(request, AssessmentRequest):
        try:
            request = AssessmentRequest.model_validate(request)
        except ValidationError as exc:
            raise _request_error(exc) from exc

    thresholds = RiskThresholds(request.risk_bands) if request.risk_bands is not None else None
    return assess(
        [(r.metal, r.concentration, r.unit) for r in request.readings],
        request.limits,
        location=request.location,
        timestamp=request.timestamp,
        standard=request.standard,
        thresholds=thresholds,
    )
