"""
Aggregator

Combines the sub-indices of one location into the overall index:

    HMPI = sum(Q_i * W_i) / sum(W_i)

Entries are put in metal-name order and summed with math.fsum, so the same
reading set always gives the same bits no matter how it was submitted.
"""
import logging
import math
from typing import Iterable, Tuple, TypeVar

from hmpi.errors import DuplicateMetal, EmptyInput
from hmpi.models import SubIndex

logger = logging.getLogger(__name__)

T = TypeVar("T")


def ordered_by_metal(items: Iterable[T]) -> Tuple[T, ...]:
    """
    Sort readings or sub-indices by metal_name.

    Raises EmptyInput for an empty set and DuplicateMetal when a metal
    shows up twice.
    """
    ordered = tuple(sorted(items, key=lambda item: item.metal_name))
    if not ordered:
        raise EmptyInput("No readings to aggregate")
    for prev, cur in zip(ordered, ordered[1:]):
        if prev.metal_name == cur.metal_name:
            raise DuplicateMetal(cur.metal_name)
    return ordered


def aggregate(sub_indices: Iterable[SubIndex]) -> float:
    """Weighted arithmetic mean of Q_i with weights W_i."""
    ordered = ordered_by_metal(sub_indices)
    total_weight = math.fsum(s.weight for s in ordered)
    # weights enter as shares of the total, so a lone metal returns its Q_i unchanged
    overall = math.fsum(s.quality_index * (s.weight / total_weight) for s in ordered)
    logger.debug("Aggregated %d sub-indices into %.6f", len(ordered), overall)
    return overall
