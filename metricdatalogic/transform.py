from __future__ import annotations

import logging
import math
from typing import Iterable, List, Mapping, Optional, Sequence

from .exceptions import ConsolidationError, UnknownConsolidationError, require
from .series import Series
from .types import AggregateFunc

_logger = logging.getLogger(__name__)


def present(results: Iterable[Optional[Series]]) -> List[Series]:
    """Drop empty slots from a batch."""
    return [r for r in results if r is not None]


def time_range(results: Sequence[Optional[Series]]) -> tuple[int, int]:
    """Return (min start_time, max stop_time) over the batch, (0, 0) if empty."""
    series = present(results)
    if not series:
        return 0, 0
    return (
        min(r.start_time for r in series),
        max(r.stop_time for r in series),
    )


def consolidate(results: Sequence[Optional[Series]], max_points: int) -> None:
    """
    Set each series' grouping factor so none exceeds max_points.

    - Uses the batch-wide range, so series rendered together end up at a
      comparable resolution even when their own spans differ.
    - Series already within budget are left untouched.
    - Empty batches and zero/negative ranges are a no-op.
    """
    require(
        max_points > 0,
        f"max_points must be positive, got {max_points}",
        ConsolidationError,
    )
    start, stop = time_range(results)
    span = stop - start
    if span <= 0:
        return

    for r in present(results):
        raw_points = span // r.step
        if raw_points <= max_points:
            continue
        vpp = math.ceil(raw_points / max_points)
        _logger.debug(
            "Consolidating %r: %d points over %ds -> %d values per point",
            r.name,
            raw_points,
            span,
            vpp,
        )
        r.values_per_point = vpp


def resolve_batch(
    results: Sequence[Optional[Series]],
    registry: Optional[Mapping[str, AggregateFunc]] = None,
) -> List[UnknownConsolidationError]:
    """
    Bind reducers for every series that needs one.

    A series with an unknown consolidation function does not stop the others
    from being resolved; the errors are returned so the caller can report or
    drop the offending series before encoding.
    """
    errors: List[UnknownConsolidationError] = []
    for r in present(results):
        if r.values_per_point <= 1:
            continue
        try:
            r.resolve_aggregate_function(registry)
        except UnknownConsolidationError as err:
            errors.append(err)
    return errors
