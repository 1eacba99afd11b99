from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Sequence

import numpy as np

from . import canon, consolidations, validate
from .exceptions import SeriesError, UnknownConsolidationError, require
from .tags import extract_tags
from .types import AggregateFunc

_logger = logging.getLogger(__name__)

TagExtractor = Callable[[str], Mapping[str, str]]


@dataclass(eq=False)
class Series:
    """
    One named, evenly spaced metric series as fetched from storage.

    - `values` holds the raw samples; NaN marks a missing sample.
    - `values_per_point` groups raw samples for consolidation; 0 and 1
      both mean no consolidation.
    - The consolidated view is computed lazily and cached until
      `values_per_point` changes.

    Not safe for concurrent mutation: plan consolidation for a batch before
    handing its series to encoders on other threads.
    """

    name: str
    start_time: int
    stop_time: int
    step: int
    values: List[float] = field(default_factory=list)
    path_expression: str = ""
    consolidation_func: str = ""
    x_files_factor: float = 0.0
    tags: Dict[str, str] = field(default_factory=dict)
    high_precision_timestamps: bool = False
    applied_functions: List[str] = field(default_factory=list)
    request_start_time: int = 0
    request_stop_time: int = 0
    aggregate_function: Optional[AggregateFunc] = field(default=None, repr=False)
    _values_per_point: int = field(default=0, init=False, repr=False)
    _aggregated: Optional[List[float]] = field(default=None, init=False, repr=False)
    _resolution_error: Optional[UnknownConsolidationError] = field(
        default=None, init=False, repr=False
    )

    def __post_init__(self):
        # The entity owns its buffers; never alias the caller's
        self.values = [float(v) for v in self.values]
        self.tags = dict(self.tags)
        self.applied_functions = list(self.applied_functions)

    @property
    def values_per_point(self) -> int:
        return self._values_per_point

    @values_per_point.setter
    def values_per_point(self, value: int) -> None:
        require(
            value >= 0,
            f"values_per_point must be non-negative, got {value}",
            SeriesError,
        )
        self._values_per_point = int(value)
        self._aggregated = None

    @property
    def resolution_error(self) -> Optional[UnknownConsolidationError]:
        """Error from a failed reducer lookup, if one happened."""
        return self._resolution_error

    @property
    def is_aggregated(self) -> bool:
        return self._aggregated is not None

    def resolve_aggregate_function(
        self, registry: Optional[Mapping[str, AggregateFunc]] = None
    ) -> AggregateFunc:
        """
        Bind the reducer for `consolidation_func`, looking it up only once.

        A failed lookup is remembered: later calls raise again without
        consulting the registry. An explicitly assigned `aggregate_function`
        always takes precedence.
        """
        if self.aggregate_function is not None:
            return self.aggregate_function
        if self._resolution_error is not None:
            raise UnknownConsolidationError(self.name, self.consolidation_func)

        # An empty name falls back to the default reducer; the field itself
        # stays empty so it round-trips unchanged into the encodings
        fn = consolidations.lookup(
            self.consolidation_func or canon.DEFAULT_CONSOLIDATION, registry
        )
        if fn is None:
            self._resolution_error = UnknownConsolidationError(
                self.name, self.consolidation_func
            )
            _logger.warning(
                "Series %r has unknown consolidation function %r",
                self.name,
                self.consolidation_func,
            )
            raise self._resolution_error
        self.aggregate_function = fn
        return fn

    def aggregate_values(self) -> List[float]:
        """Recompute the consolidated view and store it in the cache."""
        k = self._values_per_point
        if k <= 1:
            self._aggregated = list(self.values)
            return self._aggregated

        fn = self.resolve_aggregate_function()
        v = self.values
        # Short trailing group is reduced too, never dropped
        self._aggregated = [float(fn(v[i : i + k])) for i in range(0, len(v), k)]
        return self._aggregated

    def aggregated_values(self) -> List[float]:
        if self._aggregated is None:
            return self.aggregate_values()
        return self._aggregated

    def aggregated_time_step(self) -> int:
        if self._values_per_point <= 1:
            return self.step
        return self.step * self._values_per_point

    def timestamps(self) -> np.ndarray:
        """Timestamps of the raw samples."""
        return self.start_time + self.step * np.arange(len(self.values), dtype=np.int64)

    def aggregated_timestamps(self) -> np.ndarray:
        """Timestamps of the consolidated view: start_time + i * aggregated step."""
        n = len(self.aggregated_values())
        return self.start_time + self.aggregated_time_step() * np.arange(
            n, dtype=np.int64
        )


def make_series(
    name: str,
    values: Sequence[float],
    step: int,
    start: int,
    *,
    extract: TagExtractor = extract_tags,
) -> Series:
    """Build a Series, deriving stop time and tags from its name."""
    return make_series_with_tags(name, values, step, start, extract(name))


def make_series_with_tags(
    name: str,
    values: Sequence[float],
    step: int,
    start: int,
    tags: Mapping[str, str],
) -> Series:
    require(step > 0, f"step must be positive, got {step}", SeriesError)
    stop = start + len(values) * step
    out = Series(
        name=name,
        start_time=int(start),
        stop_time=int(stop),
        step=int(step),
        values=list(values),
        tags=dict(tags),
    )
    validate.assert_series(out)
    return out
