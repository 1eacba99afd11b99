from __future__ import annotations
from typing import Callable, List, Literal, Optional, Sequence, TypedDict

from pydantic import BaseModel, Field

# Reducer over one non-empty group of samples
AggregateFunc = Callable[[Sequence[float]], float]

Format = Literal["csv", "json", "pickle", "protobuf", "raw"]


# Object-graph record, keys as graphite's pickle consumers expect them
PickleRecord = TypedDict(
    "PickleRecord",
    {
        "name": str,
        "pathExpression": str,
        "consolidationFunc": str,
        "start": int,
        "end": int,
        "step": int,
        "xFilesFactor": float,
        "values": List[Optional[float]],
    },
)


class FetchRecord(BaseModel):
    """Native fetch-response record of one series.

    Built from a Series only at the protobuf boundary, so the wire schema
    never leaks into the domain entity.

    Attributes:
        name: Metric name
        path_expression: Expression the series was fetched for
        consolidation_func: Consolidation function name
        start_time: First timestamp (seconds)
        stop_time: End of the series (seconds, exclusive)
        step_time: Seconds between samples
        x_files_factor: Graphite xFilesFactor
        high_precision_timestamps: Whether timestamps carry sub-second precision
        values: Raw samples, NaN for missing
        applied_functions: Functions already applied by the storage backend
        request_start_time: Start of the originating request
        request_stop_time: Stop of the originating request
    """

    name: str
    path_expression: str = ""
    consolidation_func: str = ""
    start_time: int
    stop_time: int
    step_time: int
    x_files_factor: float = 0.0
    high_precision_timestamps: bool = False
    values: List[float] = Field(default_factory=list)
    applied_functions: List[str] = Field(default_factory=list)
    request_start_time: int = 0
    request_stop_time: int = 0
    model_config = {"frozen": True}
