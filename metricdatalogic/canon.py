from __future__ import annotations
from typing import Final

DEFAULT_TZ: Final[str] = "UTC"
TIMESTAMP_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
# Reducer used when a series names no consolidation function
DEFAULT_CONSOLIDATION: Final[str] = "average"

# Text token written for missing samples in the raw format
NONE_TOKEN: Final[str] = "None"

# Protocol 2 keeps the payload readable by older graphite consumers
PICKLE_PROTOCOL: Final[int] = 2

PICKLE_KEYS: Final[tuple[str, ...]] = (
    "name",
    "pathExpression",
    "consolidationFunc",
    "start",
    "end",
    "step",
    "xFilesFactor",
    "values",
)

FORMATS: Final[tuple[str, ...]] = ("csv", "json", "pickle", "protobuf", "raw")
FORMAT_ALIASES: Final[dict[str, str]] = {
    "protobuf3": "protobuf",
    "carbonapi_v3_pb": "protobuf",
}
