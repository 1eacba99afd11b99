from __future__ import annotations

import json
import math
from typing import List, Optional
from zoneinfo import ZoneInfo

import numpy as np
import pandas as pd

from . import canon


def format_float(v: float) -> str:
    """
    Shortest round-trip decimal, always positional (no exponent).

    1.0 -> '1', 1e-7 -> '0.0000001', inf -> '+Inf'.
    """
    if math.isinf(v):
        return "+Inf" if v > 0 else "-Inf"
    if math.isnan(v):
        return "NaN"
    return np.format_float_positional(v, unique=True, trim="-")


def format_timestamps(
    start: int, step: int, count: int, tz: str = canon.DEFAULT_TZ
) -> List[str]:
    """Wall-clock labels for count samples from start, step seconds apart."""
    if count == 0:
        return []
    secs = start + step * np.arange(count, dtype=np.int64)
    idx = pd.to_datetime(secs, unit="s", utc=True).tz_convert(ZoneInfo(tz))
    return list(idx.strftime(canon.TIMESTAMP_FORMAT))


def quote_csv(field: str) -> str:
    return '"' + field.replace('"', '""') + '"'


def quote_json(s: str) -> str:
    # ASCII-only output; anything else becomes \uXXXX
    return json.dumps(s, ensure_ascii=True)


# '%' is escaped too so the encoding stays reversible
_RAW_NAME_ESCAPES = str.maketrans(
    {"%": "%25", "|": "%7C", "\n": "%0A", "\r": "%0D"}
)


def escape_raw_name(name: str) -> str:
    """
    Percent-encode the characters that break a raw line.

    Readers split a line on its first '|' and the metadata before it with
    rsplit(',', 3), so commas in a name are safe as-is; '|' and line breaks
    are not. urllib.parse.unquote reverses the escaping.
    """
    return name.translate(_RAW_NAME_ESCAPES)


def none_if_nan(v: float) -> Optional[float]:
    return None if math.isnan(v) else v
