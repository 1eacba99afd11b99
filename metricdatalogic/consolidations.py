from __future__ import annotations

from typing import Mapping, Optional, Sequence

import numpy as np

from .types import AggregateFunc


def _present(values: Sequence[float]) -> np.ndarray:
    arr = np.asarray(values, dtype=float)
    return arr[~np.isnan(arr)]


def agg_mean(values: Sequence[float]) -> float:
    v = _present(values)
    return float(v.mean()) if v.size else np.nan


def agg_mean_zero(values: Sequence[float]) -> float:
    """Mean with missing samples counted as zero."""
    arr = np.nan_to_num(np.asarray(values, dtype=float), nan=0.0)
    return float(arr.mean()) if arr.size else np.nan


def agg_median(values: Sequence[float]) -> float:
    v = _present(values)
    return float(np.median(v)) if v.size else np.nan


def agg_sum(values: Sequence[float]) -> float:
    v = _present(values)
    return float(v.sum()) if v.size else np.nan


def agg_max(values: Sequence[float]) -> float:
    v = _present(values)
    return float(v.max()) if v.size else np.nan


def agg_min(values: Sequence[float]) -> float:
    v = _present(values)
    return float(v.min()) if v.size else np.nan


def agg_first(values: Sequence[float]) -> float:
    v = _present(values)
    return float(v[0]) if v.size else np.nan


def agg_last(values: Sequence[float]) -> float:
    v = _present(values)
    return float(v[-1]) if v.size else np.nan


def agg_multiply(values: Sequence[float]) -> float:
    v = _present(values)
    return float(v.prod()) if v.size else np.nan


def agg_diff(values: Sequence[float]) -> float:
    """First present value minus every following one."""
    v = _present(values)
    return float(v[0] - v[1:].sum()) if v.size else np.nan


def agg_range(values: Sequence[float]) -> float:
    v = _present(values)
    return float(v.max() - v.min()) if v.size else np.nan


def agg_count(values: Sequence[float]) -> float:
    v = _present(values)
    return float(v.size) if v.size else np.nan


def agg_stddev(values: Sequence[float]) -> float:
    v = _present(values)
    return float(v.std()) if v.size else np.nan


# Lower-case names, as looked up by Series
CONSOLIDATION_TO_FUNC: Mapping[str, AggregateFunc] = {
    "average": agg_mean,
    "avg": agg_mean,
    "avg_zero": agg_mean_zero,
    "median": agg_median,
    "sum": agg_sum,
    "total": agg_sum,
    "max": agg_max,
    "min": agg_min,
    "first": agg_first,
    "last": agg_last,
    "multiply": agg_multiply,
    "diff": agg_diff,
    "range": agg_range,
    "rangeof": agg_range,
    "count": agg_count,
    "stddev": agg_stddev,
}


def lookup(
    name: str, registry: Optional[Mapping[str, AggregateFunc]] = None
) -> Optional[AggregateFunc]:
    """Return the reducer registered for name (case-insensitive), or None."""
    table = CONSOLIDATION_TO_FUNC if registry is None else registry
    return table.get(name.lower())
