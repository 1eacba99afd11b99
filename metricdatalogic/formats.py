from __future__ import annotations

import logging
import math
import pickle
from typing import Callable, Dict, List, Optional, Sequence

from google.protobuf.message import EncodeError

from . import canon, transform, utils, wire
from .config import FormatConfig, default_config
from .exceptions import EncodingError, FormatError, UnknownConsolidationError
from .series import Series
from .types import FetchRecord, Format, PickleRecord

_logger = logging.getLogger(__name__)

Batch = Sequence[Optional[Series]]


def to_csv(results: Batch, *, config: Optional[FormatConfig] = None) -> bytes:
    """
    One line per raw sample: "name",YYYY-MM-DD HH:MM:SS,value

    Missing samples leave the value field empty. Timestamps are rendered in
    config.tz wall-clock time.
    """
    cfg = config or default_config()
    lines: List[str] = []
    for r in transform.present(results):
        name = utils.quote_csv(r.name)
        stamps = utils.format_timestamps(r.start_time, r.step, len(r.values), cfg.tz)
        for ts, v in zip(stamps, r.values):
            value = "" if math.isnan(v) else utils.format_float(v)
            lines.append(f"{name},{ts},{value}\n")
    return "".join(lines).encode("utf-8")


def _json_value(v: float) -> str:
    if math.isnan(v) or math.isinf(v):
        return "null"
    return utils.format_float(v)


def to_json(
    results: Batch,
    *,
    errors: Optional[List[UnknownConsolidationError]] = None,
) -> bytes:
    """
    Render the consolidated view of each series as graphite render JSON.

    [{"target": name, "datapoints": [[value|null, ts], ...], "tags": {...}}]

    Timestamps start at start_time and advance by the aggregated step; tag
    keys are sorted so output is deterministic.

    A series whose consolidation function cannot be resolved is left out of
    the document; its error is appended to `errors` when a list is given.
    """
    out: List[str] = []
    for r in transform.present(results):
        try:
            values = r.aggregated_values()
        except UnknownConsolidationError as err:
            _logger.warning("Skipping %r in JSON output: %s", r.name, err)
            if errors is not None:
                errors.append(err)
            continue
        stamps = r.aggregated_timestamps()
        points = ",".join(
            f"[{_json_value(v)},{int(t)}]" for v, t in zip(values, stamps)
        )
        tags = ",".join(
            f"{utils.quote_json(k)}:{utils.quote_json(r.tags[k])}"
            for k in sorted(r.tags)
        )
        out.append(
            f'{{"target":{utils.quote_json(r.name)},'
            f'"datapoints":[{points}],'
            f'"tags":{{{tags}}}}}'
        )
    return ("[" + ",".join(out) + "]").encode("ascii")


def pickle_record(r: Series) -> PickleRecord:
    return {
        "name": r.name,
        "pathExpression": r.path_expression,
        "consolidationFunc": r.consolidation_func,
        "start": r.start_time,
        "end": r.stop_time,
        "step": r.step,
        "xFilesFactor": r.x_files_factor,
        "values": [utils.none_if_nan(v) for v in r.values],
    }


def to_pickle(results: Batch, *, config: Optional[FormatConfig] = None) -> bytes:
    """Pickle a list of graphite fetch dicts; raw values with None for NaN."""
    cfg = config or default_config()
    records = [pickle_record(r) for r in transform.present(results)]
    return pickle.dumps(records, protocol=cfg.pickle_protocol)


def fetch_record(r: Series) -> FetchRecord:
    return FetchRecord(
        name=r.name,
        path_expression=r.path_expression,
        consolidation_func=r.consolidation_func,
        start_time=r.start_time,
        stop_time=r.stop_time,
        step_time=r.step,
        x_files_factor=r.x_files_factor,
        high_precision_timestamps=r.high_precision_timestamps,
        values=r.values,
        applied_functions=r.applied_functions,
        request_start_time=r.request_start_time,
        request_stop_time=r.request_stop_time,
    )


def to_protobuf(results: Batch) -> bytes:
    """
    Serialise the batch as a carbonapi v3 MultiFetchResponse.

    Raw values pass through untouched (NaN stays NaN). Any rejection by the
    wire library raises EncodingError and no buffer is returned.
    """
    try:
        records = [fetch_record(r) for r in transform.present(results)]
        return wire.multi_fetch_response(records).SerializeToString()
    except (ValueError, TypeError, EncodeError) as err:
        raise EncodingError(f"Cannot encode protobuf response: {err}") from err


def to_raw(results: Batch) -> bytes:
    """graphite 'raw' lines: name,start,stop,step|v1,v2,... with None for NaN."""
    lines: List[str] = []
    for r in transform.present(results):
        values = ",".join(
            canon.NONE_TOKEN if math.isnan(v) else utils.format_float(v)
            for v in r.values
        )
        lines.append(
            f"{utils.escape_raw_name(r.name)},{r.start_time},{r.stop_time},{r.step}|{values}\n"
        )
    return "".join(lines).encode("utf-8")


_ENCODERS: Dict[Format, Callable[[Batch, FormatConfig], bytes]] = {
    "csv": lambda rs, cfg: to_csv(rs, config=cfg),
    "json": lambda rs, cfg: to_json(rs),
    "pickle": lambda rs, cfg: to_pickle(rs, config=cfg),
    "protobuf": lambda rs, cfg: to_protobuf(rs),
    "raw": lambda rs, cfg: to_raw(rs),
}


def encode(
    results: Batch,
    fmt: str,
    *,
    max_points: Optional[int] = None,
    config: Optional[FormatConfig] = None,
    errors: Optional[List[UnknownConsolidationError]] = None,
) -> bytes:
    """
    Encode a batch by format name.

    When max_points is given the batch is consolidated first; only the JSON
    encoder reads the consolidated view, the others emit raw samples.

    Reducers are bound for the whole batch before encoding. Series with an
    unknown consolidation function do not stop the others from being
    encoded: their errors are appended to `errors` when a list is given,
    and JSON output leaves them out.
    """
    key = fmt.lower()
    key = canon.FORMAT_ALIASES.get(key, key)
    encoder = _ENCODERS.get(key)
    if encoder is None:
        raise FormatError(
            f"Unknown format {fmt!r}. Expected one of: {', '.join(canon.FORMATS)}."
        )
    if max_points is not None:
        transform.consolidate(results, max_points)
    failed = transform.resolve_batch(results)
    if errors is not None:
        errors.extend(failed)
    _logger.debug("Encoding %d series as %s", len(results), key)
    return encoder(results, config or default_config())
