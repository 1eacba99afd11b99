from __future__ import annotations
from typing import TYPE_CHECKING

from . import exceptions

if TYPE_CHECKING:
    from .series import Series


def assert_series(s: Series, *, check_bounds: bool = True) -> None:
    """Check a series' structural invariants, raising SeriesError on failure.

    check_bounds also enforces stop == start + step * len(values), which only
    holds as constructed (before any caller adjusts the time bounds).
    """
    if s.step <= 0:
        raise exceptions.SeriesError(f"Series {s.name!r}: step must be positive.")
    if s.values_per_point < 0:
        raise exceptions.SeriesError(
            f"Series {s.name!r}: values_per_point must be non-negative."
        )
    if s.values and s.stop_time < s.start_time:
        raise exceptions.SeriesError(
            f"Series {s.name!r}: stop_time precedes start_time."
        )
    if check_bounds and s.stop_time != s.start_time + s.step * len(s.values):
        raise exceptions.SeriesError(
            f"Series {s.name!r}: stop_time does not match start + step * len(values)."
        )
    for key, value in s.tags.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise exceptions.SeriesError(
                f"Series {s.name!r}: tags must map str to str."
            )
