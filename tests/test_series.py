"""Tests for the Series entity and its consolidation engine.

Covers:
- Construction derives stop time and tags, and owns its buffers
- Identity consolidation for values_per_point 0 and 1
- Grouping completeness, including the short trailing group
- Cache reuse and invalidation when the grouping factor changes
- Timestamp law of the consolidated view
- Reducer resolution: case-insensitive, once per entity, failures remembered
"""

import math

import numpy as np
import numpy.testing as npt
import pytest

from metricdatalogic import series, exceptions


def _group_len(group):
    return float(len(group))


def test_make_series_derives_stop_and_tags():
    s = series.make_series("a.b;env=prod", [1.0, 2.0, 3.0], 10, 100)
    assert s.start_time == 100
    assert s.stop_time == 130
    assert s.step == 10
    assert s.tags == {"name": "a.b", "env": "prod"}
    assert s.values_per_point == 0
    assert not s.is_aggregated


def test_make_series_uses_given_extractor():
    calls = []

    def extract(name):
        calls.append(name)
        return {"k": "v"}

    s = series.make_series("x", [], 5, 0, extract=extract)
    assert calls == ["x"]
    assert s.tags == {"k": "v"}
    assert s.stop_time == s.start_time


def test_make_series_rejects_non_positive_step():
    with pytest.raises(exceptions.SeriesError):
        series.make_series("a", [1.0], 0, 0)
    with pytest.raises(exceptions.SeriesError):
        series.make_series("a", [1.0], -10, 0)


def test_series_owns_its_values():
    raw = [1.0, 2.0]
    s = series.make_series("a", raw, 10, 0)
    raw.append(3.0)
    assert s.values == [1.0, 2.0]


@pytest.mark.parametrize("vpp", [0, 1])
def test_identity_consolidation(nan_series, vpp):
    nan_series.consolidation_func = "no-such-function"
    nan_series.values_per_point = vpp
    out = nan_series.aggregated_values()
    npt.assert_array_equal(out, nan_series.values)
    assert out is not nan_series.values
    assert nan_series.aggregated_time_step() == nan_series.step
    assert nan_series.resolution_error is None


@pytest.mark.parametrize("n, k", [(10, 3), (9, 3), (1, 4), (7, 7), (8, 2)])
def test_grouping_completeness(n, k):
    s = series.make_series("g", [1.0] * n, 1, 0)
    s.aggregate_function = _group_len
    s.values_per_point = k
    out = s.aggregated_values()
    assert len(out) == math.ceil(n / k)
    expected_last = n % k or k
    assert out[-1] == expected_last
    assert all(v == k for v in out[:-1])


def test_empty_series_aggregates_to_empty():
    s = series.make_series("e", [], 10, 0)
    s.values_per_point = 4
    assert s.aggregated_values() == []
    assert len(s.aggregated_timestamps()) == 0


def test_sum_consolidation_with_trailing_group(dense_series):
    dense_series.values_per_point = 4
    assert dense_series.aggregated_values() == [6.0, 22.0, 17.0]


def test_nan_groups_use_reducer_semantics():
    s = series.make_series("n", [np.nan, np.nan, 2.0, np.nan], 10, 0)
    s.values_per_point = 2
    out = s.aggregated_values()
    assert math.isnan(out[0])
    assert out[1] == 2.0


def test_cache_is_reused_until_grouping_changes():
    calls = []

    def reducer(group):
        calls.append(len(group))
        return float(sum(group))

    s = series.make_series("c", [1.0, 2.0, 3.0, 4.0], 10, 0)
    s.aggregate_function = reducer
    s.values_per_point = 2
    first = s.aggregated_values()
    second = s.aggregated_values()
    assert first == [3.0, 7.0]
    assert second is first
    assert calls == [2, 2]


def test_cache_invalidated_on_grouping_change(dense_series):
    dense_series.values_per_point = 2
    assert dense_series.aggregated_values() == [1.0, 5.0, 9.0, 13.0, 17.0]
    dense_series.values_per_point = 5
    assert not dense_series.is_aggregated
    assert dense_series.aggregated_values() == [10.0, 35.0]
    dense_series.values_per_point = 1
    assert dense_series.aggregated_values() == dense_series.values


def test_negative_values_per_point_rejected(nan_series):
    with pytest.raises(exceptions.SeriesError):
        nan_series.values_per_point = -1
    assert nan_series.values_per_point == 0


@pytest.mark.parametrize("vpp, step", [(0, 60), (1, 60), (3, 180)])
def test_timestamp_law(dense_series, vpp, step):
    dense_series.values_per_point = vpp
    assert dense_series.aggregated_time_step() == step
    stamps = dense_series.aggregated_timestamps()
    assert len(stamps) == len(dense_series.aggregated_values())
    for i, t in enumerate(stamps):
        assert t == dense_series.start_time + i * step


def test_raw_timestamps(nan_series):
    npt.assert_array_equal(nan_series.timestamps(), [0, 10, 20])


def test_consolidation_name_is_case_insensitive(dense_series):
    dense_series.consolidation_func = "MaX"
    dense_series.values_per_point = 5
    assert dense_series.aggregated_values() == [4.0, 9.0]


def test_unknown_consolidation_fails_fast(nan_series, counting_registry):
    nan_series.consolidation_func = "bogus"
    nan_series.values_per_point = 2
    registry = counting_registry()

    with pytest.raises(exceptions.UnknownConsolidationError) as info:
        nan_series.resolve_aggregate_function(registry)
    assert info.value.func_name == "bogus"
    assert info.value.series_name == "a"
    assert nan_series.resolution_error is not None
    assert registry.lookups == 1

    # Remembered: no second lookup, same typed error on read
    with pytest.raises(exceptions.UnknownConsolidationError):
        nan_series.resolve_aggregate_function(registry)
    with pytest.raises(exceptions.UnknownConsolidationError):
        nan_series.aggregated_values()
    assert registry.lookups == 1
    assert not nan_series.is_aggregated


def test_reducer_resolved_once(dense_series, counting_registry):
    registry = counting_registry({"sum": lambda g: float(sum(g))})
    dense_series.values_per_point = 2
    fn = dense_series.resolve_aggregate_function(registry)
    assert dense_series.resolve_aggregate_function(registry) is fn
    assert registry.lookups == 1
    dense_series.values_per_point = 3
    dense_series.aggregated_values()
    assert dense_series.aggregate_function is fn


def test_explicit_aggregate_function_wins(nan_series):
    nan_series.consolidation_func = "bogus"
    nan_series.aggregate_function = _group_len
    nan_series.values_per_point = 2
    assert nan_series.aggregated_values() == [2.0, 1.0]


def test_empty_consolidation_name_falls_back_to_average():
    s = series.make_series("plain", [1.0, 3.0, np.nan, 5.0], 10, 0)
    assert s.consolidation_func == ""
    s.values_per_point = 2
    assert s.aggregated_values() == [2.0, 5.0]
    assert s.aggregate_function is not None
    # The stored name is left untouched for the encoders
    assert s.consolidation_func == ""
