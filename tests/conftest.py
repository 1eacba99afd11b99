import numpy as np
import pytest

from metricdatalogic import series


@pytest.fixture
def nan_series():
    # a,[1, NaN, 3], step 10 from epoch 0
    return series.make_series("a", [1.0, np.nan, 3.0], 10, 0)


@pytest.fixture
def dense_series():
    # 10 samples 0..9, step 60, sum-consolidated
    s = series.make_series("dense.metric", [float(i) for i in range(10)], 60, 1_000)
    s.consolidation_func = "sum"
    return s


@pytest.fixture
def tagged_series():
    return series.make_series_with_tags(
        "cpu.load;b=2;a=1", [0.5, 0.25], 30, 600, {"b": "2", "a": "1"}
    )


class CountingRegistry(dict):
    """Registry that records how often it is consulted."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.lookups = 0

    def get(self, key, default=None):
        self.lookups += 1
        return super().get(key, default)


@pytest.fixture
def counting_registry():
    return CountingRegistry
