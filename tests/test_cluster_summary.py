"""
Per-cluster statistics over original (unstandardized) records.
"""

from __future__ import annotations

import math

import numpy as np
import pytest

from jobscope.errors import DimensionMismatchError
from jobscope.summary import ClusterSummarizer, summarize, STATISTICS


X = np.array([[1.0], [2.0], [3.0], [4.0], [10.0], [20.0]])
LABELS = [0, 0, 0, 0, 1, 1]


def test_numeric_statistics():
    summary = summarize(X, LABELS, columns=["runtime"])

    first = summary[0]
    assert first.size == 4
    assert first.stat("runtime", "mean") == pytest.approx(2.5)
    assert first.stat("runtime", "median") == pytest.approx(2.5)
    assert first.stat("runtime", "min") == 1.0
    assert first.stat("runtime", "max") == 4.0
    assert first.stat("runtime", "sd") == pytest.approx(math.sqrt(5.0 / 3.0))

    second = summary[1]
    assert second.size == 2
    assert second.stat("runtime", "median") == pytest.approx(15.0)
    assert second.stat("runtime", "sd") == pytest.approx(math.sqrt(50.0))


def test_odd_count_median():
    summary = summarize([[5.0], [1.0], [3.0]], [0, 0, 0])
    assert summary[0].stat("x0", "median") == 3.0


def test_singleton_cluster_has_zero_sd():
    summary = summarize([[1.0], [2.0], [7.0]], [0, 0, 1])
    assert summary[1].size == 1
    assert summary[1].stat("x0", "sd") == 0.0
    assert summary[1].stat("x0", "mean") == 7.0


def test_only_non_empty_clusters_are_reported():
    summary = summarize([[1.0], [2.0], [3.0], [4.0]], [0, 0, 2, 2])
    assert summary.cluster_ids == (0, 2)
    assert len(summary) == 2
    with pytest.raises(KeyError):
        summary[1]


def test_sizes_sum_to_record_count(rng):
    data = rng.normal(size=(90, 3))
    labels = rng.integers(0, 4, size=90)
    summary = summarize(data, labels)
    assert sum(stats.size for stats in summary) == 90


def test_categorical_mode():
    queues = ["short", "short", "long", "short", "gpu", "gpu"]
    summary = summarize(X, LABELS, columns=["runtime"], categorical={"queue": queues})
    assert summary[0].modes["queue"] == "short"
    assert summary[1].modes["queue"] == "gpu"


def test_mode_tie_goes_to_first_seen():
    queues = ["long", "short", "short", "long", "gpu", "cpu"]
    summary = summarize(X, LABELS, categorical={"queue": queues})
    assert summary[0].modes["queue"] == "long"
    assert summary[1].modes["queue"] == "gpu"


def test_to_frame_layout():
    queues = ["a", "a", "b", "b", "c", "c"]
    frame = summarize(X, LABELS, columns=["runtime"], categorical={"queue": queues}).to_frame()

    assert frame.index.name == "cluster"
    assert list(frame.index) == [0, 1]
    expected = ["size"] + [f"runtime_{name}" for name in STATISTICS] + ["queue_mode"]
    assert list(frame.columns) == expected
    assert frame.loc[1, "runtime_max"] == 20.0


def test_assignment_length_mismatch():
    with pytest.raises(DimensionMismatchError):
        summarize(X, [0, 1, 0])


def test_categorical_length_mismatch():
    with pytest.raises(DimensionMismatchError):
        summarize(X, LABELS, categorical={"queue": ["a", "b"]})


def test_column_cannot_be_numeric_and_categorical():
    with pytest.raises(ValueError):
        ClusterSummarizer().summarize(X, LABELS, columns=["runtime"],
                                      categorical={"runtime": ["a"] * 6})
