"""
Tests for order_analytics.parallel: partitioning, worker pool, ordered / unordered traversal.
"""

import threading

import numpy as np
import pytest

from order_analytics import UserFunctionError, for_each, partition, partition_by_sizes
from order_analytics.parallel import resolve_workers, run_partitions


# --- partition ---


def test_partition_covers_input_in_order():
    data = list(range(10))
    parts = partition(data, 3)
    assert [len(p) for p in parts] == [4, 3, 3]
    assert [p.start for p in parts] == [0, 4, 7]
    assert [x for p in parts for x in p] == data


def test_partition_more_parts_than_records():
    parts = partition([1, 2], 5)
    assert [list(p) for p in parts] == [[1], [2]]


def test_partition_empty_input():
    assert partition([], 4) == []


def test_partition_rejects_zero_parts():
    with pytest.raises(ValueError):
        partition([1], 0)


def test_partitions_read_the_input_in_place():
    data = [object() for _ in range(7)]
    parts = partition(data, 3) + partition_by_sizes(data, [2, 5])
    for p in parts:
        assert p.source is data
        assert all(x is data[i] for i, x in enumerate(p, p.start))


def test_partition_by_sizes():
    parts = partition_by_sizes("abcdef", [1, 2, 3])
    assert ["".join(p) for p in parts] == ["a", "bc", "def"]
    assert [p.start for p in parts] == [0, 1, 3]


@pytest.mark.parametrize("sizes", [[1, 1], [2, 2, 2], [0, 3], [-1, 4]])
def test_partition_by_sizes_validates(sizes):
    with pytest.raises(ValueError):
        partition_by_sizes([1, 2, 3], sizes)


# --- run_partitions ---


def test_run_partitions_results_in_partition_order():
    parts = partition(list(range(20)), 6)
    results = run_partitions(lambda p: sum(p), parts, workers=4)
    expected = [sum(p) for p in parts]
    assert results == expected


def test_run_partitions_empty():
    assert run_partitions(lambda p: 1, [], workers=2) == []


def test_run_partitions_uses_worker_threads():
    seen = set()
    lock = threading.Lock()

    def work(p):
        with lock:
            seen.add(threading.get_ident())
        return len(p)

    run_partitions(work, partition(list(range(8)), 4), workers=4)
    assert threading.get_ident() not in seen


def test_run_partitions_raises_lowest_failure():
    def work(p):
        if p.start >= 2:
            raise RuntimeError(f"partition at {p.start}")
        return p.start

    with pytest.raises(RuntimeError, match="partition at 2"):
        run_partitions(work, partition_by_sizes([0, 1, 2, 3, 4], [1, 1, 1, 1, 1]), workers=5)


# --- resolve_workers ---


def test_resolve_workers_explicit():
    assert resolve_workers(3) == 3
    with pytest.raises(ValueError):
        resolve_workers(0)


def test_resolve_workers_from_env(monkeypatch):
    monkeypatch.setenv("ORDER_ANALYTICS_WORKERS", "5")
    assert resolve_workers(None) == 5


# --- for_each ---


def test_for_each_ordered_preserves_order():
    seen = []
    data = [8, 7, 6, 5, 4, 3, 2, 1]
    for_each(data, seen.append, ordered=True, workers=4)
    assert seen == data


def test_for_each_unordered_visits_every_record_once():
    rng = np.random.default_rng(7)
    data = [int(v) for v in rng.integers(0, 1_000, size=200)]
    seen = []
    lock = threading.Lock()

    def visit(x):
        with lock:
            seen.append(x)

    for_each(data, visit, workers=4)
    assert sorted(seen) == sorted(data)


def test_for_each_failure_propagates():
    def visit(x):
        if x == 3:
            raise ValueError("three")

    with pytest.raises(UserFunctionError) as info:
        for_each([1, 2, 3, 4], visit, ordered=True)
    assert info.value.role == "action"
    assert info.value.index == 2

    with pytest.raises(UserFunctionError):
        for_each([1, 2, 3, 4], visit, workers=2)
