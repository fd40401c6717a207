"""
Partitioning and worker-pool execution for the concurrent path.

Input sequences are split into contiguous, disjoint partitions; each worker
gets one partition and shares no mutable state with the others, so no locks
are taken while workers run. Results come back in partition order and are
combined by the calling thread.

The input sequence is read-only for the duration of a call. Mutating it while
a query or aggregation over it is in flight is not supported.

Cancellation is not modeled: every partition runs to completion. A caller
wanting a deadline should check it between calls, not inside a partition.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

import numpy as np

from order_analytics.config import EngineConfig
from order_analytics.query import call_user_function

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class Partition(Generic[T]):
    """
    A contiguous index range [start, stop) over the caller's sequence.

    Iterating reads records straight from source; the input is never copied.
    """

    source: Sequence[T] = field(repr=False)
    start: int
    stop: int

    def __len__(self) -> int:
        return self.stop - self.start

    def __iter__(self) -> Iterator[T]:
        for index in range(self.start, self.stop):
            yield self.source[index]


def resolve_workers(workers: int | None) -> int:
    """Explicit worker count, else ORDER_ANALYTICS_WORKERS / cpu count."""
    if workers is None:
        return EngineConfig.from_env().workers
    return EngineConfig(workers=workers).workers


def as_sequence(records: Iterable[T]) -> Sequence[T]:
    return records if isinstance(records, Sequence) else list(records)


def partition(records: Sequence[T], parts: int) -> list[Partition[T]]:
    """
    Split records into at most `parts` non-empty contiguous partitions of
    near-equal size, covering the input in order. Empty input -> [].
    """
    if parts < 1:
        raise ValueError(f"parts must be >= 1, got {parts}")
    out: list[Partition[T]] = []
    for idx in np.array_split(np.arange(len(records)), parts):
        if idx.size == 0:
            continue
        lo, hi = int(idx[0]), int(idx[-1]) + 1
        out.append(Partition(records, lo, hi))
    return out


def partition_by_sizes(records: Sequence[T], sizes: Sequence[int]) -> list[Partition[T]]:
    """Contiguous partitions with explicit sizes; sizes must be positive and sum to len(records)."""
    if any(int(s) < 1 for s in sizes):
        raise ValueError(f"partition sizes must be >= 1, got {list(sizes)}")
    total = int(sum(sizes))
    if total != len(records):
        raise ValueError(f"partition sizes sum to {total}, expected {len(records)}")
    bounds = np.cumsum([0, *sizes])
    return [
        Partition(records, int(lo), int(hi))
        for lo, hi in zip(bounds[:-1], bounds[1:])
    ]


def run_partitions(
    func: Callable[[Partition[T]], R],
    partitions: Sequence[Partition[T]],
    *,
    workers: int | None = None,
) -> list[R]:
    """
    Run func over each partition on a thread pool. Results are in partition
    order. If any partition fails, every worker is still allowed to finish and
    the failure of the lowest-indexed partition is raised; nothing is returned.
    """
    if not partitions:
        return []
    n_workers = min(resolve_workers(workers), len(partitions))
    logger.debug(
        "Running %d partition(s) on %d worker(s): sizes=%s",
        len(partitions),
        n_workers,
        [len(p) for p in partitions],
    )
    with ThreadPoolExecutor(max_workers=n_workers) as executor:
        futures = [executor.submit(func, p) for p in partitions]

    results: list[R] = []
    for i, future in enumerate(futures):
        exc = future.exception()
        if exc is not None:
            logger.debug("Partition %d failed; aborting", i)
            raise exc
        results.append(future.result())
    return results


def for_each(
    records: Iterable[T],
    action: Callable[[T], Any],
    *,
    ordered: bool = False,
    workers: int | None = None,
) -> None:
    """
    Apply action to every record.

    ordered=False: partitions run concurrently and the order in which action
    sees records is unspecified. ordered=True: action runs on the calling
    thread in input order. Asking for order gives up the parallel speedup.
    """
    seq = as_sequence(records)
    if ordered:
        for index, record in enumerate(seq):
            call_user_function("action", action, index, record)
        return

    def _visit(part: Partition[T]) -> None:
        for index, record in enumerate(part, part.start):
            call_user_function("action", action, index, record)

    n_workers = resolve_workers(workers)
    run_partitions(_visit, partition(seq, n_workers), workers=n_workers)
