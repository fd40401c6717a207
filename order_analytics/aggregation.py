"""
Aggregation engine: grouped sum / count / average over records.

Serial path: one fold over the input into key -> Accumulator, then each
accumulator is turned into the requested scalar.

Concurrent path: the input is partitioned, each worker folds its partition
into a private mapping, and the partial mappings are merged key-wise. The
merge adds totals and counts component-wise, so it is associative and
commutative with {} as identity: any partitioning and any merge order give
the same result as the serial fold.

Float values are held as exact Fractions while folding and rounded to float
once, when the result is read. Non-finite floats are rejected. A group whose
values mix Decimal with float cannot be totalled and fails as a value error.
"""

from __future__ import annotations

import logging
import numbers
from collections.abc import Callable, Hashable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Any, TypeVar

from order_analytics.errors import UserFunctionError
from order_analytics.parallel import (
    Partition,
    as_sequence,
    partition,
    partition_by_sizes,
    resolve_workers,
    run_partitions,
)
from order_analytics.query import Predicate, call_user_function, matches

logger = logging.getLogger(__name__)

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)

Number = int | float | Decimal


class ReduceMode(Enum):
    SUM = "sum"
    COUNT = "count"
    AVERAGE = "average"


@dataclass
class Accumulator:
    """Running (total, count) for one group. Identity is Accumulator()."""

    total: Number | Fraction = 0
    count: int = 0

    def add(self, value: Number) -> None:
        if not isinstance(value, numbers.Number) or isinstance(value, complex):
            raise TypeError(f"value must be a real number, got {value!r}")
        if isinstance(value, float):
            value = Fraction(value)
        self.total += value
        self.count += 1

    def combine(self, other: Accumulator) -> Accumulator:
        """New accumulator holding both; neither operand is modified."""
        return Accumulator(total=self.total + other.total, count=self.count + other.count)

    def sum(self) -> Number:
        if isinstance(self.total, Fraction):
            return float(self.total)
        return self.total

    def average(self) -> Number:
        """total / count; 0 for an empty group (Decimal 0 if the total is Decimal)."""
        if isinstance(self.total, Decimal):
            return self.total / self.count if self.count else Decimal(0)
        if not self.count:
            return 0.0
        if isinstance(self.total, Fraction):
            return float(self.total / self.count)
        return self.total / self.count

    def result(self, mode: ReduceMode) -> Number:
        if mode is ReduceMode.SUM:
            return self.sum()
        if mode is ReduceMode.COUNT:
            return self.count
        return self.average()


def _bucket(acc: dict[K, Accumulator], k: K) -> Accumulator:
    bucket = acc.get(k)
    if bucket is None:
        bucket = acc[k] = Accumulator()
    return bucket


def fold(
    records: Iterable[T],
    key: Callable[[T], K],
    value: Callable[[T], Number],
    *,
    where: Predicate | None = None,
    start: int = 0,
) -> dict[K, Accumulator]:
    """Serial fold of records into key -> Accumulator, in input order."""
    acc: dict[K, Accumulator] = {}
    for index, record in enumerate(records, start):
        if where is not None and not matches(where, record, index=index):
            continue
        k = call_user_function("key", key, index, record)
        v = call_user_function("value", value, index, record)
        # hashing the key and adding the value both act on what the caller returned
        bucket = call_user_function("key", _bucket, index, acc, k)
        call_user_function("value", bucket.add, index, v)
    return acc


def merge_partials(
    left: Mapping[K, Accumulator],
    right: Mapping[K, Accumulator],
) -> dict[K, Accumulator]:
    """Key-wise combine of two partial mappings. Inputs are left untouched."""
    out: dict[K, Accumulator] = {k: Accumulator(a.total, a.count) for k, a in left.items()}
    for k, a in right.items():
        mine = out.get(k)
        if mine is None:
            out[k] = Accumulator(a.total, a.count)
            continue
        try:
            out[k] = mine.combine(a)
        except TypeError as exc:
            logger.warning("Cannot combine totals for group %r: %r", k, exc)
            raise UserFunctionError("value", None, exc) from exc
    return out


def merge_all(
    partials: Sequence[Mapping[K, Accumulator]],
    *,
    tree: bool = True,
) -> dict[K, Accumulator]:
    """
    Merge many partial mappings. tree=True merges pairwise level by level;
    tree=False folds left to right. Both give the same result.
    """
    if not partials:
        return {}
    if not tree:
        merged: dict[K, Accumulator] = {}
        for p in partials:
            merged = merge_partials(merged, p)
        return merged
    level = [dict(p) for p in partials]
    while len(level) > 1:
        nxt = [merge_partials(level[i], level[i + 1]) for i in range(0, len(level) - 1, 2)]
        if len(level) % 2:
            nxt.append(level[-1])
        level = nxt
    return merge_partials(level[0], {})


def finalize(
    partials: Mapping[K, Accumulator],
    mode: ReduceMode,
    *,
    keys: Iterable[K] | None = None,
) -> dict[K, Number]:
    """
    Reduce each accumulator to a scalar. Groups listed in keys but absent from
    partials are reported with the empty-group result (0).
    """
    out = {k: a.result(mode) for k, a in partials.items()}
    for k in keys or ():
        if k not in out:
            out[k] = Accumulator().result(mode)
    return out


def aggregate(
    records: Iterable[T],
    key: Callable[[T], K],
    value: Callable[[T], Number],
    mode: ReduceMode,
    *,
    where: Predicate | None = None,
    keys: Iterable[K] | None = None,
) -> dict[K, Number]:
    """Serial grouped reduction: key -> sum / count / average of value."""
    return finalize(fold(records, key, value, where=where), mode, keys=keys)


def fold_concurrent(
    records: Iterable[T],
    key: Callable[[T], K],
    value: Callable[[T], Number],
    *,
    where: Predicate | None = None,
    workers: int | None = None,
    partition_sizes: Sequence[int] | None = None,
    tree: bool = True,
) -> dict[K, Accumulator]:
    """
    Partitioned fold on a worker pool, merged once by the calling thread.
    Either every partition succeeds or the first failure is raised.
    """
    seq = as_sequence(records)
    n_workers = resolve_workers(workers)
    if partition_sizes is not None:
        parts = partition_by_sizes(seq, partition_sizes)
    else:
        parts = partition(seq, n_workers)

    def _fold(part: Partition[T]) -> dict[K, Accumulator]:
        return fold(part, key, value, where=where, start=part.start)

    partials = run_partitions(_fold, parts, workers=n_workers)
    merged = merge_all(partials, tree=tree)
    logger.debug("Merged %d partial(s) into %d group(s)", len(partials), len(merged))
    return merged


def aggregate_concurrent(
    records: Iterable[T],
    key: Callable[[T], K],
    value: Callable[[T], Number],
    mode: ReduceMode,
    *,
    where: Predicate | None = None,
    keys: Iterable[K] | None = None,
    workers: int | None = None,
    partition_sizes: Sequence[int] | None = None,
    tree: bool = True,
) -> dict[K, Number]:
    """Concurrent grouped reduction. Same result as aggregate() for the same input."""
    merged = fold_concurrent(
        records,
        key,
        value,
        where=where,
        workers=workers,
        partition_sizes=partition_sizes,
        tree=tree,
    )
    return finalize(merged, mode, keys=keys)


def reduce_all(
    records: Iterable[T],
    value: Callable[[T], Number],
    mode: ReduceMode,
    *,
    where: Predicate | None = None,
) -> Number:
    """Ungrouped reduction, e.g. average trades-to-fill over all SELL orders."""
    grouped = fold(records, _single_group, value, where=where)
    return grouped.get(None, Accumulator()).result(mode)


def _single_group(_record: Any) -> None:
    return None
