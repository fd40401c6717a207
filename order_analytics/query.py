"""
Query engine: predicate matching over an ordered sequence of records.

One primitive, select(), drives everything else. A predicate takes either the
record alone or, when a derive function is given, the record plus one value
derived from it (e.g. the fee). Records are never mutated, reordered or kept
past the call.

Fail-fast: an exception in any caller-supplied function aborts the query and
surfaces as UserFunctionError. No partial result is returned.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from decimal import Decimal
from operator import attrgetter
from typing import Any, TypeVar

from order_analytics.errors import UserFunctionError
from order_analytics.order import Order

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

Predicate = Callable[..., bool]


def call_user_function(role: str, func: Callable[..., R], index: int | None, *args: Any) -> R:
    """Invoke a caller-supplied function; wrap any failure in UserFunctionError."""
    try:
        return func(*args)
    except Exception as exc:
        logger.warning("%s raised on record %s: %r", role, index, exc)
        raise UserFunctionError(role, index, exc) from exc


def matches(
    predicate: Predicate,
    record: Any,
    *,
    derive: Callable[[Any], Any] | None = None,
    index: int | None = None,
) -> bool:
    """Evaluate predicate on one record (two-argument form when derive is given)."""
    if derive is None:
        result = call_user_function("predicate", predicate, index, record)
    else:
        extra = call_user_function("derive", derive, index, record)
        result = call_user_function("predicate", predicate, index, record, extra)
    # truth testing can itself raise, e.g. on a numpy array
    return call_user_function("predicate", bool, index, result)


def _select_indexed(
    records: Iterable[T],
    predicate: Predicate,
    derive: Callable[[T], Any] | None,
    start: int,
) -> Iterator[tuple[int, T]]:
    for index, record in enumerate(records, start):
        if matches(predicate, record, derive=derive, index=index):
            yield index, record


def select(
    records: Iterable[T],
    predicate: Predicate,
    *,
    derive: Callable[[T], Any] | None = None,
    start: int = 0,
) -> Iterator[T]:
    """
    Yield records matching predicate, in input order.

    With derive, the predicate is called as predicate(record, derive(record));
    otherwise as predicate(record). start offsets the record index reported in
    errors (used when querying a partition of a larger sequence).
    """
    for _, record in _select_indexed(records, predicate, derive, start):
        yield record


def count_matches(
    records: Iterable[T],
    predicate: Predicate,
    *,
    derive: Callable[[T], Any] | None = None,
) -> int:
    """Number of records for which predicate holds. 0 for empty input."""
    count = 0
    for _ in select(records, predicate, derive=derive):
        count += 1
    return count


def count_matches_with_fee(
    orders: Iterable[Order],
    predicate: Callable[[Order, Decimal], bool],
) -> int:
    """Two-argument form: predicate(order, order.fee)."""
    return count_matches(orders, predicate, derive=_fee)


def filter_project(
    records: Iterable[T],
    predicate: Predicate,
    projection: Callable[[T], R],
    *,
    derive: Callable[[T], Any] | None = None,
) -> list[R]:
    """projection(record) for each match, in input order. [] when nothing matches."""
    return [
        call_user_function("projection", projection, index, record)
        for index, record in _select_indexed(records, predicate, derive, 0)
    ]


def collect(records: Iterable[T], predicate: Predicate, *fields: str) -> list[Any]:
    """
    Named attributes of matching records, e.g. collect(book, is_sell, "amount").

    One field gives a list of values; several give a list of tuples. An
    unknown field name fails as a projection error.
    """
    if not fields:
        raise ValueError("collect needs at least one field name")
    return filter_project(records, predicate, attrgetter(*fields))


def audit_details(orders: Iterable[Order], predicate: Predicate) -> list[str]:
    """Audit strings of matching orders, in book order."""
    return filter_project(orders, predicate, Order.provide_audit_details)


def _fee(order: Order) -> Decimal:
    return order.fee
