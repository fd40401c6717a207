"""
Summary report: grouped count / sum / average as a DataFrame and printed table.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from enum import Enum
from typing import Any

import pandas as pd

from order_analytics.aggregation import ReduceMode, finalize, fold_concurrent
from order_analytics.order import Order
from order_analytics.query import Predicate


def _label(key: Any) -> Any:
    return key.name if isinstance(key, Enum) else key


def orders_to_frame(orders: Iterable[Order]) -> pd.DataFrame:
    """One row per order, in book order. Decimal columns keep their Decimal values."""
    rows = [
        {
            "market": o.market.value,
            "side": o.side.name,
            "amount": o.amount,
            "price": o.price,
            "fee": o.fee,
            "trade_count_to_fill": o.trade_count_to_fill,
        }
        for o in orders
    ]
    columns = ["market", "side", "amount", "price", "fee", "trade_count_to_fill"]
    return pd.DataFrame(rows, columns=columns)


def aggregates_to_frame(
    result: Mapping[Any, Any],
    *,
    key_name: str = "group",
    value_name: str = "value",
) -> pd.DataFrame:
    """Mapping from aggregate()/aggregate_concurrent() as a two-column frame sorted by key label."""
    rows = [{key_name: _label(k), value_name: v} for k, v in result.items()]
    df = pd.DataFrame(rows, columns=[key_name, value_name])
    return df.sort_values(key_name, key=lambda s: s.astype(str)).reset_index(drop=True)


def _default_key(order: Order) -> Any:
    return order.side


def _default_value(order: Order) -> int:
    return order.trade_count_to_fill


def print_summary(
    orders: Iterable[Order],
    *,
    key: Callable[[Order], Any] = _default_key,
    value: Callable[[Order], Any] = _default_value,
    where: Predicate | None = None,
    key_name: str = "side",
    workers: int | None = None,
) -> pd.DataFrame:
    """
    Fold orders once (concurrently), then print count, sum and average per group.

    Parameters
    ----------
    orders : iterable of Order
        The book snapshot. Must not be modified while this runs.
    key : callable
        Group key (default: side).
    value : callable
        Value to reduce (default: trade_count_to_fill).
    where : callable, optional
        Restrict membership before grouping.
    key_name : str
        Column name for the group label.
    workers : int, optional
        Worker count; default from ORDER_ANALYTICS_WORKERS.

    Returns
    -------
    pd.DataFrame
        Columns key_name, count, sum, average; one row per group.
    """
    merged = fold_concurrent(orders, key, value, where=where, workers=workers)
    counts = finalize(merged, ReduceMode.COUNT)
    sums = finalize(merged, ReduceMode.SUM)
    averages = finalize(merged, ReduceMode.AVERAGE)
    rows = [
        {key_name: _label(k), "count": counts[k], "sum": sums[k], "average": averages[k]}
        for k in merged
    ]
    df = pd.DataFrame(rows, columns=[key_name, "count", "sum", "average"])
    df = df.sort_values(key_name, key=lambda s: s.astype(str)).reset_index(drop=True)

    print("--- Order Book Summary ---")
    for row in df.itertuples(index=False):
        label, count, total, average = row
        print(f"{str(label):<10} count={count:<6} sum={total!s:<12} average={float(average):.2f}")
    print(f"Groups: {len(df)}")
    print("--------------------------")
    return df
