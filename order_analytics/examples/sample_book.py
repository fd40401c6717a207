"""
Sample order books: three orders each across EUR, USD and CNY.

Stands in for whatever builds the real snapshot; used by the demos and tests.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from order_analytics.order import Market, Order, Side


def build_sample_book(trade_counts: Sequence[int] | None = None) -> list[Order]:
    """
    EUR BUY 100.00@1.69, USD SELL 201.00@1.70, CNY SELL 250.00@10.58, fee 0.01 each.
    trade_counts, if given, sets trade_count_to_fill on each order in turn.
    """
    book = [
        Order(Market.EUR, Side.BUY, Decimal("100.00"), Decimal("1.69"), Decimal("0.01")),
        Order(Market.USD, Side.SELL, Decimal("201.00"), Decimal("1.70"), Decimal("0.01")),
        Order(Market.CNY, Side.SELL, Decimal("250.00"), Decimal("10.58"), Decimal("0.01")),
    ]
    if trade_counts is not None:
        if len(trade_counts) != len(book):
            raise ValueError(f"expected {len(book)} trade counts, got {len(trade_counts)}")
        for order, count in zip(book, trade_counts):
            order.set_trade_count_to_fill(count)
    return book


def build_query_book() -> list[Order]:
    """
    Variant used for predicate queries: the USD order is a BUY of 200.00, so
    price >= 1.70 matches two orders and only one of them is a SELL.
    """
    return [
        Order(Market.EUR, Side.BUY, Decimal("100.00"), Decimal("1.69"), Decimal("0.01")),
        Order(Market.USD, Side.BUY, Decimal("200.00"), Decimal("1.70"), Decimal("0.01")),
        Order(Market.CNY, Side.SELL, Decimal("250.00"), Decimal("10.58"), Decimal("0.01")),
    ]
