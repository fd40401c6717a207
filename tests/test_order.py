"""
Tests for order_analytics.order: Market, Side, Order, decimal coercion.
"""

from decimal import Decimal

import pytest

from order_analytics import Market, Order, Side
from order_analytics.examples.sample_book import build_query_book, build_sample_book
from order_analytics.order import to_decimal


# --- Order ---


def test_order_creation():
    o = Order(Market.EUR, Side.BUY, Decimal("100.00"), Decimal("1.69"), Decimal("0.01"))
    assert o.market == Market.EUR
    assert o.side == Side.BUY
    assert o.amount == Decimal("100.00")
    assert o.price == Decimal("1.69")
    assert o.fee == Decimal("0.01")
    assert o.trade_count_to_fill == 0


def test_order_core_fields_immutable():
    o = Order(Market.USD, Side.SELL, "201.00", "1.70", "0.01")
    with pytest.raises(AttributeError):
        o.price = Decimal("2.00")


def test_order_coerces_strings_and_floats():
    o = Order("usd", "SELL", "201.00", 1.70, 0.01)
    assert o.market == Market.USD
    assert o.side == Side.SELL
    assert isinstance(o.price, Decimal)
    assert o.price == Decimal("1.70")
    assert o.fee == Decimal("0.01")


def test_order_rejects_negative_amount():
    with pytest.raises(ValueError):
        Order(Market.EUR, Side.BUY, "-1", "1.69", "0.01")


def test_order_rejects_unknown_side():
    with pytest.raises(ValueError):
        Order(Market.EUR, "hold", "1", "1.69", "0.01")


def test_order_rejects_non_numeric_price():
    with pytest.raises(ValueError):
        Order(Market.EUR, Side.BUY, "1", "abc", "0.01")


def test_order_identity_is_reference():
    a = Order(Market.EUR, Side.BUY, "1", "1", "0")
    b = Order(Market.EUR, Side.BUY, "1", "1", "0")
    assert a != b
    assert a == a
    assert len({a, b}) == 2


def test_set_trade_count_to_fill():
    o = Order(Market.CNY, Side.SELL, "250.00", "10.58", "0.01")
    o.set_trade_count_to_fill(4)
    assert o.trade_count_to_fill == 4
    with pytest.raises(ValueError):
        o.set_trade_count_to_fill(-1)
    with pytest.raises(ValueError):
        o.set_trade_count_to_fill(2.5)
    assert o.trade_count_to_fill == 4


def test_provide_audit_details():
    o = Order(Market.EUR, Side.BUY, Decimal("100.00"), Decimal("1.69"), Decimal("0.01"))
    o.set_trade_count_to_fill(3)
    assert o.provide_audit_details() == (
        "Market: EUR, Side: BUY, Amount: 100.00, Price: 1.69, Fee: 0.01, Trades to fill: 3"
    )


def test_to_decimal_rejects_bool_and_nan():
    with pytest.raises(ValueError):
        to_decimal(True)
    with pytest.raises(ValueError):
        to_decimal("NaN")


# --- Sample books ---


def test_sample_book_trade_counts():
    book = build_sample_book(trade_counts=[3, 4, 2])
    assert [o.trade_count_to_fill for o in book] == [3, 4, 2]
    assert [o.market for o in book] == [Market.EUR, Market.USD, Market.CNY]


def test_sample_book_trade_counts_length_checked():
    with pytest.raises(ValueError):
        build_sample_book(trade_counts=[1, 2])


def test_query_book_has_one_sell():
    book = build_query_book()
    assert [o.side for o in book] == [Side.BUY, Side.BUY, Side.SELL]
