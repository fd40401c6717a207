"""
Order: one record of the order book snapshot queried by the engines.

Immutable apart from trade_count_to_fill, which the caller sets after
construction. Decimal fields are exact fixed point so threshold comparisons
such as price >= 1.70 never drift.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum


class Market(Enum):
    EUR = "EUR"
    USD = "USD"
    CNY = "CNY"


class Side(Enum):
    BUY = "buy"
    SELL = "sell"


def to_decimal(value: Decimal | int | float | str, name: str = "value") -> Decimal:
    """Coerce to Decimal. Floats go through their shortest repr, so 1.70 -> Decimal('1.7')."""
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a decimal amount, got {value!r}")
    if isinstance(value, Decimal):
        out = value
    elif isinstance(value, float):
        out = Decimal(repr(float(value)))
    else:
        try:
            out = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"{name} must be a decimal amount, got {value!r}") from None
    if not out.is_finite():
        raise ValueError(f"{name} must be finite, got {value!r}")
    if out < 0:
        raise ValueError(f"{name} must be >= 0, got {value!r}")
    return out


def _coerce_enum(enum_cls: type[Enum], value: object, name: str) -> Enum:
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        text = value.strip()
        for member in enum_cls:
            if text.lower() in (member.name.lower(), str(member.value).lower()):
                return member
    raise ValueError(f"{name} must be one of {[m.name for m in enum_cls]}, got {value!r}")


@dataclass(frozen=True, eq=False)
class Order:
    """
    An order as seen by the query layer. Identity is reference identity:
    two orders with identical fields are still two records.
    """

    market: Market
    side: Side
    amount: Decimal
    price: Decimal
    fee: Decimal
    trade_count_to_fill: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "market", _coerce_enum(Market, self.market, "market"))
        object.__setattr__(self, "side", _coerce_enum(Side, self.side, "side"))
        for name in ("amount", "price", "fee"):
            object.__setattr__(self, name, to_decimal(getattr(self, name), name))
        self.set_trade_count_to_fill(self.trade_count_to_fill)

    def set_trade_count_to_fill(self, count: int) -> None:
        """Record how many trades it took to fill this order."""
        if isinstance(count, bool) or not isinstance(count, int):
            raise ValueError(f"trade_count_to_fill must be int, got {count!r}")
        if count < 0:
            raise ValueError(f"trade_count_to_fill must be >= 0, got {count}")
        object.__setattr__(self, "trade_count_to_fill", count)

    def provide_audit_details(self) -> str:
        return (
            f"Market: {self.market.value}, Side: {self.side.name}, Amount: {self.amount}, "
            f"Price: {self.price}, Fee: {self.fee}, Trades to fill: {self.trade_count_to_fill}"
        )

    def __repr__(self) -> str:
        return (
            f"Order({self.market.value} {self.side.name} {self.amount}@{self.price}, "
            f"fee={self.fee}, trades={self.trade_count_to_fill})"
        )
