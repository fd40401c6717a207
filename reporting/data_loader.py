"""
Load orders from a CSV file or DataFrame.

Expects columns market, side, amount, price, fee and optionally
trade_count_to_fill. Decimal columns are parsed from their text form so the
fixed-point values survive exactly.
"""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from order_analytics.order import Order

ORDER_COLUMNS = ("market", "side", "amount", "price", "fee")
TRADE_COUNT_COLUMN = "trade_count_to_fill"


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Lowercase column names and map common aliases."""
    out = df.copy()
    out.columns = [str(c).lower().strip() for c in out.columns]
    renames = {
        "type": "side",
        "qty": "amount",
        "quantity": "amount",
        "trades": TRADE_COUNT_COLUMN,
        "tradecounttofill": TRADE_COUNT_COLUMN,
        "trade_count": TRADE_COUNT_COLUMN,
    }
    out = out.rename(columns={k: v for k, v in renames.items() if k in out.columns})
    return out


def load_dataframe(df: pd.DataFrame) -> list[Order]:
    """
    Build one Order per row, in row order.

    Parameters
    ----------
    df : pd.DataFrame
        Raw frame; column names may be mixed case or aliased.

    Returns
    -------
    list[Order]
        Orders with trade_count_to_fill set when the column is present
        (missing cells count as 0).
    """
    out = _normalize_columns(df)
    missing = [c for c in ORDER_COLUMNS if c not in out.columns]
    if missing:
        raise ValueError(f"missing order columns: {missing}")
    has_counts = TRADE_COUNT_COLUMN in out.columns

    orders: list[Order] = []
    for row in out.to_dict("records"):
        order = Order(
            market=row["market"],
            side=row["side"],
            amount=row["amount"],
            price=row["price"],
            fee=row["fee"],
        )
        if has_counts and not pd.isna(row[TRADE_COUNT_COLUMN]):
            order.set_trade_count_to_fill(int(row[TRADE_COUNT_COLUMN]))
        orders.append(order)
    return orders


def load_csv(path: str | Path) -> list[Order]:
    """Read every column as text, then build orders with load_dataframe."""
    df = pd.read_csv(path, dtype=str, skipinitialspace=True)
    return load_dataframe(df)
