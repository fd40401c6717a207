"""
Order book query demo using the query engine.

Demonstrates: count by predicate, two-argument (fee) predicate, audit details
for matching orders, and collecting one field from matches.
"""

from decimal import Decimal

from order_analytics import (
    Side,
    audit_details,
    collect,
    count_matches,
    count_matches_with_fee,
)
from order_analytics.examples.sample_book import build_query_book, build_sample_book


def main() -> None:
    book = build_query_book()
    threshold = Decimal("1.70")

    # Price at or above threshold
    n = count_matches(book, lambda o: o.price >= threshold)
    print(f"Orders priced >= {threshold}: {n}")

    # Same threshold, SELL only
    n = count_matches(book, lambda o: o.price >= threshold and o.side == Side.SELL)
    print(f"SELL orders priced >= {threshold}: {n}")

    # Fee passed as a second argument
    n = count_matches_with_fee(book, lambda o, fee: (o.price + fee).quantize(Decimal("0.01")) >= threshold)
    print(f"Orders with price + fee >= {threshold}: {n}")

    # Audit trail for large SELL orders
    book = build_sample_book(trade_counts=[3, 4, 2])
    for line in audit_details(book, lambda o: o.side == Side.SELL and o.amount >= 200):
        print(f"  audit: {line}")

    amounts = collect(book, lambda o: o.side == Side.SELL, "amount")
    print(f"SELL amounts: {[str(a) for a in amounts]}")


if __name__ == "__main__":
    main()
