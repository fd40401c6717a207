"""
Grouped statistics demo: serial vs concurrent aggregation and the summary report.

Loads orders from CSV → aggregates trades-to-fill by side and market → prints
a summary table. Worker count comes from ORDER_ANALYTICS_WORKERS unless given.
"""

from pathlib import Path

from order_analytics import ReduceMode, Side, aggregate, aggregate_concurrent, reduce_all
from reporting import aggregates_to_frame, load_csv, print_summary


def main() -> None:
    csv_path = Path(__file__).resolve().parent / "data" / "sample_orders.csv"
    book = load_csv(csv_path)

    def trades(o):
        return o.trade_count_to_fill

    serial = aggregate(book, lambda o: o.side, trades, ReduceMode.SUM)
    concurrent = aggregate_concurrent(book, lambda o: o.side, trades, ReduceMode.SUM, workers=4)
    print(aggregates_to_frame(serial, key_name="side", value_name="trades"))
    print(f"Concurrent result matches serial: {serial == concurrent}")

    avg_sell = reduce_all(book, trades, ReduceMode.AVERAGE, where=lambda o: o.side == Side.SELL)
    print(f"Average trades to fill a SELL order: {avg_sell:.2f}")

    # Average fee by market (Decimal in, Decimal out)
    fees = aggregate_concurrent(book, lambda o: o.market, lambda o: o.fee, ReduceMode.AVERAGE)
    print(aggregates_to_frame(fees, key_name="market", value_name="avg_fee"))

    print_summary(book)
    print_summary(book, key=lambda o: o.market, key_name="market")


if __name__ == "__main__":
    main()
