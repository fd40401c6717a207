"""
Tabular layer on top of order_analytics.

Builds orders from CSV / DataFrames and renders aggregation results with pandas.
"""

from reporting.data_loader import load_csv, load_dataframe
from reporting.summary import aggregates_to_frame, orders_to_frame, print_summary

__all__ = [
    "load_csv",
    "load_dataframe",
    "aggregates_to_frame",
    "orders_to_frame",
    "print_summary",
]
