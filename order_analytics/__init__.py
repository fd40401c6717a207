"""
order-analytics: in-memory query and aggregation over an order book snapshot.

Pure, stateless functions. No persistence, no network, no matching engine.
"""

__version__ = "0.1.0"

from order_analytics.order import Market, Order, Side
from order_analytics.errors import AnalyticsError, UserFunctionError
from order_analytics.config import EngineConfig
from order_analytics.query import (
    audit_details,
    collect,
    count_matches,
    count_matches_with_fee,
    filter_project,
    select,
)
from order_analytics.aggregation import (
    Accumulator,
    ReduceMode,
    aggregate,
    aggregate_concurrent,
    fold,
    fold_concurrent,
    merge_all,
    merge_partials,
    reduce_all,
)
from order_analytics.parallel import for_each, partition, partition_by_sizes

__all__ = [
    "Market",
    "Order",
    "Side",
    "AnalyticsError",
    "UserFunctionError",
    "EngineConfig",
    "audit_details",
    "collect",
    "count_matches",
    "count_matches_with_fee",
    "filter_project",
    "select",
    "Accumulator",
    "ReduceMode",
    "aggregate",
    "aggregate_concurrent",
    "fold",
    "fold_concurrent",
    "merge_all",
    "merge_partials",
    "reduce_all",
    "for_each",
    "partition",
    "partition_by_sizes",
]
