"""
Errors raised by the query and aggregation engines.

Bad arguments (field values, worker counts, partition sizes) raise ValueError.
A failure inside a caller-supplied function is wrapped in UserFunctionError so
callers can tell it apart from a fault in the engine itself.
"""

from __future__ import annotations


class AnalyticsError(Exception):
    """Base class for order_analytics errors."""


class UserFunctionError(AnalyticsError):
    """
    A predicate, key, value, projection or action raised while evaluating a record.

    The whole operation is aborted; the original exception is chained as __cause__.
    """

    def __init__(self, role: str, index: int | None, cause: BaseException) -> None:
        self.role = role
        self.index = index
        where = f" at record {index}" if index is not None else ""
        super().__init__(f"{role} failed{where}: {type(cause).__name__}: {cause}")
