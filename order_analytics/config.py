"""
Engine configuration from environment variables.

The only knob is the default worker count for concurrent aggregation and
unordered traversal. Read at call time so tests and callers can change it.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

# Default worker count for the concurrent path. Unset -> derived from cpu_count.
WORKERS_ENV = "ORDER_ANALYTICS_WORKERS"
MAX_DEFAULT_WORKERS = 32


def _default_workers() -> int:
    return max(1, min(MAX_DEFAULT_WORKERS, os.cpu_count() or 1))


@dataclass(frozen=True)
class EngineConfig:
    """Parallelism settings for the concurrent path."""

    workers: int

    def __post_init__(self) -> None:
        if isinstance(self.workers, bool) or not isinstance(self.workers, int):
            raise ValueError(f"workers must be int, got {self.workers!r}")
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EngineConfig:
        env = os.environ if environ is None else environ
        raw = env.get(WORKERS_ENV, "").strip()
        if not raw:
            return cls(workers=_default_workers())
        try:
            workers = int(raw)
        except ValueError:
            raise ValueError(f"{WORKERS_ENV} must be an integer, got {raw!r}") from None
        return cls(workers=workers)
