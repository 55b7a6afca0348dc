"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_CAPACITY = 100
RESTORED_CAPACITY = 1000
FRESH_CAPACITY = 50


@dataclass(frozen=True)
class RecencyConfig:
    """Capacities for per-topic delivery windows.

    Windows restored from a snapshot keep a longer history than windows
    created for topics first seen at delivery time.
    """

    restored_capacity: int = RESTORED_CAPACITY
    fresh_capacity: int = FRESH_CAPACITY

    def __post_init__(self) -> None:
        # A zero-capacity window would report every new item as a duplicate.
        if self.restored_capacity < 1 or self.fresh_capacity < 1:
            raise ValueError("Recency window capacities must be >= 1")


@dataclass(frozen=True)
class PollConfig:
    """Poll loop cadence and feed batch size."""

    interval_minutes: int = 60
    post_limit: int = 5

    def __post_init__(self) -> None:
        if self.interval_minutes <= 0:
            raise ValueError("Poll interval must be a positive number of minutes")
        if self.post_limit <= 0:
            raise ValueError("Post limit must be positive")

    @property
    def interval_seconds(self) -> float:
        return self.interval_minutes * 60.0
