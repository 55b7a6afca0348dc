from __future__ import annotations

import pytest

from core.config import PollConfig, RecencyConfig


def test_defaults() -> None:
    recency = RecencyConfig()
    poll = PollConfig()

    assert (recency.restored_capacity, recency.fresh_capacity) == (1000, 50)
    assert poll.interval_seconds == 3600.0
    assert poll.post_limit == 5


@pytest.mark.parametrize(
    "kwargs",
    [
        {"fresh_capacity": 0},
        {"restored_capacity": 0},
        {"fresh_capacity": -1},
    ],
)
def test_window_capacities_must_retain_items(kwargs) -> None:
    with pytest.raises(ValueError):
        RecencyConfig(**kwargs)


@pytest.mark.parametrize("kwargs", [{"interval_minutes": 0}, {"post_limit": 0}])
def test_poll_values_must_be_positive(kwargs) -> None:
    with pytest.raises(ValueError):
        PollConfig(**kwargs)
