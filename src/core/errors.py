"""Error types shared by the core and its adapters."""

from __future__ import annotations


class RedscopeError(Exception):
    """Base class for redscope errors."""


class PersistenceError(RedscopeError):
    """Snapshot storage failed."""


class PersistenceReadError(PersistenceError):
    """The snapshot exists but could not be read or parsed."""


class PersistenceWriteError(PersistenceError):
    """The snapshot could not be written to durable storage."""


class FeedFetchError(RedscopeError):
    """A feed could not be fetched or parsed."""


class DeliveryError(RedscopeError):
    """Sending a payload to one subscriber failed."""

    def __init__(self, subscriber_id: str, cause: BaseException) -> None:
        super().__init__(f"Delivery to {subscriber_id} failed: {cause}")
        self.subscriber_id = subscriber_id
        self.cause = cause
