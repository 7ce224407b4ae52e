from __future__ import annotations

UPDATE_PAYLOAD_MESSAGE = "Only one valid column can be updated at a time."


class DuesError(Exception):
    """Base class for errors raised by the dues backend."""


# PUBLIC_INTERFACE
class InvalidUpdatePayload(DuesError, ValueError):
    """
    Raised when an update payload does not name exactly one allowed column.

    Always raised before any statement reaches the store.
    """

    def __init__(self, message: str = UPDATE_PAYLOAD_MESSAGE) -> None:
        super().__init__(message)
        self.message = message


class StoreError(DuesError):
    """A read or write against the store failed."""


# PUBLIC_INTERFACE
class StoreUnavailable(StoreError):
    """The connection provider could not hand out a usable connection."""


# PUBLIC_INTERFACE
class QueryFailed(StoreError):
    """The store rejected a statement."""
