"""Exception hierarchy for bunny-storage.

HTTP status outcomes (401, 404, ...) are not exceptions; they are returned
to the caller as the status of the operation.
"""


class BunnyStorageError(Exception):
    """Base exception for all bunny-storage errors."""

    pass


class ValidationError(BunnyStorageError):
    """Raised when a call precondition fails, before any network activity."""

    pass


class TransferCancelledError(BunnyStorageError):
    """Raised when a cancellation signal is observed during a transfer."""

    pass


class ResponseDecodeError(BunnyStorageError):
    """Raised when a successful listing response is not a JSON array."""

    pass


class TransportFailureError(BunnyStorageError):
    """Raised when no HTTP status could be obtained (DNS, TLS, reset, timeout)."""

    pass
