"""Core utilities and shared components for bunny-storage."""

from .config import settings
from .exceptions import (
    BunnyStorageError,
    ResponseDecodeError,
    TransferCancelledError,
    TransportFailureError,
    ValidationError,
)
from .observability import get_logger, get_tracer

__all__ = [
    "settings",
    "BunnyStorageError",
    "ResponseDecodeError",
    "TransferCancelledError",
    "TransportFailureError",
    "ValidationError",
    "get_logger",
    "get_tracer",
]
