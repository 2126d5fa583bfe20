"""A streaming async client for BunnyCDN edge storage zones.

This package lists, downloads, uploads and deletes objects in a storage zone
over the storage HTTP API. Bodies are streamed in bounded chunks rather than
buffered, with optional progress callbacks and cooperative cancellation.

Key Features:
    - Streaming downloads, either as a live stream or copied into a sink
    - Streaming uploads from any binary source, with seek offsets
    - Optional percent-encoding of object names (auto-encode policy)
    - HTTP statuses returned verbatim, no hidden retries
    - CLI interface

Recommended Usage:

    >>> from bunny_storage import StorageClient
    >>> async with StorageClient("access-key", "my-zone") as client:
    ...     listing = await client.list_files()
    ...     for item in listing.files:
    ...         print(item.object_name, item.length)
"""

__version__ = "0.1.0"

from .core.exceptions import (
    BunnyStorageError,
    ResponseDecodeError,
    TransferCancelledError,
    TransportFailureError,
    ValidationError,
)
from .naming import NameCodec
from .objectstorage import (
    FileListResponse,
    ObjectStream,
    StorageClient,
    StreamResponse,
    is_success,
)
from .schemas import ClientConfig, StorageObject

__all__ = [
    # Client
    "StorageClient",
    "ClientConfig",
    "NameCodec",
    # Results
    "FileListResponse",
    "ObjectStream",
    "StorageObject",
    "StreamResponse",
    "is_success",
    # Errors
    "BunnyStorageError",
    "ResponseDecodeError",
    "TransferCancelledError",
    "TransportFailureError",
    "ValidationError",
]
