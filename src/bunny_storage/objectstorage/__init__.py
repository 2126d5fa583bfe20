"""Object storage operations for BunnyCDN storage zones."""

from .client import StorageClient
from .results import FileListResponse, Status, StreamResponse, is_success, to_status
from .transfer import CancelSignal, ObjectStream, ProgressCallback, TransferExecutor
from .uri import RequestBuilder, build_uri

__all__ = [
    "CancelSignal",
    "FileListResponse",
    "ObjectStream",
    "ProgressCallback",
    "RequestBuilder",
    "Status",
    "StorageClient",
    "StreamResponse",
    "TransferExecutor",
    "build_uri",
    "is_success",
    "to_status",
]
