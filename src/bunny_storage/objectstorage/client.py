"""Client for the BunnyCDN edge storage API.

The StorageClient composes name encoding, URI construction, the streaming
transfer executor and result mapping into four operations: list, get, put and
delete. HTTP statuses are returned, not raised:

    list_files    200 OK, 401 Unauthorized
    get_file      200 OK, 401 Unauthorized, 404 Not Found
    put_file      201 Created, 400 Bad Request, 401 Unauthorized
    delete_file   200 OK, 400 Bad Request, 401 Unauthorized, 404 Not Found

An invalid zone can surface as either 401 or 404 depending on the service's
routing.

Exceptions are reserved for failures that produce no status:
``ValidationError`` (bad arguments, raised before any request),
``TransferCancelledError`` and ``TransportFailureError``.

Example:
    async with StorageClient("access-key", "my-zone") as client:
        await client.put_text("hello.txt", "Hello, world!")
        response = await client.get_file("hello.txt")
        async with response.stream as stream:
            content = await stream.read()
"""

import io
from typing import Any, Optional

import httpx

from bunny_storage.core import get_logger, get_tracer
from bunny_storage.naming import NameCodec
from bunny_storage.schemas import ClientConfig

from .results import FileListResponse, Status, StreamResponse, map_listing, to_status
from .transfer import (
    CancelSignal,
    ProgressCallback,
    TransferExecutor,
    ensure_readable,
    ensure_writable,
)
from .uri import RequestBuilder

logger = get_logger(__name__)
tracer = get_tracer(__name__)


class StorageClient:
    """Async client bound to one storage zone.

    Configuration is immutable after construction and no per-call state is
    kept, so concurrent calls on one client are safe. The underlying
    ``httpx.AsyncClient`` is shared by all calls; pass ``http_client`` to
    supply your own (it is then not closed by ``aclose``).
    """

    def __init__(
        self,
        access_key: str,
        storage_zone: str,
        *,
        auto_encode_filenames: Optional[bool] = None,
        timeout: Optional[float] = None,
        endpoint: Optional[str] = None,
        chunk_size: Optional[int] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the storage client.

        Args:
            access_key: Storage zone password used as the AccessKey
            storage_zone: Name of the storage zone to work with
            auto_encode_filenames: Percent-encode object names; disable to
                address virtual folders with literal ``/``
            timeout: Request timeout in seconds
            endpoint: Base endpoint of the storage API
            chunk_size: Chunk size in bytes for streamed transfers
            http_client: Shared transport; one is created when omitted
        """
        overrides = {
            "auto_encode_filenames": auto_encode_filenames,
            "timeout": timeout,
            "endpoint": endpoint,
            "chunk_size": chunk_size,
        }
        self._config = ClientConfig(
            access_key=access_key,
            storage_zone=storage_zone,
            **{key: value for key, value in overrides.items() if value is not None},
        )
        self._codec = NameCodec(self._config.auto_encode_filenames)
        self._requests = RequestBuilder(self._config, self._codec)

        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            timeout=self._config.timeout
        )
        self._executor = TransferExecutor(
            self._http_client,
            timeout=self._config.timeout,
            chunk_size=self._config.chunk_size,
        )
        logger.info(
            "Storage client initialized",
            storage_zone=self._config.storage_zone,
            auto_encode_filenames=self._config.auto_encode_filenames,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def storage_zone(self) -> str:
        """The storage zone in its URI-encoded form."""
        return self._config.storage_zone

    @property
    def auto_encode_filenames(self) -> bool:
        return self._config.auto_encode_filenames

    async def list_files(
        self, cancel: Optional[CancelSignal] = None
    ) -> FileListResponse:
        """List the files directly under the storage zone root.

        Virtual subfolders are returned as directory entries and not recursed
        into. On any status other than 200 the file list is empty.
        """
        with tracer.start_as_current_span("bunny_storage.list_files") as span:
            code, payload = await self._executor.fetch_listing(
                self._requests.zone_uri(), cancel
            )
            result = map_listing(code, payload, self._codec)
            span.set_attribute("http.status_code", int(result.status_code))

        logger.info(
            "Storage zone listed",
            storage_zone=self.storage_zone,
            status=int(result.status_code),
            file_count=len(result.files),
        )
        return result

    async def get_file(
        self, name: str, cancel: Optional[CancelSignal] = None
    ) -> StreamResponse:
        """Start downloading ``name`` and return its status and body stream.

        The stream is returned for every status; on failure it carries the
        service's error message. Close it on every path.
        """
        with tracer.start_as_current_span("bunny_storage.get_file") as span:
            code, stream = await self._executor.open_stream(
                self._requests.object_uri(name), cancel
            )
            span.set_attribute("http.status_code", code)

        logger.info("Object download started", object_name=name, status=code)
        return StreamResponse(status_code=to_status(code), stream=stream)

    async def download_file(
        self,
        name: str,
        destination: Any,
        progress: Optional[ProgressCallback] = None,
        cancel: Optional[CancelSignal] = None,
    ) -> Status:
        """Download ``name`` into a writable ``destination``.

        ``progress`` is called after every chunk with the bytes written so far
        and the total size when the service reports it. Only a successful
        body is written to the destination.

        Raises:
            ValidationError: If the destination is not writable
            TransferCancelledError: If ``cancel`` is set during the copy
        """
        await ensure_writable(destination)

        with tracer.start_as_current_span("bunny_storage.download_file") as span:
            code = await self._executor.copy_to_sink(
                self._requests.object_uri(name), destination, progress, cancel
            )
            span.set_attribute("http.status_code", code)

        logger.info("Object downloaded", object_name=name, status=code)
        return to_status(code)

    async def put_file(
        self,
        name: str,
        source: Any,
        offset: int = 0,
        auto_dispose: bool = False,
        progress: Optional[ProgressCallback] = None,
        cancel: Optional[CancelSignal] = None,
    ) -> Status:
        """Upload the bytes of ``source`` to ``name``, overwriting any object.

        A seekable source is read from ``offset``; otherwise from its current
        position. With ``auto_dispose`` the source is closed after a
        successful upload; on failure it is always left open.

        Raises:
            ValidationError: If the source is not readable or offset < 0
            TransferCancelledError: If ``cancel`` is set during the upload
        """
        await ensure_readable(source)

        with tracer.start_as_current_span("bunny_storage.put_file") as span:
            code = await self._executor.send_body(
                self._requests.object_uri(name),
                source,
                offset=offset,
                auto_dispose=auto_dispose,
                progress=progress,
                cancel=cancel,
            )
            span.set_attribute("http.status_code", code)

        logger.info("Object uploaded", object_name=name, status=code)
        return to_status(code)

    async def put_text(
        self,
        name: str,
        content: str,
        progress: Optional[ProgressCallback] = None,
        cancel: Optional[CancelSignal] = None,
    ) -> Status:
        """Upload ``content`` encoded as UTF-8 to ``name``."""
        source = io.BytesIO(content.encode("utf-8"))
        return await self.put_file(
            name, source, offset=0, auto_dispose=True, progress=progress, cancel=cancel
        )

    async def delete_file(
        self, name: str, cancel: Optional[CancelSignal] = None
    ) -> Status:
        """Delete ``name``. A missing object yields 404, not success."""
        with tracer.start_as_current_span("bunny_storage.delete_file") as span:
            code = await self._executor.delete(self._requests.object_uri(name), cancel)
            span.set_attribute("http.status_code", code)

        logger.info("Object deleted", object_name=name, status=code)
        return to_status(code)

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "StorageClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
