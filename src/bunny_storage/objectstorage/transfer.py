"""Streaming HTTP exchanges against the storage API.

Every request is sent with ``stream=True`` so the call returns as soon as the
status line and headers arrive. Bodies are moved in bounded chunks: uploads
are fed to httpx from an async generator reading the caller's source, and
downloads are pulled from the response as the caller (or the sink copy)
consumes them.

Sources and sinks may be plain binary file objects or objects exposing
coroutine ``read``/``write`` methods; both are handled through
``_maybe_await``.

Cancellation is cooperative: a signal with an ``is_set()`` method
(``asyncio.Event``, ``threading.Event``, ...) is checked before a request is
sent and between chunks, and raises ``TransferCancelledError`` when set.
"""

import inspect
import io
from collections.abc import AsyncIterator, Iterator
from contextlib import contextmanager
from typing import Any, Callable, Optional, Protocol

import httpx

from bunny_storage.core import get_logger
from bunny_storage.core.exceptions import (
    TransferCancelledError,
    TransportFailureError,
    ValidationError,
)

logger = get_logger(__name__)

ProgressCallback = Callable[[int, Optional[int]], None]


class CancelSignal(Protocol):
    """Anything that can report whether cancellation was requested."""

    def is_set(self) -> bool: ...


def _check_cancelled(cancel: Optional[CancelSignal]) -> None:
    if cancel is not None and cancel.is_set():
        raise TransferCancelledError("Transfer cancelled")


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


@contextmanager
def _transport_errors(action: str) -> Iterator[None]:
    """Convert httpx transport failures into TransportFailureError."""
    try:
        yield
    except httpx.TransportError as e:
        raise TransportFailureError(f"{action} failed: {e!r}") from e


def _content_length(response: httpx.Response) -> Optional[int]:
    """Size of the decoded body, or None when it cannot be known up front."""
    # Content-Length counts encoded bytes; httpx yields decoded ones
    if response.headers.get("Content-Encoding", "identity").lower() != "identity":
        return None
    value = response.headers.get("Content-Length")
    if value is None or not value.isdigit():
        return None
    return int(value)


async def ensure_writable(destination: Any) -> None:
    """Raise ValidationError unless ``destination`` can accept bytes."""
    if not callable(getattr(destination, "write", None)):
        raise ValidationError("Destination must provide a write() method")
    if getattr(destination, "closed", False) is True:
        raise ValidationError("Destination is closed")
    writable = getattr(destination, "writable", None)
    if callable(writable) and not await _maybe_await(writable()):
        raise ValidationError("Destination is not writable")


async def ensure_readable(source: Any) -> None:
    """Raise ValidationError unless ``source`` can supply bytes."""
    if not callable(getattr(source, "read", None)):
        raise ValidationError("Source must provide a read() method")
    if getattr(source, "closed", False) is True:
        raise ValidationError("Source is closed")
    readable = getattr(source, "readable", None)
    if callable(readable) and not await _maybe_await(readable()):
        raise ValidationError("Source is not readable")


class ObjectStream:
    """A live, not yet drained response body.

    Bytes are pulled from the connection as the stream is iterated or read.
    The connection is released when the body is fully consumed or the stream
    is closed; callers must close it on every path, e.g.::

        async with response.stream as stream:
            data = await stream.read()

    Single reader only.
    """

    def __init__(self, response: httpx.Response, chunk_size: int):
        self._response = response
        self._chunk_size = chunk_size
        self._iterator: Optional[AsyncIterator[bytes]] = None
        self._pending = bytearray()

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def content_length(self) -> Optional[int]:
        return _content_length(self._response)

    @property
    def closed(self) -> bool:
        return self._response.is_closed

    def __aiter__(self) -> "ObjectStream":
        return self

    async def __anext__(self) -> bytes:
        if self._pending:
            chunk = bytes(self._pending)
            self._pending.clear()
            return chunk
        return await self._next_chunk()

    async def _next_chunk(self) -> bytes:
        if self._iterator is None:
            self._iterator = self._response.aiter_bytes(self._chunk_size)
        try:
            return await self._iterator.__anext__()
        except httpx.TransportError as e:
            raise TransportFailureError(f"Reading response body failed: {e!r}") from e

    async def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes, or the remainder of the body when negative.

        Returns ``b""`` once the body is exhausted.
        """
        if size < 0:
            return b"".join([chunk async for chunk in self])

        while len(self._pending) < size:
            try:
                self._pending += await self._next_chunk()
            except StopAsyncIteration:
                break
        data = bytes(self._pending[:size])
        del self._pending[:size]
        return data

    async def aclose(self) -> None:
        await self._response.aclose()

    async def __aenter__(self) -> "ObjectStream":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


class TransferExecutor:
    """Drives single HTTP exchanges over a shared ``httpx.AsyncClient``.

    Holds no per-call state, so one executor may serve concurrent calls.
    """

    def __init__(self, http_client: httpx.AsyncClient, timeout: float, chunk_size: int):
        self.http_client = http_client
        self.timeout = timeout
        self.chunk_size = chunk_size

    async def _send(
        self,
        method: str,
        uri: str,
        cancel: Optional[CancelSignal],
        content: Any = None,
        headers: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        _check_cancelled(cancel)
        request = self.http_client.build_request(
            method, uri, content=content, headers=headers, timeout=self.timeout
        )
        with _transport_errors(f"{method} request"):
            return await self.http_client.send(request, stream=True)

    async def fetch_listing(
        self, uri: str, cancel: Optional[CancelSignal] = None
    ) -> tuple[int, Optional[str]]:
        """GET a listing; the body text is read only for a 200 response."""
        response = await self._send("GET", uri, cancel)
        try:
            if response.status_code != httpx.codes.OK:
                return response.status_code, None
            with _transport_errors("Reading listing"):
                await response.aread()
            return response.status_code, response.text
        finally:
            await response.aclose()

    async def open_stream(
        self, uri: str, cancel: Optional[CancelSignal] = None
    ) -> tuple[int, ObjectStream]:
        """GET an object and hand back its undrained body, whatever the status."""
        response = await self._send("GET", uri, cancel)
        return response.status_code, ObjectStream(response, self.chunk_size)

    async def copy_to_sink(
        self,
        uri: str,
        destination: Any,
        progress: Optional[ProgressCallback] = None,
        cancel: Optional[CancelSignal] = None,
    ) -> int:
        """GET an object and copy a successful body into ``destination``.

        Error bodies are discarded so the destination only ever receives
        object content.
        """
        response = await self._send("GET", uri, cancel)
        try:
            if not response.is_success:
                return response.status_code

            total = _content_length(response)
            transferred = 0
            with _transport_errors("Downloading object"):
                async for chunk in response.aiter_bytes(self.chunk_size):
                    _check_cancelled(cancel)
                    await _maybe_await(destination.write(chunk))
                    transferred += len(chunk)
                    if progress is not None:
                        progress(transferred, total)

            logger.debug("Object downloaded", bytes=transferred)
            return response.status_code
        finally:
            await response.aclose()

    async def send_body(
        self,
        uri: str,
        source: Any,
        offset: int = 0,
        auto_dispose: bool = False,
        progress: Optional[ProgressCallback] = None,
        cancel: Optional[CancelSignal] = None,
    ) -> int:
        """PUT the bytes of ``source`` starting at ``offset``.

        Seekable sources are repositioned to ``offset``; for anything else the
        offset is ignored and the source is read from its current position.
        With ``auto_dispose`` the source is closed after a 2xx response; it is
        never closed on failure.
        """
        if offset < 0:
            raise ValidationError(f"Offset must not be negative: {offset}")
        _check_cancelled(cancel)

        total = await self._position(source, offset)
        headers = {"Content-Length": str(total)} if total is not None else None
        body = self._read_chunks(source, total, progress, cancel)

        response = await self._send("PUT", uri, cancel, content=body, headers=headers)
        await response.aclose()

        if auto_dispose and response.is_success:
            await _maybe_await(source.close())
        return response.status_code

    async def delete(self, uri: str, cancel: Optional[CancelSignal] = None) -> int:
        response = await self._send("DELETE", uri, cancel)
        await response.aclose()
        return response.status_code

    async def _position(self, source: Any, offset: int) -> Optional[int]:
        """Seek to ``offset`` when possible; return the bytes left to send."""
        seekable = getattr(source, "seekable", None)
        if not callable(seekable) or not await _maybe_await(seekable()):
            if offset:
                logger.debug("Source is not seekable, ignoring offset", offset=offset)
            return None

        end = await _maybe_await(source.seek(0, io.SEEK_END))
        await _maybe_await(source.seek(offset))
        return max(end - offset, 0)

    async def _read_chunks(
        self,
        source: Any,
        total: Optional[int],
        progress: Optional[ProgressCallback],
        cancel: Optional[CancelSignal],
    ) -> AsyncIterator[bytes]:
        transferred = 0
        while True:
            _check_cancelled(cancel)
            chunk = await _maybe_await(source.read(self.chunk_size))
            if not chunk:
                break
            if isinstance(chunk, str):
                raise ValidationError("Source must be opened in binary mode")
            yield chunk
            transferred += len(chunk)
            if progress is not None:
                progress(transferred, total)

        logger.debug("Object body sent", bytes=transferred)
