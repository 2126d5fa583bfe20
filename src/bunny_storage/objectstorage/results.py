"""Mapping of raw HTTP outcomes to caller-visible results.

Status codes are passed through unchanged; interpreting them (200 OK,
201 Created, 401 Unauthorized, 404 Not Found, 400 Bad Request) is left to the
caller. Only listings carry a decoded payload, and only on 200.
"""

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Optional, Union

import pydantic
from pydantic import TypeAdapter

from bunny_storage.core import get_logger
from bunny_storage.core.exceptions import ResponseDecodeError
from bunny_storage.naming import NameCodec
from bunny_storage.schemas import StorageObject

from .transfer import ObjectStream

logger = get_logger(__name__)

Status = Union[HTTPStatus, int]

_listing_adapter = TypeAdapter(list[Any])


def to_status(code: int) -> Status:
    """Return ``code`` as an HTTPStatus member when it is a known status."""
    try:
        return HTTPStatus(code)
    except ValueError:
        return code


def is_success(status: Status) -> bool:
    return 200 <= int(status) < 300


@dataclass(frozen=True)
class StreamResponse:
    """Status plus the undrained body of a GET.

    The stream is populated on failure too (usually a small JSON error), and
    must be closed by the caller on every path.
    """

    status_code: Status
    stream: ObjectStream


@dataclass(frozen=True)
class FileListResponse:
    """Status plus the files directly under the storage zone root.

    ``files`` is empty for any status other than 200.
    """

    status_code: Status
    files: list[StorageObject] = field(default_factory=list)


def decode_listing(payload: str) -> list[StorageObject]:
    """Decode a listing body, skipping records that do not validate."""
    try:
        records = _listing_adapter.validate_json(payload)
    except pydantic.ValidationError as e:
        raise ResponseDecodeError(f"Listing is not a JSON array: {e}") from e

    files = []
    for record in records:
        try:
            files.append(StorageObject.model_validate(record))
        except pydantic.ValidationError as e:
            logger.warning("Skipping malformed listing record", error=str(e))
    return files


def map_listing(
    code: int, payload: Optional[str], codec: NameCodec
) -> FileListResponse:
    status = to_status(code)
    if status != HTTPStatus.OK or payload is None:
        return FileListResponse(status_code=status, files=[])

    files = [
        item.model_copy(update={"object_name": codec.decode(item.object_name)})
        for item in decode_listing(payload)
    ]
    return FileListResponse(status_code=status, files=files)
