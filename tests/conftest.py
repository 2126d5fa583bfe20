"""Test configuration and fixtures for bunny-storage."""

import json
from urllib.parse import parse_qs, unquote

import httpx
import pytest

from bunny_storage import StorageClient

ZONE = "test-zone"
ACCESS_KEY = "test-key"
TIMESTAMP = "2024-05-01T10:00:00.123"


def _error(status: int, message: str) -> httpx.Response:
    return httpx.Response(status, json={"HttpCode": status, "Message": message})


class FakeBunnyStorage:
    """In-memory stand-in for the storage API, served via httpx.MockTransport.

    Object keys are the raw (still encoded) path after the zone, so an
    auto-encoded "a/b.txt" is stored as the single name "a%2Fb.txt" while a
    literal "a/b.txt" lives in the virtual folder "a". Uploads are committed
    only after the whole body has been received.
    """

    def __init__(self, zone: str = ZONE, access_key: str = ACCESS_KEY):
        self.zone = zone
        self.access_key = access_key
        self.objects: dict[str, bytes] = {}
        self.requests: list[httpx.Request] = []

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        path, _, query = request.url.raw_path.decode("ascii").partition("?")
        _, zone, name = path.split("/", 2)
        key = parse_qs(query).get("AccessKey", [""])[0]
        if unquote(zone) != self.zone or key != self.access_key:
            return _error(401, "Unauthorized")

        if request.method == "GET" and name == "":
            return httpx.Response(200, json=self._listing())
        if request.method == "GET":
            if name not in self.objects:
                return _error(404, "Object Not Found")
            return httpx.Response(200, content=self.objects[name])
        if request.method == "PUT":
            if name == "" or name.endswith("/"):
                return _error(400, "Invalid object name")
            body = await request.aread()
            self.objects[name] = body
            return _error(201, "File uploaded.")
        if request.method == "DELETE":
            if self.objects.pop(name, None) is None:
                return _error(404, "Object Not Found")
            return _error(200, "File deleted successfully.")
        return _error(405, "Method not allowed")

    def _listing(self) -> list[dict]:
        entries = []
        folders = set()
        for name, body in self.objects.items():
            if "/" in name:
                folders.add(name.split("/", 1)[0])
                continue
            entries.append(self._record(name, len(body), is_directory=False))
        for folder in sorted(folders):
            entries.append(self._record(folder, 0, is_directory=True))
        return entries

    def _record(self, name: str, length: int, is_directory: bool) -> dict:
        return {
            "Guid": f"guid-{name}",
            "StorageZoneName": self.zone,
            "Path": f"/{self.zone}/",
            "ObjectName": name,
            "Length": length,
            "LastChanged": TIMESTAMP,
            "IsDirectory": is_directory,
            "ServerId": 42,
            "UserId": "user-1",
            "DateCreated": TIMESTAMP,
            "StorageZoneId": 1234,
            "ReplicatedZones": None,
        }


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def fake_storage():
    """An empty fake storage zone."""
    return FakeBunnyStorage()


@pytest.fixture
def http_client(fake_storage):
    """An httpx client routed to the fake storage zone."""
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_storage.handler))


@pytest.fixture
def make_client(http_client):
    """Factory for storage clients talking to the fake zone.

    A small chunk size makes short payloads span several chunks.
    """

    def factory(**overrides):
        kwargs = {
            "access_key": ACCESS_KEY,
            "storage_zone": ZONE,
            "chunk_size": 10,
            "http_client": http_client,
        }
        kwargs.update(overrides)
        return StorageClient(**kwargs)

    return factory


@pytest.fixture
def listing_payload():
    """A raw listing body as returned by the service."""
    return json.dumps(
        [
            {
                "Guid": "1",
                "StorageZoneName": ZONE,
                "Path": f"/{ZONE}/",
                "ObjectName": "hello%20world.txt",
                "Length": 13,
                "LastChanged": TIMESTAMP,
                "IsDirectory": False,
                "ServerId": 7,
                "UserId": "user-1",
                "DateCreated": TIMESTAMP,
                "StorageZoneId": 99,
            },
            {"ObjectName": "docs", "IsDirectory": True, "Unexpected": [1, 2]},
        ]
    )
