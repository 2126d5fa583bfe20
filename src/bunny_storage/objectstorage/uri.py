"""Request URI construction."""

from bunny_storage.naming import NameCodec
from bunny_storage.schemas import ClientConfig


def build_uri(endpoint: str, zone: str, access_key: str, object_name: str) -> str:
    """Compose ``{endpoint}/{zone}/{object_name}?AccessKey={access_key}``.

    ``zone`` and ``access_key`` must already be encoded; ``object_name`` is
    used as given.
    """
    return f"{endpoint}/{zone}/{object_name}?AccessKey={access_key}"


class RequestBuilder:
    """Builds URIs for one client's zone and credentials."""

    def __init__(self, config: ClientConfig, codec: NameCodec):
        self.config = config
        self.codec = codec

    def object_uri(self, name: str) -> str:
        """URI addressing a single object, encoding the name per the policy."""
        return build_uri(
            self.config.endpoint,
            self.config.storage_zone,
            self.config.access_key,
            self.codec.encode(name),
        )

    def zone_uri(self) -> str:
        """URI of the zone root, used for listing."""
        return build_uri(
            self.config.endpoint,
            self.config.storage_zone,
            self.config.access_key,
            "",
        )
