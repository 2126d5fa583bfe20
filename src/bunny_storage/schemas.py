"""Data models for bunny-storage: listing records and client configuration."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .core.config import settings
from .naming import encode_component


class StorageObject(BaseModel):
    """A file (or virtual directory) stored in a storage zone.

    Field names follow Python conventions; the service's PascalCase JSON keys
    are accepted through aliases. Unknown keys are ignored and missing keys
    fall back to defaults so one odd record never breaks a listing.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    guid: str = Field("", alias="Guid", description="Identifier given on upload")
    storage_zone_name: str = Field(
        "", alias="StorageZoneName", description="Storage zone holding the object"
    )
    path: str = Field("", alias="Path", description="Full virtual folder path")
    object_name: str = Field(
        "", alias="ObjectName", description="Name used for API operations"
    )
    length: int = Field(0, alias="Length", description="Size in bytes")
    last_changed: Optional[datetime] = Field(
        None, alias="LastChanged", description="Date of the last write"
    )
    is_directory: bool = Field(
        False, alias="IsDirectory", description="True for virtual folders"
    )
    server_id: int = Field(0, alias="ServerId", description="Storage server id")
    user_id: str = Field("", alias="UserId", description="Owning user id")
    date_created: Optional[datetime] = Field(
        None, alias="DateCreated", description="Creation date"
    )
    storage_zone_id: int = Field(
        0, alias="StorageZoneId", description="Numeric id of the storage zone"
    )


class ClientConfig(BaseModel):
    """Per-client configuration, immutable after construction.

    ``access_key`` and ``storage_zone`` are stored in their URI-safe encoded
    form as soon as they are assigned. Object names are encoded per request
    instead, because that depends on ``auto_encode_filenames``.

    Example:
        config = ClientConfig(access_key="key", storage_zone="my zone")
        config.storage_zone  # "my%20zone"
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    access_key: str = Field(..., description="Storage zone password / API key")
    storage_zone: str = Field(..., description="Storage zone name")
    auto_encode_filenames: bool = Field(
        default_factory=lambda: settings.auto_encode_filenames,
        description="Percent-encode object names (disables virtual folders)",
    )
    timeout: float = Field(
        default_factory=lambda: settings.timeout_seconds,
        gt=0,
        description="Request timeout in seconds",
    )
    endpoint: str = Field(
        default_factory=lambda: settings.endpoint,
        description="Base HTTPS endpoint of the storage API",
    )
    chunk_size: int = Field(
        default_factory=lambda: settings.chunk_size,
        gt=0,
        description="Chunk size in bytes for streamed transfers",
    )

    @field_validator("access_key", "storage_zone")
    @classmethod
    def _encode(cls, value: str) -> str:
        return encode_component(value)

    @field_validator("endpoint")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value[:-1] if value.endswith("/") else value
