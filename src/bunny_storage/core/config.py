"""Configuration management for bunny-storage."""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    log_level: str = "INFO"
    otel_enabled: bool = False
    otel_service_name: str = "bunny-storage"

    endpoint: str = "https://storage.bunnycdn.com"
    auto_encode_filenames: bool = True
    # Large transfers can run for hours
    timeout_seconds: float = 6 * 60 * 60
    chunk_size: int = 80 * 1024

    access_key: Optional[str] = None
    storage_zone: Optional[str] = None

    model_config = {
        "env_prefix": "BUNNY_STORAGE_",
        "case_sensitive": False,
    }


settings = Settings()
