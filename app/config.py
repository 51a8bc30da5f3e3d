"""Application configuration pulled from environment variables via pydantic."""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")


class Settings(BaseSettings):
    """Environment-driven configuration for the air-quality dashboard service."""
    model_config = SettingsConfigDict(env_prefix="AIRDASH_", extra="ignore")

    data_source: str = "api"  # options: api, snapshot
    api_base_url: str = "http://localhost:8000"
    api_timeout_seconds: float = 10.0
    http_cache_seconds: int = 900
    http_retries: int = 3
    snapshot_path: str | None = None
    map_step: float = 0.25
    label_timezone: str | None = None  # IANA name; None renders in the process-local zone
    api_key: str | None = None
    api_key_redis_url: str | None = None
    api_key_redis_set: str = "api_keys"

    @field_validator("api_base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs to avoid double slashes."""
        return str(v).rstrip("/")


settings = Settings()


if __name__ == "__main__":
    logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4)}")
