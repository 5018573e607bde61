"""Application configuration pulled from environment variables via pydantic."""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")


class Settings(BaseSettings):
    """Environment-driven configuration for the weather guide service."""
    model_config = SettingsConfigDict(env_prefix="GUIDE_", extra="ignore")

    weather_source: str = "openweathermap"  # options: openweathermap, mock
    openweathermap_api_key: str | None = None
    openweathermap_base_url: str = "https://api.openweathermap.org/data/2.5"
    request_timeout_seconds: float = 10.0
    http_cache_name: str = ".weather_cache"
    http_cache_ttl_seconds: int = 600
    default_location: str = "Mumbai, India"
    fallback_to_sample: bool = True
    api_key: str | None = None
    api_key_redis_url: str | None = None
    api_key_redis_set: str = "api_keys"
    tips_redis_url: str | None = None
    tips_redis_prefix: str = "tips:"
    max_tip_chars: int = 500

    @field_validator("openweathermap_base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs to avoid double slashes."""
        return str(v).rstrip("/")


settings = Settings()


if __name__ == "__main__":
    logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4, exclude={'openweathermap_api_key', 'api_key'})}")
