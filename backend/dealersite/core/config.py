# Central place for all configurable settings. We use Pydantic's
# BaseSettings so values can be read from env vars or a .env file.
# Cache, tenant resolution and theme defaults all read from here.

import json
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def safe_json_loads(value):
    try:
        return json.loads(value)
    except Exception:
        return value


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_json_loads=safe_json_loads,
    )

    # Core DB connection string, like sqlite:///./dealersite.db or a Postgres URL.
    # Customization records and the dealer directory live here.
    DATABASE_URL: str

    # Toggle SQLAlchemy echo logs. Useful for debugging queries locally.
    DB_ECHO: bool = False

    # Cache backend for resolved configs and tenant lookups:
    # "memory", "redis" or "none".
    CACHE_BACKEND: str = "memory"
    REDIS_URL: Optional[str] = None
    CACHE_NAMESPACE: str = "dealersite"
    CACHE_DEFAULT_TTL_SECONDS: int = Field(default=300, ge=0)
    CONFIG_CACHE_TTL_SECONDS: int = Field(default=300, ge=0)
    TENANT_CACHE_TTL_SECONDS: int = Field(default=600, ge=0)

    # Theme used when a dealer references a key that is not registered.
    DEFAULT_THEME_KEY: str = "base"

    # Tenant resolution: header first, then hostname, then this fallback.
    DEALER_HEADER_NAME: str = "X-Dealer-ID"
    DEFAULT_DEALER_ID: Optional[str] = None
    DEFAULT_LOCALE: str = "en"
    SUPPORTED_LOCALES: List[str] = Field(
        default_factory=lambda: ["en", "fr", "es", "ar"]
    )

    @field_validator("SUPPORTED_LOCALES", mode="before")
    @classmethod
    def _parse_list_values(cls, value):
        if isinstance(value, str):
            parts = [p.strip().lower() for p in value.split(",") if p.strip()]
            return parts
        return value


# Instantiate a single settings object for app-wide import.
# Any module can just `from dealersite.core.config import settings`.
settings = Settings()
