import ssl
from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SwishEnvironment(str, Enum):
    """Known gateway environments."""
    PRODUCTION = "production"
    SIMULATOR = "simulator"


ENVIRONMENT_BASE_URLS = {
    SwishEnvironment.PRODUCTION: "https://cpc.getswish.net",
    SwishEnvironment.SIMULATOR: "https://mss.swicpc.bankgirot.se",
}

# The gateway only completes handshakes on TLS 1.1.
DEFAULT_TLS_VERSION = "TLSv1_1"
TLS_VERSION_NAMES = ("TLSv1", "TLSv1_1", "TLSv1_2", "TLSv1_3")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SWISH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: SwishEnvironment = Field(default=SwishEnvironment.PRODUCTION)
    base_url: Optional[str] = Field(
        default=None,
        description="Explicit gateway base URL, overrides the environment default",
    )
    tls_version: str = Field(
        default=DEFAULT_TLS_VERSION,
        description="ssl.TLSVersion member the transport is pinned to, e.g. 'TLSv1_1'",
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if not value.startswith(("https://", "http://")):
            raise ValueError(f"base_url must be an absolute http(s) URL, got '{value}'")
        return value.rstrip("/")

    @field_validator("tls_version")
    @classmethod
    def validate_tls_version(cls, value: str) -> str:
        if value not in TLS_VERSION_NAMES:
            raise ValueError(f"tls_version must be one of {list(TLS_VERSION_NAMES)}, got '{value}'")
        return value

    def resolved_base_url(self) -> str:
        """Base URL of the gateway: the explicit override or the environment default."""
        return self.base_url or ENVIRONMENT_BASE_URLS[self.environment]

    def ssl_tls_version(self) -> ssl.TLSVersion:
        return ssl.TLSVersion[self.tls_version]


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    The same instance is returned for the lifetime of the process so every
    client built from it agrees on environment and protocol version.

    Returns:
        Settings: The cached settings instance
    """
    return Settings()


def clear_settings_cache() -> None:
    """
    Clear the cached settings instance.

    The next call to get_settings() re-reads the environment.
    """
    get_settings.cache_clear()
