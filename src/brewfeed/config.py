"""Configuration management for brewfeed.

Loads settings from environment variables (and an optional .env file) using
Pydantic. Every setting has a working default, so the module imports cleanly
without any environment.

Usage:
    from brewfeed.config import settings

    print(settings.brewery_api_url)
    print(settings.cache_ttl_seconds)
"""

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """brewfeed configuration from environment variables.

    Attributes:
        brewery_api_url: Base address of the brewery collection endpoint
        brewery_filter: Path segment appended to the base address ("" = base collection)
        request_timeout: Per-request timeout in seconds
        rate_limit: Maximum upstream requests per second
        max_retries: Retries for transient upstream failures
        cache_ttl_seconds: Absolute lifetime of the cached record set
        cache_sliding_seconds: Idle window that also expires the cached set (None disables)
        snapshot_path: File holding the last good record set
            (default: response.json, or response.parquet for the parquet format)
        snapshot_format: 'json' or 'parquet'
        log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Upstream
    brewery_api_url: str = Field(
        default="https://api.openbrewerydb.org/v1/breweries",
        description="Open Brewery DB collection endpoint",
    )
    brewery_filter: str = Field(default="", description="Filter path appended to the base URL")
    request_timeout: float = Field(default=30.0, gt=0, description="Request timeout (seconds)")
    rate_limit: int = Field(default=5, ge=1, description="Upstream requests/second")
    max_retries: int = Field(default=3, ge=0, le=10, description="Retries on transient errors")

    # Cache
    cache_ttl_seconds: int = Field(default=600, ge=1, description="Absolute cache lifetime")
    cache_sliding_seconds: int | None = Field(
        default=300,
        ge=1,
        description="Sliding idle window (None = absolute expiry only)",
    )

    # Snapshot
    snapshot_path: str | None = Field(
        default=None,
        description="Snapshot file path (default: response.<format>)",
    )
    snapshot_format: str = Field(default="json", description="Snapshot format: 'json' or 'parquet'")

    # System
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("brewery_api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Ensure the base URL is http(s) and has no trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"brewery_api_url must start with http:// or https://, got '{v}'")
        return v.rstrip("/")

    @field_validator("brewery_filter")
    @classmethod
    def validate_filter(cls, v: str) -> str:
        """Strip surrounding whitespace and slashes."""
        return v.strip().strip("/")

    @field_validator("snapshot_format")
    @classmethod
    def validate_snapshot_format(cls, v: str) -> str:
        """Ensure snapshot format is supported."""
        v_lower = v.lower()
        if v_lower not in {"json", "parquet"}:
            raise ValueError(f"snapshot_format must be 'json' or 'parquet', got '{v}'")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid:
            raise ValueError(f"log_level must be one of {valid}, got {v}")
        return v_upper

    @model_validator(mode="after")
    def default_snapshot_path(self) -> "Settings":
        """Derive the snapshot file name from the format when unset."""
        if not self.snapshot_path:
            self.snapshot_path = f"response.{self.snapshot_format}"
        return self

    @model_validator(mode="after")
    def validate_cache_windows(self) -> "Settings":
        """Sliding window must fit inside the absolute TTL."""
        if (
            self.cache_sliding_seconds is not None
            and self.cache_sliding_seconds > self.cache_ttl_seconds
        ):
            raise ValueError(
                "cache_sliding_seconds cannot exceed cache_ttl_seconds "
                f"({self.cache_sliding_seconds} > {self.cache_ttl_seconds})"
            )
        return self


# Global settings instance — loaded once at import
settings = Settings()
