"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables following 12-factor principles.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Upstream counting service
    counting_api_base_url: str = Field(
        description="Base URL of the audience-counting API",
    )
    counting_api_key: str = Field(
        default="",
        description="API key sent in the X-API-Key header",
    )
    counting_api_timeout: float = Field(
        default=60.0,
        description="Counting API request timeout in seconds",
        gt=0,
    )

    @field_validator("counting_api_base_url", "counting_api_key")
    @classmethod
    def strip_wrapping_quotes(cls, v: str) -> str:
        """Drop quotes left around values copied from shell exports."""
        v = v.strip()
        if len(v) >= 2 and v[0] == v[-1] and v[0] in ("'", '"'):
            v = v[1:-1]
        return v

    @field_validator("counting_api_base_url")
    @classmethod
    def validate_counting_api_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            msg = "counting_api_base_url must be an http(s) URL"
            raise ValueError(msg)
        return v.rstrip("/")

    # Aggregation
    geography_top_n: int = Field(
        default=5,
        description="Entries kept per geography level in breakdown responses",
        gt=0,
    )
    dimension_cache_ttl: int = Field(
        default=3600,
        description="Seconds dimension lookups are cached for",
        ge=0,
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )

    # CORS
    cors_origins: str = Field(
        default="",
        description="Comma-separated list of allowed CORS origins (must be explicitly configured)",
    )

    # API
    api_v1_prefix: str = Field(
        default="/api/v1",
        description="API version prefix",
    )

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        if not self.cors_origins.strip():
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()  # type: ignore[call-arg]
