"""Application settings, read from the environment (and ``.env`` if present).

Required: ``DATABASE_URL`` and ``JWT_SECRET_KEY``. Everything else has a
default suitable for a production deployment.
"""

import re

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_SCHEMA_NAME = re.compile(r"^[a-z_][a-z0-9_]{0,62}$")


class Settings(BaseSettings):
    """Runtime configuration for the API, CLI and migrations."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage
    database_url: str = Field(description="Async SQLAlchemy URL, e.g. postgresql+asyncpg://user:pw@host/db")
    database_schema: str | None = Field(
        default=None,
        description="PostgreSQL schema holding the tables, for per-branch or preview deployments",
    )

    # Bearer tokens
    jwt_secret_key: str = Field(min_length=32, description="HMAC key shared with the token issuer")
    jwt_algorithm: str = Field(default="HS256")
    jwt_access_token_expire_minutes: int = Field(
        default=60 * 24,
        gt=0,
        description="Lifetime of tokens minted with `constituency-api token`",
    )

    # Result import
    import_max_file_size_mb: int = Field(default=5, gt=0, description="Largest accepted result spreadsheet")

    # Logging
    log_level: str = Field(default="INFO")
    log_dir: str | None = Field(default=None, description="Also write a daily-rotated log file here")
    log_json: bool = Field(default=False, description="Write stderr logs as JSON lines")

    # HTTP
    cors_origins: str = Field(default="", description="Comma-separated browser origins allowed by CORS")
    cors_origin_regex: str = Field(default="", description="Regex for additional allowed origins")
    api_v1_prefix: str = Field(default="/api/v1")
    environment: str = Field(default="production", description="Deployment name; HSTS is sent only in production")

    @field_validator("database_schema")
    @classmethod
    def validate_database_schema(cls, v: str | None) -> str | None:
        # The name is interpolated into SET search_path / CREATE SCHEMA.
        if v is not None and not _SCHEMA_NAME.match(v):
            msg = f"Invalid database_schema: must match {_SCHEMA_NAME.pattern}"
            raise ValueError(msg)
        return v

    @property
    def import_max_file_size_bytes(self) -> int:
        return self.import_max_file_size_mb * 1024 * 1024

    @property
    def cors_origin_list(self) -> list[str]:
        """``cors_origins`` split on commas, blanks dropped."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()  # type: ignore[call-arg]
