"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables (and an optional
.env file) with sensible defaults. The variable names match what
`fly storage create` exports for a Tigris bucket, so a deployed app
picks up its bucket without extra wiring.

Mock mode enables local development without a real bucket.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Bundled front-end served at /
PACKAGE_PUBLIC_DIR = Path(__file__).resolve().parent.parent / "public"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For lists (like cors_origins), use comma-separated values in env.
    """

    # API Configuration
    api_title: str = "Filebucket API"
    api_version: str = "0.1.0"

    # Object storage
    bucket_name: str = Field(
        default="",
        description="Bucket holding the files. Required unless in mock mode."
    )
    aws_access_key_id: str = Field(
        default="",
        description="Access key ID for the object store"
    )
    aws_secret_access_key: str = Field(
        default="",
        description="Secret access key for the object store"
    )
    aws_endpoint_url_s3: str = Field(
        default="https://fly.storage.tigris.dev",
        description="S3-compatible endpoint. Defaults to Tigris."
    )
    aws_region: str = Field(
        default="auto",
        description="Region name. Tigris ignores it but the signer needs one."
    )
    storage_mock_mode: bool = Field(
        default=False,
        description="Use in-memory storage instead of a real bucket."
    )
    storage_list_page_size: Optional[int] = Field(
        default=None,
        ge=1,
        le=1000,
        description="MaxKeys per list call. Store default (1000) when unset."
    )
    presign_expiry_seconds: int = Field(
        default=3600,
        ge=1,
        le=604800,
        description="Lifetime of signed download URLs. S3 caps this at 7 days."
    )

    # Static assets
    static_dir: Optional[str] = Field(
        default=None,
        description="Directory served at /. Defaults to the bundled public/ tree."
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Listen address")
    port: int = Field(default=8080, description="Listen port")

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def static_path(self) -> Path:
        """Resolved directory for static assets."""
        if self.static_dir:
            return Path(self.static_dir)
        return PACKAGE_PUBLIC_DIR

    def validate_required_fields(self) -> list[str]:
        """
        Validate that required fields are set based on mock mode.

        Returns list of missing required fields. Kept separate from
        Pydantic validation because requirements depend on mock mode.
        """
        missing = []

        if not self.storage_mock_mode:
            if not self.bucket_name:
                missing.append("BUCKET_NAME")
            if not self.aws_access_key_id:
                missing.append("AWS_ACCESS_KEY_ID")
            if not self.aws_secret_access_key:
                missing.append("AWS_SECRET_ACCESS_KEY")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once per process. For tests, call
    get_settings.cache_clear() to reset.
    """
    return Settings()
