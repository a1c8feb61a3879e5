"""Application configuration using Pydantic Settings.

Environment Variable Strategy:
- Every field has a development default so the service boots locally and in CI
- The OpenRouter key is the only secret; leaving it empty disables statement extraction
"""

from functools import cached_property

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_comma_list(value: str | list[str] | None, default: list[str]) -> list[str]:
    """Parse comma-separated string into list."""
    if value is None:
        return default
    if isinstance(value, list):
        return value
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # AI API (empty = statement extraction disabled)
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    primary_model: str = "google/gemini-2.5-flash"
    fallback_models_str: str | None = Field(default=None, validation_alias="FALLBACK_MODELS")

    # Statement extraction
    extraction_timeout_seconds: float = 180.0
    extraction_concurrency: int = Field(default=4, ge=1)

    # Uploads
    max_upload_bytes: int = 10 * 1024 * 1024
    ledger_header_scan_rows: int = Field(default=20, ge=1)

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # App settings
    environment: str = Field(
        default="development", validation_alias=AliasChoices("ENVIRONMENT", "ENV")
    )
    debug: bool = False

    # Env format: CORS_ORIGINS="http://localhost:3000,http://localhost:5173"
    cors_origins_str: str | None = Field(default=None, validation_alias="CORS_ORIGINS")

    @cached_property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from env string or use defaults."""
        return parse_comma_list(
            self.cors_origins_str,
            [
                "http://localhost:3000",
                "http://localhost:5173",
                "http://127.0.0.1:3000",
            ],
        )

    @cached_property
    def fallback_models(self) -> list[str]:
        """Parse fallback models from env string or use defaults."""
        return parse_comma_list(
            self.fallback_models_str,
            [
                "google/gemini-2.0-flash-001",
                "qwen/qwen-2.5-vl-7b-instruct:free",
            ],
        )


settings = Settings()
