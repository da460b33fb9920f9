"""Configuration management for StatAnalyzer.

Uses pydantic-settings for type-safe environment variable loading.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """StatAnalyzer settings read from the environment and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Interpretation providers
    openai_api_key: str = Field(
        default="",
        description="OpenAI API key for result interpretation",
    )
    openai_model: str = Field(
        default="gpt-4o",
        description="OpenAI model to use",
    )
    anthropic_api_key: str = Field(
        default="",
        description="Anthropic API key (used when no OpenAI key is set)",
    )
    anthropic_model: str = Field(
        default="claude-sonnet-4-20250514",
        description="Claude model to use",
    )
    interpretation_max_tokens: int = Field(
        default=2000,
        description="Maximum tokens for an interpretation response",
    )

    # Server
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )
    api_host: str = Field(
        default="127.0.0.1",
        description="API server host",
    )
    api_port: int = Field(
        default=8000,
        description="API server port",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # Upload and report settings
    max_upload_mb: int = Field(
        default=500,
        description="Maximum upload size in megabytes",
    )
    reports_dir: Path = Field(
        default=Path("reports"),
        description="Directory where generated reports are written",
    )

    # Analysis settings
    pair_alignment: Literal["truncate", "row"] = Field(
        default="truncate",
        description="How variable pairs are matched for correlation and regression",
    )
    qc_subgroup_size: int = Field(
        default=1,
        ge=1,
        le=10,
        description="Subgroup size for control charts (1 = individuals chart)",
    )

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


settings = Settings()


def get_settings() -> Settings:
    """Return the process-wide settings."""
    return settings
