"""
config.py

PURPOSE: Configuration loading and settings management.
DEPENDENCIES: pydantic, pydantic-settings

ARCHITECTURE NOTES:
Configuration comes from multiple sources (in priority order):
1. CLI flags (highest priority)
2. Environment variables (PLAYTEST_*, PLAYTEST_LLM_*, PLAYTEST_OTEL_*)
3. Defaults (lowest priority)
"""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class LLMSettings(BaseSettings):
    """Settings for the LLM player."""

    model: str = Field(
        default="claude-sonnet-4-20250514",
        description="Model name/ID",
    )
    temperature: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Sampling temperature",
    )
    max_tokens: int = Field(
        default=1024,
        gt=0,
        description="Maximum tokens in response",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        description="Attempts to get a tool call before giving up",
    )
    anthropic_api_key: str = Field(
        default="",
        description="Anthropic API key (or set ANTHROPIC_API_KEY env var)",
    )

    model_config = {"env_prefix": "PLAYTEST_LLM_"}


class OpenTelemetrySettings(BaseSettings):
    """Settings for OpenTelemetry tracing."""

    enabled: bool = Field(default=False, description="Enable tracing")
    service_name: str = Field(default="playtest", description="Service name on spans")
    endpoint: str | None = Field(
        default=None,
        description="OTLP gRPC endpoint (console export only when unset)",
    )

    model_config = {"env_prefix": "PLAYTEST_OTEL_"}


class Settings(BaseSettings):
    """Main application settings."""

    data_dir: Path = Field(
        default_factory=lambda: Path.home() / ".playtest",
        description="Directory for save files and data",
    )
    log_level: str = Field(
        default="WARNING",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug output",
    )
    default_game: str = Field(
        default="cave",
        description="Game played when none is given",
    )
    max_steps: int | None = Field(
        default=None,
        gt=0,
        description="Force termination after this many steps",
    )
    llm: LLMSettings = Field(
        default_factory=LLMSettings,
        description="LLM settings",
    )
    otel: OpenTelemetrySettings = Field(
        default_factory=OpenTelemetrySettings,
        description="OpenTelemetry settings",
    )

    model_config = {"env_prefix": "PLAYTEST_"}

    def saves_dir(self) -> Path:
        """Get the save file directory."""
        saves = self.data_dir / "saves"
        saves.mkdir(parents=True, exist_ok=True)
        return saves


def get_settings() -> Settings:
    """Get application settings, loading from environment."""
    llm_settings = LLMSettings()
    if not llm_settings.anthropic_api_key:
        # Fall back to the standard Anthropic env var
        llm_settings.anthropic_api_key = os.environ.get("ANTHROPIC_API_KEY", "")

    return Settings(llm=llm_settings, otel=OpenTelemetrySettings())
