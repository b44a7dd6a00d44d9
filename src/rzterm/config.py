"""Configuration management for rzterm."""

from pathlib import Path
from typing import Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError
from .logging_utils import configure_logging

AUTO_ANALYZE_THRESHOLD = 1024 * 1024


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="RZTERM_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Engine Configuration
    rizin_path: str = Field(default="rizin", description="rizin executable name or path")
    analysis_depth: int = Field(default=1, ge=1, le=4, description="1=aa, 2=aaa, 3+=aaaa on open")
    io_cache: Optional[bool] = Field(default=True, description="Value for e io.cache on open, None to skip")
    auto_analyze_threshold: int = Field(
        default=AUTO_ANALYZE_THRESHOLD, description="Files below this size are analyzed on open"
    )

    # History Configuration
    history_max_size: int = Field(default=1000, ge=1, description="Maximum commands kept in memory")
    history_persist_limit: int = Field(default=100, ge=0, description="Most recent commands written to disk")

    # System Configuration
    home: Path = Field(default=Path.home() / ".rzterm", description="State directory for history and logs")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_file: Optional[Path] = Field(None, description="Log file used while the terminal is in raw mode")

    def resolve_home(self) -> Path:
        return self.home.expanduser().resolve()

    def history_path(self) -> Path:
        return self.resolve_home() / "history.json"


def get_settings(**overrides: object) -> Settings:
    """Get application settings.

    Args:
        overrides: Explicit values that win over environment and .env

    Returns:
        Settings instance

    Raises:
        ConfigurationError: If a setting fails validation
    """
    try:
        settings = Settings(**overrides)  # type: ignore[arg-type]
    except ValidationError as exc:
        fields = ", ".join(".".join(str(part) for part in error["loc"]) for error in exc.errors())
        raise ConfigurationError(f"invalid settings: {fields}") from exc

    configure_logging(level=settings.log_level)

    return settings
