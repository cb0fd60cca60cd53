"""
Logging Configuration.
"""

from enum import Enum
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..levels import Level


class LogFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"


class LoggingSettings(BaseSettings):
    """Default sink configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TAGLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    level: Level = Field(default=Level.INFO, description="Minimum level emitted by default sinks")
    sinks: str = Field(default="console", description="Comma-separated sink names (console, file)")
    format: LogFormat = Field(default=LogFormat.CONSOLE, description="Console output format")
    colorize: bool = Field(default=True, description="Color console lines by level")
    dirname: str = Field(default="logs", description="Directory for the file sink")
    filename: str = Field(default="log-%DATE%.log", description="File sink name template")
    maxsize: int = Field(default=10 * 1024 * 1024, gt=0, description="Rotate the log file past this size")
    zipped_archive: bool = Field(default=True, description="Gzip rotated log files")
    level_width: int = Field(default=8, description="Console level column width")
    tag_width: int = Field(default=20, description="Console tag column width")
    intercept_stdlib: bool = Field(default=False, description="Route stdlib logging into taglog")
    stdlib_tag: str = Field(default="stdlib", min_length=1, description="Tag used for stdlib records")

    @field_validator("level", mode="before")
    @classmethod
    def _parse_level(cls, value: Any) -> Level:
        return Level.parse(value)
