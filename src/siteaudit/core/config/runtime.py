"""Logging settings that a project config may carry."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console", "both"]


class LogConfig(BaseModel):
    """How siteaudit emits its structured log events.

    The CLI's ``--log-*`` options take precedence over these values.
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Events below this level are dropped (case-insensitive in YAML)",
    )
    format: LogFormat = Field(
        default="console",
        description="'console' renders for humans on stderr, 'json' emits one object "
        "per line, 'both' renders for humans and copies every event to file_path",
    )
    file_path: Path | None = Field(
        default=None,
        description="Log file; mandatory for format 'both'",
    )
    max_file_size_mb: int = Field(
        default=50,
        gt=0,
        le=1000,
        description="Size in MB at which the log file rolls over",
    )
    backup_count: int = Field(
        default=5,
        ge=0,
        le=100,
        description="Rolled-over log files retained next to file_path",
    )
    include_timestamps: bool = Field(
        default=True,
        description="Stamp each event with an ISO8601 UTC 'timestamp'",
    )
    include_context: bool = Field(
        default=True,
        description="Copy audit_id, run_id, phase and test_id from the active audit context",
    )

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @model_validator(mode="after")
    def _both_needs_file(self) -> LogConfig:
        if self.format == "both" and self.file_path is None:
            raise ValueError("file_path is required when format='both'")
        return self
