"""Shared utilities for siteaudit CLI commands.

This module contains helpers used across multiple CLI command modules:
- Logging configuration from global options
- Project and audit config loading with CLI error handling
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from siteaudit.core.config import AuditConfig, LogConfig, ProjectConfig
from siteaudit.core.config.runtime import LogFormat, LogLevel
from siteaudit.core.errors import ConfigurationError
from siteaudit.core.logging import configure_logging, get_logger
from siteaudit.scheduling.registry import (
    Registries,
    build_registries,
    get_default_registries,
    load_default_project_config,
)

from .output import output_error

# =============================================================================
# Module-level logger
# =============================================================================

_logger = get_logger("cli")


# =============================================================================
# Error message constants
# =============================================================================


class ErrorMessages:
    """Constants for CLI error messages."""

    AUDIT_READ_ERROR = "Cannot read audit file"
    AUDIT_YAML_ERROR = "YAML syntax error"
    AUDIT_SCHEMA_ERROR = "Audit schema validation failed"
    PROJECT_LOAD_ERROR = "Error loading project config"
    PLAN_ERROR = "Cannot plan audit"


EXIT_INVALID = 1
"""Exit code for configurations that parse but fail pre-flight checks."""

EXIT_UNPARSEABLE = 2
"""Exit code for files that cannot be read or parsed."""


# =============================================================================
# Logging configuration
# =============================================================================


@dataclass
class CliLoggingConfig:
    """CLI logging configuration state.

    ``explicit`` records whether any global logging option was given, in
    which case a project config's ``logging`` section is ignored.
    """

    level: LogLevel = "WARNING"
    file: Path | None = None
    format: LogFormat = "console"
    configured: bool = False
    explicit: bool = False


# Single global config instance
_log_config = CliLoggingConfig()


def set_log_level(level: str) -> None:
    """Set the log level (DEBUG, INFO, WARNING, ERROR)."""
    _log_config.level = level.upper()  # type: ignore[assignment]
    _log_config.explicit = True


def set_log_file(path: Path | None) -> None:
    """Set the log file path.

    Console output continues; the file receives the same events.
    """
    _log_config.file = path
    _log_config.explicit = True
    if path and _log_config.format == "console":
        _log_config.format = "both"


def set_log_format(fmt: str) -> None:
    """Set the log format (json, console, both)."""
    _log_config.format = fmt.lower()  # type: ignore[assignment]
    _log_config.explicit = True


def configure_global_logging(console: Console) -> None:
    """Configure logging based on global CLI options.

    Only configures once per session.

    Raises:
        typer.Exit: If logging configuration fails.
    """
    if _log_config.configured:
        return

    try:
        configure_logging(
            level=_log_config.level,
            format=_log_config.format,
            file_path=_log_config.file,
        )
        _log_config.configured = True
    except ValueError as e:
        # e.g. format="both" without a file path
        console.print(f"[red]Logging configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None


def apply_project_logging(log_config: LogConfig) -> None:
    """Reconfigure logging from a project config unless CLI options were given."""
    if _log_config.explicit or log_config == LogConfig():
        return
    configure_logging(
        level=log_config.level,
        format=log_config.format,
        file_path=log_config.file_path,
        max_file_size_mb=log_config.max_file_size_mb,
        backup_count=log_config.backup_count,
        include_timestamps=log_config.include_timestamps,
        include_context=log_config.include_context,
    )
    _log_config.configured = True


def reset_logging_state() -> None:
    """Reset logging state (primarily for testing)."""
    global _log_config
    _log_config = CliLoggingConfig()


# =============================================================================
# Config loading
# =============================================================================


def load_project(
    project_config: Path | None,
    console: Console,
    json_output: bool = False,
) -> tuple[ProjectConfig, Registries]:
    """Load the project config and build its registries.

    Without an explicit path the cached process-wide default is used
    (``SITEAUDIT_PROJECT_CONFIG`` or the packaged config).

    Raises:
        typer.Exit: Code 2 if the project config cannot be loaded.
    """
    try:
        if project_config is None:
            project = load_default_project_config()
            registries = get_default_registries()
        else:
            project = ProjectConfig.from_yaml(project_config)
            registries = build_registries(project)
    except (OSError, yaml.YAMLError, ValidationError, ConfigurationError) as e:
        _logger.error("cli.project_load_failed", error=str(e), error_type=type(e).__name__)
        output_error(
            str(e),
            title=ErrorMessages.PROJECT_LOAD_ERROR,
            json_output=json_output,
            console_instance=console,
        )
        raise typer.Exit(EXIT_UNPARSEABLE) from None

    apply_project_logging(project.logging)
    return project, registries


def load_audit(
    audit_file: Path,
    console: Console,
    json_output: bool = False,
) -> tuple[AuditConfig, str]:
    """Read and parse an audit file.

    Performs the layers in order: read, YAML syntax, Pydantic schema.

    Returns:
        The parsed audit and its raw YAML text.

    Raises:
        typer.Exit: Code 2 if any layer fails.
    """
    try:
        raw_yaml = audit_file.read_text()
    except OSError as e:
        output_error(
            str(e),
            title=ErrorMessages.AUDIT_READ_ERROR,
            json_output=json_output,
            console_instance=console,
        )
        raise typer.Exit(EXIT_UNPARSEABLE) from None

    try:
        audit = AuditConfig.from_yaml_string(raw_yaml)
    except yaml.YAMLError as e:
        output_error(
            str(e),
            title=ErrorMessages.AUDIT_YAML_ERROR,
            json_output=json_output,
            console_instance=console,
        )
        raise typer.Exit(EXIT_UNPARSEABLE) from None
    except ValidationError as e:
        output_error(
            str(e),
            title=ErrorMessages.AUDIT_SCHEMA_ERROR,
            json_output=json_output,
            console_instance=console,
        )
        raise typer.Exit(EXIT_UNPARSEABLE) from None

    return audit, raw_yaml


__all__ = [
    "EXIT_INVALID",
    "EXIT_UNPARSEABLE",
    "CliLoggingConfig",
    "ErrorMessages",
    "apply_project_logging",
    "configure_global_logging",
    "load_audit",
    "load_project",
    "reset_logging_state",
    "set_log_file",
    "set_log_format",
    "set_log_level",
]
