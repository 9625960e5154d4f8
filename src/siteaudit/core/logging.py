"""Structured logging for siteaudit.

Events are structlog event dicts routed through the stdlib root logger, so
one ``configure_logging()`` call decides where every component's events go.
Event names are dotted snake_case (``scheduler.strategy_built``).

    from siteaudit.core.logging import AuditContext, configure_logging, get_logger, with_context

    configure_logging(level="DEBUG", format="console")
    logger = get_logger("scheduler")

    audit = AuditContext(audit_id="https://example.com", component="plan")
    with with_context(audit):
        logger.info("scheduler.strategy_built", phases=3)  # carries audit_id, run_id
"""

from __future__ import annotations

import logging
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, get_args

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from siteaudit.core.config.runtime import LogFormat, LogLevel

# Substrings of field names whose values are replaced before rendering
SENSITIVE_PATTERNS = frozenset({
    "api_key",
    "apikey",
    "api-key",
    "token",
    "secret",
    "password",
    "credential",
    "cookie",
    "authorization",
})

REDACTED = "[REDACTED]"

_log_file: Path | None = None


def get_current_log_path() -> Path | None:
    """The file events are written to, if file logging is active."""
    return _log_file


# =============================================================================
# Audit context
# =============================================================================


@dataclass(frozen=True)
class AuditContext:
    """Correlation fields attached to every event logged inside ``with_context``.

    ``run_id`` is unique per invocation so that two plans of the same site
    can be told apart in a shared log file.
    """

    audit_id: str
    run_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    phase: int | None = None
    test_id: str | None = None
    component: str = "unknown"

    def to_dict(self) -> dict[str, Any]:
        """Fields for an event dict; unset phase and test are left out."""
        return {key: value for key, value in asdict(self).items() if value is not None}


_active_context: ContextVar[AuditContext | None] = ContextVar(
    "siteaudit_audit_context", default=None
)


def get_current_context() -> AuditContext | None:
    return _active_context.get()


@contextmanager
def with_context(ctx: AuditContext) -> Iterator[AuditContext]:
    """Make ``ctx`` the active audit context inside the block.

    Nested blocks shadow the outer context and restore it on exit.
    """
    token = _active_context.set(ctx)
    try:
        yield ctx
    finally:
        _active_context.reset(token)


# =============================================================================
# Processors
# =============================================================================


def _sanitize_value(key: str, value: Any) -> Any:
    lowered = key.lower()
    if any(pattern in lowered for pattern in SENSITIVE_PATTERNS):
        return REDACTED
    return value


def _redact_sensitive(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Redact sensitive keys at the top level and inside nested dicts."""
    return {
        key: (
            {k: _sanitize_value(k, v) for k, v in value.items()}
            if isinstance(value, dict)
            else _sanitize_value(key, value)
        )
        for key, value in event_dict.items()
    }


def _stamp_utc(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    event_dict["timestamp"] = datetime.now(UTC).isoformat()
    return event_dict


def _merge_audit_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Add fields of the active AuditContext that the event does not set itself."""
    ctx = _active_context.get()
    if ctx is None:
        return event_dict
    return {**ctx.to_dict(), **event_dict}


def _processor_chain(
    renderer: Processor,
    include_timestamps: bool,
    include_context: bool,
) -> list[Processor]:
    chain: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        _redact_sensitive,
    ]
    if include_context:
        chain.append(_merge_audit_context)
    if include_timestamps:
        chain.append(_stamp_utc)
    chain += [
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]
    return chain


# =============================================================================
# Component logger
# =============================================================================


class SiteAuditLogger:
    """Logger that stamps every event with its component name.

    The structlog logger is looked up per call, so instances created at
    import time follow any later ``configure_logging()``.
    """

    def __init__(self, component: str) -> None:
        self._context: dict[str, Any] = {"component": component}

    def _emit(self, method: str, event: str, fields: dict[str, Any]) -> None:
        bound = structlog.get_logger().bind(**self._context)
        getattr(bound, method)(event, **fields)

    def debug(self, event: str, **fields: Any) -> None:
        self._emit("debug", event, fields)

    def info(self, event: str, **fields: Any) -> None:
        self._emit("info", event, fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._emit("warning", event, fields)

    def error(self, event: str, **fields: Any) -> None:
        self._emit("error", event, fields)


def get_logger(component: str) -> SiteAuditLogger:
    """Logger for ``component`` (e.g. "scheduler", "registry", "cli.plan")."""
    return SiteAuditLogger(component)


# =============================================================================
# Configuration
# =============================================================================


def _build_handlers(
    log_format: LogFormat,
    file_path: Path | None,
    max_file_size_mb: int,
    backup_count: int,
) -> list[logging.Handler]:
    global _log_file

    _log_file = None
    handlers: list[logging.Handler] = []
    if log_format != "json":
        handlers.append(logging.StreamHandler(sys.stderr))

    if file_path is not None and log_format in ("json", "both"):
        file_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                file_path,
                maxBytes=max_file_size_mb * 1024 * 1024,
                backupCount=backup_count,
                encoding="utf-8",
            )
        )
        _log_file = file_path
    elif log_format == "json":
        handlers.append(logging.StreamHandler(sys.stdout))
    return handlers


def configure_logging(
    level: LogLevel = "INFO",
    format: LogFormat = "console",  # noqa: A002
    file_path: Path | None = None,
    max_file_size_mb: int = 50,
    backup_count: int = 5,
    include_timestamps: bool = True,
    include_context: bool = True,
) -> None:
    """Route all siteaudit events according to the given options.

    Replaces any handlers already on the root logger, so calling it again
    reconfigures rather than duplicates output.

    Args:
        level: Events below this level are dropped.
        format: "console" renders for humans on stderr. "json" writes one
            JSON object per event to ``file_path``, or to stdout without one.
            "both" renders for humans on stderr and copies each event to
            ``file_path``.
        file_path: Log file, rotated at ``max_file_size_mb`` keeping
            ``backup_count`` old files. Required for "both".
        include_timestamps: Add an ISO8601 UTC ``timestamp`` field.
        include_context: Merge fields of the active AuditContext.

    Raises:
        ValueError: For an unknown level or format, or "both" without a file.
    """
    if level not in get_args(LogLevel):
        raise ValueError(f"Unknown log level: {level!r}")
    if format not in get_args(LogFormat):
        raise ValueError(f"Unknown log format: {format!r}")
    if format == "both" and file_path is None:
        raise ValueError("file_path is required when format='both'")

    numeric_level = logging.getLevelName(level)
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    for handler in _build_handlers(format, file_path, max_file_size_mb, backup_count):
        handler.setLevel(numeric_level)
        root.addHandler(handler)
    root.setLevel(numeric_level)

    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if format == "json"
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )
    structlog.configure(
        processors=_processor_chain(renderer, include_timestamps, include_context),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Loggers fetched before a reconfiguration must not keep the old chain
        cache_logger_on_first_use=False,
    )


__all__ = [
    "AuditContext",
    "REDACTED",
    "SENSITIVE_PATTERNS",
    "SiteAuditLogger",
    "configure_logging",
    "get_current_context",
    "get_current_log_path",
    "get_logger",
    "with_context",
]
