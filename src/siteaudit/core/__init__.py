"""Core configuration, errors and logging."""

from siteaudit.core.config import AuditConfig, LogConfig, ProjectConfig, SchedulingConfig
from siteaudit.core.errors import (
    ConfigurationError,
    SiteAuditError,
    UnknownTestError,
)

__all__ = [
    "AuditConfig",
    "ConfigurationError",
    "LogConfig",
    "ProjectConfig",
    "SchedulingConfig",
    "SiteAuditError",
    "UnknownTestError",
]
