"""Configuration models for siteaudit.

Pydantic models for the project YAML (test registry, phases, playlists,
viewports, scheduling tunables) and for per-run audit YAML. All models are
re-exported here so ``from siteaudit.core.config import ...`` works.
"""

from siteaudit.core.config.audit import AuditConfig, SelectedTest
from siteaudit.core.config.project import (
    PhaseConfig,
    PlaylistDefinition,
    ProjectConfig,
    SchedulingConfig,
    TestDefinition,
    ViewportConfig,
)
from siteaudit.core.config.runtime import LogConfig

__all__ = [
    # Audit
    "AuditConfig",
    "SelectedTest",
    # Project
    "PhaseConfig",
    "PlaylistDefinition",
    "ProjectConfig",
    "SchedulingConfig",
    "TestDefinition",
    "ViewportConfig",
    # Runtime
    "LogConfig",
]
