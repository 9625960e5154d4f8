"""Shared helper functions for validation checks."""

from __future__ import annotations

from siteaudit.core.config import AuditConfig, ProjectConfig
from siteaudit.core.errors import PlaylistNotFoundError
from siteaudit.scheduling.registry import Registries
from siteaudit.selection import resolve_selection


def find_line_in_yaml(yaml_str: str, marker: str) -> int | None:
    """Find the line number of a marker in the YAML string.

    Args:
        yaml_str: Raw YAML content as string.
        marker: Substring to search for in each line.

    Returns:
        1-based line number if found, None otherwise.
    """
    if not yaml_str or not marker:
        return None
    for i, line in enumerate(yaml_str.split("\n"), 1):
        if marker in line:
            return i
    return None


def selected_tests(
    audit: AuditConfig,
    project: ProjectConfig,
    registries: Registries,
) -> list[str]:
    """The audit's selection, ignoring an undefined playlist.

    The unknown playlist itself is reported by its own check.
    """
    try:
        return resolve_selection(audit, project, registries.classifications)
    except PlaylistNotFoundError:
        without_playlist = audit.model_copy(update={"playlist": None})
        return resolve_selection(without_playlist, project, registries.classifications)
