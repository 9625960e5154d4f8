"""Validation check implementations.

This module contains the built-in pre-flight checks organized by category:
- target: URL, viewport and crawl scope checks
- selection: Test id, playlist, dependency and conflict checks
"""

from siteaudit.validation.checks.selection import (
    ConflictNoticeCheck,
    EmptySelectionCheck,
    MissingDependencyCheck,
    PlaylistCheck,
    UnknownTestCheck,
)
from siteaudit.validation.checks.target import (
    CrawlScopeCheck,
    UrlFormatCheck,
    ViewportCheck,
)

__all__ = [
    # Target checks
    "UrlFormatCheck",
    "ViewportCheck",
    "CrawlScopeCheck",
    # Selection checks
    "EmptySelectionCheck",
    "UnknownTestCheck",
    "PlaylistCheck",
    "MissingDependencyCheck",
    "ConflictNoticeCheck",
]
