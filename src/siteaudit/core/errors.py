"""Exception hierarchy for siteaudit.

All siteaudit exceptions inherit from SiteAuditError, enabling callers
to catch broad (SiteAuditError) or narrow (e.g., UnknownTestError).
Configuration problems share the ConfigurationError base so a CLI can
report them uniformly as pre-flight failures.
"""

from __future__ import annotations

from collections.abc import Iterable


class SiteAuditError(Exception):
    """Base exception for all siteaudit errors."""


class ConfigurationError(SiteAuditError):
    """Raised when the test registry or an audit configuration is invalid."""


class UnknownTestError(ConfigurationError):
    """Raised when a selection references test ids absent from the registry.

    Attributes:
        test_ids: Every offending id, sorted and de-duplicated.
    """

    def __init__(self, test_ids: Iterable[str]):
        self.test_ids: tuple[str, ...] = tuple(sorted(set(test_ids)))
        listed = ", ".join(self.test_ids)
        noun = "test" if len(self.test_ids) == 1 else "tests"
        super().__init__(f"Unknown {noun}: {listed}")


class UnknownPhaseError(ConfigurationError):
    """Raised when a phase number has no definition.

    Attributes:
        phase: The phase number that was looked up.
    """

    def __init__(self, phase: int):
        self.phase = phase
        super().__init__(f"Unknown phase: {phase}")


class RegistryValidationError(ConfigurationError):
    """Raised when a static registry entry violates a registry invariant.

    Attributes:
        test_id: The entry containing the problem.
        reason: Why the entry is invalid.
    """

    def __init__(self, test_id: str, reason: str):
        self.test_id = test_id
        self.reason = reason
        super().__init__(f"Test '{test_id}': {reason}")


class CycleDetectedError(RegistryValidationError):
    """Raised when test dependencies contain a cycle.

    Attributes:
        cycle: The detected cycle as a list of test ids, first id repeated last.
    """

    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__(
            cycle[0],
            "circular dependency detected: " + " -> ".join(cycle),
        )


class PlaylistNotFoundError(ConfigurationError):
    """Raised when a playlist id is not defined in the project config.

    Attributes:
        playlist_id: The requested playlist.
        available: Playlist ids that do exist.
    """

    def __init__(self, playlist_id: str, available: Iterable[str] = ()):
        self.playlist_id = playlist_id
        self.available = tuple(sorted(available))
        message = f"Playlist '{playlist_id}' not found"
        if self.available:
            message += f". Available: {', '.join(self.available)}"
        super().__init__(message)


__all__ = [
    "ConfigurationError",
    "CycleDetectedError",
    "PlaylistNotFoundError",
    "RegistryValidationError",
    "SiteAuditError",
    "UnknownPhaseError",
    "UnknownTestError",
]
