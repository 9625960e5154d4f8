"""Checks on the test selection: known ids, playlists, dependencies, conflicts."""

from __future__ import annotations

from siteaudit.core.config import AuditConfig, ProjectConfig
from siteaudit.core.errors import PlaylistNotFoundError
from siteaudit.playlists import PlaylistCatalog
from siteaudit.scheduling.registry import Registries
from siteaudit.scheduling.scheduler import PhaseScheduler
from siteaudit.validation.base import ValidationIssue, ValidationSeverity
from siteaudit.validation.checks._helpers import find_line_in_yaml, selected_tests


class EmptySelectionCheck:
    """Check that the audit selects at least one test (A002)."""

    @property
    def check_id(self) -> str:
        return "A002"

    @property
    def severity(self) -> ValidationSeverity:
        return ValidationSeverity.ERROR

    @property
    def description(self) -> str:
        return "Validates at least one test is enabled"

    def check(
        self,
        audit: AuditConfig,
        project: ProjectConfig,
        registries: Registries,
        raw_yaml: str,
    ) -> list[ValidationIssue]:
        if audit.has_enabled_tests() or audit.playlist:
            return []
        return [
            ValidationIssue(
                check_id=self.check_id,
                severity=self.severity,
                message="No tests enabled",
                line=find_line_in_yaml(raw_yaml, "tests:"),
                suggestion="Enable at least one test or name a playlist",
            )
        ]


class UnknownTestCheck:
    """Check that every selected test exists in the registry (A003)."""

    @property
    def check_id(self) -> str:
        return "A003"

    @property
    def severity(self) -> ValidationSeverity:
        return ValidationSeverity.ERROR

    @property
    def description(self) -> str:
        return "Validates selected test ids are known"

    def check(
        self,
        audit: AuditConfig,
        project: ProjectConfig,
        registries: Registries,
        raw_yaml: str,
    ) -> list[ValidationIssue]:
        known = registries.classifications
        available = ", ".join(known.ids())
        return [
            ValidationIssue(
                check_id=self.check_id,
                severity=self.severity,
                message=f"Unknown test '{test_id}'",
                line=find_line_in_yaml(raw_yaml, test_id),
                context=test_id,
                suggestion=f"Available tests: {available}",
                metadata={"test_id": test_id},
            )
            for test_id in audit.enabled_test_ids()
            if test_id not in known
        ]


class PlaylistCheck:
    """Check the named playlist exists and only lists known tests (A004)."""

    @property
    def check_id(self) -> str:
        return "A004"

    @property
    def severity(self) -> ValidationSeverity:
        return ValidationSeverity.ERROR

    @property
    def description(self) -> str:
        return "Validates the playlist exists and references known tests"

    def check(
        self,
        audit: AuditConfig,
        project: ProjectConfig,
        registries: Registries,
        raw_yaml: str,
    ) -> list[ValidationIssue]:
        if not audit.playlist:
            return []

        catalog = PlaylistCatalog.from_project(project)
        line = find_line_in_yaml(raw_yaml, "playlist:")
        try:
            result = catalog.validate_playlist(audit.playlist, registries.classifications)
        except PlaylistNotFoundError as e:
            return [
                ValidationIssue(
                    check_id=self.check_id,
                    severity=self.severity,
                    message=str(e),
                    line=line,
                    context=audit.playlist,
                    metadata={"playlist": audit.playlist},
                )
            ]

        if result.valid:
            return []
        return [
            ValidationIssue(
                check_id=self.check_id,
                severity=self.severity,
                message=(
                    f"Playlist '{audit.playlist}' references unknown tests: "
                    + ", ".join(result.missing_tests)
                ),
                line=line,
                suggestion="Fix the playlist definition in the project config",
                metadata={"playlist": audit.playlist, "tests": ",".join(result.missing_tests)},
            )
        ]


class MissingDependencyCheck:
    """Check every dependency of the selection is selected too (A005).

    A crawling audit counts the crawl test as selected.
    """

    @property
    def check_id(self) -> str:
        return "A005"

    @property
    def severity(self) -> ValidationSeverity:
        return ValidationSeverity.ERROR

    @property
    def description(self) -> str:
        return "Validates test dependencies are part of the selection"

    def check(
        self,
        audit: AuditConfig,
        project: ProjectConfig,
        registries: Registries,
        raw_yaml: str,
    ) -> list[ValidationIssue]:
        scheduler = PhaseScheduler(registries.classifications, registries.phases)
        report = scheduler.validate_dependencies(selected_tests(audit, project, registries))
        if report.valid:
            return []
        missing = ", ".join(report.missing_dependencies)
        return [
            ValidationIssue(
                check_id=self.check_id,
                severity=self.severity,
                message=f"Missing dependencies: {missing}",
                suggestion="Enable the missing tests or turn on crawl_site",
                metadata={"tests": ",".join(report.missing_dependencies)},
            )
        ]


class ConflictNoticeCheck:
    """Note selected tests that cannot share a page concurrently (A007)."""

    @property
    def check_id(self) -> str:
        return "A007"

    @property
    def severity(self) -> ValidationSeverity:
        return ValidationSeverity.INFO

    @property
    def description(self) -> str:
        return "Reports conflicting tests that will be serialized"

    def check(
        self,
        audit: AuditConfig,
        project: ProjectConfig,
        registries: Registries,
        raw_yaml: str,
    ) -> list[ValidationIssue]:
        scheduler = PhaseScheduler(registries.classifications, registries.phases)
        pairs = scheduler.find_conflicts(selected_tests(audit, project, registries))
        return [
            ValidationIssue(
                check_id=self.check_id,
                severity=self.severity,
                message=f"'{a}' and '{b}' conflict and will not run concurrently",
                metadata={"pair": f"{a},{b}"},
            )
            for a, b in pairs
        ]
