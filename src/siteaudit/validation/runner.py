"""Runs the pre-flight checks over one audit file."""

from __future__ import annotations

from collections import Counter

from siteaudit.core.config import AuditConfig, ProjectConfig
from siteaudit.core.logging import get_logger
from siteaudit.scheduling.registry import Registries
from siteaudit.validation.base import (
    SEVERITY_ORDER,
    ValidationCheck,
    ValidationIssue,
    ValidationSeverity,
)
from siteaudit.validation.checks import (
    ConflictNoticeCheck,
    CrawlScopeCheck,
    EmptySelectionCheck,
    MissingDependencyCheck,
    PlaylistCheck,
    UnknownTestCheck,
    UrlFormatCheck,
    ViewportCheck,
)

_logger = get_logger("validation")


class ValidationRunner:
    """Collects the findings of a set of checks, most severe first.

    Exit codes follow the CLI contract: 0 when no ERROR was found (warnings
    and info notes are fine), 1 otherwise.
    """

    def __init__(self, checks: list[ValidationCheck] | None = None):
        self._checks: list[ValidationCheck] = (
            create_default_checks() if checks is None else list(checks)
        )

    @property
    def checks(self) -> list[ValidationCheck]:
        return list(self._checks)

    def add_check(self, check: ValidationCheck) -> None:
        self._checks.append(check)

    def validate(
        self,
        audit: AuditConfig,
        project: ProjectConfig,
        registries: Registries,
        raw_yaml: str = "",
    ) -> list[ValidationIssue]:
        """Run every check; issues keep check order within a severity."""
        found: list[ValidationIssue] = []
        for check in self._checks:
            try:
                found += check.check(audit, project, registries, raw_yaml)
            except Exception as e:
                # A crashing check is reported, the remaining checks still run
                _logger.warning(
                    "validation.check_failed",
                    check_id=check.check_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                found.append(
                    ValidationIssue(
                        check_id=check.check_id,
                        severity=ValidationSeverity.WARNING,
                        message=f"Check {check.check_id} crashed: {e}",
                        suggestion="Please report this as a siteaudit bug",
                    )
                )

        found.sort(key=lambda issue: SEVERITY_ORDER[issue.severity])
        _logger.debug(
            "validation.completed",
            checks=len(self._checks),
            issues=len(found),
            errors=sum(1 for issue in found if issue.severity == ValidationSeverity.ERROR),
        )
        return found

    def has_errors(self, issues: list[ValidationIssue]) -> bool:
        return any(issue.severity == ValidationSeverity.ERROR for issue in issues)

    def get_exit_code(self, issues: list[ValidationIssue]) -> int:
        return int(self.has_errors(issues))

    def count_by_severity(self, issues: list[ValidationIssue]) -> dict[ValidationSeverity, int]:
        """Issue count for every severity, including zeros."""
        counts = Counter(issue.severity for issue in issues)
        return {severity: counts[severity] for severity in ValidationSeverity}


def create_default_checks() -> list[ValidationCheck]:
    """Built-in checks: what the audit targets first, then what it selects."""
    return [
        UrlFormatCheck(),
        ViewportCheck(),
        CrawlScopeCheck(),
        EmptySelectionCheck(),
        UnknownTestCheck(),
        PlaylistCheck(),
        MissingDependencyCheck(),
        ConflictNoticeCheck(),
    ]
