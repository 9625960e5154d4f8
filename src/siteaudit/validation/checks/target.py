"""Checks on what an audit targets: the URL, viewports and crawl scope."""

from __future__ import annotations

from collections import Counter
from urllib.parse import urlparse

from siteaudit.core.config import AuditConfig, ProjectConfig
from siteaudit.core.constants import SCREENSHOT_TEST_ID
from siteaudit.scheduling.registry import Registries
from siteaudit.selection import effective_viewports, requires_crawling
from siteaudit.validation.base import ValidationIssue, ValidationSeverity
from siteaudit.validation.checks._helpers import find_line_in_yaml, selected_tests

_ALLOWED_SCHEMES = ("http", "https")


class UrlFormatCheck:
    """Check that the audit URL is an absolute http(s) URL (A001)."""

    @property
    def check_id(self) -> str:
        return "A001"

    @property
    def severity(self) -> ValidationSeverity:
        return ValidationSeverity.ERROR

    @property
    def description(self) -> str:
        return "Validates the audit URL is an absolute http or https URL"

    def check(
        self,
        audit: AuditConfig,
        project: ProjectConfig,
        registries: Registries,
        raw_yaml: str,
    ) -> list[ValidationIssue]:
        url = audit.url.strip()
        if not url:
            return [
                ValidationIssue(
                    check_id=self.check_id,
                    severity=self.severity,
                    message="URL is required",
                    line=find_line_in_yaml(raw_yaml, "url:"),
                    suggestion="Set 'url' to the page the audit starts from",
                )
            ]

        parsed = urlparse(url)
        if parsed.scheme not in _ALLOWED_SCHEMES or not parsed.netloc:
            return [
                ValidationIssue(
                    check_id=self.check_id,
                    severity=self.severity,
                    message="URL must be a valid http or https URL",
                    line=find_line_in_yaml(raw_yaml, "url:"),
                    context=url,
                    suggestion=f"Use a full address such as https://{parsed.path or 'example.com'}",
                )
            ]
        return []


class ViewportCheck:
    """Check viewports are usable for visual tests (A006).

    Screenshots need at least one viewport. Duplicate viewport names would
    overwrite each other's artifacts.
    """

    @property
    def check_id(self) -> str:
        return "A006"

    @property
    def severity(self) -> ValidationSeverity:
        return ValidationSeverity.ERROR

    @property
    def description(self) -> str:
        return "Validates viewports exist and have unique names"

    def check(
        self,
        audit: AuditConfig,
        project: ProjectConfig,
        registries: Registries,
        raw_yaml: str,
    ) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        viewports = effective_viewports(audit, project)

        if not viewports and SCREENSHOT_TEST_ID in selected_tests(audit, project, registries):
            issues.append(
                ValidationIssue(
                    check_id=self.check_id,
                    severity=self.severity,
                    message="At least one viewport must be configured for screenshots",
                    suggestion="Add a 'viewports' list to the audit or the project config",
                )
            )

        counts = Counter(v.name for v in viewports)
        for name in sorted(n for n, c in counts.items() if c > 1):
            issues.append(
                ValidationIssue(
                    check_id=self.check_id,
                    severity=ValidationSeverity.WARNING,
                    message=f"Viewport name '{name}' is used {counts[name]} times",
                    line=find_line_in_yaml(raw_yaml, name),
                    suggestion="Give each viewport a unique name",
                    metadata={"viewport": name},
                )
            )
        return issues


class CrawlScopeCheck:
    """Warn when site-wide tests run without a crawl (A008).

    Without a crawl only the start page is visited, so session tests that
    summarize the whole site see a single page.
    """

    @property
    def check_id(self) -> str:
        return "A008"

    @property
    def severity(self) -> ValidationSeverity:
        return ValidationSeverity.WARNING

    @property
    def description(self) -> str:
        return "Warns when site-wide tests are selected for a single-page audit"

    def check(
        self,
        audit: AuditConfig,
        project: ProjectConfig,
        registries: Registries,
        raw_yaml: str,
    ) -> list[ValidationIssue]:
        if audit.crawl_site:
            return []

        affected = [
            t
            for t in selected_tests(audit, project, registries)
            if requires_crawling(t, registries.classifications)
        ]
        if not affected:
            return []
        return [
            ValidationIssue(
                check_id=self.check_id,
                severity=self.severity,
                message=(
                    "crawl_site is false; site-wide tests will only cover the start page: "
                    + ", ".join(affected)
                ),
                line=find_line_in_yaml(raw_yaml, "crawl_site:"),
                suggestion="Set 'crawl_site: true' to audit every internal page",
                metadata={"tests": ",".join(affected)},
            )
        ]
