"""Tests for pre-flight validation of audit configurations.

Covers:
- Each built-in check (A001-A008)
- Runner ordering, exit codes and crash isolation
- Reporter output formats
"""

from __future__ import annotations

import json

import pytest
from rich.console import Console

from siteaudit.core.config import AuditConfig, ProjectConfig
from siteaudit.scheduling import Registries, build_registries, get_default_registries
from siteaudit.validation import (
    ValidationIssue,
    ValidationReporter,
    ValidationRunner,
    ValidationSeverity,
)
from siteaudit.validation.base import SEVERITY_ORDER
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
from siteaudit.validation.checks._helpers import find_line_in_yaml


def _audit(**fields) -> AuditConfig:
    fields.setdefault("url", "https://example.com")
    return AuditConfig(**fields)


def _run(check, audit: AuditConfig, project: ProjectConfig, raw_yaml: str = ""):
    registries = build_registries(project)
    return check.check(audit, project, registries, raw_yaml)


# =============================================================================
# Helpers
# =============================================================================


class TestFindLineInYaml:
    def test_finds_first_match(self) -> None:
        assert find_line_in_yaml("url: x\ntests:\n  - seo\n", "seo") == 3

    def test_missing_marker(self) -> None:
        assert find_line_in_yaml("url: x\n", "playlist:") is None

    def test_empty_input(self) -> None:
        assert find_line_in_yaml("", "url:") is None


# =============================================================================
# Target checks
# =============================================================================


class TestUrlFormatCheck:
    """Tests for A001."""

    @pytest.mark.parametrize("url", ["https://example.com", "http://localhost:8080/shop"])
    def test_valid(self, url: str, default_project: ProjectConfig) -> None:
        assert _run(UrlFormatCheck(), _audit(url=url), default_project) == []

    @pytest.mark.parametrize("url", ["example.com", "ftp://example.com", "https://"])
    def test_invalid(self, url: str, default_project: ProjectConfig) -> None:
        issues = _run(UrlFormatCheck(), _audit(url=url), default_project, f"url: {url}\n")

        assert len(issues) == 1
        assert issues[0].check_id == "A001"
        assert issues[0].severity == ValidationSeverity.ERROR
        assert issues[0].message == "URL must be a valid http or https URL"
        assert issues[0].line == 1

    def test_empty(self, default_project: ProjectConfig) -> None:
        issues = _run(UrlFormatCheck(), _audit(url="  "), default_project)

        assert [i.message for i in issues] == ["URL is required"]


class TestViewportCheck:
    """Tests for A006."""

    def test_screenshots_without_viewports(self, default_project: ProjectConfig) -> None:
        project = default_project.model_copy(update={"viewports": {}})

        issues = _run(ViewportCheck(), _audit(tests=["screenshots"]), project)

        assert len(issues) == 1
        assert issues[0].severity == ValidationSeverity.ERROR
        assert "At least one viewport" in issues[0].message

    def test_no_viewports_without_screenshots(self, default_project: ProjectConfig) -> None:
        project = default_project.model_copy(update={"viewports": {}})

        assert _run(ViewportCheck(), _audit(tests=["seo"]), project) == []

    def test_duplicate_names_warn(self, default_project: ProjectConfig) -> None:
        audit = _audit(
            tests=["screenshots"],
            viewports=[
                {"name": "desktop", "width": 1920, "height": 1080},
                {"name": "desktop", "width": 1280, "height": 800},
            ],
        )

        issues = _run(ViewportCheck(), audit, default_project)

        assert len(issues) == 1
        assert issues[0].severity == ValidationSeverity.WARNING
        assert issues[0].metadata == {"viewport": "desktop"}


class TestCrawlScopeCheck:
    """Tests for A008."""

    def test_site_wide_tests_without_crawl(self, default_project: ProjectConfig) -> None:
        audit = _audit(crawl_site=False, tests=["seo", "site-summary", "content-scraping"])

        issues = _run(CrawlScopeCheck(), audit, default_project, "crawl_site: false\n")

        assert len(issues) == 1
        assert issues[0].severity == ValidationSeverity.WARNING
        assert issues[0].metadata == {"tests": "site-summary"}
        assert issues[0].line == 1

    def test_crawling_audit(self, default_project: ProjectConfig) -> None:
        audit = _audit(tests=["site-summary"])

        assert _run(CrawlScopeCheck(), audit, default_project) == []


# =============================================================================
# Selection checks
# =============================================================================


class TestEmptySelectionCheck:
    """Tests for A002."""

    def test_no_tests(self, default_project: ProjectConfig) -> None:
        issues = _run(EmptySelectionCheck(), _audit(), default_project)

        assert [i.message for i in issues] == ["No tests enabled"]

    def test_all_disabled(self, default_project: ProjectConfig) -> None:
        audit = _audit(tests=[{"id": "seo", "enabled": False}])

        assert len(_run(EmptySelectionCheck(), audit, default_project)) == 1

    def test_playlist_counts(self, default_project: ProjectConfig) -> None:
        assert _run(EmptySelectionCheck(), _audit(playlist="visual"), default_project) == []


class TestUnknownTestCheck:
    """Tests for A003."""

    def test_reports_each_unknown_id(self, default_project: ProjectConfig) -> None:
        raw = "url: https://example.com\ntests:\n  - seo\n  - ghost\n  - phantom\n"

        issues = _run(
            UnknownTestCheck(),
            _audit(tests=["seo", "ghost", "phantom"]),
            default_project,
            raw,
        )

        assert [i.message for i in issues] == ["Unknown test 'ghost'", "Unknown test 'phantom'"]
        assert issues[0].line == 4
        assert "seo" in issues[0].suggestion

    def test_known_ids(self, default_project: ProjectConfig) -> None:
        assert _run(UnknownTestCheck(), _audit(tests=["seo"]), default_project) == []


class TestPlaylistCheck:
    """Tests for A004."""

    def test_unknown_playlist(self, small_project: ProjectConfig) -> None:
        issues = _run(PlaylistCheck(), _audit(playlist="nope"), small_project)

        assert len(issues) == 1
        assert "Playlist 'nope' not found" in issues[0].message

    def test_playlist_with_unknown_tests(self, small_project: ProjectConfig) -> None:
        issues = _run(PlaylistCheck(), _audit(playlist="broken"), small_project)

        assert len(issues) == 1
        assert issues[0].message == "Playlist 'broken' references unknown tests: does-not-exist"

    def test_valid_playlist(self, small_project: ProjectConfig) -> None:
        assert _run(PlaylistCheck(), _audit(playlist="visual"), small_project) == []

    def test_no_playlist(self, small_project: ProjectConfig) -> None:
        assert _run(PlaylistCheck(), _audit(tests=["seo"]), small_project) == []


class TestMissingDependencyCheck:
    """Tests for A005."""

    def test_missing_dependency(self, small_project: ProjectConfig) -> None:
        issues = _run(MissingDependencyCheck(), _audit(tests=["sitemap-crawl"]), small_project)

        assert len(issues) == 1
        assert issues[0].message == "Missing dependencies: sitemap-generate"

    def test_crawl_satisfies_crawl_dependency(self, default_project: ProjectConfig) -> None:
        assert _run(MissingDependencyCheck(), _audit(tests=["sitemap"]), default_project) == []

    def test_single_page_audit_lacks_crawl(self, default_project: ProjectConfig) -> None:
        issues = _run(
            MissingDependencyCheck(),
            _audit(crawl_site=False, tests=["sitemap"]),
            default_project,
        )

        assert issues[0].metadata == {"tests": "site-crawling"}

    def test_unknown_playlist_is_not_fatal(self, small_project: ProjectConfig) -> None:
        audit = _audit(tests=["sitemap-crawl"], playlist="nope")

        issues = _run(MissingDependencyCheck(), audit, small_project)

        assert len(issues) == 1


class TestConflictNoticeCheck:
    """Tests for A007."""

    def test_conflicting_selection(self, default_project: ProjectConfig) -> None:
        issues = _run(
            ConflictNoticeCheck(),
            _audit(tests=["api-key-scan", "accessibility"]),
            default_project,
        )

        assert len(issues) == 1
        assert issues[0].severity == ValidationSeverity.INFO
        assert issues[0].metadata == {"pair": "accessibility,api-key-scan"}

    def test_no_conflicts(self, default_project: ProjectConfig) -> None:
        assert _run(ConflictNoticeCheck(), _audit(tests=["seo"]), default_project) == []


# =============================================================================
# Runner
# =============================================================================


class _ExplodingCheck:
    check_id = "X999"
    severity = ValidationSeverity.ERROR
    description = "Always fails"

    def check(self, audit, project, registries, raw_yaml):
        raise RuntimeError("boom")


class TestValidationRunner:
    """Tests for running checks together."""

    @pytest.fixture
    def registries(self) -> Registries:
        return get_default_registries()

    def test_default_checks(self) -> None:
        ids = [c.check_id for c in ValidationRunner().checks]

        assert ids == ["A001", "A006", "A008", "A002", "A003", "A004", "A005", "A007"]

    def test_clean_audit(self, default_project: ProjectConfig, registries) -> None:
        runner = ValidationRunner()

        issues = runner.validate(_audit(tests=["seo", "screenshots"]), default_project, registries)

        assert issues == []
        assert runner.get_exit_code(issues) == 0

    def test_sorted_by_severity(self, default_project: ProjectConfig, registries) -> None:
        runner = ValidationRunner()
        audit = _audit(
            url="example.com",
            crawl_site=False,
            tests=["accessibility", "api-key-scan", "site-summary"],
        )

        issues = runner.validate(audit, default_project, registries)
        severities = [i.severity for i in issues]

        assert severities == sorted(severities, key=SEVERITY_ORDER.get)
        assert {i.check_id for i in issues} == {"A001", "A005", "A007", "A008"}
        assert runner.has_errors(issues)
        assert runner.get_exit_code(issues) == 1

    def test_warnings_do_not_fail(self, default_project: ProjectConfig, registries) -> None:
        runner = ValidationRunner()
        audit = _audit(tests=["accessibility", "api-key-scan"])

        issues = runner.validate(audit, default_project, registries)

        assert [i.check_id for i in issues] == ["A007"]
        assert runner.get_exit_code(issues) == 0

    def test_crashing_check_becomes_warning(
        self, default_project: ProjectConfig, registries
    ) -> None:
        runner = ValidationRunner([_ExplodingCheck(), UrlFormatCheck()])

        issues = runner.validate(_audit(url="nope"), default_project, registries)

        assert [i.check_id for i in issues] == ["A001", "X999"]
        assert issues[1].severity == ValidationSeverity.WARNING
        assert "boom" in issues[1].message

    def test_add_check(self) -> None:
        runner = ValidationRunner([])
        runner.add_check(UrlFormatCheck())

        assert [c.check_id for c in runner.checks] == ["A001"]

    def test_count_by_severity(self) -> None:
        issues = [
            ValidationIssue("A001", ValidationSeverity.ERROR, "x"),
            ValidationIssue("A007", ValidationSeverity.INFO, "y"),
            ValidationIssue("A007", ValidationSeverity.INFO, "z"),
        ]

        counts = ValidationRunner([]).count_by_severity(issues)

        assert counts == {
            ValidationSeverity.ERROR: 1,
            ValidationSeverity.WARNING: 0,
            ValidationSeverity.INFO: 2,
        }


# =============================================================================
# Reporter
# =============================================================================


class TestValidationReporter:
    """Tests for validation output."""

    @pytest.fixture
    def issues(self) -> list[ValidationIssue]:
        return [
            ValidationIssue(
                "A003",
                ValidationSeverity.ERROR,
                "Unknown test 'ghost'",
                line=4,
                context="ghost",
                suggestion="Available tests: seo",
            ),
            ValidationIssue("A007", ValidationSeverity.INFO, "'a' and 'b' conflict"),
        ]

    def test_format_short_and_full(self, issues: list[ValidationIssue]) -> None:
        assert issues[0].format_short() == "[A003] Line 4: Unknown test 'ghost'"
        assert "Suggestion: Available tests: seo" in issues[0].format_full()
        assert issues[1].format_short() == "[A007] 'a' and 'b' conflict"

    def test_json(self, issues: list[ValidationIssue]) -> None:
        data = json.loads(ValidationReporter().report_json(issues))

        assert data["valid"] is False
        assert data["error_count"] == 1
        assert data["info_count"] == 1
        assert data["issues"][0] == {
            "check_id": "A003",
            "severity": "error",
            "message": "Unknown test 'ghost'",
            "line": 4,
            "context": "ghost",
            "suggestion": "Available tests: seo",
        }
        assert "line" not in data["issues"][1]

    def test_plain(self, issues: list[ValidationIssue]) -> None:
        text = ValidationReporter().format_plain(issues)

        assert "[ERROR] A003 (line 4): Unknown test 'ghost'" in text
        assert "Total: 1 errors, 0 warnings, 1 info" in text
        assert text.endswith("Validation: FAILED")

    def test_plain_no_issues(self) -> None:
        assert ValidationReporter().format_plain([]) == "Validation passed: no issues found"

    def test_terminal(self, issues: list[ValidationIssue]) -> None:
        console = Console(record=True, width=120)

        ValidationReporter(console).report_terminal(issues, "audit.yaml")
        output = console.export_text()

        assert "ERRORS" in output
        assert "Unknown test 'ghost'" in output
        assert "Validation: FAILED" in output

    def test_terminal_prints_brackets_literally(self) -> None:
        console = Console(record=True, width=120)
        issue = ValidationIssue(
            check_id="A003",
            severity=ValidationSeverity.ERROR,
            message="Unknown test '[/x]'",
            context="[bold]",
            suggestion="Remove '[red]seo[/]'",
        )

        ValidationReporter(console).report_terminal([issue], "[audit].yaml")
        output = console.export_text()

        assert "Unknown test '[/x]'" in output
        assert "[bold]" in output
        assert "Remove '[red]seo[/]'" in output

    def test_terminal_valid(self) -> None:
        console = Console(record=True, width=120)

        ValidationReporter(console).report_terminal([], "audit.yaml")

        assert "Audit configuration valid" in console.export_text()
