"""Rendering of pre-flight results for people and for tools."""

from __future__ import annotations

import json
from collections import Counter
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from siteaudit.validation.base import SEVERITY_ORDER, ValidationIssue, ValidationSeverity

_CONTEXT_WIDTH = 70


def _counts(issues: list[ValidationIssue]) -> Counter[ValidationSeverity]:
    return Counter(issue.severity for issue in issues)


def _verdict(issues: list[ValidationIssue]) -> str:
    return "FAILED" if _counts(issues)[ValidationSeverity.ERROR] else "PASSED"


class ValidationReporter:
    """Renders a list of issues as rich terminal output, JSON or plain text."""

    SEVERITY_COLORS = {
        ValidationSeverity.ERROR: "red",
        ValidationSeverity.WARNING: "yellow",
        ValidationSeverity.INFO: "blue",
    }

    SEVERITY_ICONS = {
        ValidationSeverity.ERROR: "✗",
        ValidationSeverity.WARNING: "!",
        ValidationSeverity.INFO: "i",
    }

    SECTION_TITLES = {
        ValidationSeverity.ERROR: "ERRORS (must fix before planning)",
        ValidationSeverity.WARNING: "WARNINGS (audit may not cover what you expect)",
        ValidationSeverity.INFO: "INFO (affects scheduling)",
    }

    SUMMARY_NOUNS = {
        ValidationSeverity.ERROR: "error",
        ValidationSeverity.WARNING: "warning",
        ValidationSeverity.INFO: "info note",
    }

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    # -------------------------------------------------------------------------
    # Terminal
    # -------------------------------------------------------------------------

    def report_terminal(self, issues: list[ValidationIssue], config_name: str) -> None:
        """Print issues grouped by severity, then a one-line verdict."""
        out = self.console
        out.print()
        if not issues:
            out.print(
                Panel(
                    f"[green]✓ Audit configuration valid:[/green] {escape(config_name)}",
                    border_style="green",
                )
            )
            return

        ordered = sorted(ValidationSeverity, key=SEVERITY_ORDER.__getitem__)
        for severity in ordered:
            group = [issue for issue in issues if issue.severity == severity]
            if group:
                self._print_group(severity, group)

        counts = _counts(issues)
        summary = []
        for severity in ordered:
            if not counts[severity]:
                continue
            color = self.SEVERITY_COLORS[severity]
            noun = self.SUMMARY_NOUNS[severity]
            plural = "" if counts[severity] == 1 else "s"
            summary.append(f"[{color}]{counts[severity]} {noun}{plural}[/{color}]")
        out.print()
        out.print(f"Summary: {', '.join(summary)}")

        verdict = _verdict(issues)
        style = "bold red" if verdict == "FAILED" else "bold green"
        out.print(f"\n[{style}]Validation: {verdict}[/{style}]")

    def _print_group(self, severity: ValidationSeverity, group: list[ValidationIssue]) -> None:
        color = self.SEVERITY_COLORS[severity]
        icon = self.SEVERITY_ICONS[severity]
        indent = " " * 9
        self.console.print(f"\n[{color} bold]{self.SECTION_TITLES[severity]}:[/{color} bold]")
        for issue in group:
            self.console.print(f"  [{color}]{icon}[/{color}] {escape(issue.format_short())}")
            if issue.context:
                shown = issue.context
                if len(shown) > _CONTEXT_WIDTH:
                    shown = shown[: _CONTEXT_WIDTH - 3] + "..."
                self.console.print(f"{indent}[dim]{escape(shown)}[/dim]", highlight=False)
            if issue.suggestion:
                self.console.print(f"{indent}[cyan]Suggestion:[/cyan] {escape(issue.suggestion)}")

    # -------------------------------------------------------------------------
    # Machine-readable
    # -------------------------------------------------------------------------

    def to_dict(self, issues: list[ValidationIssue]) -> dict[str, Any]:
        """Verdict, per-severity counts and the issues, ready for ``json.dumps``."""
        counts = _counts(issues)
        return {
            "valid": not counts[ValidationSeverity.ERROR],
            "error_count": counts[ValidationSeverity.ERROR],
            "warning_count": counts[ValidationSeverity.WARNING],
            "info_count": counts[ValidationSeverity.INFO],
            "issues": [self._issue_to_dict(issue) for issue in issues],
        }

    def report_json(self, issues: list[ValidationIssue]) -> str:
        return json.dumps(self.to_dict(issues), indent=2)

    @staticmethod
    def _issue_to_dict(issue: ValidationIssue) -> dict[str, Any]:
        data: dict[str, Any] = {
            "check_id": issue.check_id,
            "severity": issue.severity.value,
            "message": issue.message,
        }
        optional = {
            "line": issue.line,
            "context": issue.context,
            "suggestion": issue.suggestion,
            "metadata": issue.metadata or None,
        }
        data.update({key: value for key, value in optional.items() if value is not None})
        return data

    def format_plain(self, issues: list[ValidationIssue]) -> str:
        """Uncoloured multi-line text, suitable for log files."""
        if not issues:
            return "Validation passed: no issues found"

        lines: list[str] = []
        for issue in issues:
            where = f" (line {issue.line})" if issue.line else ""
            lines.append(f"[{issue.severity.name}] {issue.check_id}{where}: {issue.message}")
            if issue.suggestion:
                lines.append(f"    Suggestion: {issue.suggestion}")

        counts = _counts(issues)
        lines += [
            "",
            f"Total: {counts[ValidationSeverity.ERROR]} errors, "
            f"{counts[ValidationSeverity.WARNING]} warnings, "
            f"{counts[ValidationSeverity.INFO]} info",
            f"Validation: {_verdict(issues)}",
        ]
        return "\n".join(lines)
