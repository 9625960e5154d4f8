"""Pre-flight validation of audit configurations.

Runs a set of checks against an audit before any browser work starts,
reporting problems as ERROR, WARNING or INFO issues.

Example usage:
    from siteaudit.validation import ValidationRunner, ValidationReporter

    runner = ValidationRunner()
    issues = runner.validate(audit, project, registries, raw_yaml)
    ValidationReporter().report_terminal(issues, "audit.yaml")
"""

from siteaudit.validation.base import (
    ValidationCheck,
    ValidationIssue,
    ValidationSeverity,
)
from siteaudit.validation.reporter import ValidationReporter
from siteaudit.validation.runner import ValidationRunner, create_default_checks

__all__ = [
    "ValidationCheck",
    "ValidationIssue",
    "ValidationReporter",
    "ValidationRunner",
    "ValidationSeverity",
    "create_default_checks",
]
