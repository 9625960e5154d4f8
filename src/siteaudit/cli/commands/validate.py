"""Validate command for the siteaudit CLI.

Runs the pre-flight checks against an audit file without planning it.

Exit codes:
  0: Valid (warnings/info OK)
  1: Invalid (one or more errors)
  2: Cannot validate (file not found, YAML unparseable, schema failure)
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape

from siteaudit.validation import ValidationReporter, ValidationRunner

from ..helpers import configure_global_logging, load_audit, load_project
from ..output import console, print_json


def validate(
    audit_file: Path = typer.Argument(
        ...,
        help="Path to YAML audit configuration file",
        exists=True,
        readable=True,
        dir_okay=False,
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Output validation results as JSON",
    ),
    project_config: Path | None = typer.Option(
        None,
        "--project-config",
        "-p",
        help="Project config replacing the packaged test registry",
        envvar="SITEAUDIT_PROJECT_CONFIG",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """Validate an audit configuration file.

    Checks the URL, viewports, selected tests, playlist, dependencies
    and conflicts against the test registry.
    """
    configure_global_logging(console)

    audit, raw_yaml = load_audit(audit_file, console, json_output)
    project, registries = load_project(project_config, console, json_output)

    if not json_output:
        console.print(f"\nValidating [cyan]{escape(audit_file.name)}[/cyan]...")
        console.print("[green]✓[/green] YAML syntax valid")
        console.print("[green]✓[/green] Schema validation passed")

    runner = ValidationRunner()
    issues = runner.validate(audit, project, registries, raw_yaml)

    reporter = ValidationReporter(console)
    if json_output:
        print_json(reporter.to_dict(issues))
    else:
        reporter.report_terminal(issues, audit_file.name)

    exit_code = runner.get_exit_code(issues)
    if exit_code != 0:
        raise typer.Exit(exit_code)
