"""Plan command for the siteaudit CLI.

Validates an audit file, then prints the execution strategy the
orchestrator would follow: phases in order, the session and page tests of
each phase, recommended page concurrency and duration estimates.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer
from rich.markup import escape

from siteaudit.core.errors import ConfigurationError
from siteaudit.core.logging import AuditContext, get_logger, with_context
from siteaudit.scheduling import PhaseScheduler
from siteaudit.selection import (
    effective_page_count,
    effective_viewports,
    estimate_test_count,
    format_config_summary,
    get_resource_intensive_tests,
    resolve_selection,
)
from siteaudit.validation import (
    ValidationReporter,
    ValidationRunner,
    ValidationSeverity,
)

from ..helpers import (
    EXIT_INVALID,
    ErrorMessages,
    configure_global_logging,
    load_audit,
    load_project,
)
from ..output import (
    console,
    create_strategy_table,
    format_duration,
    output_error,
    print_json,
)

_logger = get_logger("cli.plan")


def plan(
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
        help="Output the execution strategy as JSON",
    ),
    pages: int | None = typer.Option(
        None,
        "--pages",
        "-n",
        min=1,
        help="Expected page count for a crawl (overrides the audit and project estimate)",
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
    """Plan an audit and show its execution strategy.

    Exit codes:
      0: Planned
      1: Pre-flight validation failed
      2: Audit or project config cannot be parsed
    """
    configure_global_logging(console)

    audit, raw_yaml = load_audit(audit_file, console, json_output)
    project, registries = load_project(project_config, console, json_output)

    runner = ValidationRunner()
    issues = runner.validate(audit, project, registries, raw_yaml)
    reporter = ValidationReporter(console)

    if runner.has_errors(issues):
        if json_output:
            print_json({"planned": False, "validation": reporter.to_dict(issues)})
        else:
            reporter.report_terminal(issues, audit_file.name)
        raise typer.Exit(EXIT_INVALID)

    with with_context(AuditContext(audit_id=audit.url, component="plan")):
        try:
            selection = resolve_selection(audit, project, registries.classifications)
            scheduler = PhaseScheduler(
                registries.classifications, registries.phases, project.scheduling
            )
            page_count = pages or effective_page_count(audit, project)
            strategy = scheduler.organize_tests_into_phases(
                selection, audit.crawl_site, page_count
            )
        except ConfigurationError as e:
            _logger.error("cli.plan_failed", error=str(e), error_type=type(e).__name__)
            output_error(
                str(e),
                title=ErrorMessages.PLAN_ERROR,
                json_output=json_output,
                console_instance=console,
            )
            raise typer.Exit(EXIT_INVALID) from None

        viewports = effective_viewports(audit, project)
        test_count = estimate_test_count(
            selection, registries.classifications, len(viewports), strategy.page_count
        )
        heavy = get_resource_intensive_tests(selection, registries.classifications)
        _logger.info(
            "cli.plan_built",
            tests=len(selection),
            phases=len(strategy.phases),
            page_count=strategy.page_count,
        )

    if json_output:
        result: dict[str, Any] = {
            "planned": True,
            "url": audit.url,
            "selection": selection,
            "strategy": strategy.to_dict(),
            "estimated_test_count": test_count,
            "resource_intensive_tests": heavy,
            "validation": reporter.to_dict(issues),
        }
        print_json(result)
        return

    console.print()
    console.print(format_config_summary(audit, project, registries.classifications), markup=False)
    console.print()
    console.print(create_strategy_table(strategy))
    console.print()
    console.print(f"Pages assumed: {strategy.page_count}")
    console.print(f"Test invocations: ~{test_count}")
    console.print(f"Max concurrent pages: {strategy.max_concurrent_pages}")
    console.print(f"Parallel pages: {'yes' if strategy.parallel_pages else 'no'}")
    console.print(f"Estimated duration: {format_duration(strategy.total_estimated_duration)}")
    if heavy:
        console.print(f"[yellow]Resource-intensive tests:[/yellow] {escape(', '.join(heavy))}")

    notes = [i for i in issues if i.severity != ValidationSeverity.ERROR]
    if notes:
        console.print()
        for issue in notes:
            color = reporter.SEVERITY_COLORS[issue.severity]
            text = escape(issue.format_short())
            console.print(f"[{color}]{issue.severity.value}[/{color}] {text}")
