"""Rich output formatting for the siteaudit CLI.

Centralizes the console, table builders and formatters shared by the
command modules. Ids, names and descriptions come from user-edited YAML, so
every such value is escaped before it reaches rich markup.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from siteaudit.playlists import PlaylistCatalog
    from siteaudit.scheduling.models import ExecutionStrategy, PhaseSummary
    from siteaudit.scheduling.registry import ClassificationRegistry

# =============================================================================
# Shared console instance
# =============================================================================

# Command modules print through this console; JSON mode is handled by
# each command via print_json().
console = Console()


# =============================================================================
# Formatters
# =============================================================================


def format_duration(seconds: float | None) -> str:
    """Format a duration in seconds (e.g., "45.0s", "3m 12s", "1h 30m")."""
    if seconds is None:
        return "N/A"

    if seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        minutes = int(seconds // 60)
        secs = int(seconds % 60)
        return f"{minutes}m {secs}s"
    else:
        hours = int(seconds // 3600)
        minutes = int((seconds % 3600) // 60)
        return f"{hours}h {minutes}m"


def format_test_list(test_ids: tuple[str, ...] | list[str]) -> str:
    """Comma-separated ids as escaped markup, or a dim dash when empty."""
    return escape(", ".join(test_ids)) if test_ids else "[dim]-[/dim]"


def print_json(data: dict[str, Any] | list[Any], console_instance: Console | None = None) -> None:
    """Print JSON without Rich wrapping or markup so it stays parseable."""
    out = console_instance or console
    out.print(json.dumps(data, indent=2), soft_wrap=True, markup=False, highlight=False)


# =============================================================================
# Table builders
# =============================================================================


def create_strategy_table(strategy: ExecutionStrategy) -> Table:
    """Table with one row per planned phase."""
    table = Table(title="Execution Strategy", show_header=True, header_style="bold")
    table.add_column("Phase", justify="right", style="cyan", width=5)
    table.add_column("Session tests", style="magenta")
    table.add_column("Page tests", style="green")
    table.add_column("Concurrency", justify="right", width=11)
    table.add_column("Estimate", justify="right", style="dim")

    for plan in strategy.phases:
        table.add_row(
            str(plan.phase),
            format_test_list(plan.session_tests),
            format_test_list(plan.page_tests),
            str(plan.max_concurrency),
            format_duration(plan.estimated_duration),
        )
    return table


def create_tests_table(classifications: ClassificationRegistry) -> Table:
    """Table of every registered test in canonical order.

    "Depends on" lists every test that must finish first, including
    indirect dependencies; "Required by" lists direct dependents.
    """
    graph = classifications.dependency_graph
    table = Table(title="Available Tests", show_header=True, header_style="bold")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Phase", justify="right")
    table.add_column("Scope")
    table.add_column("Depends on", style="dim")
    table.add_column("Required by", style="dim")
    table.add_column("Conflicts with", style="yellow")
    table.add_column("Heavy", justify="center")

    for test_id in classifications.ids():
        c = classifications[test_id]
        table.add_row(
            escape(c.test_id),
            escape(c.display_name),
            str(c.phase),
            c.scope.value,
            escape(", ".join(graph.get_transitive_dependencies(test_id))),
            escape(", ".join(graph.get_dependents(test_id))),
            escape(", ".join(sorted(c.conflicts_with))),
            "✓" if c.resource_intensive else "",
        )
    return table


def create_phases_table(summaries: list[PhaseSummary]) -> Table:
    """Table of phase summaries."""
    table = Table(title="Phases", show_header=True, header_style="bold")
    table.add_column("Phase", justify="right", style="cyan", width=5)
    table.add_column("Name", style="bold")
    table.add_column("Tests", justify="right")
    table.add_column("Session tests", style="magenta")
    table.add_column("Page tests", style="green")
    table.add_column("Estimate", justify="right", style="dim")

    for summary in summaries:
        table.add_row(
            str(summary.phase),
            escape(summary.name),
            str(summary.test_count),
            format_test_list(summary.session_tests),
            format_test_list(summary.page_tests),
            format_duration(summary.estimated_duration),
        )
    return table


def create_playlists_table(catalog: PlaylistCatalog) -> Table:
    """Table of predefined playlists."""
    table = Table(title="Playlists", show_header=True, header_style="bold")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="bold")
    table.add_column("Tests", style="green")
    table.add_column("Description", style="dim")

    for playlist_id, playlist in catalog.items():
        table.add_row(
            escape(playlist_id),
            escape(playlist.name),
            escape(", ".join(playlist.tests)),
            escape(playlist.description),
        )
    return table


# =============================================================================
# Error output
# =============================================================================


def output_error(
    message: str,
    *,
    title: str | None = None,
    json_output: bool = False,
    console_instance: Console | None = None,
) -> None:
    """Output a formatted error, or its JSON form in JSON mode."""
    out = console_instance or console

    if json_output:
        error = f"{title}: {message}" if title else message
        print_json({"valid": False, "error": error}, out)
        return

    label = title or "Error"
    out.print(f"[red]{label}:[/red] ", end="")
    out.print(message, markup=False, highlight=False)


__all__ = [
    "console",
    "create_phases_table",
    "create_playlists_table",
    "create_strategy_table",
    "create_tests_table",
    "format_duration",
    "format_test_list",
    "output_error",
    "print_json",
]
