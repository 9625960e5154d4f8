"""Registry listing commands: tests, phases and playlists."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape

from siteaudit.playlists import PlaylistCatalog
from siteaudit.scheduling import PhaseScheduler

from ..helpers import configure_global_logging, load_project
from ..output import (
    console,
    create_phases_table,
    create_playlists_table,
    create_tests_table,
    print_json,
)

_PROJECT_CONFIG_OPTION = typer.Option(
    None,
    "--project-config",
    "-p",
    help="Project config replacing the packaged test registry",
    envvar="SITEAUDIT_PROJECT_CONFIG",
    exists=True,
    dir_okay=False,
)

_JSON_OPTION = typer.Option(False, "--json", "-j", help="Output as JSON")


def tests(
    json_output: bool = _JSON_OPTION,
    project_config: Path | None = _PROJECT_CONFIG_OPTION,
) -> None:
    """List every known test with its scheduling metadata and dependency graph."""
    configure_global_logging(console)
    _, registries = load_project(project_config, console, json_output)
    classifications = registries.classifications
    graph = classifications.dependency_graph

    if json_output:
        entries = [
            {
                "id": c.test_id,
                "name": c.display_name,
                "description": c.description,
                "phase": c.phase,
                "scope": c.scope.value,
                "execution_order": c.execution_order,
                "dependencies": sorted(c.dependencies),
                "conflicts_with": sorted(c.conflicts_with),
                "resource_intensive": c.resource_intensive,
                "output_type": c.output_type.value,
                "transitive_dependencies": graph.get_transitive_dependencies(c.test_id),
                "dependents": graph.get_dependents(c.test_id),
            }
            for c in (classifications[t] for t in classifications.ids())
        ]
        print_json({"tests": entries, "dependency_graph": graph.to_dict()})
        return

    console.print(create_tests_table(classifications))
    if graph.has_dependencies():
        order = " -> ".join(graph.get_topological_order())
        console.print(f"[dim]Dependency order:[/dim] {escape(order)}")


def phases(
    json_output: bool = _JSON_OPTION,
    project_config: Path | None = _PROJECT_CONFIG_OPTION,
) -> None:
    """Show each phase with all of its registered tests."""
    configure_global_logging(console)
    project, registries = load_project(project_config, console, json_output)
    scheduler = PhaseScheduler(registries.classifications, registries.phases, project.scheduling)

    all_tests = registries.classifications.ids()
    summaries = [scheduler.get_phase_summary(phase, all_tests) for phase in registries.phases]

    if json_output:
        print_json([s.to_dict() for s in summaries])
        return

    console.print(create_phases_table(summaries))
    for number, definition in registries.phases.items():
        if definition.dependencies:
            after = ", ".join(str(d) for d in definition.dependencies)
            console.print(f"[dim]Phase {number} runs after phase(s) {after}[/dim]")


def playlists(
    json_output: bool = _JSON_OPTION,
    project_config: Path | None = _PROJECT_CONFIG_OPTION,
) -> None:
    """List predefined playlists."""
    configure_global_logging(console)
    project, _ = load_project(project_config, console, json_output)
    catalog = PlaylistCatalog.from_project(project)

    if json_output:
        print_json([p.model_dump() for p in catalog.values()])
        return

    console.print(create_playlists_table(catalog))
