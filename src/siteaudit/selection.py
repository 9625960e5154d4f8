"""Turn an audit configuration into the selection handed to the scheduler.

An audit names tests directly, through a playlist, or both. When the site
is crawled the crawl test joins the selection so that tests depending on
it validate and plan correctly.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from siteaudit.core.config import AuditConfig, ProjectConfig, ViewportConfig
from siteaudit.core.constants import CRAWL_TEST_ID, SCREENSHOT_TEST_ID
from siteaudit.playlists import PlaylistCatalog
from siteaudit.scheduling.registry import Scope, TestClassification


def resolve_selection(
    audit: AuditConfig,
    project: ProjectConfig,
    known_tests: Iterable[str] | None = None,
) -> list[str]:
    """Selected test ids in declaration order, without duplicates.

    Playlist tests follow the explicitly enabled tests. The crawl test is
    appended for crawling audits when it is a known test.

    Raises:
        PlaylistNotFoundError: If the audit names an undefined playlist.
    """
    ids = audit.enabled_test_ids()
    if audit.playlist:
        catalog = PlaylistCatalog.from_project(project)
        ids.extend(catalog.get_playlist_tests(audit.playlist))

    known = set(project.tests if known_tests is None else known_tests)
    if audit.crawl_site and CRAWL_TEST_ID in known:
        ids.append(CRAWL_TEST_ID)
    return list(dict.fromkeys(ids))


def effective_viewports(audit: AuditConfig, project: ProjectConfig) -> list[ViewportConfig]:
    """Audit viewports, falling back to the project's."""
    return list(audit.viewports) or project.default_viewports()


def effective_page_count(audit: AuditConfig, project: ProjectConfig) -> int:
    """Pages assumed for planning: 1 unless the site is crawled."""
    if not audit.crawl_site:
        return 1
    return audit.estimated_pages or project.scheduling.estimated_pages


def get_resource_intensive_tests(
    test_ids: Iterable[str],
    classifications: Mapping[str, TestClassification],
) -> list[str]:
    """Known resource-intensive ids, in input order."""
    return [
        t
        for t in dict.fromkeys(test_ids)
        if t in classifications and classifications[t].resource_intensive
    ]


def requires_crawling(
    test_id: str,
    classifications: Mapping[str, TestClassification],
) -> bool:
    """Whether a test only makes sense once the site has been crawled.

    Session tests and tests depending on the crawl test qualify. Unknown
    ids do not.
    """
    classification = classifications.get(test_id)
    if classification is None:
        return False
    return (
        CRAWL_TEST_ID in classification.dependencies
        or classification.scope is Scope.SESSION
    )


def estimate_test_count(
    test_ids: Iterable[str],
    classifications: Mapping[str, TestClassification],
    viewport_count: int,
    page_count: int,
) -> int:
    """Number of individual test invocations an audit will perform.

    Session tests run once. Page tests run once per page, except
    screenshots which run once per viewport on every page. Unknown ids
    are not counted.
    """
    total = 0
    for test_id in dict.fromkeys(test_ids):
        classification = classifications.get(test_id)
        if classification is None:
            continue
        if classification.scope is Scope.SESSION:
            total += 1
        elif test_id == SCREENSHOT_TEST_ID:
            total += max(viewport_count, 0) * page_count
        else:
            total += page_count
    return total


def format_config_summary(
    audit: AuditConfig,
    project: ProjectConfig,
    classifications: Mapping[str, TestClassification],
) -> str:
    """Plain-text summary of an audit configuration."""
    selected = resolve_selection(audit, project, classifications)
    names = [
        classifications[t].display_name if t in classifications else t for t in selected
    ]
    viewports = ", ".join(
        f"{v.name} ({v.width}x{v.height})" for v in effective_viewports(audit, project)
    )

    lines = [
        "Configuration Summary:",
        f"• URL: {audit.url}",
        f"• Crawl Site: {'Yes' if audit.crawl_site else 'No'}",
    ]
    if audit.playlist:
        lines.append(f"• Playlist: {audit.playlist}")
    lines.append(f"• Viewports: {viewports or 'none'}")
    lines.append(f"• Enabled Tests ({len(selected)}): {', '.join(names)}")
    return "\n".join(lines)


def create_default_audit(
    url: str,
    project: ProjectConfig,
    crawl_site: bool = True,
) -> AuditConfig:
    """Audit config with every test the project pre-selects."""
    return AuditConfig(
        url=url,
        crawl_site=crawl_site,
        tests=[{"id": t.id, "enabled": t.enabled} for t in project.tests.values()],
        viewports=project.default_viewports(),
    )
