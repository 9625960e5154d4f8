"""Pytest fixtures for siteaudit tests."""

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog
import yaml

from siteaudit.core.config import ProjectConfig
from siteaudit.scheduling import (
    PhaseScheduler,
    Registries,
    build_registries,
    clear_registry_cache,
    create_scheduler,
)


@pytest.fixture(autouse=True)
def reset_logging_state() -> Generator[None, None, None]:
    """Reset logging and registry caches before and after each test.

    This ensures test isolation for logging configuration and for the
    process-wide default registries.
    """
    import siteaudit.cli.helpers as cli_helpers

    cli_helpers.reset_logging_state()
    clear_registry_cache()

    # Reset structlog to default state
    structlog.reset_defaults()

    # Clear all handlers from root logger
    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers[:]
    original_level = root_logger.level
    for handler in original_handlers:
        root_logger.removeHandler(handler)

    yield

    cli_helpers.reset_logging_state()
    clear_registry_cache()
    structlog.reset_defaults()

    # Restore original handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in original_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(original_level)


def _test(phase: int, scope: str, order: int, **extra: object) -> dict:
    return {
        "name": extra.pop("name", ""),
        "phase": phase,
        "scope": scope,
        "execution_order": order,
        **extra,
    }


@pytest.fixture
def small_project_dict() -> dict:
    """A compact project with dependencies, conflicts and heavy tests.

    Phase 1: sitemap-generate (session), sitemap-crawl (session, depends on
             sitemap-generate), content-scraping (page, heavy)
    Phase 2: screenshot-desktop, screenshot-mobile (page, heavy),
             accessibility-scan (page, heavy, conflicts with screenshot-mobile),
             seo (page)
    Phase 3: summary (session, depends on content-scraping)
    """
    return {
        "name": "small",
        "tests": {
            "sitemap-generate": _test(1, "session", 1, name="Sitemap Generate"),
            "sitemap-crawl": _test(1, "session", 2, dependencies=["sitemap-generate"]),
            "content-scraping": _test(1, "page", 3, resource_intensive=True),
            "screenshot-desktop": _test(2, "page", 1, resource_intensive=True),
            "screenshot-mobile": _test(
                2,
                "page",
                2,
                resource_intensive=True,
                conflicts_with=["accessibility-scan"],
            ),
            "accessibility-scan": _test(
                2,
                "page",
                3,
                resource_intensive=True,
                conflicts_with=["screenshot-mobile"],
            ),
            "seo": _test(2, "page", 4),
            "summary": _test(3, "session", 1, dependencies=["content-scraping"]),
        },
        "phases": {
            1: {"name": "Data Collection", "scope": "session"},
            2: {"name": "Page Analysis", "scope": "page", "dependencies": [1]},
            3: {"name": "Reporting", "scope": "page", "dependencies": [1, 2]},
        },
        "playlists": {
            "visual": {"name": "Visual", "tests": ["screenshot-desktop", "screenshot-mobile"]},
            "broken": {"name": "Broken", "tests": ["seo", "does-not-exist"]},
        },
        "viewports": {
            "desktop": {"width": 1920, "height": 1080},
            "mobile": {"width": 375, "height": 667},
        },
    }


@pytest.fixture
def small_project(small_project_dict: dict) -> ProjectConfig:
    return ProjectConfig.model_validate(small_project_dict)


@pytest.fixture
def small_registries(small_project: ProjectConfig) -> Registries:
    return build_registries(small_project)


@pytest.fixture
def small_scheduler(small_project: ProjectConfig) -> PhaseScheduler:
    return create_scheduler(small_project)


@pytest.fixture
def default_project() -> ProjectConfig:
    """The packaged project configuration."""
    from siteaudit.scheduling import load_default_project_config

    return load_default_project_config()


@pytest.fixture
def default_scheduler() -> PhaseScheduler:
    from siteaudit.scheduling import get_default_scheduler

    return get_default_scheduler()


@pytest.fixture
def audit_yaml(tmp_path: Path):
    """Factory writing an audit config to a YAML file."""

    def _write(data: dict, name: str = "audit.yaml") -> Path:
        path = tmp_path / name
        path.write_text(yaml.safe_dump(data, sort_keys=False))
        return path

    return _write


@pytest.fixture
def project_yaml(tmp_path: Path, small_project_dict: dict) -> Path:
    """The small project written to disk."""
    path = tmp_path / "project.yaml"
    path.write_text(yaml.safe_dump(small_project_dict, sort_keys=False))
    return path
