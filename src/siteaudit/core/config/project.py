"""Project configuration models.

Defines the static description of an audit tool installation: which tests
exist and how they are classified, the phase table, named playlists,
viewports, scheduling tunables and logging defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from siteaudit.core.config.runtime import LogConfig
from siteaudit.core.constants import (
    DEFAULT_BASELINE_CONCURRENCY,
    DEFAULT_ESTIMATED_PAGES,
    DEFAULT_PAGE_TEST_SECONDS,
    DEFAULT_SESSION_TEST_SECONDS,
    MAX_PHASE,
    MIN_PHASE,
)


def _fill_ids_from_keys(entries: Any) -> Any:
    """Default each mapping entry's ``id`` to its key."""
    if not isinstance(entries, dict):
        return entries
    filled: dict[Any, Any] = {}
    for key, entry in entries.items():
        if isinstance(entry, dict) and "id" not in entry:
            entry = {**entry, "id": key}
        filled[key] = entry
    return filled


class TestDefinition(BaseModel):
    """Declaration of one audit test and its scheduling metadata."""

    __test__ = False

    id: str = Field(min_length=1, description="Unique test identifier, e.g. 'screenshots'")
    name: str = Field(description="Display name")
    description: str = Field(default="", description="One-line description for listings")
    enabled: bool = Field(
        default=False,
        description="Whether the test is pre-selected when building a default audit",
    )
    phase: int = Field(ge=MIN_PHASE, le=MAX_PHASE, description="Phase the test belongs to")
    scope: Literal["session", "page"] = Field(
        description="'session' runs once per audit, 'page' runs once per discovered page",
    )
    execution_order: int = Field(
        default=0,
        description="Ascending order among tests sharing a phase",
    )
    dependencies: list[str] = Field(
        default_factory=list,
        description="Tests that must be part of the same selection",
    )
    conflicts_with: list[str] = Field(
        default_factory=list,
        description="Tests that must not run concurrently with this one on a page",
    )
    resource_intensive: bool = Field(
        default=False,
        description="Lowers recommended page concurrency when selected",
    )
    output_type: Literal["per-page", "site-wide"] = Field(
        default="per-page",
        description="Whether the test produces one artifact per page or one per site",
    )


class PhaseConfig(BaseModel):
    """Declaration of one execution phase."""

    name: str
    description: str = ""
    scope: Literal["session", "page"] = "page"
    dependencies: list[int] = Field(
        default_factory=list,
        description="Phases that must be fully planned before this one",
    )
    parallelizable: bool = Field(
        default=True,
        description="Whether tests inside the phase may overlap in time",
    )


class PlaylistDefinition(BaseModel):
    """A named, predefined selection of tests."""

    id: str = Field(min_length=1)
    name: str
    description: str = ""
    tests: list[str] = Field(min_length=1)


class ViewportConfig(BaseModel):
    """Browser viewport used by visual tests."""

    name: str = Field(min_length=1)
    width: int = Field(gt=0)
    height: int = Field(gt=0)


class SchedulingConfig(BaseModel):
    """Tunables for concurrency recommendations and duration estimates."""

    baseline_concurrency: int = Field(
        default=DEFAULT_BASELINE_CONCURRENCY,
        ge=1,
        description="Page slots recommended before resource-intensive tests reduce it",
    )
    session_test_seconds: float = Field(
        default=DEFAULT_SESSION_TEST_SECONDS,
        ge=0,
        description="Estimated cost of a session-scope test",
    )
    page_test_seconds: float = Field(
        default=DEFAULT_PAGE_TEST_SECONDS,
        ge=0,
        description="Estimated cost of a page-scope test on one page",
    )
    estimated_pages: int = Field(
        default=DEFAULT_ESTIMATED_PAGES,
        ge=1,
        description="Pages assumed for a crawl when no page count is supplied",
    )


class ProjectConfig(BaseModel):
    """Top-level project configuration.

    The ``tests`` and ``phases`` tables feed the classification and phase
    registries. Mapping keys double as ids; an explicit ``id`` must match
    its key.
    """

    name: str = Field(default="siteaudit")
    tests: dict[str, TestDefinition] = Field(min_length=1)
    phases: dict[int, PhaseConfig] = Field(min_length=1)
    playlists: dict[str, PlaylistDefinition] = Field(default_factory=dict)
    viewports: dict[str, ViewportConfig] = Field(default_factory=dict)
    scheduling: SchedulingConfig = Field(default_factory=SchedulingConfig)
    logging: LogConfig = Field(default_factory=LogConfig)

    @field_validator("tests", "playlists", mode="before")
    @classmethod
    def _default_ids(cls, value: Any) -> Any:
        return _fill_ids_from_keys(value)

    @field_validator("viewports", mode="before")
    @classmethod
    def _default_viewport_names(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {
            key: {**entry, "name": key} if isinstance(entry, dict) and "name" not in entry
            else entry
            for key, entry in value.items()
        }

    @model_validator(mode="after")
    def _check_keys_match_ids(self) -> ProjectConfig:
        for key, test in self.tests.items():
            if key != test.id:
                raise ValueError(f"tests.{key}: id '{test.id}' does not match its key")
        for key, playlist in self.playlists.items():
            if key != playlist.id:
                raise ValueError(
                    f"playlists.{key}: id '{playlist.id}' does not match its key"
                )
        for phase in self.phases:
            if not MIN_PHASE <= phase <= MAX_PHASE:
                raise ValueError(
                    f"phases.{phase}: phase must be between {MIN_PHASE} and {MAX_PHASE}"
                )
        return self

    @classmethod
    def from_yaml(cls, path: Path) -> ProjectConfig:
        """Load project configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls.model_validate(data)

    @classmethod
    def from_yaml_string(cls, yaml_str: str) -> ProjectConfig:
        """Load project configuration from a YAML string."""
        data = yaml.safe_load(yaml_str)
        return cls.model_validate(data)

    def default_viewports(self) -> list[ViewportConfig]:
        """Viewports in declaration order."""
        return list(self.viewports.values())
