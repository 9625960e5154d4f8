"""Audit run configuration models.

An audit config describes one run: the target URL, whether the site is
crawled, and which tests (or which playlist) to plan.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from siteaudit.core.config.project import ViewportConfig


class SelectedTest(BaseModel):
    """A test toggled on or off for a run."""

    id: str = Field(min_length=1)
    enabled: bool = True


class AuditConfig(BaseModel):
    """Configuration for a single audit run.

    ``tests`` accepts plain ids or ``{id, enabled}`` mappings:

        tests:
          - seo
          - {id: screenshots, enabled: false}
    """

    url: str = Field(description="Start URL of the audit")
    crawl_site: bool = Field(
        default=True,
        description="Discover and audit every internal page instead of only the start URL",
    )
    tests: list[SelectedTest] = Field(default_factory=list)
    playlist: str | None = Field(
        default=None,
        description="Playlist whose tests are added to the selection",
    )
    viewports: list[ViewportConfig] = Field(
        default_factory=list,
        description="Viewports for visual tests; project viewports are used when empty",
    )
    estimated_pages: int | None = Field(
        default=None,
        ge=1,
        description="Expected page count for a crawl; the project default is used when unset",
    )

    @field_validator("tests", mode="before")
    @classmethod
    def _accept_plain_ids(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        return [{"id": item} if isinstance(item, str) else item for item in value]

    @classmethod
    def from_yaml(cls, path: Path) -> AuditConfig:
        """Load an audit configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls.model_validate(data)

    @classmethod
    def from_yaml_string(cls, yaml_str: str) -> AuditConfig:
        """Load an audit configuration from a YAML string."""
        data = yaml.safe_load(yaml_str)
        return cls.model_validate(data)

    def enabled_test_ids(self) -> list[str]:
        """Enabled ids in declaration order, without duplicates."""
        return list(dict.fromkeys(t.id for t in self.tests if t.enabled))

    def has_enabled_tests(self) -> bool:
        return any(t.enabled for t in self.tests)
