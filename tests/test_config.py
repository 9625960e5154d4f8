"""Tests for configuration models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from siteaudit.core.config import AuditConfig, LogConfig, ProjectConfig, SchedulingConfig


class TestAuditConfig:
    """Tests for per-run audit configuration."""

    def test_minimal(self) -> None:
        audit = AuditConfig(url="https://example.com")

        assert audit.crawl_site is True
        assert audit.tests == []
        assert audit.playlist is None
        assert not audit.has_enabled_tests()

    def test_plain_ids_and_mappings(self) -> None:
        audit = AuditConfig.from_yaml_string(
            """
            url: https://example.com
            tests:
              - seo
              - {id: screenshots, enabled: false}
              - id: accessibility
            """
        )

        assert audit.enabled_test_ids() == ["seo", "accessibility"]
        assert audit.has_enabled_tests()

    def test_enabled_ids_deduplicated(self) -> None:
        audit = AuditConfig(url="https://example.com", tests=["seo", "seo", "accessibility"])

        assert audit.enabled_test_ids() == ["seo", "accessibility"]

    def test_estimated_pages_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            AuditConfig(url="https://example.com", estimated_pages=0)

    def test_from_yaml(self, audit_yaml) -> None:
        path = audit_yaml({"url": "https://example.com", "crawl_site": False, "playlist": "visual"})

        audit = AuditConfig.from_yaml(path)

        assert audit.crawl_site is False
        assert audit.playlist == "visual"


class TestProjectConfig:
    """Tests for the project configuration."""

    def test_ids_default_to_keys(self, small_project: ProjectConfig) -> None:
        assert small_project.tests["seo"].id == "seo"
        assert small_project.playlists["visual"].id == "visual"
        assert small_project.viewports["mobile"].name == "mobile"

    def test_mismatched_id_rejected(self, small_project_dict: dict) -> None:
        small_project_dict["tests"]["seo"]["id"] = "not-seo"

        with pytest.raises(ValidationError, match="does not match its key"):
            ProjectConfig.model_validate(small_project_dict)

    def test_phase_out_of_range(self, small_project_dict: dict) -> None:
        small_project_dict["tests"]["seo"]["phase"] = 4

        with pytest.raises(ValidationError):
            ProjectConfig.model_validate(small_project_dict)

    def test_phase_table_out_of_range(self, small_project_dict: dict) -> None:
        small_project_dict["phases"][0] = {"name": "Zero"}

        with pytest.raises(ValidationError, match="between 1 and 3"):
            ProjectConfig.model_validate(small_project_dict)

    def test_invalid_scope(self, small_project_dict: dict) -> None:
        small_project_dict["tests"]["seo"]["scope"] = "site"

        with pytest.raises(ValidationError):
            ProjectConfig.model_validate(small_project_dict)

    def test_empty_playlist_rejected(self, small_project_dict: dict) -> None:
        small_project_dict["playlists"]["empty"] = {"name": "Empty", "tests": []}

        with pytest.raises(ValidationError):
            ProjectConfig.model_validate(small_project_dict)

    def test_default_viewports_in_order(self, small_project: ProjectConfig) -> None:
        assert [v.name for v in small_project.default_viewports()] == ["desktop", "mobile"]

    def test_defaults(self, small_project: ProjectConfig) -> None:
        assert small_project.scheduling == SchedulingConfig()
        assert small_project.logging == LogConfig()

    def test_from_yaml(self, project_yaml: Path) -> None:
        project = ProjectConfig.from_yaml(project_yaml)

        assert project.name == "small"
        assert set(project.phases) == {1, 2, 3}

    def test_packaged_config_loads(self, default_project: ProjectConfig) -> None:
        assert len(default_project.tests) == 8
        assert "quick-check" in default_project.playlists


class TestLogConfig:
    """Tests for logging configuration."""

    def test_defaults(self) -> None:
        config = LogConfig()

        assert config.level == "WARNING"
        assert config.format == "console"
        assert config.file_path is None

    def test_both_requires_file(self) -> None:
        with pytest.raises(ValidationError, match="file_path is required"):
            LogConfig(format="both")

    def test_both_with_file(self, tmp_path: Path) -> None:
        config = LogConfig(format="both", file_path=tmp_path / "audit.log")

        assert config.file_path == tmp_path / "audit.log"

    def test_invalid_level(self) -> None:
        with pytest.raises(ValidationError):
            LogConfig(level="TRACE")
