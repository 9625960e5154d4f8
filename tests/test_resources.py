"""Tests for conflict detection and phase resource requirements."""

from siteaudit.core.config import ProjectConfig
from siteaudit.scheduling import PhaseScheduler, create_scheduler


class TestFindConflicts:
    """Tests for declared conflict pairs."""

    def test_pairs_are_sorted(self, small_scheduler: PhaseScheduler) -> None:
        pairs = small_scheduler.find_conflicts(
            ["seo", "screenshot-mobile", "accessibility-scan"]
        )

        assert pairs == (("accessibility-scan", "screenshot-mobile"),)

    def test_no_conflicts(self, small_scheduler: PhaseScheduler) -> None:
        assert small_scheduler.find_conflicts(["seo", "screenshot-desktop"]) == ()

    def test_unknown_ids_ignored(self, small_scheduler: PhaseScheduler) -> None:
        assert small_scheduler.find_conflicts(["ghost", "accessibility-scan"]) == ()

    def test_default_registry(self, default_scheduler: PhaseScheduler) -> None:
        pairs = default_scheduler.find_conflicts(default_scheduler.classifications.ids())

        assert pairs == (("accessibility", "api-key-scan"),)


class TestPhaseResourceRequirements:
    """Tests for per-phase resource profiles."""

    def test_counts_heavy_and_page_tests(self, small_scheduler: PhaseScheduler) -> None:
        requirements = small_scheduler.get_phase_resource_requirements(
            1, ["sitemap-generate", "sitemap-crawl", "content-scraping"]
        )

        assert requirements.memory_intensive == 1
        assert requirements.cpu_intensive == 1
        assert requirements.network_intensive == 1
        assert requirements.recommended_concurrency == 3
        assert not requirements.has_conflicts

    def test_only_counts_members_of_phase(self, small_scheduler: PhaseScheduler) -> None:
        requirements = small_scheduler.get_phase_resource_requirements(
            2, ["seo", "content-scraping", "summary", "ghost"]
        )

        assert requirements.memory_intensive == 0
        assert requirements.network_intensive == 1
        assert requirements.recommended_concurrency == 4

    def test_conflict_forces_single_slot(self, small_scheduler: PhaseScheduler) -> None:
        requirements = small_scheduler.get_phase_resource_requirements(
            2, ["screenshot-mobile", "accessibility-scan"]
        )

        assert requirements.recommended_concurrency == 1
        assert requirements.conflicting_pairs == (
            ("accessibility-scan", "screenshot-mobile"),
        )

    def test_never_below_one(self, small_project_dict: dict) -> None:
        small_project_dict["scheduling"] = {"baseline_concurrency": 2}
        scheduler = create_scheduler(ProjectConfig.model_validate(small_project_dict))

        requirements = scheduler.get_phase_resource_requirements(
            2, ["screenshot-desktop", "screenshot-mobile", "seo"]
        )

        assert requirements.memory_intensive == 2
        assert requirements.recommended_concurrency == 1

    def test_always_at_least_one(self, default_scheduler: PhaseScheduler) -> None:
        ids = default_scheduler.classifications.ids()

        for phase in default_scheduler.phases:
            for size in range(len(ids) + 1):
                requirements = default_scheduler.get_phase_resource_requirements(
                    phase, ids[:size]
                )
                assert requirements.recommended_concurrency >= 1

    def test_empty_phase(self, small_scheduler: PhaseScheduler) -> None:
        requirements = small_scheduler.get_phase_resource_requirements(3, [])

        assert requirements.recommended_concurrency == 4
        assert requirements.to_dict() == {
            "memory_intensive": 0,
            "cpu_intensive": 0,
            "network_intensive": 0,
            "recommended_concurrency": 4,
            "conflicting_pairs": [],
        }
