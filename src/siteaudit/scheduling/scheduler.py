"""Phase scheduler: turns a test selection into an execution strategy.

The scheduler is a planning component only. It never runs a test, holds no
state between calls and only reads the immutable registries, so every
method is a pure function of its arguments.

Plan contract for the orchestrator:
- phases run strictly in ascending order
- within a phase, session tests finish before page tests start
- page tests may be spread across pages up to ``max_concurrency``
- conflicting tests never overlap on the same page
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import replace
from itertools import combinations

from siteaudit.core.config import ProjectConfig, SchedulingConfig
from siteaudit.core.constants import MIN_CONCURRENCY
from siteaudit.core.logging import get_logger
from siteaudit.scheduling.estimation import DurationEstimator
from siteaudit.scheduling.models import (
    DependencyReport,
    ExecutionStrategy,
    PhaseExecutionPlan,
    PhaseSummary,
    ResourceRequirements,
)
from siteaudit.scheduling.registry import (
    ClassificationRegistry,
    PhaseRegistry,
    Scope,
    TestClassification,
    build_registries,
    get_default_registries,
    load_default_project_config,
)

_logger = get_logger("scheduler")


def _dedupe(test_ids: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(test_ids))


class PhaseScheduler:
    """Plans test selections against a classification and phase registry.

    Example:
        ```python
        scheduler = get_default_scheduler()
        strategy = scheduler.organize_tests_into_phases(
            ["seo", "accessibility", "screenshots"], crawl_enabled=True
        )
        for plan in strategy.phases:
            ...
        ```
    """

    def __init__(
        self,
        classifications: ClassificationRegistry,
        phases: PhaseRegistry,
        settings: SchedulingConfig | None = None,
    ):
        self.classifications = classifications
        self.phases = phases
        self.settings = settings or SchedulingConfig()
        self._estimator = DurationEstimator(classifications, self.settings)

    # -------------------------------------------------------------------------
    # Strategy construction
    # -------------------------------------------------------------------------

    def organize_tests_into_phases(
        self,
        selection: Iterable[str],
        crawl_enabled: bool,
        page_count: int | None = None,
    ) -> ExecutionStrategy:
        """Build the execution strategy for a selection.

        Args:
            selection: Enabled test ids; duplicates are ignored.
            crawl_enabled: True for a multi-page crawl, False for a single page.
            page_count: Pages the orchestrator expects to visit. Defaults to
                the configured estimate for crawls and is always 1 otherwise.

        Returns:
            Strategy with one plan per phase present in the selection.

        Raises:
            UnknownTestError: Listing every id absent from the registry.
        """
        resolved = self.classifications.resolve(_dedupe(selection))
        pages = self._effective_page_count(crawl_enabled, page_count)

        grouped: dict[int, list[TestClassification]] = defaultdict(list)
        for classification in resolved:
            grouped[classification.phase].append(classification)

        plans: list[PhaseExecutionPlan] = []
        for phase in sorted(grouped):
            plans.append(self._plan_phase(phase, grouped[phase], crawl_enabled, pages))

        # Session-only phases have no page work to spread
        max_concurrent_pages = max(
            (plan.max_concurrency for plan in plans if plan.page_tests),
            default=MIN_CONCURRENCY,
        )
        strategy = ExecutionStrategy(
            phases=tuple(plans),
            total_estimated_duration=self._estimator.estimate_total(plans, pages),
            parallel_pages=crawl_enabled and max_concurrent_pages > 1,
            max_concurrent_pages=max_concurrent_pages,
            crawl_enabled=crawl_enabled,
            page_count=pages,
        )

        _logger.debug(
            "scheduler.strategy_built",
            tests=len(resolved),
            phases=[plan.phase for plan in plans],
            max_concurrent_pages=max_concurrent_pages,
            total_estimated_duration=strategy.total_estimated_duration,
        )
        return strategy

    def _plan_phase(
        self,
        phase: int,
        members: list[TestClassification],
        crawl_enabled: bool,
        page_count: int,
    ) -> PhaseExecutionPlan:
        ordered = sorted(members, key=lambda c: (c.execution_order, c.test_id))
        session_tests = tuple(c.test_id for c in ordered if c.scope is Scope.SESSION)
        page_tests = tuple(c.test_id for c in ordered if c.scope is Scope.PAGE)

        requirements = self.get_phase_resource_requirements(
            phase, session_tests + page_tests
        )
        max_concurrency = requirements.recommended_concurrency
        definition = self.phases.get_phase(phase)
        if not crawl_enabled or not definition.parallelizable:
            max_concurrency = MIN_CONCURRENCY

        if requirements.has_conflicts:
            _logger.info(
                "scheduler.conflicts_serialized",
                phase=phase,
                pairs=[list(pair) for pair in requirements.conflicting_pairs],
            )

        plan = PhaseExecutionPlan(
            phase=phase,
            session_tests=session_tests,
            page_tests=page_tests,
            max_concurrency=max_concurrency,
        )
        return replace(
            plan, estimated_duration=self._estimator.estimate_phase(plan, page_count)
        )

    def _effective_page_count(self, crawl_enabled: bool, page_count: int | None) -> int:
        if not crawl_enabled:
            return 1
        if page_count is None:
            return self.settings.estimated_pages
        return max(page_count, 1)

    # -------------------------------------------------------------------------
    # Pairwise and ordering queries
    # -------------------------------------------------------------------------

    def can_run_in_parallel(self, test_a: str, test_b: str) -> bool:
        """Whether two tests may overlap in time on the same page.

        False for the same test, for a declared conflict in either direction,
        and for mixed scopes (a session test is a barrier inside its phase).

        Raises:
            UnknownTestError: If either id is unknown.
        """
        first, second = self.classifications.resolve([test_a, test_b])
        if first.test_id == second.test_id:
            return False
        if self._conflict(first, second):
            return False
        return first.scope is second.scope

    def get_execution_order(self, test_ids: Iterable[str]) -> list[str]:
        """Flat run order sorted by phase, execution order, then id.

        Raises:
            UnknownTestError: Listing every unknown id.
        """
        resolved = self.classifications.resolve(_dedupe(test_ids))
        return [c.test_id for c in sorted(resolved, key=lambda c: c.sort_key)]

    def validate_dependencies(self, test_ids: Iterable[str]) -> DependencyReport:
        """Report declared dependencies missing from a selection.

        Never raises; unknown ids contribute no dependencies.
        """
        selected = set(test_ids)
        missing: set[str] = set()
        for test_id in selected:
            classification = self.classifications.get(test_id)
            if classification is None:
                continue
            missing |= classification.dependencies - selected
        return DependencyReport(
            valid=not missing,
            missing_dependencies=tuple(sorted(missing)),
        )

    # -------------------------------------------------------------------------
    # Conflicts and resources
    # -------------------------------------------------------------------------

    def find_conflicts(self, test_ids: Iterable[str]) -> tuple[tuple[str, str], ...]:
        """Declared conflict pairs among known ids, each pair sorted."""
        known = sorted({t for t in test_ids if t in self.classifications})
        pairs = [
            (a, b)
            for a, b in combinations(known, 2)
            if self._conflict(self.classifications[a], self.classifications[b])
        ]
        return tuple(pairs)

    def get_phase_resource_requirements(
        self,
        phase: int,
        test_ids: Iterable[str],
    ) -> ResourceRequirements:
        """Resource profile and recommended concurrency for one phase.

        Only ids belonging to ``phase`` are counted; unknown ids are ignored.
        """
        members = [
            c
            for c in (self.classifications.get(t) for t in _dedupe(test_ids))
            if c is not None and c.phase == phase
        ]
        intensive = sum(1 for c in members if c.resource_intensive)
        network = sum(1 for c in members if c.scope is Scope.PAGE)
        conflicts = self.find_conflicts(c.test_id for c in members)

        recommended = max(MIN_CONCURRENCY, self.settings.baseline_concurrency - intensive)
        if conflicts:
            recommended = MIN_CONCURRENCY

        return ResourceRequirements(
            memory_intensive=intensive,
            cpu_intensive=intensive,
            network_intensive=network,
            recommended_concurrency=recommended,
            conflicting_pairs=conflicts,
        )

    # -------------------------------------------------------------------------
    # Display
    # -------------------------------------------------------------------------

    def get_phase_summary(
        self,
        phase: int,
        test_ids: Iterable[str],
        page_count: int = 1,
    ) -> PhaseSummary:
        """Combine a phase definition with the selection's tests of that phase.

        Raises:
            UnknownPhaseError: If the phase is not defined.
        """
        definition = self.phases.get_phase(phase)
        members = sorted(
            (
                c
                for c in (self.classifications.get(t) for t in _dedupe(test_ids))
                if c is not None and c.phase == phase
            ),
            key=lambda c: c.sort_key,
        )
        session_tests = tuple(c.test_id for c in members if c.scope is Scope.SESSION)
        page_tests = tuple(c.test_id for c in members if c.scope is Scope.PAGE)
        return PhaseSummary(
            phase=phase,
            name=definition.name,
            description=definition.description,
            test_count=len(members),
            session_tests=session_tests,
            page_tests=page_tests,
            estimated_duration=self._estimator.estimate_tests(
                session_tests + page_tests, page_count
            ),
        )

    @staticmethod
    def _conflict(first: TestClassification, second: TestClassification) -> bool:
        return (
            second.test_id in first.conflicts_with
            or first.test_id in second.conflicts_with
        )


def create_scheduler(config: ProjectConfig) -> PhaseScheduler:
    """Build a scheduler with fresh registries from a project config."""
    registries = build_registries(config)
    return PhaseScheduler(registries.classifications, registries.phases, config.scheduling)


def get_default_scheduler() -> PhaseScheduler:
    """Scheduler over the process-wide default registries."""
    registries = get_default_registries()
    return PhaseScheduler(
        registries.classifications,
        registries.phases,
        load_default_project_config().scheduling,
    )
