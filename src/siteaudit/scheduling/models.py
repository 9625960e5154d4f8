"""Value objects produced by the phase scheduler.

Every model is frozen: the scheduler creates them per call and the
orchestrator only reads them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PhaseExecutionPlan:
    """Planned work for one phase.

    Attributes:
        phase: Phase number.
        session_tests: Tests run once for the audit, in execution order.
            They complete before any page test of the phase starts.
        page_tests: Tests run once per page, in execution order.
        max_concurrency: Recommended concurrent page slots (>= 1).
        estimated_duration: Heuristic duration in seconds, for display only.
    """

    phase: int
    session_tests: tuple[str, ...] = ()
    page_tests: tuple[str, ...] = ()
    max_concurrency: int = 1
    estimated_duration: float | None = None

    @property
    def test_ids(self) -> tuple[str, ...]:
        """Session tests followed by page tests."""
        return self.session_tests + self.page_tests

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase,
            "session_tests": list(self.session_tests),
            "page_tests": list(self.page_tests),
            "max_concurrency": self.max_concurrency,
            "estimated_duration": self.estimated_duration,
        }


@dataclass(frozen=True)
class ExecutionStrategy:
    """Complete, ordered plan for an audit.

    Phases are strictly ascending; phase N+1 may only start after every test
    of phase N has completed on every page.

    Attributes:
        phases: Non-empty phase plans in ascending phase order.
        total_estimated_duration: Sum of the phase estimates, in seconds.
        parallel_pages: Whether page-scope work may be spread across pages.
        max_concurrent_pages: Largest concurrency among phases with page tests.
        crawl_enabled: Whether the plan covers a crawl or a single page.
        page_count: Pages the estimate assumed.
    """

    phases: tuple[PhaseExecutionPlan, ...]
    total_estimated_duration: float
    parallel_pages: bool
    max_concurrent_pages: int
    crawl_enabled: bool = False
    page_count: int = 1

    @property
    def test_ids(self) -> tuple[str, ...]:
        """Flat sequence of every planned test, in plan order."""
        return tuple(t for plan in self.phases for t in plan.test_ids)

    @property
    def is_empty(self) -> bool:
        return not self.phases

    def get_phase(self, phase: int) -> PhaseExecutionPlan | None:
        """The plan for ``phase``, or None if the phase has no selected tests."""
        for plan in self.phases:
            if plan.phase == phase:
                return plan
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "phases": [plan.to_dict() for plan in self.phases],
            "total_estimated_duration": self.total_estimated_duration,
            "parallel_pages": self.parallel_pages,
            "max_concurrent_pages": self.max_concurrent_pages,
            "crawl_enabled": self.crawl_enabled,
            "page_count": self.page_count,
        }


@dataclass(frozen=True)
class DependencyReport:
    """Result of a dependency completeness check.

    Not an error: callers decide whether to warn, abort, or add the
    missing tests.
    """

    valid: bool
    missing_dependencies: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "missing_dependencies": list(self.missing_dependencies),
        }


@dataclass(frozen=True)
class ResourceRequirements:
    """Coarse resource profile of one phase of a selection.

    ``memory_intensive`` and ``cpu_intensive`` both count tests flagged
    resource-intensive; ``network_intensive`` counts page-scope tests since
    each implies a navigation per page.
    """

    memory_intensive: int
    cpu_intensive: int
    network_intensive: int
    recommended_concurrency: int
    conflicting_pairs: tuple[tuple[str, str], ...] = ()

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicting_pairs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "memory_intensive": self.memory_intensive,
            "cpu_intensive": self.cpu_intensive,
            "network_intensive": self.network_intensive,
            "recommended_concurrency": self.recommended_concurrency,
            "conflicting_pairs": [list(pair) for pair in self.conflicting_pairs],
        }


@dataclass(frozen=True)
class PhaseSummary:
    """Display projection of a phase for a selection."""

    phase: int
    name: str
    description: str
    test_count: int
    session_tests: tuple[str, ...]
    page_tests: tuple[str, ...]
    estimated_duration: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase,
            "name": self.name,
            "description": self.description,
            "test_count": self.test_count,
            "session_tests": list(self.session_tests),
            "page_tests": list(self.page_tests),
            "estimated_duration": self.estimated_duration,
        }
