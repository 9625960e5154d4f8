"""Heuristic duration estimates for execution plans.

Estimates are for display only and carry no scheduling authority. A
session test costs a fixed amount once; a page test costs a fixed amount
per page. Phases run sequentially, so the strategy total is the sum of
its phases. Estimation never raises: an unknown id costs nothing.
"""

from collections.abc import Iterable, Mapping

from siteaudit.core.config import SchedulingConfig
from siteaudit.core.logging import get_logger
from siteaudit.scheduling.models import PhaseExecutionPlan
from siteaudit.scheduling.registry import Scope, TestClassification

_logger = get_logger("estimation")


class DurationEstimator:
    """Per-test, per-phase and total duration estimates in seconds."""

    def __init__(
        self,
        classifications: Mapping[str, TestClassification],
        settings: SchedulingConfig | None = None,
    ):
        self._classifications = classifications
        self._settings = settings or SchedulingConfig()

    def estimate_test(self, test_id: str, page_count: int = 1) -> float:
        classification = self._classifications.get(test_id)
        if classification is None:
            _logger.warning("estimation.unknown_test", test_id=test_id)
            return 0.0
        if classification.scope is Scope.SESSION:
            return self._settings.session_test_seconds
        return self._settings.page_test_seconds * max(page_count, 1)

    def estimate_tests(self, test_ids: Iterable[str], page_count: int = 1) -> float:
        return sum(self.estimate_test(t, page_count) for t in test_ids)

    def estimate_phase(self, plan: PhaseExecutionPlan, page_count: int = 1) -> float:
        return self.estimate_tests(plan.test_ids, page_count)

    def estimate_total(
        self,
        plans: Iterable[PhaseExecutionPlan],
        page_count: int = 1,
    ) -> float:
        return sum(self.estimate_phase(plan, page_count) for plan in plans)
