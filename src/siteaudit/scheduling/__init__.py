"""Test phase scheduling.

Turns a selection of audit tests into an ordered, concurrency-bounded
execution strategy using the static classification and phase registries.
"""

from siteaudit.scheduling.dag import TestDependencyGraph
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
    OutputType,
    PhaseDefinition,
    PhaseRegistry,
    Registries,
    Scope,
    TestClassification,
    build_registries,
    clear_registry_cache,
    get_default_registries,
    load_default_project_config,
)
from siteaudit.scheduling.scheduler import (
    PhaseScheduler,
    create_scheduler,
    get_default_scheduler,
)

__all__ = [
    "ClassificationRegistry",
    "DependencyReport",
    "DurationEstimator",
    "ExecutionStrategy",
    "OutputType",
    "PhaseDefinition",
    "PhaseExecutionPlan",
    "PhaseRegistry",
    "PhaseScheduler",
    "PhaseSummary",
    "Registries",
    "ResourceRequirements",
    "Scope",
    "TestClassification",
    "TestDependencyGraph",
    "build_registries",
    "clear_registry_cache",
    "create_scheduler",
    "get_default_registries",
    "get_default_scheduler",
    "load_default_project_config",
]
