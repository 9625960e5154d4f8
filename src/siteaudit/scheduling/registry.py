"""Classification and phase registries.

The registries are the static scheduling tables: one TestClassification per
known test id and one PhaseDefinition per phase. They are built once from a
ProjectConfig, validated at construction and read-only afterwards.

Construction-time validation rejects:
- duplicate test ids
- self-referencing dependencies or conflicts
- references to unknown tests
- dependency cycles
- tests assigned to undefined phases
- phase dependencies that point at the same or a later phase

Asymmetric conflict declarations are completed (if A conflicts with B, B
conflicts with A) and logged as a warning.
"""

from __future__ import annotations

import functools
import os
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from types import MappingProxyType

from siteaudit.core.config import ProjectConfig
from siteaudit.core.constants import PROJECT_CONFIG_ENV_VAR
from siteaudit.core.errors import (
    RegistryValidationError,
    UnknownPhaseError,
    UnknownTestError,
)
from siteaudit.core.logging import get_logger
from siteaudit.data import DEFAULT_PROJECT_CONFIG
from siteaudit.scheduling.dag import TestDependencyGraph

_logger = get_logger("registry")


class Scope(str, Enum):
    """Whether a test runs once per audit or once per page."""

    SESSION = "session"
    PAGE = "page"


class OutputType(str, Enum):
    """Shape of the artifacts a test produces."""

    PER_PAGE = "per-page"
    SITE_WIDE = "site-wide"


@dataclass(frozen=True)
class TestClassification:
    """Static scheduling metadata of one test."""

    __test__ = False

    test_id: str
    phase: int
    scope: Scope
    execution_order: int = 0
    dependencies: frozenset[str] = frozenset()
    conflicts_with: frozenset[str] = frozenset()
    resource_intensive: bool = False
    output_type: OutputType = OutputType.PER_PAGE
    name: str = ""
    description: str = ""

    @property
    def display_name(self) -> str:
        return self.name or self.test_id

    @property
    def sort_key(self) -> tuple[int, int, str]:
        """Canonical ordering key: phase, then execution order, then id."""
        return (self.phase, self.execution_order, self.test_id)


@dataclass(frozen=True)
class PhaseDefinition:
    """Static description of one execution phase."""

    phase: int
    name: str
    description: str = ""
    scope: Scope = Scope.PAGE
    dependencies: tuple[int, ...] = field(default_factory=tuple)
    parallelizable: bool = True


class PhaseRegistry(Mapping[int, PhaseDefinition]):
    """Read-only table of phase definitions, iterated in ascending order."""

    def __init__(self, phases: Iterable[PhaseDefinition]):
        table: dict[int, PhaseDefinition] = {}
        for definition in sorted(phases, key=lambda p: p.phase):
            if definition.phase in table:
                raise RegistryValidationError(
                    f"phase {definition.phase}", "phase defined more than once"
                )
            table[definition.phase] = definition

        for definition in table.values():
            for dep in definition.dependencies:
                if dep not in table:
                    raise RegistryValidationError(
                        f"phase {definition.phase}", f"depends on undefined phase {dep}"
                    )
                if dep >= definition.phase:
                    raise RegistryValidationError(
                        f"phase {definition.phase}",
                        f"may only depend on earlier phases, not phase {dep}",
                    )

        self._phases = MappingProxyType(table)

    def __getitem__(self, phase: int) -> PhaseDefinition:
        return self._phases[phase]

    def __iter__(self) -> Iterator[int]:
        return iter(self._phases)

    def __len__(self) -> int:
        return len(self._phases)

    def get_phase(self, phase: int) -> PhaseDefinition:
        """Look up a phase.

        Raises:
            UnknownPhaseError: If the phase is not defined.
        """
        try:
            return self._phases[phase]
        except KeyError:
            raise UnknownPhaseError(phase) from None


class ClassificationRegistry(Mapping[str, TestClassification]):
    """Read-only table of test classifications keyed by test id."""

    def __init__(
        self,
        classifications: Iterable[TestClassification],
        phases: PhaseRegistry,
    ):
        table: dict[str, TestClassification] = {}
        for classification in classifications:
            if classification.test_id in table:
                raise RegistryValidationError(
                    classification.test_id, "test id defined more than once"
                )
            table[classification.test_id] = classification

        for classification in table.values():
            if classification.phase not in phases:
                raise RegistryValidationError(
                    classification.test_id,
                    f"assigned to undefined phase {classification.phase}",
                )
            if classification.test_id in classification.conflicts_with:
                raise RegistryValidationError(
                    classification.test_id, "test cannot conflict with itself"
                )
            unknown = sorted(classification.conflicts_with - table.keys())
            if unknown:
                raise RegistryValidationError(
                    classification.test_id,
                    f"conflicts with unknown test(s): {', '.join(unknown)}",
                )

        self._graph = TestDependencyGraph.from_dependencies(
            {test_id: c.dependencies for test_id, c in table.items()}
        )
        self._classifications = MappingProxyType(_symmetrize_conflicts(table))

    def __getitem__(self, test_id: str) -> TestClassification:
        return self._classifications[test_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._classifications)

    def __len__(self) -> int:
        return len(self._classifications)

    @property
    def dependency_graph(self) -> TestDependencyGraph:
        return self._graph

    def get_test(self, test_id: str) -> TestClassification:
        """Look up one test.

        Raises:
            UnknownTestError: If the id is not registered.
        """
        try:
            return self._classifications[test_id]
        except KeyError:
            raise UnknownTestError([test_id]) from None

    def resolve(self, test_ids: Iterable[str]) -> list[TestClassification]:
        """Resolve ids in order, reporting every unknown id at once.

        Raises:
            UnknownTestError: Listing all ids absent from the registry.
        """
        ids = list(test_ids)
        unknown = [t for t in ids if t not in self._classifications]
        if unknown:
            raise UnknownTestError(unknown)
        return [self._classifications[t] for t in ids]

    def ids(self) -> list[str]:
        """Every registered id in canonical order."""
        return [c.test_id for c in sorted(self._classifications.values(), key=lambda c: c.sort_key)]

    def by_phase(self, phase: int) -> list[TestClassification]:
        """Classifications of one phase in canonical order."""
        return sorted(
            (c for c in self._classifications.values() if c.phase == phase),
            key=lambda c: c.sort_key,
        )


def _symmetrize_conflicts(
    table: dict[str, TestClassification],
) -> dict[str, TestClassification]:
    """Complete one-sided conflict declarations."""
    missing: dict[str, set[str]] = {}
    for test_id, classification in table.items():
        for other in classification.conflicts_with:
            if test_id not in table[other].conflicts_with:
                missing.setdefault(other, set()).add(test_id)

    result = dict(table)
    for test_id, additions in sorted(missing.items()):
        _logger.warning(
            "registry.asymmetric_conflict",
            test_id=test_id,
            declared_by=sorted(additions),
        )
        current = result[test_id]
        result[test_id] = replace(
            current, conflicts_with=current.conflicts_with | frozenset(additions)
        )
    return result


@dataclass(frozen=True)
class Registries:
    """The classification and phase registries built from one project config."""

    classifications: ClassificationRegistry
    phases: PhaseRegistry


def build_registries(config: ProjectConfig) -> Registries:
    """Convert a project config into validated registries.

    Raises:
        RegistryValidationError: If the static tables violate an invariant.
    """
    phases = PhaseRegistry(
        PhaseDefinition(
            phase=number,
            name=phase.name,
            description=phase.description,
            scope=Scope(phase.scope),
            dependencies=tuple(sorted(set(phase.dependencies))),
            parallelizable=phase.parallelizable,
        )
        for number, phase in config.phases.items()
    )

    classifications = ClassificationRegistry(
        (
            TestClassification(
                test_id=test.id,
                phase=test.phase,
                scope=Scope(test.scope),
                execution_order=test.execution_order,
                dependencies=frozenset(test.dependencies),
                conflicts_with=frozenset(test.conflicts_with),
                resource_intensive=test.resource_intensive,
                output_type=OutputType(test.output_type),
                name=test.name,
                description=test.description,
            )
            for test in config.tests.values()
        ),
        phases,
    )

    _logger.debug(
        "registry.loaded",
        project=config.name,
        tests=len(classifications),
        phases=len(phases),
    )
    return Registries(classifications=classifications, phases=phases)


def resolve_project_config_path(path: Path | None = None) -> Path:
    """Pick the project config: explicit path, then environment, then packaged default."""
    if path is not None:
        return path
    env_path = os.environ.get(PROJECT_CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_PROJECT_CONFIG


@functools.lru_cache(maxsize=1)
def load_default_project_config() -> ProjectConfig:
    """Load and cache the process-wide project config."""
    path = resolve_project_config_path()
    _logger.debug("registry.loading_project_config", path=str(path))
    return ProjectConfig.from_yaml(path)


@functools.lru_cache(maxsize=1)
def get_default_registries() -> Registries:
    """Registries built once per process from the default project config."""
    return build_registries(load_default_project_config())


def clear_registry_cache() -> None:
    """Forget the cached project config and registries (for tests)."""
    get_default_registries.cache_clear()
    load_default_project_config.cache_clear()
