"""Dependency graph over test identifiers.

Builds a directed graph from each test's declared dependencies and
provides:
- Validation of references (no self-dependency, no unknown test)
- Cycle detection with the offending path
- Deterministic topological ordering for display

Registry construction uses the graph to reject malformed tables before
any scheduling happens.
"""

from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from siteaudit.core.errors import CycleDetectedError, RegistryValidationError


@dataclass
class TestDependencyGraph:
    """Directed acyclic graph of test dependencies.

    Example:
        >>> graph = TestDependencyGraph.from_dependencies({
        ...     "site-crawling": [],
        ...     "sitemap": ["site-crawling"],
        ... })
        >>> graph.get_topological_order()
        ['site-crawling', 'sitemap']

    Attributes:
        nodes: Every known test id.
        edges: Forward edges (test -> tests that depend on it).
        reverse_edges: Backward edges (test -> tests it depends on).
        validated: Whether the graph has been checked for cycles.
    """

    __test__ = False

    nodes: frozenset[str] = frozenset()
    edges: dict[str, list[str]] = field(default_factory=lambda: defaultdict(list))
    reverse_edges: dict[str, list[str]] = field(default_factory=lambda: defaultdict(list))
    validated: bool = False

    @classmethod
    def from_dependencies(
        cls,
        dependencies: Mapping[str, Iterable[str]],
    ) -> "TestDependencyGraph":
        """Create a validated graph from test dependency declarations.

        Args:
            dependencies: Map of test_id -> ids it depends on. Every test must
                appear as a key, even with no dependencies.

        Raises:
            RegistryValidationError: If a dependency is the test itself or an
                unknown test.
            CycleDetectedError: If dependencies contain a cycle.
        """
        graph = cls(nodes=frozenset(dependencies))

        for test_id in sorted(dependencies):
            for dep in sorted(set(dependencies[test_id])):
                if dep == test_id:
                    raise RegistryValidationError(test_id, "test cannot depend on itself")
                if dep not in graph.nodes:
                    raise RegistryValidationError(
                        test_id, f"dependency '{dep}' is not a known test"
                    )
                graph.edges[dep].append(test_id)
                graph.reverse_edges[test_id].append(dep)

        graph._validate_no_cycles()
        graph.validated = True
        return graph

    def _validate_no_cycles(self) -> None:
        """DFS cycle check.

        Raises:
            CycleDetectedError: With the cycle path, first id repeated last.
        """
        # 0=unvisited, 1=in progress, 2=done
        state = dict.fromkeys(self.nodes, 0)
        path: list[str] = []

        def dfs(test_id: str) -> None:
            if state[test_id] == 1:
                cycle_start = path.index(test_id)
                raise CycleDetectedError(path[cycle_start:] + [test_id])
            if state[test_id] == 2:
                return

            state[test_id] = 1
            path.append(test_id)
            for dependent in sorted(self.edges.get(test_id, [])):
                dfs(dependent)
            path.pop()
            state[test_id] = 2

        for test_id in sorted(self.nodes):
            if state[test_id] == 0:
                dfs(test_id)

    def get_topological_order(self) -> list[str]:
        """Kahn's algorithm, lexically smallest ready test first."""
        in_degree = {t: len(self.reverse_edges.get(t, [])) for t in self.nodes}
        ready = sorted(t for t, degree in in_degree.items() if degree == 0)
        result: list[str] = []

        while ready:
            test_id = ready.pop(0)
            result.append(test_id)
            for dependent in self.edges.get(test_id, []):
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    ready.append(dependent)
                    ready.sort()

        return result

    def get_dependencies(self, test_id: str) -> list[str]:
        """Sorted direct dependencies of a test."""
        return sorted(self.reverse_edges.get(test_id, []))

    def get_dependents(self, test_id: str) -> list[str]:
        """Sorted tests that directly depend on ``test_id``."""
        return sorted(self.edges.get(test_id, []))

    def get_transitive_dependencies(self, test_id: str) -> list[str]:
        """All tests that must precede ``test_id``, sorted."""
        seen: set[str] = set()
        stack = list(self.reverse_edges.get(test_id, []))
        while stack:
            dep = stack.pop()
            if dep in seen:
                continue
            seen.add(dep)
            stack.extend(self.reverse_edges.get(dep, []))
        return sorted(seen)

    def has_dependencies(self) -> bool:
        return any(self.reverse_edges.get(t) for t in self.nodes)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary for JSON output."""
        return {
            "tests": sorted(self.nodes),
            "dependencies": {
                t: self.get_dependencies(t)
                for t in sorted(self.nodes)
                if self.reverse_edges.get(t)
            },
            "topological_order": self.get_topological_order(),
        }
