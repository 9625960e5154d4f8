"""Tests for the test dependency graph.

Covers:
- Graph construction from dependency declarations
- Invalid references (self, unknown)
- Cycle detection
- Topological ordering and transitive queries
"""

import pytest

from siteaudit.core.errors import CycleDetectedError, RegistryValidationError
from siteaudit.scheduling.dag import TestDependencyGraph as Graph

# =============================================================================
# Construction
# =============================================================================


class TestGraphConstruction:
    """Tests for building graphs from dependency declarations."""

    def test_no_dependencies(self) -> None:
        """Independent tests form a valid graph with no edges."""
        graph = Graph.from_dependencies({"seo": [], "screenshots": []})

        assert graph.validated is True
        assert graph.nodes == frozenset({"seo", "screenshots"})
        assert not graph.has_dependencies()

    def test_linear_chain(self) -> None:
        """crawl -> sitemap -> report."""
        graph = Graph.from_dependencies(
            {"crawl": [], "sitemap": ["crawl"], "report": ["sitemap"]}
        )

        assert graph.has_dependencies()
        assert graph.get_dependencies("crawl") == []
        assert graph.get_dependencies("sitemap") == ["crawl"]
        assert graph.get_dependents("crawl") == ["sitemap"]

    def test_diamond(self) -> None:
        """Two tests sharing a root feed a single sink."""
        graph = Graph.from_dependencies(
            {"a": [], "b": ["a"], "c": ["a"], "d": ["c", "b"]}
        )

        assert graph.get_dependencies("d") == ["b", "c"]
        assert graph.get_dependents("a") == ["b", "c"]
        assert graph.get_transitive_dependencies("d") == ["a", "b", "c"]

    def test_duplicate_dependency_is_collapsed(self) -> None:
        graph = Graph.from_dependencies({"a": [], "b": ["a", "a"]})

        assert graph.get_dependencies("b") == ["a"]


# =============================================================================
# Invalid declarations
# =============================================================================


class TestGraphValidation:
    """Tests for rejected declarations."""

    def test_self_dependency(self) -> None:
        with pytest.raises(RegistryValidationError, match="cannot depend on itself") as exc:
            Graph.from_dependencies({"sitemap": ["sitemap"]})

        assert exc.value.test_id == "sitemap"

    def test_unknown_dependency(self) -> None:
        with pytest.raises(RegistryValidationError, match="'ghost' is not a known test"):
            Graph.from_dependencies({"sitemap": ["ghost"]})

    def test_two_node_cycle(self) -> None:
        with pytest.raises(CycleDetectedError) as exc:
            Graph.from_dependencies({"a": ["b"], "b": ["a"]})

        cycle = exc.value.cycle
        assert cycle[0] == cycle[-1]
        assert set(cycle) == {"a", "b"}

    def test_three_node_cycle_message(self) -> None:
        with pytest.raises(CycleDetectedError, match="circular dependency detected"):
            Graph.from_dependencies({"a": ["c"], "b": ["a"], "c": ["b"]})

    def test_cycle_is_a_registry_error(self) -> None:
        """Cycle errors can be caught with the broader registry error."""
        with pytest.raises(RegistryValidationError):
            Graph.from_dependencies({"a": ["b"], "b": ["a"]})


# =============================================================================
# Ordering
# =============================================================================


class TestTopologicalOrder:
    """Tests for deterministic topological ordering."""

    def test_dependencies_come_first(self) -> None:
        graph = Graph.from_dependencies(
            {"report": ["sitemap"], "sitemap": ["crawl"], "crawl": []}
        )

        assert graph.get_topological_order() == ["crawl", "sitemap", "report"]

    def test_ties_broken_lexically(self) -> None:
        graph = Graph.from_dependencies({"zeta": [], "alpha": [], "mid": ["zeta"]})

        assert graph.get_topological_order() == ["alpha", "zeta", "mid"]

    def test_to_dict(self) -> None:
        graph = Graph.from_dependencies({"crawl": [], "sitemap": ["crawl"]})

        data = graph.to_dict()

        assert data["tests"] == ["crawl", "sitemap"]
        assert data["dependencies"] == {"sitemap": ["crawl"]}
        assert data["topological_order"] == ["crawl", "sitemap"]
