"""Tests for the DependencyGraph class."""

import pytest

from gumup.dependency.graph import DependencyGraph
from gumup.utils.exceptions import CyclicDependencyError, DeclarationError, ResolutionError


def assert_dependencies_first(graph: DependencyGraph, order: list[str]) -> None:
    """Every unit must follow all of its dependencies."""
    position = {name: index for index, name in enumerate(order)}
    for name in order:
        for dep_name in graph.dependencies_of(name):
            assert position[dep_name] < position[name], f"{dep_name} must precede {name}"


class TestDependencyGraph:
    """Test suite for DependencyGraph."""

    @pytest.fixture
    def graph(self):
        """Create a new DependencyGraph instance."""
        return DependencyGraph()

    def test_add_unit(self, graph):
        """Test adding units to the graph."""
        node = graph.add_unit("a", ["b"])

        assert graph.nodes["a"] is node
        assert node.requirements == ["b"]
        assert node.dependencies == []

    def test_add_duplicate_unit_raises(self, graph):
        """Test a unit can't be added twice."""
        graph.add_unit("a")

        with pytest.raises(DeclarationError, match="already been declared"):
            graph.add_unit("a")

    def test_chain_order(self, graph):
        """Test a -> b -> c is ordered a, b, c."""
        graph.add_unit("c", ["b"])
        graph.add_unit("b", ["a"])
        graph.add_unit("a")

        assert graph.topological_sort() == ["a", "b", "c"]

    def test_roots(self, graph):
        """Test roots are the units nothing depends on."""
        graph.add_unit("a")
        graph.add_unit("b", ["a"])
        graph.add_unit("c", ["a"])
        graph.resolve()

        assert graph.roots == ["b", "c"]
        assert graph.nodes["a"].dependents == {"b", "c"}
        assert graph.nodes["a"].is_root is False

    def test_diamond_is_not_a_cycle(self, graph):
        """Test a diamond resolves and each unit appears once."""
        graph.add_unit("top", ["left", "right"])
        graph.add_unit("left", ["base"])
        graph.add_unit("right", ["base"])
        graph.add_unit("base")

        order = graph.topological_sort()

        assert sorted(order) == ["base", "left", "right", "top"]
        assert_dependencies_first(graph, order)

    def test_prefix_wildcard_expansion(self, graph):
        """Test foo.* depends on nested units but not on foo."""
        graph.add_unit("app", ["lib.*"])
        graph.add_unit("lib")
        graph.add_unit("lib.a")
        graph.add_unit("lib.b.c")

        graph.resolve()

        assert graph.dependencies_of("app") == ["lib.a", "lib.b.c"]

    def test_global_wildcard_excludes_self(self, graph):
        """Test * depends on every other unit, declared before or after."""
        graph.add_unit("a")
        graph.add_unit("all", ["*"])
        graph.add_unit("z")

        graph.resolve()

        assert graph.dependencies_of("all") == ["a", "z"]
        assert graph.roots == ["all"]

    def test_wildcard_matching_nothing(self, graph):
        """Test an empty wildcard expansion is allowed."""
        graph.add_unit("a", ["missing.*"])

        assert graph.topological_sort() == ["a"]

    def test_duplicate_matches_are_collapsed(self, graph):
        """Test a unit matched by several requirements is a single edge."""
        graph.add_unit("app", ["lib.a", "lib.*", "*"])
        graph.add_unit("lib.a")

        graph.resolve()

        assert graph.dependencies_of("app") == ["lib.a"]

    def test_invalid_dependency_raises(self, graph):
        """Test an unknown exact requirement fails resolution."""
        graph.add_unit("a", ["missing"])

        with pytest.raises(ResolutionError, match="Invalid dependency 'missing'"):
            graph.resolve()

    def test_self_dependency_is_a_cycle(self, graph):
        """Test a unit requiring itself by name is rejected."""
        graph.add_unit("a", ["a"])

        with pytest.raises(CyclicDependencyError, match="Recursive dependency 'a'"):
            graph.resolve()

    def test_two_unit_cycle(self, graph):
        """Test a <-> b is rejected."""
        graph.add_unit("a", ["b"])
        graph.add_unit("b", ["a"])

        with pytest.raises(CyclicDependencyError) as exc_info:
            graph.resolve()

        assert exc_info.value.cycle == ["a", "b", "a"]

    def test_indirect_cycle_through_wildcard(self, graph):
        """Test a cycle closed by a wildcard requirement."""
        graph.add_unit("app", ["app.*"])
        graph.add_unit("app.view", ["app"])

        with pytest.raises(CyclicDependencyError):
            graph.resolve()

    def test_failed_resolve_leaves_no_edges(self, graph):
        """Test a cyclic graph exposes no partially expanded edges."""
        graph.add_unit("a", ["b"])
        graph.add_unit("b", ["c"])
        graph.add_unit("c", ["a"])

        with pytest.raises(CyclicDependencyError):
            graph.resolve()

        assert all(node.dependencies == [] for node in graph.nodes.values())

    def test_topological_sort_from_entry_points(self, graph):
        """Test only units reachable from the entry points are returned."""
        graph.add_unit("a")
        graph.add_unit("b", ["a"])
        graph.add_unit("c")

        assert graph.topological_sort(["b"]) == ["a", "b"]

    def test_topological_sort_unknown_entry_point(self, graph):
        """Test an unknown entry point fails."""
        graph.add_unit("a")

        with pytest.raises(ResolutionError):
            graph.topological_sort(["b"])

    def test_large_acyclic_graph_order(self, graph):
        """Test every unit appears once, dependencies first."""
        for i in range(50):
            graph.add_unit(f"u{i}", [f"u{j}" for j in range(i) if (i + j) % 3 == 0])

        order = graph.topological_sort()

        assert sorted(order) == sorted(graph.nodes)
        assert_dependencies_first(graph, order)

    def test_adding_unit_invalidates_resolution(self, graph):
        """Test a later unit is picked up by a wildcard on the next sort."""
        graph.add_unit("all", ["*"])
        assert graph.topological_sort() == ["all"]

        graph.add_unit("late")

        assert graph.topological_sort() == ["late", "all"]

    def test_validate(self, graph):
        """Test validate resolves the graph."""
        graph.add_unit("a")

        assert graph.validate() is True
        assert graph.roots == ["a"]

    def test_to_dot(self, graph):
        """Test DOT rendering contains nodes and edges."""
        graph.add_unit("a")
        graph.add_unit("b", ["a"])

        dot = graph.to_dot(labels={"a": "src/a.js"})

        assert dot.startswith("digraph DependencyGraph {")
        assert '"a" -> "b";' in dot
        assert 'label="a\\nsrc/a.js"' in dot
        assert dot.endswith("}")

    def test_long_chain(self, graph):
        """Test a 5000 unit chain resolves and sorts without recursion limits."""
        graph.add_unit("u0")
        for i in range(1, 5000):
            graph.add_unit(f"u{i}", [f"u{i - 1}"])

        order = graph.topological_sort()

        assert order == [f"u{i}" for i in range(5000)]
        assert graph.roots == ["u4999"]

    def test_long_cycle(self, graph):
        """Test a cycle closing a 5000 unit chain is detected."""
        graph.add_unit("u0", ["u4999"])
        for i in range(1, 5000):
            graph.add_unit(f"u{i}", [f"u{i - 1}"])

        with pytest.raises(CyclicDependencyError) as exc_info:
            graph.resolve()

        assert len(exc_info.value.cycle) == 5001
        assert exc_info.value.cycle[0] == exc_info.value.cycle[-1]
