"""Dependency Graph - name-based DAG with cycle detection for unit ordering.

Shared by both processing modes:
- runtime mode walks the graph to initialize units (Gumup.init)
- build mode walks the graph to order source files (BuildNamespace.resolve)
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from ..observability.logger import get_logger
from ..utils.exceptions import CyclicDependencyError, DeclarationError, ResolutionError
from .matching import expand

logger = get_logger(__name__)


@dataclass
class DependencyNode:
    """
    Node in the dependency graph representing a unit.

    Attributes:
        name: Unit name
        requirements: Declared requirements (exact names or wildcards), in order
        dependencies: Concrete unit names this unit depends on, in requirement order
        dependents: Unit names that depend on this unit
        is_root: True if nothing in the graph depends on this unit
    """

    name: str
    requirements: list[str] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    dependents: set[str] = field(default_factory=set)
    is_root: bool = True

    def __hash__(self) -> int:
        """Hash based on unit name."""
        return hash(self.name)


class DependencyGraph:
    """
    Directed Acyclic Graph (DAG) of named units.

    Features:
    - Wildcard requirement expansion against the full set of units
    - Cycle detection over the active DFS path
    - Root detection (units nothing depends on)
    - Dependency-first ordering via DFS post-order
    """

    def __init__(self) -> None:
        """Initialize empty dependency graph."""
        self.nodes: dict[str, DependencyNode] = {}
        self._resolved = False

    def add_unit(self, name: str, requirements: Iterable[str] = ()) -> DependencyNode:
        """
        Add a unit to the dependency graph.

        Args:
            name: Unit name
            requirements: Requirements declared by the unit

        Returns:
            The created DependencyNode

        Raises:
            DeclarationError: If a unit with this name is already in the graph
        """
        if name in self.nodes:
            raise DeclarationError(f"Unit '{name}' has already been declared", unit_name=name)

        node = DependencyNode(name=name, requirements=list(requirements))
        self.nodes[name] = node
        self._resolved = False  # Invalidate resolution when graph changes

        return node

    @property
    def roots(self) -> list[str]:
        """Names of units nothing else depends on, in insertion order."""
        self._ensure_resolved()
        return [name for name, node in self.nodes.items() if node.is_root]

    def dependencies_of(self, name: str) -> list[str]:
        """
        Get the concrete dependencies of a unit.

        Args:
            name: Unit name

        Returns:
            Wildcard-expanded dependency names in requirement order
        """
        self._ensure_resolved()
        return list(self.nodes[name].dependencies)

    def resolve(self) -> None:
        """
        Expand requirements into edges and reject cyclic graphs.

        ALGORITHM:
        1. Expand every requirement against a snapshot of all unit names.
           Wildcards skip the requiring unit; exact names must exist.
        2. Run a DFS from every unit, tracking the active path. Reaching a
           unit that is already on the path is a back edge (cycle).
           Units whose subtree is fully checked are memoized.
        3. Units appearing as a dependency of another unit lose root status.

        The graph is left untouched by a failed expansion, so a failed
        resolve never exposes partially expanded edges.

        Raises:
            ResolutionError: If an exact requirement names an unknown unit
            CyclicDependencyError: If a unit depends on itself
        """
        names = self.nodes.keys()

        expanded: dict[str, list[str]] = {}
        for name, node in self.nodes.items():
            deps: list[str] = []
            for requirement in node.requirements:
                for dep_name in expand(requirement, names, exclude=name):
                    if dep_name not in deps:
                        deps.append(dep_name)
            expanded[name] = deps

        resolved: set[str] = set()
        for name in names:
            self._check_cycles_from(name, expanded, resolved)

        for node in self.nodes.values():
            node.dependencies = expanded[node.name]
            node.dependents = set()
            node.is_root = True
        for node in self.nodes.values():
            for dep_name in node.dependencies:
                self.nodes[dep_name].dependents.add(node.name)
                self.nodes[dep_name].is_root = False

        self._resolved = True

        logger.debug(
            "Dependency graph resolved",
            nodes=len(self.nodes),
            edges=sum(len(node.dependencies) for node in self.nodes.values()),
            roots=sum(1 for node in self.nodes.values() if node.is_root),
        )

    def _check_cycles_from(
        self,
        start: str,
        expanded: dict[str, list[str]],
        resolved: set[str],
    ) -> None:
        """
        Detect cycles using Depth-First Search (DFS) with active path tracking.

        Why the active path:
        A plain visited set can't tell a diamond from a cycle:
        - A→B→D, A→C→D is fine (D reached twice, never while on the path)
        - A→B→A is a cycle (A reached again while still on the path)

        The walk keeps an explicit stack of dependency iterators, so chain
        length is not limited by the interpreter recursion limit.

        Args:
            start: Unit to check
            expanded: Concrete dependencies per unit
            resolved: Units whose dependency subtree has been fully checked

        Raises:
            CyclicDependencyError: If a unit is reached again while on the path
        """
        if start in resolved:
            return

        path = [start]
        on_path = {start}
        stack = [iter(expanded[start])]

        while stack:
            for dep_name in stack[-1]:
                if dep_name in resolved:
                    continue
                if dep_name in on_path:
                    cycle = path[path.index(dep_name) :] + [dep_name]
                    raise CyclicDependencyError(dep_name, cycle=cycle)
                path.append(dep_name)
                on_path.add(dep_name)
                stack.append(iter(expanded[dep_name]))
                break
            else:
                # All dependencies checked
                stack.pop()
                name = path.pop()
                on_path.discard(name)
                resolved.add(name)

    def _ensure_resolved(self) -> None:
        if not self._resolved:
            self.resolve()

    def validate(self) -> bool:
        """
        Validate the dependency graph.

        Returns:
            True if graph is valid

        Raises:
            ResolutionError: If a requirement can't be satisfied
            CyclicDependencyError: If cycles are detected
        """
        self.resolve()
        return True

    def topological_sort(self, entry_points: Iterable[str] | None = None) -> list[str]:
        """
        Order units so that every unit follows all of its dependencies.

        Walks the graph depth-first from each entry point, visiting
        dependencies in requirement order, and emits each unit after its
        dependencies (post-order). Siblings without a mutual dependency keep
        no particular relative order beyond that.

        Args:
            entry_points: Units to start from (default: the roots). Only units
                reachable from the entry points are returned.

        Returns:
            Unit names in processing order, each exactly once

        Raises:
            ResolutionError: If an entry point is not in the graph
        """
        self._ensure_resolved()

        starts = self.roots if entry_points is None else list(entry_points)
        ordered: list[str] = []
        visited: set[str] = set()

        for name in starts:
            if name not in self.nodes:
                raise ResolutionError(f"Invalid dependency '{name}'")
            self._visit(name, visited, ordered)

        logger.debug("Topological sort complete", unit_count=len(ordered))

        return ordered

    def _visit(self, start: str, visited: set[str], ordered: list[str]) -> None:
        """Append `start` and its unvisited dependencies to `ordered` in post-order."""
        if start in visited:
            return

        visited.add(start)
        path = [start]
        stack = [iter(self.nodes[start].dependencies)]

        while stack:
            for dep_name in stack[-1]:
                if dep_name not in visited:
                    visited.add(dep_name)
                    path.append(dep_name)
                    stack.append(iter(self.nodes[dep_name].dependencies))
                    break
            else:
                stack.pop()
                ordered.append(path.pop())

    def to_dot(self, labels: dict[str, str] | None = None) -> str:
        """
        Generate DOT format representation of the dependency graph.

        Args:
            labels: Optional extra label line per unit (e.g. its file name)

        Returns:
            String containing the Graphviz DOT definition
        """
        self._ensure_resolved()

        lines = ["digraph DependencyGraph {"]
        lines.append("    rankdir=LR;")
        lines.append("    node [shape=box style=filled];")

        for node in self.nodes.values():
            label = node.name
            if labels and node.name in labels:
                label = f"{label}\\n{labels[node.name]}"

            # Roots are the entry points of runtime initialization
            color = "#d4edda" if node.is_root else "#eeeeee"

            lines.append(f'    "{node.name}" [label="{label}" fillcolor="{color}"];')

            for dep_name in node.dependencies:
                lines.append(f'    "{dep_name}" -> "{node.name}";')

        lines.append("}")
        return "\n".join(lines)
