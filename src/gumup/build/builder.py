"""Build namespace - orders unit files for concatenation.

Build mode applies the runtime dependency rules to source files: each added
file is an entry point, its requirements are loaded through the unit cache,
and resolve() returns the file names in an order where every file follows
all the files it depends on.
"""

from collections import deque
from pathlib import Path

from ..constants import DEFAULT_SEPARATOR
from ..dependency.graph import DependencyGraph
from ..models.file_unit import FileUnit
from ..observability.logger import get_logger
from .unit_cache import UnitCache

logger = get_logger(__name__)


class BuildNamespace:
    """
    Set of entry unit files plus everything they require.

    Example:
        cache = UnitCache(["src"])
        namespace = BuildNamespace(cache)
        namespace.add("src/app/main.js")
        files = namespace.resolve()
    """

    def __init__(self, unit_cache: UnitCache) -> None:
        """
        Initialize BuildNamespace.

        Args:
            unit_cache: Cache used to read files and locate required units
        """
        self._unit_cache = unit_cache
        self._units: list[FileUnit] = []
        self._graph: DependencyGraph | None = None

    @property
    def unit_cache(self) -> UnitCache:
        return self._unit_cache

    @property
    def units(self) -> list[FileUnit]:
        """Entry units, in the order they were added."""
        return list(self._units)

    @property
    def graph(self) -> DependencyGraph:
        """Resolved dependency graph (resolves on first access)."""
        graph = self._graph
        if graph is None:
            graph = self._graph = self._build_graph(self._load_namespace())
        return graph

    def add(self, file_name: str | Path) -> FileUnit:
        """
        Register an entry unit file.

        Args:
            file_name: Path of the unit file

        Returns:
            FileUnit declared by the file
        """
        unit = self._unit_cache.read_file(file_name)
        if unit not in self._units:
            self._units.append(unit)
        self._graph = None
        return unit

    def resolve(self) -> list[str]:
        """
        Order the unit files for concatenation.

        Returns:
            File names, each exactly once, dependencies first

        Raises:
            ResolutionError: If a required unit can't be found
            CyclicDependencyError: If the units form a cycle
            DeclarationError: If a unit file is invalid
        """
        return [unit.file_name for unit in self.resolve_units()]

    def resolve_units(self) -> list[FileUnit]:
        """
        Order the units for concatenation.

        Returns:
            Units, each exactly once, dependencies first
        """
        namespace = self._load_namespace()
        graph = self._graph = self._build_graph(namespace)

        order = graph.topological_sort(unit.name for unit in self._units)

        logger.debug("Build namespace resolved", entries=len(self._units), files=len(order))

        return [namespace[name] for name in order]

    def concatenate(self, separator: str = DEFAULT_SEPARATOR, banner: str = "") -> str:
        """
        Concatenate the unit files in dependency order.

        Args:
            separator: Text inserted between files
            banner: Text prepended to the output

        Returns:
            Concatenated content
        """
        encoding = self._unit_cache.encoding
        contents = [Path(file_name).read_text(encoding=encoding) for file_name in self.resolve()]
        return banner + separator.join(contents)

    def _build_graph(self, namespace: dict[str, FileUnit]) -> DependencyGraph:
        graph = DependencyGraph()
        for unit in namespace.values():
            graph.add_unit(unit.name, unit.dependencies)
        graph.resolve()
        return graph

    def _load_namespace(self) -> dict[str, FileUnit]:
        """Load the entry units and the transitive closure of their requirements."""
        namespace: dict[str, FileUnit] = {}
        pending = deque(self._units)

        while pending:
            unit = pending.popleft()
            if unit.name in namespace:
                continue
            namespace[unit.name] = unit
            for req_name in unit.dependencies:
                for dep_unit in self._unit_cache.read_unit(req_name):
                    if dep_unit.name not in namespace:
                        pending.append(dep_unit)

        return namespace
