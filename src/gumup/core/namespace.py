"""Gumup namespace - unit registry and runtime initialization.

Overview:
--------
A Gumup namespace is a registry of unit declarations. A unit can be anything
a callable can build: modules, objects, constructors, constants. Each
declaration carries the requirements of the unit and an action that builds
it. Calling init() resolves the requirements into a dependency graph and runs
every action exactly once, dependencies first.

Example:
-------
    ns = Gumup()
    ns.unit("app.config", lambda units, unit: {"debug": True})
    ns.unit("app.service", build_service).require("app.config")
    ns.init()
    ns.units.app.service

Actions:
-------
An action is called as `action(units, unit)`:
- `units` is the root UnitTree of already initialized units
- `unit` is the placeholder UnitTree at the unit's own path

The action result decides what is stored at the unit's path:
- Produced(value), or any non-None value: `value` replaces the placeholder
- RETAINED, or None: the placeholder (populated in place) is kept

Lifecycle:
---------
Declarations may be added, extended with require() and picked from other
namespaces until init() begins. From then on the namespace is frozen, even if
initialization fails.
"""

from collections.abc import Callable, Mapping
from typing import Any

from ..dependency.graph import DependencyGraph
from ..dependency.matching import check_require_name, check_unit_name, split_name
from ..observability.logger import get_logger
from ..utils.exceptions import DeclarationError, NamespaceInitializedError, ResolutionError
from .units import Produced, UnitTree, as_unit_result

logger = get_logger(__name__)

UnitAction = Callable[[UnitTree, UnitTree], Any]


class Declaration:
    """
    Declaration of a single unit: its requirements and its action.

    A declaration belongs to the namespace that created it. It keeps that
    owner when picked into other namespaces, so require() is blocked as soon
    as the owner is initialized.
    """

    def __init__(self, owner: "Gumup", action: UnitAction) -> None:
        """
        Initialize Declaration.

        Args:
            owner: Namespace the declaration was created in
            action: Callable building the unit
        """
        self._owner = owner
        self._action = action
        self._requirements: list[str] = []

    @property
    def requirements(self) -> list[str]:
        """Declared requirements, in declaration order."""
        return list(self._requirements)

    @property
    def action(self) -> UnitAction:
        return self._action

    def require(self, req_name: str) -> "Declaration":
        """
        Add a dependency on another unit.

        Args:
            req_name: Unit name or mask. `foo.*` matches all the nested units
                of `foo` (but not `foo` itself); `*` matches every unit.

        Returns:
            Itself, for chaining

        Raises:
            NamespaceInitializedError: If the owning namespace is initialized
            DeclarationError: If `req_name` isn't a valid requirement
        """
        if self._owner.initialized:
            raise NamespaceInitializedError()
        if not check_require_name(req_name):
            raise DeclarationError(f"Invalid require name '{req_name}'")
        self._requirements.append(req_name)
        return self

    def initialize(self, units: UnitTree, name: str) -> None:
        """
        Run the action and store its result in the namespace tree.

        Args:
            units: Root of the namespace tree
            name: Unit name the declaration is registered under

        Raises:
            ResolutionError: If the unit's path is occupied by a non-container
        """
        container_path, segment = split_name(name)
        container = units.make_path(container_path)

        placeholder = container.get(segment)
        if placeholder is None:
            placeholder = UnitTree()
            container[segment] = placeholder
        elif not isinstance(placeholder, UnitTree):
            raise ResolutionError(
                f"Can't create unit '{name}' because there is an object on this path"
            )

        result = as_unit_result(self._action(units, placeholder))
        if isinstance(result, Produced):
            container[segment] = result.value

    def __repr__(self) -> str:
        return f"Declaration(requirements={self._requirements!r})"


class Gumup:
    """
    Registry of unit declarations and the tree of initialized units.

    Attributes:
        units: Tree of initialized units, filled by init()
    """

    def __init__(self) -> None:
        self._declarations: dict[str, Declaration] = {}
        self._initialized = False
        self.units = UnitTree()

    @property
    def initialized(self) -> bool:
        """True once init() has begun."""
        return self._initialized

    @property
    def declarations(self) -> Mapping[str, Declaration]:
        """Read-only view of the declarations, keyed by unit name."""
        return dict(self._declarations)

    def __contains__(self, name: object) -> bool:
        return name in self._declarations

    def __len__(self) -> int:
        return len(self._declarations)

    def unit(self, name: str, action: UnitAction) -> Declaration:
        """
        Add a unit declaration.

        Args:
            name: Unit name
            action: Callable `action(units, unit)` building the unit

        Returns:
            The declaration, to chain require() calls on

        Raises:
            NamespaceInitializedError: If the namespace is initialized
            DeclarationError: If the name is invalid or already declared, or
                the action isn't callable
        """
        self._ensure_mutable()
        if not check_unit_name(name):
            raise DeclarationError(f"Invalid unit name '{name}'", unit_name=name)
        if not callable(action):
            raise DeclarationError(f"Invalid implementation of '{name}' unit", unit_name=name)
        if name in self._declarations:
            raise DeclarationError(f"Unit '{name}' has already been declared", unit_name=name)

        declaration = Declaration(self, action)
        self._declarations[name] = declaration
        return declaration

    def pick(self, settings: Any) -> "Gumup":
        """
        Copy unit declarations from another namespace, with their dependencies.

        Args:
            settings: PickSettings or a mapping with `namespace`, `units`
                and `dependencies` keys

        Returns:
            Itself, for chaining

        Raises:
            NamespaceInitializedError: If the namespace is initialized
            OptionsError: If the settings are malformed
            ResolutionError: If a picked unit or its dependency doesn't exist
            CyclicDependencyError: If the picked units form a cycle
        """
        from .picker import pick_declarations

        self._ensure_mutable()
        picked = pick_declarations(self, settings)
        self._declarations.update(picked)

        return self

    def build_graph(self) -> DependencyGraph:
        """
        Build the dependency graph of the declared units.

        Returns:
            Unresolved DependencyGraph with one node per declaration
        """
        graph = DependencyGraph()
        for name, declaration in self._declarations.items():
            graph.add_unit(name, declaration.requirements)
        return graph

    def init(self) -> None:
        """
        Initialize the declared units in dependency order.

        The whole graph is resolved before the first action runs, so an
        invalid or cyclic graph initializes nothing. An action raising an
        error aborts initialization; the error propagates unchanged.

        Raises:
            NamespaceInitializedError: If init() was already called
            ResolutionError: If a requirement can't be satisfied or a unit
                path is blocked
            CyclicDependencyError: If a unit depends on itself
        """
        self._ensure_mutable()
        self._initialized = True

        graph = self.build_graph()
        graph.resolve()

        for name in graph.topological_sort(graph.roots):
            self._declarations[name].initialize(self.units, name)
            logger.debug("Unit initialized", unit=name)

        logger.debug("Gumup namespace initialized", units=len(self._declarations))

    def _ensure_mutable(self) -> None:
        if self._initialized:
            raise NamespaceInitializedError()
