"""Namespace tree and unit action results.

The namespace tree holds initialized units by their dotted names. Container
segments are UnitTree objects, so `units.app.model` and
`units.get_path("app.model")` reach the same value.
"""

from collections.abc import Iterator, MutableMapping
from dataclasses import dataclass
from typing import Any

from ..constants import NAME_SEPARATOR
from ..utils.exceptions import ResolutionError


class UnitTree(MutableMapping[str, Any]):
    """
    Mutable mapping of path segments to nested trees or produced values.

    Entries are also reachable as attributes, so a unit action can populate
    its placeholder with `unit.helper = ...` and dependents can read it back
    as `units.app.helper`.

    Item access is the canonical path. Segments named like a UnitTree method
    (`items`, `get`, `get_path`, ...) are only reachable as items, and
    assigning them as attributes raises AttributeError.
    """

    def __init__(self, **entries: Any) -> None:
        object.__setattr__(self, "_entries", dict(entries))

    def __getitem__(self, key: str) -> Any:
        return self._entries[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._entries[key] = value

    def __delitem__(self, key: str) -> None:
        del self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__") or name == "_entries":
            raise AttributeError(name)
        try:
            return self._entries[name]
        except KeyError:
            raise AttributeError(name) from None

    def __setattr__(self, name: str, value: Any) -> None:
        if hasattr(type(self), name):
            raise AttributeError(
                f"'{name}' is a UnitTree attribute, assign it as unit['{name}'] instead"
            )
        self._entries[name] = value

    def __delattr__(self, name: str) -> None:
        try:
            del self._entries[name]
        except KeyError:
            raise AttributeError(name) from None

    def __repr__(self) -> str:
        return f"UnitTree({self._entries!r})"

    def get_path(self, name: str, default: Any = None) -> Any:
        """
        Look up a value by its dotted unit name.

        Args:
            name: Dotted unit name, e.g. "app.model.user"
            default: Value returned when any segment is missing

        Returns:
            The stored value or `default`
        """
        node: Any = self
        for segment in name.split(NAME_SEPARATOR):
            if not isinstance(node, UnitTree) or segment not in node:
                return default
            node = node[segment]
        return node

    def make_path(self, name: str) -> "UnitTree":
        """
        Create (or reuse) the containers along a dotted path.

        Args:
            name: Dotted container path; empty string means this tree

        Returns:
            The innermost container

        Raises:
            ResolutionError: If a path segment holds a non-container value
        """
        node = self
        if not name:
            return node

        path: list[str] = []
        for segment in name.split(NAME_SEPARATOR):
            path.append(segment)
            child = node.get(segment)
            if child is None:
                child = UnitTree()
                node[segment] = child
            elif not isinstance(child, UnitTree):
                raise ResolutionError(
                    f"Can't init unit '{name}' because path element "
                    f"'{NAME_SEPARATOR.join(path)}' isn't a container"
                )
            node = child
        return node


@dataclass(frozen=True)
class Produced:
    """Action result carrying the value stored at the unit's path."""

    value: Any


class _Retained:
    """Action result keeping the unit's placeholder tree as its value."""

    _instance: "_Retained | None" = None

    def __new__(cls) -> "_Retained":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "RETAINED"

    def __bool__(self) -> bool:
        return False


RETAINED = _Retained()

UnitResult = Produced | _Retained


def as_unit_result(value: Any) -> UnitResult:
    """
    Normalize an action's return value into an explicit UnitResult.

    Args:
        value: Whatever the action returned

    Returns:
        `value` itself if it already is a UnitResult, RETAINED for None,
        otherwise Produced(value)
    """
    if isinstance(value, (Produced, _Retained)):
        return value
    if value is None:
        return RETAINED
    return Produced(value)
