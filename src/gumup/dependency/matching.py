"""Name validation and requirement matching.

A requirement is one of:
- an exact unit name (`app.model`)
- a prefix wildcard (`app.*`) matching every unit nested under `app`,
  but never `app` itself
- the global wildcard (`*`) matching every unit

Matching is a pure function over a snapshot of declared names, so the result
never depends on the order in which units were declared.
"""

from collections.abc import Collection

from ..constants import (
    GLOBAL_WILDCARD,
    NAME_SEPARATOR,
    PREFIX_WILDCARD_SUFFIX,
    REQUIRE_NAME_PATTERN,
    UNIT_NAME_PATTERN,
)
from ..utils.exceptions import ResolutionError


def check_unit_name(name: object) -> bool:
    """Return True if `name` is a syntactically valid unit name."""
    return isinstance(name, str) and bool(UNIT_NAME_PATTERN.fullmatch(name))


def check_require_name(name: object) -> bool:
    """Return True if `name` is a syntactically valid requirement."""
    return isinstance(name, str) and bool(REQUIRE_NAME_PATTERN.fullmatch(name))


def is_wildcard(requirement: str) -> bool:
    """Return True for `*` and `foo.*` requirements."""
    return requirement == GLOBAL_WILDCARD or requirement.endswith(PREFIX_WILDCARD_SUFFIX)


def split_name(name: str) -> tuple[str, str]:
    """
    Split a unit name into its container path and its last segment.

    Args:
        name: Unit name, e.g. "a.b.c"

    Returns:
        Tuple of (container path, last segment), e.g. ("a.b", "c").
        The container path is empty for top-level units.
    """
    container, _, segment = name.rpartition(NAME_SEPARATOR)
    return container, segment


def matches(requirement: str, name: str) -> bool:
    """
    Check whether a single unit name satisfies a requirement.

    Args:
        requirement: Exact name, prefix wildcard or global wildcard
        name: Declared unit name

    Returns:
        True if `name` is matched by `requirement`
    """
    if requirement == GLOBAL_WILDCARD:
        return True
    if requirement.endswith(PREFIX_WILDCARD_SUFFIX):
        # Keep the trailing dot so `foo.*` matches `foo.bar` but not `foo` or `food`
        return name.startswith(requirement[:-1])
    return name == requirement


def expand(requirement: str, names: Collection[str], exclude: str | None = None) -> list[str]:
    """
    Expand a requirement into the concrete unit names it refers to.

    Wildcards may expand to nothing. An exact requirement must match a
    declared name, otherwise resolution fails.

    Args:
        requirement: Requirement to expand
        names: Snapshot of all declared unit names (order is preserved).
            Dict keys views make the exact lookup constant time.
        exclude: Name to leave out of wildcard matches (the requiring unit)

    Returns:
        Matched names in snapshot order

    Raises:
        ResolutionError: If an exact requirement matches no declared name
    """
    if is_wildcard(requirement):
        return [name for name in names if name != exclude and matches(requirement, name)]

    if requirement in names:
        return [requirement]

    raise ResolutionError(f"Invalid dependency '{requirement}'")
