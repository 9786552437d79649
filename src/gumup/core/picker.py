"""Pick - copy unit declarations between Gumup namespaces.

Picking runs in two steps:
1. `units`: every requirement is expanded against the picked namespace and
   each matched declaration is copied with its whole dependency closure.
2. `dependencies`: injected units are added afterwards, so they override
   same-named units pulled in by step 1.

Declarations are shared, not cloned. Everything is collected into a staging
dict first; the target namespace only changes when the whole pick succeeds.
"""

from collections.abc import Iterator, Mapping
from typing import Any

from pydantic import ValidationError

from ..dependency.matching import check_unit_name, expand
from ..models.settings import PickDependency, PickSettings
from ..observability.logger import get_logger
from ..utils.exceptions import CyclicDependencyError, OptionsError, ResolutionError
from .namespace import Declaration, Gumup
from .units import Produced

logger = get_logger(__name__)


def parse_settings(settings: Any) -> PickSettings:
    """
    Validate pick settings.

    Args:
        settings: PickSettings instance or a mapping of settings

    Returns:
        Validated PickSettings

    Raises:
        OptionsError: If the settings are malformed
    """
    if isinstance(settings, PickSettings):
        return settings
    try:
        return PickSettings.model_validate(settings)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc']) or 'settings'}: {err['msg']}"
            for err in e.errors()
        )
        raise OptionsError(f"Invalid pick settings: {details}") from e


def _source_namespace(settings: PickSettings) -> Gumup:
    if not isinstance(settings.namespace, Gumup):
        raise OptionsError("Invalid namespace in pick settings", option="namespace")
    return settings.namespace


def pick_declarations(target: Gumup, settings: Any) -> dict[str, Declaration]:
    """
    Collect the declarations a pick adds to the target namespace.

    Args:
        target: Namespace receiving the declarations (owner of injected units)
        settings: PickSettings instance or a mapping of settings

    Returns:
        Declarations keyed by their name in the target namespace

    Raises:
        OptionsError: If the settings are malformed
        ResolutionError: If a picked unit doesn't exist
        CyclicDependencyError: If the picked closure contains a cycle
    """
    parsed = parse_settings(settings)
    staged: dict[str, Declaration] = {}

    _pick_units(parsed, staged)
    _pick_dependencies(target, parsed, staged)

    logger.debug(
        "Pick settings resolved",
        units=len(parsed.units),
        injected=len(parsed.dependencies),
        declarations=len(staged),
    )

    return staged


def _pick_units(settings: PickSettings, staged: dict[str, Declaration]) -> None:
    # The namespace may be omitted when no units are picked
    if not settings.units:
        return

    source = _source_namespace(settings).declarations
    names = source.keys()
    picked: set[str] = set()

    for req_name in settings.units:
        for name in expand(req_name, names):
            _pick_unit(source, name, staged, picked)


def _requirements_of(source: Mapping[str, Declaration], name: str) -> Iterator[str]:
    names = source.keys()
    for req_name in source[name].requirements:
        yield from expand(req_name, names, exclude=name)


def _pick_unit(
    source: Mapping[str, Declaration],
    start: str,
    staged: dict[str, Declaration],
    picked: set[str],
) -> None:
    """Copy a declaration after its dependency closure (DFS, active path check)."""
    if start in picked:
        return

    path = [start]
    on_path = {start}
    stack = [_requirements_of(source, start)]

    while stack:
        for dep_name in stack[-1]:
            if dep_name in picked:
                continue
            if dep_name in on_path:
                raise CyclicDependencyError(
                    dep_name, cycle=path[path.index(dep_name) :] + [dep_name]
                )
            path.append(dep_name)
            on_path.add(dep_name)
            stack.append(_requirements_of(source, dep_name))
            break
        else:
            stack.pop()
            name = path.pop()
            on_path.discard(name)
            staged[name] = source[name]
            picked.add(name)


def _pick_dependencies(
    target: Gumup, settings: PickSettings, staged: dict[str, Declaration]
) -> None:
    for dependency in settings.dependencies:
        staged[dependency.name] = _inject(target, settings, dependency)


def _inject(target: Gumup, settings: PickSettings, dependency: PickDependency) -> Declaration:
    if not dependency.is_reference:
        value = dependency.implementation
        return Declaration(target, lambda units, unit: Produced(value))

    # Copy a single declaration under a new name, without its dependencies
    source = _source_namespace(settings)
    src_name = dependency.implementation
    if not check_unit_name(src_name):
        raise OptionsError(
            f"Invalid dependency implementation '{src_name}'", option="dependencies"
        )
    if src_name not in source:
        raise ResolutionError(f"Invalid dependency '{src_name}'")
    return source.declarations[src_name]
