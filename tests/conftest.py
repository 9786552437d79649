"""Pytest configuration and shared fixtures.

Fixtures are organized by category:
- Runtime fixtures: empty namespaces and recording actions
- Build fixtures: unit file trees on disk
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from gumup.build import BuildNamespace, UnitCache
from gumup.core import Gumup

# =============================================================================
# Runtime Fixtures
# =============================================================================


@pytest.fixture
def namespace() -> Gumup:
    """Create an empty Gumup namespace."""
    return Gumup()


@pytest.fixture
def calls() -> list[str]:
    """Shared list recording the order in which unit actions ran."""
    return []


@pytest.fixture
def recorder(calls: list[str]) -> Callable[..., Callable[[Any, Any], Any]]:
    """Build actions that record their unit name and return a value.

    Example:
        def test_something(namespace, recorder, calls):
            namespace.unit("a", recorder("a"))
            namespace.init()
            assert calls == ["a"]
    """

    def make(name: str, value: Any = None) -> Callable[[Any, Any], Any]:
        def action(units: Any, unit: Any) -> Any:
            calls.append(name)
            return value

        return action

    return make


# =============================================================================
# Build Fixtures
# =============================================================================


def write_unit(
    root: Path,
    name: str,
    requires: list[str] | None = None,
    body: str = "",
    comment: str = "//",
) -> Path:
    """Write a unit file at the location its name maps to."""
    path = root / Path(*name.split(".")).with_suffix(".js")
    path.parent.mkdir(parents=True, exist_ok=True)

    header = [f"{comment} @unit {name}"]
    header.extend(f"{comment} @require {req}" for req in requires or [])
    path.write_text("\n".join(header) + "\n" + (body or f"var {name.replace('.', '_')};\n"))
    return path


@pytest.fixture
def make_unit() -> Callable[..., Path]:
    """Expose write_unit to tests."""
    return write_unit


@pytest.fixture
def unit_dir(tmp_path: Path) -> Path:
    """Create a small unit tree.

    Layout:
        lib.core
        lib.dom            -> lib.core
        app.model.user     -> lib.core
        app.model.post     -> app.model.user
        app.main           -> app.model.*, lib.dom
    """
    root = tmp_path / "src"
    write_unit(root, "lib.core")
    write_unit(root, "lib.dom", ["lib.core"])
    write_unit(root, "app.model.user", ["lib.core"])
    write_unit(root, "app.model.post", ["app.model.user"])
    write_unit(root, "app.main", ["app.model.*", "lib.dom"])
    return root


@pytest.fixture
def unit_cache(unit_dir: Path) -> UnitCache:
    """Unit cache looking up units in unit_dir."""
    return UnitCache([unit_dir])


@pytest.fixture
def build_namespace(unit_cache: UnitCache) -> BuildNamespace:
    """Empty build namespace backed by unit_cache."""
    return BuildNamespace(unit_cache)
