"""gumup - name-based unit declaration and dependency resolution."""

from .build import BuildNamespace, UnitCache
from .cli import app
from .config import GumupConfig
from .constants import VERSION
from .core import RETAINED, Declaration, Gumup, Produced, UnitTree
from .dependency import DependencyGraph, expand
from .utils.exceptions import (
    CyclicDependencyError,
    DeclarationError,
    GumupError,
    NamespaceInitializedError,
    OptionsError,
    ResolutionError,
)

__version__ = VERSION

# Process-wide default namespace
gumup = Gumup()

__all__ = [
    "app",
    "gumup",
    "BuildNamespace",
    "CyclicDependencyError",
    "Declaration",
    "DeclarationError",
    "DependencyGraph",
    "Gumup",
    "GumupConfig",
    "GumupError",
    "NamespaceInitializedError",
    "OptionsError",
    "Produced",
    "RETAINED",
    "ResolutionError",
    "UnitCache",
    "UnitTree",
    "expand",
]
