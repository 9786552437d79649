"""Utility functions and exceptions."""

from .exceptions import (
    CyclicDependencyError,
    DeclarationError,
    GumupError,
    NamespaceInitializedError,
    OptionsError,
    ResolutionError,
)

__all__ = [
    "GumupError",
    "DeclarationError",
    "ResolutionError",
    "CyclicDependencyError",
    "NamespaceInitializedError",
    "OptionsError",
]
