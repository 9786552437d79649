"""Dependency management for unit ordering."""

from .graph import DependencyGraph, DependencyNode
from .matching import check_require_name, check_unit_name, expand, matches

__all__ = [
    "DependencyGraph",
    "DependencyNode",
    "check_require_name",
    "check_unit_name",
    "expand",
    "matches",
]
