"""Build mode: ordering unit files for concatenation."""

from .builder import BuildNamespace
from .unit_cache import UnitCache, parse_header

__all__ = [
    "BuildNamespace",
    "UnitCache",
    "parse_header",
]
