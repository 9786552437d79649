"""Runtime mode: unit registry, initialization and picking."""

from .namespace import Declaration, Gumup, UnitAction
from .units import RETAINED, Produced, UnitResult, UnitTree, as_unit_result

__all__ = [
    "Declaration",
    "Gumup",
    "UnitAction",
    "Produced",
    "RETAINED",
    "UnitResult",
    "UnitTree",
    "as_unit_result",
]
