"""Custom exceptions for gumup.

Exception Hierarchy:
-------------------
GumupError (base)
├── DeclarationError            # Invalid unit name, duplicate unit, bad action
├── ResolutionError             # Unknown dependency, blocked namespace path
│   └── CyclicDependencyError   # Unit (transitively) depends on itself
├── NamespaceInitializedError   # Registry is frozen (declaration + resolution)
└── OptionsError                # Malformed pick settings or configuration

Usage Guidelines:
----------------
1. Catch GumupError as a catch-all for gumup errors.

2. Graph errors are structural. Retrying the same resolve/init/pick call
   without changing the declarations raises the same error again.

3. Errors raised by unit actions are not wrapped; they propagate unchanged
   out of Gumup.init().
"""


class GumupError(Exception):
    """Base exception for all gumup errors."""

    pass


class DeclarationError(GumupError):
    """Raised when a unit or requirement declaration is invalid."""

    def __init__(self, message: str, unit_name: str | None = None) -> None:
        """
        Initialize DeclarationError.

        Args:
            message: Error message.
            unit_name: Optional name of the offending unit.
        """
        super().__init__(message)
        self.unit_name = unit_name


class ResolutionError(GumupError):
    """Raised when the dependency graph cannot be resolved or initialized."""

    pass


class CyclicDependencyError(ResolutionError):
    """
    Raised when a unit depends on itself directly or transitively.

    Example cycles:
    1. Unit `a` requires `a`
    2. Unit `a` requires `b`, unit `b` requires `a`
    3. Unit `app` requires `app.*` and `app.view` requires `app`

    The graph is rejected as a whole; no unit is processed.
    """

    def __init__(self, unit_name: str, cycle: list[str] | None = None) -> None:
        """
        Initialize CyclicDependencyError.

        Args:
            unit_name: Unit reached twice on the active traversal path.
            cycle: Units forming the cycle, starting and ending with unit_name.
        """
        message = f"Recursive dependency '{unit_name}'"
        if cycle:
            message += f" ({' -> '.join(cycle)})"
        super().__init__(message)
        self.unit_name = unit_name
        self.cycle = cycle or []


class NamespaceInitializedError(DeclarationError, ResolutionError):
    """Raised when a frozen namespace is modified or initialized again."""

    def __init__(self, message: str = "Gumup namespace has already been initialized") -> None:
        super().__init__(message)


class OptionsError(GumupError):
    """Raised when pick settings or configuration options are malformed."""

    def __init__(self, message: str, option: str | None = None) -> None:
        """
        Initialize OptionsError.

        Args:
            message: Error message.
            option: Optional name of the offending option.
        """
        super().__init__(message)
        self.option = option
