"""Unit cache - reads file units and locates them by unit name.

A file unit is a source file whose header declares one unit and its
requirements with directives, one per line, behind any comment prefix:

    // @unit app.view
    // @require app.model.*
    // @require lib.dom

Unit names map to files under the unit paths:

    app.view   ->  <unit path>/app/view.js
    app.*      ->  every *.js file below <unit path>/app/
    *          ->  every *.js file below <unit path>/
"""

from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from ..constants import (
    DEFAULT_ENCODING,
    DEFAULT_SUFFIX,
    GLOBAL_WILDCARD,
    HEADER_DIRECTIVE_PATTERN,
    NAME_SEPARATOR,
    PREFIX_WILDCARD_SUFFIX,
)
from ..dependency.matching import check_require_name, matches
from ..models.file_unit import FileUnit
from ..observability.logger import get_logger
from ..utils.exceptions import DeclarationError, ResolutionError

logger = get_logger(__name__)


def parse_header(content: str, file_name: str) -> FileUnit:
    """
    Parse the unit directives of a source file.

    Args:
        content: File content
        file_name: File name used in the FileUnit and in error messages

    Returns:
        FileUnit declared by the file

    Raises:
        DeclarationError: If the file declares no unit, several units, or
            invalid names
    """
    unit_names: list[str] = []
    dependencies: list[str] = []

    for match in HEADER_DIRECTIVE_PATTERN.finditer(content):
        directive, value = match.group(1), match.group(2)
        if directive == "unit":
            unit_names.append(value)
        else:
            dependencies.append(value)

    if not unit_names:
        raise DeclarationError(f"No unit declaration in '{file_name}'")
    if len(unit_names) > 1:
        raise DeclarationError(
            f"Multiple unit declarations in '{file_name}': {', '.join(unit_names)}"
        )

    try:
        return FileUnit(name=unit_names[0], dependencies=dependencies, file_name=file_name)
    except ValidationError as e:
        messages = "; ".join(err["msg"] for err in e.errors())
        raise DeclarationError(f"{messages} in '{file_name}'", unit_name=unit_names[0]) from e


class UnitCache:
    """
    Cache of file units read from disk.

    Files are read once and cached by their resolved path. Unit names are
    unique across the cache: two files declaring the same unit are rejected.
    """

    def __init__(
        self,
        unit_paths: Iterable[str | Path] = (),
        suffix: str = DEFAULT_SUFFIX,
        encoding: str = DEFAULT_ENCODING,
    ) -> None:
        """
        Initialize UnitCache.

        Args:
            unit_paths: Directories searched by read_unit(), in priority order
            suffix: Suffix of unit files
            encoding: Encoding used to read unit files
        """
        self.unit_paths = [Path(p) for p in unit_paths]
        self.suffix = suffix
        self.encoding = encoding
        self._by_path: dict[Path, FileUnit] = {}
        self._by_name: dict[str, FileUnit] = {}

    def __getitem__(self, name: str) -> FileUnit:
        """Get a cached unit by name."""
        return self._by_name[name]

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def read_file(self, file_name: str | Path) -> FileUnit:
        """
        Read a unit file, or return it from the cache.

        Args:
            file_name: Path of the unit file

        Returns:
            FileUnit declared by the file

        Raises:
            FileNotFoundError: If the file doesn't exist
            DeclarationError: If the file can't be decoded, the header is invalid,
                or the unit name is already declared by another file
        """
        path = Path(file_name)
        key = path.resolve()
        cached = self._by_path.get(key)
        if cached is not None:
            return cached

        if not path.is_file():
            raise FileNotFoundError(f"Unit file not found: {path}")

        try:
            content = path.read_text(encoding=self.encoding)
        except UnicodeDecodeError as e:
            raise DeclarationError(f"Can't read '{path}' as {self.encoding}: {e}") from e

        unit = parse_header(content, str(path))

        existing = self._by_name.get(unit.name)
        if existing is not None:
            raise DeclarationError(
                f"Unit '{unit.name}' has already been declared in '{existing.file_name}'",
                unit_name=unit.name,
            )

        self._by_path[key] = unit
        self._by_name[unit.name] = unit

        logger.debug(
            "Read unit file",
            unit=unit.name,
            file=unit.file_name,
            dependencies=len(unit.dependencies),
        )

        return unit

    def read_unit(self, req_name: str) -> list[FileUnit]:
        """
        Locate the units matched by a requirement.

        Args:
            req_name: Exact unit name, `foo.*` or `*`

        Returns:
            Matched units. Wildcards may match nothing; an exact name
            matches exactly one unit.

        Raises:
            DeclarationError: If `req_name` is invalid, or a file at the
                expected location declares a different unit
            ResolutionError: If an exact unit can't be found
        """
        if not check_require_name(req_name):
            raise DeclarationError(f"Invalid require name '{req_name}'")

        if req_name == GLOBAL_WILDCARD or req_name.endswith(PREFIX_WILDCARD_SUFFIX):
            return self._read_wildcard(req_name)

        cached = self._by_name.get(req_name)
        if cached is not None:
            return [cached]

        relative = Path(*req_name.split(NAME_SEPARATOR)).with_suffix(self.suffix)
        for unit_path in self.unit_paths:
            candidate = unit_path / relative
            if candidate.is_file():
                unit = self.read_file(candidate)
                if unit.name != req_name:
                    raise DeclarationError(
                        f"File '{candidate}' declares unit '{unit.name}' instead of '{req_name}'",
                        unit_name=unit.name,
                    )
                return [unit]

        raise ResolutionError(f"Invalid dependency '{req_name}'")

    def _read_wildcard(self, req_name: str) -> list[FileUnit]:
        if req_name == GLOBAL_WILDCARD:
            relative = Path()
        else:
            relative = Path(*req_name[: -len(PREFIX_WILDCARD_SUFFIX)].split(NAME_SEPARATOR))

        for unit_path in self.unit_paths:
            directory = unit_path / relative
            if directory.is_dir():
                for candidate in sorted(directory.rglob(f"*{self.suffix}")):
                    if candidate.is_file():
                        self.read_file(candidate)

        # Files loaded earlier from other locations may match as well
        return [unit for name, unit in self._by_name.items() if matches(req_name, name)]
