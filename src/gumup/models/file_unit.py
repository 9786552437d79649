"""File unit model used in build mode."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..dependency.matching import check_require_name, check_unit_name


class FileUnit(BaseModel):
    """
    A unit declared by a source file header.

    Attributes:
        name: Unit name from the `@unit` directive
        dependencies: Requirements from `@require` directives, in file order
        file_name: Path of the source file, as given to the unit cache
    """

    model_config = ConfigDict(frozen=True)

    name: str
    dependencies: list[str] = Field(default_factory=list)
    file_name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate unit name syntax."""
        if not check_unit_name(v):
            raise ValueError(f"Invalid unit name '{v}'")
        return v

    @field_validator("dependencies")
    @classmethod
    def validate_dependencies(cls, v: list[str]) -> list[str]:
        """Validate requirement syntax."""
        for req_name in v:
            if not check_require_name(req_name):
                raise ValueError(f"Invalid require name '{req_name}'")
        return v
