"""Pick settings models.

Validated with Pydantic so that malformed settings fail before any
declaration is copied.

Example:
    {
        "namespace": library,
        "units": ["app.model.*", "app.view"],
        "dependencies": [
            {"name": "app.config", "implementation": {"debug": True}},
            {"name": "app.store", "implementation": "lib.memory_store"},
        ],
    }
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..dependency.matching import check_require_name, check_unit_name


class PickDependency(BaseModel):
    """
    Dependency injected by Gumup.pick().

    A string implementation names a unit of the picked namespace to copy
    under `name`. Any other implementation is injected as a constant.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    name: str
    implementation: Any = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate the injected unit name."""
        if not check_unit_name(v):
            raise ValueError(f"Invalid dependency name '{v}' in pick settings")
        return v

    @property
    def is_reference(self) -> bool:
        """True if the implementation names a unit of the picked namespace."""
        return isinstance(self.implementation, str)


class PickSettings(BaseModel):
    """Settings accepted by Gumup.pick()."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    namespace: Any = None
    units: list[str] = Field(default_factory=list)
    dependencies: list[PickDependency] = Field(default_factory=list)

    @field_validator("units")
    @classmethod
    def validate_units(cls, v: list[str]) -> list[str]:
        """Validate requirement syntax of every picked unit."""
        for req_name in v:
            if not check_require_name(req_name):
                raise ValueError(f"Invalid unit name '{req_name}' in pick settings")
        return v
