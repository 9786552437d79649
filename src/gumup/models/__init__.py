"""Data models for gumup."""

from .file_unit import FileUnit
from .settings import PickDependency, PickSettings

__all__ = [
    "FileUnit",
    "PickDependency",
    "PickSettings",
]
