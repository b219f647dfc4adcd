from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from modfetch.exceptions import InvalidPathError

VERSION_SEPARATOR = "@"


class ModuleReference(BaseModel):
    """A module path with an optional version, as requested by the caller."""

    model_config = ConfigDict(frozen=True)

    path: str
    version: Optional[str] = None

    @field_validator("path")
    @classmethod
    def _check_path(cls, value: str) -> str:
        if not value:
            raise ValueError("module path must not be empty")
        if VERSION_SEPARATOR in value:
            raise ValueError(f"module path must not contain '{VERSION_SEPARATOR}'")
        return value

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and (not value or VERSION_SEPARATOR in value):
            raise ValueError(f"invalid module version {value!r}")
        return value

    @classmethod
    def parse(cls, text: str) -> "ModuleReference":
        """
        Parse ``path`` or ``path@version``.

        Raises:
            InvalidPathError: If the separator occurs more than once, or either
                side of it is empty
        """
        text = text.strip()
        if text.count(VERSION_SEPARATOR) > 1:
            raise InvalidPathError(text, f"more than one '{VERSION_SEPARATOR}'")
        path, sep, version = text.partition(VERSION_SEPARATOR)
        if not path:
            raise InvalidPathError(text, "empty module path")
        if sep and not version:
            raise InvalidPathError(text, "empty version")
        return cls(path=path, version=version or None)

    @property
    def has_version(self) -> bool:
        return self.version is not None

    def with_version(self, version: str) -> "ModuleReference":
        return ModuleReference(path=self.path, version=version)

    def __str__(self) -> str:
        if self.version is None:
            return self.path
        return f"{self.path}{VERSION_SEPARATOR}{self.version}"


@dataclass(frozen=True)
class ResolvedModule:
    """A module confirmed to exist in the cache, with its classification."""

    path: str
    version: str
    is_class_type: bool
    directory: Path

    def __post_init__(self):
        if not self.version:
            raise ValueError(f"resolved module {self.path} has no version")

    def __str__(self) -> str:
        return f"{self.path}{VERSION_SEPARATOR}{self.version}"
