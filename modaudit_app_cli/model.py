"""Module data model.

ModuleReference identifies a dependency; Module pairs a reference with the
metadata reported by `go mod download -json`.
"""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class ModuleReference(BaseModel):
    """A Go module path plus version, or a local filesystem path."""

    model_config = ConfigDict(frozen=True)

    path: str
    version: str = ""

    @classmethod
    def parse(cls, text: str) -> ModuleReference:
        """Parse ``path@version`` (or a bare path) into a reference.

        Raises:
            ValueError: Empty input
        """
        text = text.strip()
        if not text:
            raise ValueError("Module reference must not be empty")

        if "@" in text:
            path, version = text.rsplit("@", 1)
            return cls(path=path, version=version)
        return cls(path=text)

    def is_local(self) -> bool:
        """Check if the reference points at a filesystem path."""
        return self.path.startswith(".") or self.path.startswith("/")

    def __str__(self) -> str:
        if self.is_local() or not self.version:
            return self.path
        return f"{self.path}@{self.version}"


class Module(BaseModel):
    """A resolved module as reported by the module tool.

    Field aliases match the JSON keys emitted by `go mod download -json`.
    Local modules carry only path and version.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    path: str = Field(default="", alias="Path")
    version: str = Field(default="", alias="Version")
    dir: str = Field(default="", alias="Dir")
    sum: str = Field(default="", alias="Sum")
    go_mod_sum: str = Field(default="", alias="GoModSum")
    info: str = Field(default="", alias="Info")
    go_mod: str = Field(default="", alias="GoMod")
    zip: str = Field(default="", alias="Zip")
    error: str = Field(default="", alias="Error")

    @classmethod
    def local(cls, ref: ModuleReference) -> Module:
        """Build a module for a local reference; nothing is fetched for it."""
        return cls(path=ref.path, version=ref.version)

    @property
    def reference(self) -> ModuleReference:
        return ModuleReference(path=self.path, version=self.version)
