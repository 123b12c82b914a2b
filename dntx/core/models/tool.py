"""
Tool models — the values handed from one launch phase to the next.

All of them live for a single invocation and are immutable once built.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class PackageReference(BaseModel):
    """A NuGet package id with an optional explicit version.

    Built by the identifier parser from the ``name[@version]`` CLI token.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    version: str | None = None     # None = no "@" in the token

    def __str__(self) -> str:
        if self.version is None:
            return self.name
        return f"{self.name}@{self.version}"


class ScratchDirectory(BaseModel):
    """The per-run directory the tool is installed into."""

    model_config = ConfigDict(frozen=True)

    path: Path

    def entries(self) -> list[str]:
        """Names of the immediate entries, sorted."""
        return sorted(p.name for p in self.path.iterdir())


class InstalledTool(BaseModel):
    """The runnable file the installer left in the scratch directory.

    ``executable_name`` is the logical name — the platform suffix
    (``.exe`` on Windows) is added back by the launcher.
    """

    model_config = ConfigDict(frozen=True)

    executable_name: str


class ToolInvocation(BaseModel):
    """One spawn of the installed tool."""

    model_config = ConfigDict(frozen=True)

    executable_path: str
    arguments: list[str] = Field(default_factory=list)

    @property
    def argv(self) -> list[str]:
        return [self.executable_path, *self.arguments]
