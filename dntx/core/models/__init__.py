"""
Domain models — Pydantic types for a single launch.

All models are re-exported here for convenient access:

    from dntx.core.models import PackageReference, InstalledTool
"""

from dntx.core.models.tool import (
    InstalledTool,
    PackageReference,
    ScratchDirectory,
    ToolInvocation,
)

__all__ = [
    "InstalledTool",
    "PackageReference",
    "ScratchDirectory",
    "ToolInvocation",
]
