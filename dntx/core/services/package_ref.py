"""
Package identifier parsing.
"""

from __future__ import annotations

from dntx.core.models.tool import PackageReference


def parse_package_id(token: str) -> PackageReference:
    """Split ``name[@version]`` at the first ``@``.

    Everything after the first ``@`` is the version, verbatim —
    ``foo@1.0@beta`` is version ``1.0@beta``.  ``foo@`` yields an
    empty version string, which the installer treats as "latest".
    """
    name, sep, version = token.partition("@")
    return PackageReference(name=name, version=version if sep else None)
