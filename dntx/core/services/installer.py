"""
Installer — ``dotnet tool install`` into the scratch directory.

The hard part is not the install but finding out what was installed:
the package id and the command name are unrelated (``dotnet-ef``
installs ``dotnet-ef``, ``Amazon.Lambda.Tools`` installs
``dotnet-lambda``), and the SDK only sometimes says which it is.

Resolution order:
    1. the scratch directory holds exactly one entry
    2. exactly one entry survives the documentation/metadata filter
    3. the "invoke the tool using the following command" line on stdout

A name is returned only after the file has been found on disk and
is executable.  Anything else is a ``ResolutionError``.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Sequence
from pathlib import Path

from dntx.core.errors import InstallError, ResolutionError
from dntx.core.models.tool import InstalledTool, PackageReference, ScratchDirectory
from dntx.core.services.launcher import executable_suffix
from dntx.core.services.subprocess_runner import run_captured

logger = logging.getLogger(__name__)

DOC_EXTENSIONS = (".md", ".txt", ".json", ".config")
DOC_NAME_PREFIXES = ("readme", "license", "notice")

_COMMAND_LINE_RE = re.compile(
    r"(?:You can invoke the tool using the following command:"
    r"|has the following commands:)\s+(\S+)",
    re.IGNORECASE,
)


def build_install_command(
    ref: PackageReference,
    scratch: ScratchDirectory,
    *,
    toolchain: str = "dotnet",
    sources: Sequence[str] = (),
) -> list[str]:
    """Argument vector for ``dotnet tool install --tool-path``."""
    cmd = [toolchain, "tool", "install", "--tool-path", str(scratch.path), ref.name]
    if ref.version:
        cmd += ["--version", ref.version]
    for source in sources:
        cmd += ["--add-source", source]
    return cmd


def install_tool(
    ref: PackageReference,
    scratch: ScratchDirectory,
    *,
    toolchain: str = "dotnet",
    sources: Sequence[str] = (),
    env: dict[str, str] | None = None,
    platform: str | None = None,
) -> InstalledTool:
    """Install ``ref`` into ``scratch`` and identify its executable.

    Raises:
        InstallError: If the install command fails.  Not retried.
        ResolutionError: If the install succeeded but the executable
            can't be identified.
    """
    version_note = f" (version {ref.version})" if ref.version else ""
    logger.info("📦 Installing %s%s...", ref.name, version_note)

    cmd = build_install_command(ref, scratch, toolchain=toolchain, sources=sources)
    result = run_captured(cmd, env=env)

    if not result["ok"]:
        diagnostics = (result["stderr"] or result["stdout"]).strip() or result["error"]
        logger.error("❌ Failed to install tool: %s", diagnostics)
        raise InstallError(
            f"Failed to install {ref}: {result['error']}",
            diagnostic_output=diagnostics,
        )

    # Exit code is authoritative; stderr text alone is only a warning
    warnings = result["stderr"].strip()
    if warnings:
        logger.warning("⚠️  Warning during tool installation: %s", warnings)

    name = resolve_executable(scratch, result["stdout"], platform=platform)
    logger.info("✅ Tool installed successfully (%s)", name)
    return InstalledTool(executable_name=name)


def resolve_executable(
    scratch: ScratchDirectory,
    install_output: str,
    *,
    platform: str | None = None,
) -> str:
    """Work out the installed command name; see the module docstring.

    Raises:
        ResolutionError: carrying ``install_output`` for diagnosis.
    """
    suffix = executable_suffix(platform)

    candidate = _from_directory(scratch, suffix)
    if candidate and _is_executable(scratch.path, candidate, suffix):
        return candidate
    if candidate:
        logger.debug("%s is not an executable file, trying installer output", candidate)

    candidate = command_from_output(install_output)
    if candidate and _is_executable(scratch.path, candidate, suffix):
        return candidate

    raise ResolutionError(
        "Could not determine tool command name. "
        f"Installation output: {install_output.strip()}",
        diagnostic_output=install_output,
    )


def is_metadata_entry(name: str) -> bool:
    """Whether a scratch-directory entry is docs/metadata, not a command.

    Hidden entries are included: the SDK keeps its package cache in
    ``.store`` next to the command shims.
    """
    lowered = name.lower()
    return (
        lowered.startswith(".")
        or lowered.endswith(DOC_EXTENSIONS)
        or lowered.startswith(DOC_NAME_PREFIXES)
    )


def command_from_output(install_output: str) -> str | None:
    """Command name announced by ``dotnet tool install``, if any."""
    match = _COMMAND_LINE_RE.search(install_output or "")
    if not match:
        return None
    # "has the following commands: a, b" lists several; take the first
    return match.group(1).rstrip(",")


def _from_directory(scratch: ScratchDirectory, suffix: str) -> str | None:
    try:
        entries = scratch.entries()
    except OSError as e:
        logger.warning(
            "Could not inspect tool directory: %s, falling back to output parsing.", e,
        )
        return None

    logger.debug("Scratch entries: %s", entries)

    if len(entries) == 1:
        return _strip_suffix(entries[0], suffix)

    candidates = [e for e in entries if not is_metadata_entry(e)]
    if len(candidates) == 1:
        return _strip_suffix(candidates[0], suffix)

    return None


def _strip_suffix(name: str, suffix: str) -> str:
    if suffix and name.lower().endswith(suffix):
        return name[: -len(suffix)]
    return name


def _is_executable(directory: Path, name: str, suffix: str) -> bool:
    path = directory / f"{name}{suffix}"
    if not path.is_file():
        return False
    if suffix:
        # Windows has no execute bit; the .exe suffix is the marker
        return True
    return os.access(path, os.X_OK)
