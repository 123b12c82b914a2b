"""
Preflight — make sure the .NET SDK answers before anything else runs.
"""

from __future__ import annotations

import logging

from dntx.core.errors import ToolchainMissing
from dntx.core.services.subprocess_runner import run_captured

logger = logging.getLogger(__name__)

DOWNLOAD_URL = "https://dotnet.microsoft.com/download"


def check_toolchain(
    toolchain: str = "dotnet",
    *,
    env: dict[str, str] | None = None,
) -> bool:
    """Probe ``<toolchain> --version``.

    Returns:
        True when the probe exits zero.

    Raises:
        ToolchainMissing: If the probe can't be started or exits non-zero.
    """
    result = run_captured([toolchain, "--version"], env=env)
    if not result["ok"]:
        logger.debug("Toolchain probe failed: %s", result["error"])
        raise ToolchainMissing(
            ".NET SDK is not installed or not found in PATH",
            hint=f"Please install the .NET SDK from: {DOWNLOAD_URL}",
        )

    logger.debug(".NET SDK %s", result["stdout"].strip() or "(no version output)")
    return True
