"""
Core subprocess runner for toolchain commands.

The SINGLE PLACE where ``subprocess.run`` is called with captured
output.  The launched tool itself never goes through here — its
stdio is inherited (see ``launcher``).
"""

from __future__ import annotations

import logging
import subprocess
import time
from typing import Any

logger = logging.getLogger(__name__)


def run_captured(
    cmd: list[str],
    *,
    env: dict[str, str] | None = None,
    cwd: str | None = None,
) -> dict[str, Any]:
    """Run a command to completion and capture its output.

    There is no timeout: toolchain commands are expected to finish on
    their own (package restores can legitimately take minutes).

    Args:
        cmd: Argument vector, never a shell string.
        env: Full environment for the child (default: inherit).
        cwd: Working directory for the command.

    Returns:
        ``{"ok": True, "returncode": 0, "stdout": "...", "stderr": "...",
        "elapsed_ms": N}`` when the command exits zero;
        ``{"ok": False, "returncode": N, "error": "...", ...}`` when it
        exits non-zero;
        ``{"ok": False, "returncode": None, "error": "..."}`` when it
        could not be started at all.
    """
    logger.debug("Executing: %s", cmd)
    start = time.monotonic()

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            env=env,
            cwd=cwd,
        )
    except OSError as e:
        logger.debug("Could not start %s: %s", cmd[0], e)
        return {
            "ok": False,
            "returncode": None,
            "stdout": "",
            "stderr": "",
            "error": f"Could not start {cmd[0]}: {e}",
        }

    elapsed_ms = int((time.monotonic() - start) * 1000)
    stdout = result.stdout or ""
    stderr = result.stderr or ""
    logger.debug("%s exited %d after %dms", cmd[0], result.returncode, elapsed_ms)

    if result.returncode == 0:
        return {
            "ok": True,
            "returncode": 0,
            "stdout": stdout,
            "stderr": stderr,
            "elapsed_ms": elapsed_ms,
        }

    return {
        "ok": False,
        "returncode": result.returncode,
        "stdout": stdout,
        "stderr": stderr,
        "error": f"Command failed (exit {result.returncode})",
        "elapsed_ms": elapsed_ms,
    }
