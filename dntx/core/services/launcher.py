"""
Launcher — run the installed tool as if the user had typed its name.

stdin/stdout/stderr are inherited, the argument vector is passed
through untouched (no shell), and the child's exit code becomes ours.
Ctrl-C belongs to the tool while it runs: the terminal delivers SIGINT
to the whole foreground process group, so dntx ignores it and waits
for the tool to finish on its own terms.
"""

from __future__ import annotations

import logging
import signal
import subprocess
import sys
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from dntx.core.errors import ExecutionError
from dntx.core.models.tool import InstalledTool, ScratchDirectory, ToolInvocation

logger = logging.getLogger(__name__)


def executable_suffix(platform: str | None = None) -> str:
    """Native executable suffix for ``platform`` (default: this host)."""
    return ".exe" if (platform or sys.platform) == "win32" else ""


def executable_path(
    tool: InstalledTool,
    scratch: ScratchDirectory,
    *,
    platform: str | None = None,
) -> str:
    """Absolute path of the tool's executable inside ``scratch``."""
    return str(scratch.path / f"{tool.executable_name}{executable_suffix(platform)}")


def exit_status(returncode: int) -> int:
    """Map a ``Popen.returncode`` to a process exit status.

    Negative codes mean "killed by signal N"; report them the way
    POSIX shells do (128 + N).
    """
    if returncode < 0:
        return 128 - returncode
    return returncode


def run_tool(
    tool: InstalledTool,
    scratch: ScratchDirectory,
    args: Sequence[str],
    *,
    platform: str | None = None,
) -> int:
    """Run the installed tool with ``args`` and wait for it.

    Returns:
        0 when the tool exits successfully.

    Raises:
        ExecutionError: If the tool can't be started (``os_error`` set)
            or exits non-zero (``exit_code`` set).
    """
    invocation = ToolInvocation(
        executable_path=executable_path(tool, scratch, platform=platform),
        arguments=list(args),
    )
    logger.info("🚀 Running %s...", tool.executable_name)
    logger.debug("argv: %s", invocation.argv)

    try:
        process = subprocess.Popen(invocation.argv)
    except OSError as e:
        raise ExecutionError(
            f"Could not start {tool.executable_name}: {e}",
            os_error=e,
        ) from e

    with sigint_ignored():
        returncode = process.wait()

    code = exit_status(returncode)
    if code != 0:
        raise ExecutionError(f"Tool exited with code {code}", exit_code=code)

    return 0


@contextmanager
def sigint_ignored() -> Iterator[None]:
    """Ignore SIGINT in this process for the duration of the block.

    Signal handlers can only be changed from the main thread; elsewhere
    this is a no-op.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    previous = signal.signal(signal.SIGINT, signal.SIG_IGN)
    try:
        yield
    finally:
        # None: the handler was installed outside Python
        signal.signal(signal.SIGINT, previous if previous is not None else signal.SIG_DFL)
