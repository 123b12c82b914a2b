"""
Launch use case — preflight, install, run, clean up.

Strictly sequential: one toolchain probe, one install, one tool
run.  The scratch directory is removed before ``launch`` returns
or raises, whatever happened in between.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from dntx.core.config.loader import LauncherConfig
from dntx.core.services.environment import toolchain_env
from dntx.core.services.installer import install_tool
from dntx.core.services.launcher import run_tool
from dntx.core.services.package_ref import parse_package_id
from dntx.core.services.scratch import scratch_directory
from dntx.core.services.toolchain import check_toolchain

logger = logging.getLogger(__name__)


@dataclass
class LaunchRequest:
    """What the user asked for on the command line."""

    package_id: str
    tool_args: list[str] = field(default_factory=list)


def launch(request: LaunchRequest, config: LauncherConfig | None = None) -> int:
    """Run ``request.package_id`` once, with ``request.tool_args``.

    Returns:
        The tool's exit status (always 0; failures raise).

    Raises:
        ToolchainMissing: Before any scratch directory exists.
        InstallError: Install or executable resolution failed.
        ExecutionError: The tool couldn't start or exited non-zero.
    """
    config = config or LauncherConfig()
    env = toolchain_env()

    check_toolchain(config.toolchain, env=env)

    ref = parse_package_id(request.package_id)
    logger.debug("Package: %s version=%s", ref.name, ref.version)

    with scratch_directory(config.scratch_root) as scratch:
        tool = install_tool(
            ref,
            scratch,
            toolchain=config.toolchain,
            sources=config.sources,
            env=env,
        )
        return run_tool(tool, scratch, request.tool_args)
