"""
dntx — CLI entrypoint.

Usage:
    dntx --help
    dntx dotnet-ef --version
    dntx dotnet-outdated-tool@4.6.0 -- --help
    python -m dntx.main <package-id>[@<version>] [tool args...]
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import click

from dntx import __version__
from dntx.core.config.loader import ConfigError, load_config
from dntx.core.errors import LauncherError, ToolchainMissing
from dntx.core.observability.logging_config import resolve_level, setup_logging
from dntx.core.use_cases.launch import LaunchRequest, launch

# Options are only recognised before the package id; everything after
# it belongs to the tool, unknown flags included.
CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
    "ignore_unknown_options": True,
    "allow_interspersed_args": False,
}

_PHASE_LABELS = {
    "install": "Install failed",
    "resolve": "Could not determine the tool's command",
    "run": "Run failed",
    "scratch": "Could not create scratch directory",
}


def create_cli() -> click.Command:
    """Build the ``dntx`` command.

    A fresh command object per call; nothing is registered globally.
    """

    @click.command(name="dntx", context_settings=CONTEXT_SETTINGS)
    @click.version_option(version=__version__, prog_name="dntx")
    @click.option("--verbose", "-v", is_flag=True, help="Show install/run progress.")
    @click.option("--quiet", "-q", is_flag=True, help="Only show errors.")
    @click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
    @click.option(
        "--config",
        "-c",
        "config_path",
        type=click.Path(dir_okay=False),
        default=None,
        help="Path to dntx.yml (default: auto-detect).",
    )
    @click.argument("package_id", metavar="PACKAGE_ID[@VERSION]", required=False)
    @click.argument("tool_args", nargs=-1, type=click.UNPROCESSED)
    @click.pass_context
    def cli(
        ctx: click.Context,
        verbose: bool,
        quiet: bool,
        debug: bool,
        config_path: str | None,
        package_id: str | None,
        tool_args: tuple[str, ...],
    ) -> None:
        """Temporarily install and run a .NET tool.

        \b
        PACKAGE_ID  NuGet package ID of the .NET tool, optionally with
                    a version (e.g. package-id@1.2.3).
        TOOL_ARGS   Passed unchanged to the tool. Use -- to separate
                    them from dntx's own options if needed.
        """
        # ── Logging setup (once, at process start) ──────────────────
        setup_logging(
            level=resolve_level(
                debug=debug,
                verbose=verbose,
                quiet=quiet,
                env_level=os.environ.get("DNTX_LOG_LEVEL"),
            ),
            log_file=os.environ.get("DNTX_LOG_FILE"),
            log_file_level=os.environ.get("DNTX_LOG_FILE_LEVEL"),
        )

        if not package_id:
            raise click.UsageError("missing required argument 'PACKAGE_ID'", ctx=ctx)
        if not package_id.partition("@")[0]:
            raise click.BadParameter(
                f"no package name in {package_id!r}", ctx=ctx, param_hint="PACKAGE_ID",
            )

        args = list(tool_args)
        if args and args[0] == "--":
            args = args[1:]

        try:
            config = load_config(Path(config_path) if config_path else None)
        except ConfigError as e:
            click.secho(f"❌ {e}", fg="red", err=True)
            sys.exit(1)

        try:
            code = launch(LaunchRequest(package_id=package_id, tool_args=args), config)
        except ToolchainMissing as e:
            click.secho(f"❌ {e}", fg="red", err=True)
            click.echo(e.hint, err=True)
            sys.exit(e.exit_code)
        except LauncherError as e:
            label = _PHASE_LABELS.get(e.phase, "Error")
            click.secho(f"❌ {label}: {e}", fg="red", err=True)
            sys.exit(e.exit_code)

        sys.exit(code)

    return cli


def main() -> None:
    """Console-script entry point."""
    create_cli()(prog_name="dntx")


if __name__ == "__main__":
    main()
