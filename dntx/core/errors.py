"""
Error taxonomy — every fatal condition of a launch.

Services raise these; only the CLI layer prints them and exits.
Each error knows which phase failed and which exit status the
process should end with.
"""

from __future__ import annotations


class LauncherError(Exception):
    """Base class for fatal launch failures."""

    phase = "launch"

    @property
    def exit_code(self) -> int:
        return 1


class ToolchainMissing(LauncherError):
    """The .NET SDK could not be invoked."""

    phase = "toolchain"

    def __init__(self, message: str, hint: str = "") -> None:
        super().__init__(message)
        self.hint = hint


class InstallError(LauncherError):
    """``dotnet tool install`` failed or produced no usable executable."""

    phase = "install"

    def __init__(self, message: str, diagnostic_output: str = "") -> None:
        super().__init__(message)
        self.diagnostic_output = diagnostic_output


class ResolutionError(InstallError):
    """The installed executable's name could not be determined."""

    phase = "resolve"


class ExecutionError(LauncherError):
    """The installed tool could not be started or exited non-zero.

    Carries either the child's exit code or the OS error raised
    while spawning it, never both.
    """

    phase = "run"

    def __init__(
        self,
        message: str,
        *,
        exit_code: int | None = None,
        os_error: OSError | None = None,
    ) -> None:
        super().__init__(message)
        self._exit_code = exit_code
        self.os_error = os_error

    @property
    def exit_code(self) -> int:
        # never report success for a failed run
        if not self._exit_code:
            return 1
        return self._exit_code


class ScratchError(LauncherError):
    """The scratch directory could not be created."""

    phase = "scratch"
