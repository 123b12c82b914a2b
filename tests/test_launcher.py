"""
Tests for the launcher — path resolution, argument passthrough, and
exit code propagation.
"""

import signal
import threading
from pathlib import Path

import pytest

from dntx.core.errors import ExecutionError
from dntx.core.models import InstalledTool, ScratchDirectory
from dntx.core.services.launcher import (
    executable_path,
    executable_suffix,
    exit_status,
    run_tool,
    sigint_ignored,
)

from tests.helpers import make_executable

ECHO_TOOL = '#!/bin/sh\nfor a in "$@"; do echo "arg:$a"; done\nexit 0\n'


def _tool(tmp_path: Path, script: str, name: str = "tool") -> tuple[InstalledTool, ScratchDirectory]:
    make_executable(tmp_path / name, script)
    return InstalledTool(executable_name=name), ScratchDirectory(path=tmp_path)


class TestExecutablePath:
    def test_suffix(self):
        assert executable_suffix("win32") == ".exe"
        assert executable_suffix("linux") == ""
        assert executable_suffix("darwin") == ""

    def test_posix_path(self, tmp_path: Path):
        path = executable_path(
            InstalledTool(executable_name="dotnet-ef"),
            ScratchDirectory(path=tmp_path),
            platform="linux",
        )
        assert path == str(tmp_path / "dotnet-ef")

    def test_windows_path(self, tmp_path: Path):
        path = executable_path(
            InstalledTool(executable_name="dotnet-ef"),
            ScratchDirectory(path=tmp_path),
            platform="win32",
        )
        assert path == str(tmp_path / "dotnet-ef.exe")


class TestExitStatus:
    @pytest.mark.parametrize(("returncode", "status"), [(0, 0), (3, 3), (255, 255), (-9, 137), (-15, 143)])
    def test_mapping(self, returncode, status):
        assert exit_status(returncode) == status


class TestRunTool:
    def test_success(self, tmp_path: Path):
        tool, scratch = _tool(tmp_path, "#!/bin/sh\nexit 0\n")
        assert run_tool(tool, scratch, []) == 0

    def test_nonzero_exit_propagated(self, tmp_path: Path):
        tool, scratch = _tool(tmp_path, "#!/bin/sh\nexit 3\n")
        with pytest.raises(ExecutionError) as exc:
            run_tool(tool, scratch, [])
        assert exc.value.exit_code == 3
        assert exc.value.os_error is None
        assert "code 3" in str(exc.value)

    def test_killed_by_signal(self, tmp_path: Path):
        tool, scratch = _tool(tmp_path, "#!/bin/sh\nkill -TERM $$\n")
        with pytest.raises(ExecutionError) as exc:
            run_tool(tool, scratch, [])
        assert exc.value.exit_code == 143

    def test_missing_executable(self, tmp_path: Path):
        tool = InstalledTool(executable_name="not-there")
        with pytest.raises(ExecutionError) as exc:
            run_tool(tool, ScratchDirectory(path=tmp_path), [])
        assert isinstance(exc.value.os_error, FileNotFoundError)
        assert exc.value.exit_code == 1

    def test_not_executable(self, tmp_path: Path):
        (tmp_path / "tool").write_text("#!/bin/sh\n")
        tool = InstalledTool(executable_name="tool")
        with pytest.raises(ExecutionError) as exc:
            run_tool(tool, ScratchDirectory(path=tmp_path), [])
        assert isinstance(exc.value.os_error, PermissionError)

    def test_arguments_verbatim(self, tmp_path: Path, capfd):
        tool, scratch = _tool(tmp_path, ECHO_TOOL)
        args = ["--flag", "two words", "$HOME", "a;b|c&d", "*", "", "--"]
        run_tool(tool, scratch, args)
        out = capfd.readouterr().out.splitlines()
        assert out == [f"arg:{a}" for a in args]

    def test_stdio_inherited(self, tmp_path: Path, capfd):
        tool, scratch = _tool(tmp_path, "#!/bin/sh\necho to-out\necho to-err >&2\n")
        run_tool(tool, scratch, [])
        captured = capfd.readouterr()
        assert "to-out" in captured.out
        assert "to-err" in captured.err

    def test_ctrl_c_left_to_the_tool(self, tmp_path: Path):
        # SIGINT hits both dntx and the tool, as a terminal's Ctrl-C does;
        # the tool's own handler decides the outcome.
        script = (
            "#!/bin/sh\n"
            "trap 'touch \"$0.interrupted\"; exit 5' INT\n"
            "sleep 1\n"
            "kill -INT $PPID\n"
            "kill -INT $$\n"
            "sleep 5\n"
        )
        tool, scratch = _tool(tmp_path, script)
        before = signal.getsignal(signal.SIGINT)

        with pytest.raises(ExecutionError) as exc:
            run_tool(tool, scratch, [])

        assert exc.value.exit_code == 5
        assert (tmp_path / "tool.interrupted").exists()
        assert signal.getsignal(signal.SIGINT) is before


class TestSigintIgnored:
    def test_ignored_inside_block_and_restored(self):
        before = signal.getsignal(signal.SIGINT)
        with sigint_ignored():
            assert signal.getsignal(signal.SIGINT) is signal.SIG_IGN
        assert signal.getsignal(signal.SIGINT) is before

    def test_restored_on_error(self):
        before = signal.getsignal(signal.SIGINT)
        with pytest.raises(RuntimeError):
            with sigint_ignored():
                raise RuntimeError("wait failed")
        assert signal.getsignal(signal.SIGINT) is before

    def test_noop_off_main_thread(self):
        seen = []

        def worker():
            with sigint_ignored():
                seen.append(signal.getsignal(signal.SIGINT))

        before = signal.getsignal(signal.SIGINT)
        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()
        assert seen == [before]
