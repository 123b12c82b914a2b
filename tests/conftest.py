"""
Shared test fixtures and configuration.

The ``fake_dotnet`` fixture stands in for the .NET SDK: a POSIX shell
script that answers ``--version`` and emulates
``tool install --tool-path DIR NAME`` by writing a small shell
"tool" into DIR.  Its behaviour is steered through env vars:

    FAKE_INSTALL_FAIL   non-empty → install exits 1 with an error on stderr
    FAKE_INSTALL_WARN   non-empty → install succeeds but writes it to stderr
    FAKE_COMMAND        command name to install (default: faketool)

The installed tool prints ``arg:<value>`` per argument and exits with
``$FAKE_TOOL_EXIT`` (default 0).
"""

import logging
import textwrap
from pathlib import Path

import pytest

from tests.helpers import make_executable

FAKE_DOTNET = textwrap.dedent("""\
    #!/bin/sh
    if [ "$1" = "--version" ]; then
        echo "8.0.100"
        exit 0
    fi
    if [ "$1" = "tool" ] && [ "$2" = "install" ] && [ "$3" = "--tool-path" ]; then
        tool_path="$4"
        package="$5"
        if [ -n "$FAKE_INSTALL_FAIL" ]; then
            echo "error NU1101: Unable to find package $package" >&2
            exit 1
        fi
        cmd="${FAKE_COMMAND:-faketool}"
        mkdir -p "$tool_path/.store/$package"
        printf '#!/bin/sh\\nfor a in "$@"; do echo "arg:$a"; done\\nexit ${FAKE_TOOL_EXIT:-0}\\n' > "$tool_path/$cmd"
        chmod +x "$tool_path/$cmd"
        if [ -n "$FAKE_INSTALL_WARN" ]; then
            echo "$FAKE_INSTALL_WARN" >&2
        fi
        echo "You can invoke the tool using the following command: $cmd"
        echo "Tool '$package' (version '1.0.0') was successfully installed."
        exit 0
    fi
    echo "unexpected arguments: $*" >&2
    exit 2
""")


@pytest.fixture
def fake_dotnet(tmp_path: Path) -> Path:
    """Path to an executable fake ``dotnet``."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    return make_executable(bin_dir / "dotnet", FAKE_DOTNET)


@pytest.fixture
def scratch_root(tmp_path: Path) -> Path:
    """Parent directory for scratch dirs, so tests can see what's left."""
    return tmp_path / "scratch"


@pytest.fixture
def fake_env(monkeypatch):
    """Clear the fake toolchain's steering variables."""
    for name in ("FAKE_INSTALL_FAIL", "FAKE_INSTALL_WARN", "FAKE_COMMAND", "FAKE_TOOL_EXIT"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo setup_logging() calls made by a test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
