"""
Test helpers shared across modules.
"""

import stat
from pathlib import Path


def make_executable(path: Path, content: str) -> Path:
    """Write ``content`` to ``path`` and mark it executable."""
    path.write_text(content)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path
