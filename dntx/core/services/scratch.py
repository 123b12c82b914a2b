"""
Scratch directory lifecycle.

One directory per launch, created before the install and removed
on every exit path, including errors raised by the install or the
tool run.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
import sys
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from dntx.core.errors import ScratchError
from dntx.core.models.tool import ScratchDirectory

logger = logging.getLogger(__name__)

SCRATCH_PREFIX = "dntx-"


@contextmanager
def scratch_directory(root: str | Path | None = None) -> Iterator[ScratchDirectory]:
    """Create a uniquely named scratch directory and always remove it.

    Args:
        root: Parent directory (default: the system temp directory).
            Created if it doesn't exist.

    Raises:
        ScratchError: If the directory can't be created.  Nothing is
            left to clean up in that case.
    """
    try:
        if root is not None:
            Path(root).mkdir(parents=True, exist_ok=True)
        path = Path(tempfile.mkdtemp(prefix=SCRATCH_PREFIX, dir=root)).resolve()
    except OSError as e:
        location = root if root is not None else tempfile.gettempdir()
        raise ScratchError(f"Cannot create a scratch directory in {location}: {e}") from e

    logger.debug("Scratch directory: %s", path)
    try:
        yield ScratchDirectory(path=path)
    finally:
        logger.info("🧹 Cleaning up...")
        remove_scratch(path)


def remove_scratch(path: str | Path) -> None:
    """Recursively delete ``path``.

    Read-only entries (NuGet marks some package files read-only on
    Windows) are made writable and retried.  A directory that is
    already gone is fine.  Other failures are logged and do not raise,
    so they never replace the run's outcome.
    """
    try:
        if sys.version_info >= (3, 12):
            shutil.rmtree(path, onexc=_make_writable_and_retry)
        else:
            shutil.rmtree(path, onerror=_make_writable_and_retry)
    except FileNotFoundError:
        logger.debug("Scratch directory already removed: %s", path)
    except OSError as e:
        logger.warning("⚠️  Could not remove scratch directory %s: %s", path, e)


def _make_writable_and_retry(func, path, _exc) -> None:
    """rmtree error handler: add write permission, then retry ``func`` once."""
    parent = os.path.dirname(path)
    if parent:
        os.chmod(parent, os.stat(parent).st_mode | stat.S_IWUSR | stat.S_IXUSR)
    os.chmod(path, os.stat(path).st_mode | stat.S_IWUSR)
    func(path)
