"""
Toolchain environment — the env vars ``dotnet`` is started with.

On Windows, shells launched from some hosts (CI agents, IDE task
runners, node-based wrappers) drop the per-user folder variables.
NuGet then cannot locate its caches and ``dotnet tool install``
fails.  Missing values are read back from the registry, with
fallbacks derived from the variables that are still present.
"""

from __future__ import annotations

import logging
import os
import re
import subprocess
import sys

logger = logging.getLogger(__name__)

_CURRENT_VERSION = r"HKEY_LOCAL_MACHINE\SOFTWARE\Microsoft\Windows\CurrentVersion"
_VOLATILE_ENV = r"HKEY_CURRENT_USER\Volatile Environment"

# (env var, registry key, registry value)
REGISTRY_VARS: tuple[tuple[str, str, str], ...] = (
    ("PROGRAMFILES",      _CURRENT_VERSION, "ProgramFilesDir"),
    ("PROGRAMFILES(X86)", _CURRENT_VERSION, "ProgramFilesDir (x86)"),
    ("USERPROFILE",       _VOLATILE_ENV,    "USERPROFILE"),
    ("APPDATA",           _VOLATILE_ENV,    "APPDATA"),
    ("LOCALAPPDATA",      _VOLATILE_ENV,    "LOCALAPPDATA"),
)


def toolchain_env(
    base: dict[str, str] | None = None,
    *,
    platform: str | None = None,
) -> dict[str, str]:
    """Return a copy of ``base`` (default: os.environ) ready for dotnet.

    Only Windows gets repaired; elsewhere this is a plain copy.
    """
    env = dict(os.environ if base is None else base)
    if (platform or sys.platform) != "win32":
        return env

    for name, key, value in REGISTRY_VARS:
        if env.get(name):
            continue

        found = query_registry(key, value)
        if found is not None:
            env[name] = found
            logger.debug("Restored %s from registry", name)
            continue

        fallback = _fallback(name, env)
        if fallback is not None:
            env[name] = fallback
            logger.debug("Derived %s from other variables", name)

    return env


def query_registry(key: str, value: str) -> str | None:
    """Read one value with ``reg query``; None if it can't be read."""
    try:
        result = subprocess.run(
            ["reg", "query", key, "/v", value],
            capture_output=True,
            text=True,
        )
    except OSError as e:
        logger.debug("reg query unavailable: %s", e)
        return None

    if result.returncode != 0:
        return None
    return parse_reg_output(result.stdout, value)


def parse_reg_output(stdout: str, value: str) -> str | None:
    """Extract ``value``'s data from ``reg query`` output.

    Lines look like ``    ProgramFilesDir    REG_SZ    C:\\Program Files``.
    """
    name_pattern = r"\s+".join(re.escape(part) for part in value.split())
    match = re.search(rf"{name_pattern}\s+REG_\S+\s+(.+)", stdout)
    if not match:
        return None
    return match.group(1).strip()


def _fallback(name: str, env: dict[str, str]) -> str | None:
    if name == "USERPROFILE":
        if env.get("HOMEDRIVE") and env.get("HOMEPATH"):
            return env["HOMEDRIVE"] + env["HOMEPATH"]
    elif name == "APPDATA":
        if env.get("USERPROFILE"):
            return env["USERPROFILE"] + "\\AppData\\Roaming"
    elif name == "LOCALAPPDATA":
        if env.get("USERPROFILE"):
            return env["USERPROFILE"] + "\\AppData\\Local"
    return None
