"""
Configuration loader — reads dntx.yml into a LauncherConfig.

Configuration is optional: with no file and no environment
overrides the launcher runs ``dotnet`` from PATH against the
default NuGet feeds.  Environment variables win over the file.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "dntx.yml"

ENV_TOOLCHAIN = "DNTX_TOOLCHAIN"
ENV_SCRATCH_ROOT = "DNTX_SCRATCH_ROOT"


class ConfigError(Exception):
    """Raised when launcher configuration is invalid or missing."""


class LauncherConfig(BaseModel):
    """Settings for one launch."""

    model_config = ConfigDict(extra="forbid")

    toolchain: str = "dotnet"                            # SDK executable name or path
    sources: list[str] = Field(default_factory=list)     # extra NuGet feeds (--add-source)
    scratch_root: str | None = None                      # parent of scratch dirs (None = system temp)


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for dntx.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to dntx.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(
    path: Path | None = None,
    environ: dict[str, str] | None = None,
) -> LauncherConfig:
    """Load and validate launcher configuration.

    Args:
        path: Explicit path to dntx.yml. If None, searches upward
            and falls back to defaults when nothing is found.
        environ: Environment to read overrides from (default: os.environ).

    Returns:
        Validated LauncherConfig.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    explicit = path is not None
    if path is None:
        path = find_config_file()

    data: dict = {}
    if path is not None:
        data = _read_yaml(path, explicit=explicit)

    env = os.environ if environ is None else environ
    if env.get(ENV_TOOLCHAIN):
        data["toolchain"] = env[ENV_TOOLCHAIN]
    if env.get(ENV_SCRATCH_ROOT):
        data["scratch_root"] = env[ENV_SCRATCH_ROOT]

    try:
        config = LauncherConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    logger.debug(
        "Config: toolchain=%s sources=%d scratch_root=%s",
        config.toolchain, len(config.sources), config.scratch_root,
    )
    return config


def _read_yaml(path: Path, *, explicit: bool) -> dict:
    if not path.is_file():
        if explicit:
            raise ConfigError(f"Config file not found: {path}")
        return {}

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    # An empty file is a valid "all defaults" config
    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    return data
