"""Platform directory resolution for gpg-alias."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import PlatformDirs

from gpg_alias.errors import DataDirectoryError

APP_NAME = "gpg-alias"
CONFIG_FILE_NAME = "gpg-alias.toml"

ENV_CONFIG_DIR = "GPG_ALIAS_CONFIG_DIR"
ENV_DATA_DIR = "GPG_ALIAS_DATA_DIR"


def _dirs() -> PlatformDirs:
    return PlatformDirs(APP_NAME, appauthor=False)


def _resolve_dir(value: str) -> Path:
    return Path(value).expanduser().absolute()


def default_config_dir() -> Path:
    """Directory holding gpg-alias.toml ($GPG_ALIAS_CONFIG_DIR overrides)."""
    override = os.getenv(ENV_CONFIG_DIR)
    if override:
        return _resolve_dir(override)
    return Path(_dirs().user_config_dir)


def default_data_dir() -> Path:
    """Directory holding anchor files ($GPG_ALIAS_DATA_DIR overrides).

    The override names the anchor directory itself; the platform default is
    ``<user data dir>/gpg-alias``.
    """
    override = os.getenv(ENV_DATA_DIR)
    if override:
        return _resolve_dir(override)
    return Path(_dirs().user_data_dir)


def default_config_path() -> Path:
    return default_config_dir() / CONFIG_FILE_NAME


def ensure_dir(path: Path) -> Path:
    """Create path (and parents) if missing; failures are fatal."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DataDirectoryError(path, e.strerror or str(e)) from e
    if not path.is_dir():
        raise DataDirectoryError(path, "not a directory")
    return path
