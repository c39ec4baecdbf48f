"""Filesystem store for alias anchors.

One clear-signed file per alias lives at ``<directory>/<alias>.asc``. The
presence of that file is the only record that an alias has been anchored.
"""

from __future__ import annotations

from pathlib import Path

from gpg_alias.errors import AnchorExistsError, AnchorIOError, InvalidAliasError
from gpg_alias.paths import ensure_dir

ANCHOR_SUFFIX = ".asc"


class AnchorStore:
    """Locate, read and create anchor files under one directory."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def locate(self, alias: str) -> Path:
        """Return the anchor path for alias. Does not touch the filesystem."""
        if (
            not alias
            or alias in (".", "..")
            or "/" in alias
            or "\\" in alias
            or "\x00" in alias
        ):
            raise InvalidAliasError(alias)
        return self.directory / f"{alias}{ANCHOR_SUFFIX}"

    def ensure_directory(self) -> Path:
        return ensure_dir(self.directory)

    def exists(self, alias: str) -> bool:
        path = self.locate(alias)
        self.ensure_directory()
        return path.exists()

    def read(self, alias: str) -> bytes:
        path = self.locate(alias)
        try:
            return path.read_bytes()
        except OSError as e:
            raise AnchorIOError(path, e.strerror or str(e)) from e

    def write(self, alias: str, data: bytes) -> Path:
        """Persist a new anchor; never replaces an existing file."""
        path = self.locate(alias)
        self.ensure_directory()
        try:
            with path.open("xb") as fh:
                fh.write(data)
        except FileExistsError as e:
            raise AnchorExistsError(alias, path) from e
        except OSError as e:
            raise AnchorIOError(path, e.strerror or str(e)) from e
        return path
