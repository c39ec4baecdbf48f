"""Tests for platform directory resolution."""

from pathlib import Path

import pytest

from gpg_alias import paths
from gpg_alias.errors import DataDirectoryError


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv(paths.ENV_CONFIG_DIR, str(tmp_path / "cfg"))
    monkeypatch.setenv(paths.ENV_DATA_DIR, str(tmp_path / "data"))

    assert paths.default_config_dir() == tmp_path / "cfg"
    assert paths.default_config_path() == tmp_path / "cfg" / "gpg-alias.toml"
    assert paths.default_data_dir() == tmp_path / "data"


def test_platform_defaults_name_the_app(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(paths.ENV_CONFIG_DIR, raising=False)
    monkeypatch.delenv(paths.ENV_DATA_DIR, raising=False)

    assert paths.default_config_dir().name == "gpg-alias"
    assert paths.default_data_dir().name == "gpg-alias"


def test_ensure_dir_is_idempotent(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b"
    assert paths.ensure_dir(target) == target
    assert paths.ensure_dir(target) == target
    assert target.is_dir()


def test_ensure_dir_failure(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("x")
    with pytest.raises(DataDirectoryError) as exc_info:
        paths.ensure_dir(blocker)
    assert exc_info.value.details["path"] == str(blocker)
