"""Shared pytest fixtures for gpg-alias tests.

Engine, policy and store fixtures come from gpg_alias.testing.fixtures.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import structlog

from gpg_alias.observability.logging import configure_logging

# Load gpg_alias.testing fixtures (fake_provider, signing_policy, anchor_store, isolated_dirs)
pytest_plugins = ["gpg_alias.testing.fixtures"]

SAMPLE_CONFIG = """\
[signing]
enabled = true
key = "ABCD1234"

[aliases]
work = "1111AAAA"
home = "2222BBBB"
"""


@pytest.fixture(autouse=True)
def _fresh_logging() -> None:
    """Point log output at this test's stderr and drop bound context."""
    configure_logging(log_format="console", log_level="DEBUG", force=True)
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def config_file(isolated_dirs: tuple[Path, Path]) -> Path:
    """Write SAMPLE_CONFIG into the isolated config directory."""
    config_dir, _ = isolated_dirs
    config_dir.mkdir(parents=True, exist_ok=True)
    path = config_dir / "gpg-alias.toml"
    path.write_text(SAMPLE_CONFIG, encoding="utf-8")
    return path
