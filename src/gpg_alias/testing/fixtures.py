"""Pytest fixtures for gpg-alias tests.

Fixtures (use with pytest):
    fake_provider: FakeCryptoProvider with the designated signing key
        (fingerprint ending in ABCD1234, signing subkey ending in 5678EEEE)
        and an unrelated key (ending in 99990000).
    signing_policy: Enabled SigningPolicy naming ABCD1234.
    anchor_store: AnchorStore rooted in a per-test temporary directory.
    isolated_dirs: Points GPG_ALIAS_CONFIG_DIR / GPG_ALIAS_DATA_DIR at tmp_path.
"""

from pathlib import Path

import pytest

from gpg_alias.config import SigningPolicy
from gpg_alias.paths import ENV_CONFIG_DIR, ENV_DATA_DIR
from gpg_alias.testing.mocks import FakeCryptoProvider
from gpg_alias.tofu.store import AnchorStore

SIGNING_KEY_ID = "ABCD1234"
SIGNING_KEY_FPR = "0A1B2C3D4E5F60718293A4B5C6D7E8F9ABCD1234"
SIGNING_SUBKEY_FPR = "F1E2D3C4B5A6978877665544332211005678EEEE"
OTHER_KEY_FPR = "0123456789ABCDEF0123456789ABCDEF99990000"


@pytest.fixture
def fake_provider() -> FakeCryptoProvider:
    provider = FakeCryptoProvider()
    provider.add_key(
        SIGNING_KEY_FPR,
        subkeys=[SIGNING_SUBKEY_FPR],
        user_ids=["Alias Signer <signer@example.org>"],
    )
    provider.add_key(OTHER_KEY_FPR, user_ids=["Someone Else <else@example.org>"])
    return provider


@pytest.fixture
def signing_policy() -> SigningPolicy:
    return SigningPolicy(enabled=True, key=SIGNING_KEY_ID)


@pytest.fixture
def anchor_store(tmp_path: Path) -> AnchorStore:
    return AnchorStore(tmp_path / "data" / "gpg-alias")


@pytest.fixture
def isolated_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> tuple[Path, Path]:
    """Return (config_dir, data_dir) under tmp_path and export them via env."""
    config_dir = tmp_path / "config"
    data_dir = tmp_path / "data" / "gpg-alias"
    monkeypatch.setenv(ENV_CONFIG_DIR, str(config_dir))
    monkeypatch.setenv(ENV_DATA_DIR, str(data_dir))
    return config_dir, data_dir
