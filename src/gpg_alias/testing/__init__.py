"""Test helpers for gpg-alias.

Load the pytest fixtures with ``pytest_plugins = ["gpg_alias.testing.fixtures"]``.
"""

from gpg_alias.testing.mocks import FakeCryptoProvider

__all__ = ["FakeCryptoProvider"]
