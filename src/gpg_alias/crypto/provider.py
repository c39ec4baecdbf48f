"""OpenPGP capability provider interface.

The trust workflow never talks to an OpenPGP implementation directly; it
consumes the CryptoProvider protocol below. GnuPGProvider is the production
implementation, and gpg_alias.testing ships an in-memory one for tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Flag, auto
from typing import Protocol, Sequence, runtime_checkable


class SignatureSummary(Flag):
    """Summary flags for one signature, named after GPGME's sigsum bits."""

    NONE = 0
    VALID = auto()
    """Signature is good and the signing key is fully trusted."""
    GREEN = auto()
    """Signature is cryptographically good."""
    RED = auto()
    """Signature is bad."""
    KEY_REVOKED = auto()
    KEY_EXPIRED = auto()
    SIG_EXPIRED = auto()
    KEY_MISSING = auto()


@dataclass(frozen=True)
class Key:
    """An OpenPGP key as seen by the engine.

    ``subkey_fingerprints`` lists every subkey, which for GnuPG includes the
    primary key itself as its first entry.
    """

    fingerprint: str
    subkey_fingerprints: tuple[str, ...] = ()
    user_ids: tuple[str, ...] = ()

    def has_fingerprint(self, fingerprint: str) -> bool:
        """Return True if fingerprint names the primary key or one of its subkeys."""
        wanted = fingerprint.upper()
        if self.fingerprint.upper() == wanted:
            return True
        return any(sub.upper() == wanted for sub in self.subkey_fingerprints)


@dataclass(frozen=True)
class SignatureInfo:
    """One signature found while verifying an artifact."""

    summary: SignatureSummary
    fingerprint: str | None = None


@dataclass(frozen=True)
class VerifyResult:
    """Plaintext recovered from a signed artifact and its signatures."""

    plaintext: bytes
    signatures: Sequence[SignatureInfo] = field(default_factory=tuple)


@runtime_checkable
class CryptoProvider(Protocol):
    """Key lookup, clear-signing and opaque verification.

    Implementations raise subclasses of CryptoEngineError on failure.
    """

    def get_key(self, identifier: str) -> Key:
        """Resolve an identifier (fingerprint, key id, user id) to one key."""
        ...

    def sign_clear(self, plaintext: bytes, key: Key) -> bytes:
        """Return a clear-signed artifact over plaintext made with key."""
        ...

    def verify_opaque(self, signed: bytes) -> VerifyResult:
        """Verify a signed artifact and return its plaintext and signatures."""
        ...
