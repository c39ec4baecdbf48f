"""gpg-alias OpenPGP layer.

This package hides the OpenPGP engine behind a small capability interface:
- Key lookup by fingerprint, key id or user id
- Clear-signing of a byte payload
- Opaque verification returning plaintext and per-signature metadata

Public exports:
    CryptoProvider: the capability protocol consumed by the trust workflow
    GnuPGProvider: implementation driving the gpg program
    Key, SignatureInfo, SignatureSummary, VerifyResult: engine data types
"""

from gpg_alias.crypto.gnupg import GnuPGProvider
from gpg_alias.crypto.provider import (
    CryptoProvider,
    Key,
    SignatureInfo,
    SignatureSummary,
    VerifyResult,
)

__all__ = [
    "CryptoProvider",
    "GnuPGProvider",
    "Key",
    "SignatureInfo",
    "SignatureSummary",
    "VerifyResult",
]
