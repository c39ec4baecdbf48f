"""In-memory OpenPGP engine for gpg-alias tests.

FakeCryptoProvider implements the CryptoProvider protocol without gpg. It
produces a small text "clear-signed" format whose signatures are SHA-256
digests over signer fingerprint and plaintext, so any edit of the plaintext
invalidates them exactly like a real signature would.

Features:
    - Keys with subkeys and a chosen signing subkey.
    - Lookup by full fingerprint, key id suffix, or user id.
    - Artifacts with any number of signatures for multi-signer tests.
    - Per-fingerprint summary overrides (expired, revoked, untrusted keys).
    - Call recording for assertions (e.g. "the engine was never touched").
"""

from __future__ import annotations

import hashlib
from typing import Sequence

from gpg_alias.crypto.provider import Key, SignatureInfo, SignatureSummary, VerifyResult
from gpg_alias.errors import KeyNotFoundError, SigningFailedError, VerificationFailedError

BEGIN_MESSAGE = "-----BEGIN FAKE SIGNED MESSAGE-----"
BEGIN_SIGNATURE = "-----BEGIN FAKE SIGNATURE-----"
END_SIGNATURE = "-----END FAKE SIGNATURE-----"

TRUSTED = SignatureSummary.VALID | SignatureSummary.GREEN


def _digest(fingerprint: str, plaintext: bytes) -> str:
    return hashlib.sha256(fingerprint.encode("ascii") + b"\x00" + plaintext).hexdigest()


class FakeCryptoProvider:
    """Configurable stand-in for GnuPGProvider.

    Attributes:
        calls: Names of every provider method invoked, in order.
    """

    def __init__(self) -> None:
        self._keys: list[Key] = []
        self._signing_subkey: dict[str, str] = {}
        self._summaries: dict[str, SignatureSummary] = {}
        self._sign_failure: BaseException | None = None
        self.calls: list[str] = []

    def add_key(
        self,
        fingerprint: str,
        subkeys: Sequence[str] = (),
        user_ids: Sequence[str] = (),
        sign_with: str | None = None,
    ) -> Key:
        """Register a key; ``sign_with`` picks the (sub)key used by sign_clear."""
        fingerprint = fingerprint.upper()
        key = Key(
            fingerprint=fingerprint,
            subkey_fingerprints=(fingerprint, *(s.upper() for s in subkeys)),
            user_ids=tuple(user_ids),
        )
        self._keys.append(key)
        self._signing_subkey[fingerprint] = (sign_with or fingerprint).upper()
        return key

    def set_summary(self, fingerprint: str, summary: SignatureSummary) -> None:
        """Report summary for good signatures made by fingerprint."""
        self._summaries[fingerprint.upper()] = summary

    def fail_signing(self, error: BaseException) -> None:
        self._sign_failure = error

    def _known(self, fingerprint: str) -> bool:
        return any(fingerprint in key.subkey_fingerprints for key in self._keys)

    def get_key(self, identifier: str) -> Key:
        self.calls.append("get_key")
        wanted = identifier.upper()
        matches = [
            key
            for key in self._keys
            if any(fpr.endswith(wanted) for fpr in key.subkey_fingerprints)
            or identifier in key.user_ids
        ]
        if not matches:
            raise KeyNotFoundError(identifier, "no such key")
        if len(matches) > 1:
            raise KeyNotFoundError(identifier, "ambiguous identifier")
        return matches[0]

    def sign_clear(self, plaintext: bytes, key: Key) -> bytes:
        self.calls.append("sign_clear")
        if self._sign_failure is not None:
            raise self._sign_failure
        if key not in self._keys:
            raise SigningFailedError("no secret key")
        return self.sign_with_fingerprints(plaintext, [self._signing_subkey[key.fingerprint]])

    def sign_with_fingerprints(self, plaintext: bytes, fingerprints: Sequence[str]) -> bytes:
        """Build an artifact signed by every fingerprint given (may be empty)."""
        lines = [BEGIN_MESSAGE, plaintext.decode("utf-8"), BEGIN_SIGNATURE]
        lines += [f"{fpr.upper()} {_digest(fpr.upper(), plaintext)}" for fpr in fingerprints]
        lines.append(END_SIGNATURE)
        return ("\n".join(lines) + "\n").encode("utf-8")

    def verify_opaque(self, signed: bytes) -> VerifyResult:
        self.calls.append("verify_opaque")
        try:
            lines = signed.decode("utf-8").splitlines()
            begin = lines.index(BEGIN_MESSAGE)
            sig_start = lines.index(BEGIN_SIGNATURE, begin)
            sig_end = lines.index(END_SIGNATURE, sig_start)
        except (UnicodeDecodeError, ValueError) as e:
            raise VerificationFailedError("no signed data", details={"cause": str(e)}) from e

        plaintext = "\n".join(lines[begin + 1 : sig_start]).encode("utf-8")
        signatures: list[SignatureInfo] = []
        for line in lines[sig_start + 1 : sig_end]:
            fpr, _, digest = line.partition(" ")
            if not self._known(fpr):
                signatures.append(SignatureInfo(summary=SignatureSummary.KEY_MISSING))
            elif digest != _digest(fpr, plaintext):
                signatures.append(SignatureInfo(summary=SignatureSummary.RED, fingerprint=fpr))
            else:
                summary = self._summaries.get(fpr, TRUSTED)
                signatures.append(SignatureInfo(summary=summary, fingerprint=fpr))
        if not signatures:
            raise VerificationFailedError("no signature found")
        return VerifyResult(plaintext=plaintext, signatures=tuple(signatures))
