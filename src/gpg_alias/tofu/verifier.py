"""Verification of existing alias anchors.

An anchor is trusted only when all of the following hold, checked in this
order (the first failing check decides the rejection reason):

1. the engine can verify the artifact at all;
2. its plaintext, trailing whitespace trimmed, equals the expected key id;
3. it carries exactly one signature;
4. that signature is reported VALID by the engine;
5. the signer fingerprint is known;
6. the designated signing key can be looked up;
7. the signer is the designated key or one of its subkeys.

A plaintext mismatch is what catches an edited mapping: the anchor still
names the key id the operator originally confirmed.
"""

from __future__ import annotations

from gpg_alias.config import SigningPolicy
from gpg_alias.crypto.provider import CryptoProvider, SignatureSummary
from gpg_alias.errors import CryptoEngineError
from gpg_alias.observability.logging import get_logger
from gpg_alias.tofu.models import RejectionReason, TrustDecision, canonical_key_id

logger = get_logger(__name__)


def decode_plaintext(plaintext: bytes) -> str | None:
    """Return the UTF-8 plaintext without trailing whitespace, or None if undecodable."""
    try:
        return plaintext.decode("utf-8").rstrip()
    except UnicodeDecodeError:
        return None


class SignatureVerifier:
    def __init__(self, provider: CryptoProvider, policy: SigningPolicy) -> None:
        self.provider = provider
        self.policy = policy

    def _reject(self, reason: RejectionReason, detail: str, **kw: object) -> TrustDecision:
        logger.error("anchor.rejected", reason=reason.value, detail=detail, **kw)
        return TrustDecision.rejected(reason, detail)

    def verify(self, artifact: bytes, expected_key_id: str) -> TrustDecision:
        try:
            result = self.provider.verify_opaque(artifact)
        except CryptoEngineError as e:
            return self._reject(RejectionReason.VERIFICATION_ERROR, e.message, code=e.code)

        expected_key_id = canonical_key_id(expected_key_id)
        signed_id = decode_plaintext(result.plaintext)
        if signed_id is None:
            return self._reject(
                RejectionReason.CONTENT_MISMATCH, "signed content is not valid UTF-8"
            )
        if signed_id != expected_key_id:
            return self._reject(
                RejectionReason.CONTENT_MISMATCH,
                f"key does not match (`{signed_id}` != `{expected_key_id}`)",
                signed=signed_id,
                expected=expected_key_id,
            )

        if len(result.signatures) != 1:
            return self._reject(
                RejectionReason.WRONG_SIGNATURE_COUNT,
                f"expected 1 signature, got {len(result.signatures)}",
            )
        signature = result.signatures[0]

        if SignatureSummary.VALID not in signature.summary:
            return self._reject(
                RejectionReason.INVALID_SIGNATURE,
                "signature is not valid",
                summary=str(signature.summary),
            )

        if not signature.fingerprint:
            return self._reject(
                RejectionReason.NO_FINGERPRINT, "signature carries no signer fingerprint"
            )

        try:
            signing_key = self.provider.get_key(self.policy.key)
        except CryptoEngineError as e:
            return self._reject(
                RejectionReason.MISSING_SIGNING_KEY, e.message, key=self.policy.key
            )

        if not signing_key.has_fingerprint(signature.fingerprint):
            return self._reject(
                RejectionReason.WRONG_SIGNER,
                f"signature made by wrong key (got {signature.fingerprint})",
                fingerprint=signature.fingerprint,
                expected=signing_key.fingerprint,
            )

        logger.debug("anchor.verified", fingerprint=signature.fingerprint)
        return TrustDecision.trusted()
