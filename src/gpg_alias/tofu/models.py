"""Trust decision values returned by the TOFU workflow."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DecisionKind(str, Enum):
    TRUSTED = "trusted"
    """An existing anchor verified for the alias's key identifier."""

    NEWLY_ANCHORED = "newly-anchored"
    """The operator confirmed the binding and a new anchor was written."""

    REJECTED = "rejected"
    """The binding must not be used; see the rejection reason."""


class RejectionReason(str, Enum):
    VERIFICATION_ERROR = "verification error"
    CONTENT_MISMATCH = "content mismatch"
    WRONG_SIGNATURE_COUNT = "wrong signature count"
    INVALID_SIGNATURE = "invalid signature"
    NO_FINGERPRINT = "no fingerprint"
    MISSING_SIGNING_KEY = "missing signing key"
    WRONG_SIGNER = "wrong signer"
    CONSENT_REFUSED = "consent refused"


@dataclass(frozen=True)
class TrustDecision:
    """Outcome of deciding whether one alias→key binding can be used."""

    kind: DecisionKind
    reason: RejectionReason | None = None
    detail: str | None = None

    @classmethod
    def trusted(cls) -> TrustDecision:
        return cls(DecisionKind.TRUSTED)

    @classmethod
    def newly_anchored(cls) -> TrustDecision:
        return cls(DecisionKind.NEWLY_ANCHORED)

    @classmethod
    def rejected(cls, reason: RejectionReason, detail: str | None = None) -> TrustDecision:
        return cls(DecisionKind.REJECTED, reason=reason, detail=detail)

    @property
    def accepted(self) -> bool:
        """True for Trusted and NewlyAnchored."""
        return self.kind is not DecisionKind.REJECTED


def canonical_key_id(key_id: str) -> str:
    """The key identifier as it is signed into, and compared against, an anchor."""
    return key_id.strip()
