"""Trust-on-first-use anchoring of alias→key bindings.

Public exports:
    AnchorStore: per-alias anchor files on disk
    SignatureVerifier: checks an existing anchor against a key id
    AnchorCreator: consent-gated creation of a new anchor
    TrustOrchestrator: the decision used by callers
    TrustDecision, DecisionKind, RejectionReason: decision values
"""

from gpg_alias.tofu.creator import AnchorCreator, interactive_confirm, is_affirmative
from gpg_alias.tofu.models import DecisionKind, RejectionReason, TrustDecision
from gpg_alias.tofu.orchestrator import TrustOrchestrator
from gpg_alias.tofu.store import AnchorStore
from gpg_alias.tofu.verifier import SignatureVerifier

__all__ = [
    "AnchorCreator",
    "AnchorStore",
    "DecisionKind",
    "RejectionReason",
    "SignatureVerifier",
    "TrustDecision",
    "TrustOrchestrator",
    "interactive_confirm",
    "is_affirmative",
]
