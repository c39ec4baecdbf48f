"""Single entry point deciding whether an alias→key binding may be used."""

from __future__ import annotations

from gpg_alias.config import SigningPolicy
from gpg_alias.crypto.provider import CryptoProvider
from gpg_alias.observability.logging import alias_context, get_logger
from gpg_alias.tofu.creator import AnchorCreator, ConfirmFn, interactive_confirm
from gpg_alias.tofu.models import TrustDecision
from gpg_alias.tofu.store import AnchorStore
from gpg_alias.tofu.verifier import SignatureVerifier

logger = get_logger(__name__)


class TrustOrchestrator:
    """Compose store, verifier and creator into one decision per alias.

    Holds no state between aliases; everything is read from disk on each call.

    Example:
        >>> orchestrator = TrustOrchestrator(GnuPGProvider(), policy, AnchorStore(data_dir))
        >>> orchestrator.decide("work", "1111AAAA").accepted
        True
    """

    def __init__(
        self,
        provider: CryptoProvider,
        policy: SigningPolicy,
        store: AnchorStore,
        confirm: ConfirmFn = interactive_confirm,
    ) -> None:
        self.policy = policy
        self.store = store
        self.verifier = SignatureVerifier(provider, policy)
        self.creator = AnchorCreator(provider, policy, store, confirm=confirm)

    def decide(self, alias: str, key_id: str) -> TrustDecision:
        if not self.policy.enabled:
            return TrustDecision.trusted()

        with alias_context(alias):
            if self.store.exists(alias):
                logger.debug("anchor.found", path=str(self.store.locate(alias)))
                return self.verifier.verify(self.store.read(alias), key_id)
            return self.creator.create(alias, key_id)
