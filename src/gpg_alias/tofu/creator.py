"""Creation of new alias anchors after explicit operator consent."""

from __future__ import annotations

from typing import Callable

import typer

from gpg_alias.config import SigningPolicy
from gpg_alias.crypto.provider import CryptoProvider
from gpg_alias.errors import KeyNotFoundError, SigningKeyError
from gpg_alias.observability.logging import get_logger
from gpg_alias.tofu.models import RejectionReason, TrustDecision, canonical_key_id
from gpg_alias.tofu.store import AnchorStore

logger = get_logger(__name__)

CONSENT_PROMPT = "Is this correct? [y/N]"

ConfirmFn = Callable[[str, str], bool]


def is_affirmative(answer: str) -> bool:
    """Only an explicit ``y`` (any case) counts as consent."""
    return answer.strip().lower() == "y"


def interactive_confirm(alias: str, key_id: str) -> bool:
    """Explain the unanchored alias on stderr and block until the operator answers."""
    typer.secho(
        f"Please stop to read this message. gpg-alias did not find a signature "
        f"for the alias called `{alias}`.",
        err=True,
    )
    typer.secho(
        "If you just added this alias, this is normal, and you will need to verify "
        "the key ID for the alias.",
        err=True,
    )
    typer.secho(f"Alias `{alias}` points to key ID `{key_id}`.", fg=typer.colors.YELLOW, err=True)
    try:
        answer = typer.prompt(
            CONSENT_PROMPT,
            default="",
            show_default=False,
            prompt_suffix=" ",
            err=True,
        )
    except typer.Abort:
        return False
    return is_affirmative(answer)


class AnchorCreator:
    def __init__(
        self,
        provider: CryptoProvider,
        policy: SigningPolicy,
        store: AnchorStore,
        confirm: ConfirmFn = interactive_confirm,
    ) -> None:
        self.provider = provider
        self.policy = policy
        self.store = store
        self.confirm = confirm

    def create(self, alias: str, key_id: str) -> TrustDecision:
        """Ask for consent, sign key_id with the designated key and store the anchor.

        Raises:
            SigningKeyError: the designated signing key cannot be found.
            CryptoEngineError: the engine failed to sign.
            AnchorExistsError: another process wrote the anchor meanwhile.
            AnchorIOError: the anchor file could not be written.
        """
        path = self.store.locate(alias)
        logger.warning("anchor.missing", key_id=key_id, path=str(path))

        if not self.confirm(alias, key_id):
            logger.error(
                "anchor.consent_refused",
                reason=RejectionReason.CONSENT_REFUSED.value,
                detail="creating a new signature was not authorised",
            )
            return TrustDecision.rejected(
                RejectionReason.CONSENT_REFUSED, "creating a new signature was not authorised"
            )

        logger.info("anchor.signing", detail="you may need to enter your pgp passphrase")
        try:
            signing_key = self.provider.get_key(self.policy.key)
        except KeyNotFoundError as e:
            raise SigningKeyError(self.policy.key, e.reason, details=e.details) from e

        signed = self.provider.sign_clear(canonical_key_id(key_id).encode("utf-8"), signing_key)
        written = self.store.write(alias, signed)
        logger.info("anchor.created", path=str(written), signer=signing_key.fingerprint)
        return TrustDecision.newly_anchored()
