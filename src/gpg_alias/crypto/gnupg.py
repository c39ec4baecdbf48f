"""CryptoProvider backed by the gpg command-line program.

Keys are resolved from ``--with-colons`` listings and signatures are judged
from the machine-readable ``--status-fd`` lines, so no output meant for
humans is ever parsed.
"""

from __future__ import annotations

import os
import subprocess  # nosec B404
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from gpg_alias.crypto.provider import Key, SignatureInfo, SignatureSummary, VerifyResult
from gpg_alias.errors import (
    GpgNotFoundError,
    KeyNotFoundError,
    SigningFailedError,
    VerificationFailedError,
)
from gpg_alias.observability.logging import get_logger

logger = get_logger(__name__)

ENV_GPG_BIN = "GPG_ALIAS_GPG_BIN"
DEFAULT_GPG_BIN = "gpg"

STATUS_PREFIX = "[GNUPG:] "

# Colon listing field holding the fingerprint (fpr) or user id (uid) string.
_COLON_VALUE_FIELD = 9

# Status keywords that carry the verdict for one signature.
_RESULT_KEYWORDS = frozenset({"GOODSIG", "BADSIG", "EXPSIG", "EXPKEYSIG", "REVKEYSIG", "ERRSIG"})

# ERRSIG return code meaning the public key is not available.
_ERRSIG_NO_PUBKEY = "9"


@dataclass
class _SignatureStatus:
    result: str | None = None
    errsig_rc: str | None = None
    validsig_fpr: str | None = None
    trusted: bool = False
    no_pubkey: bool = False

    def summary(self) -> SignatureSummary:
        summary = SignatureSummary.NONE
        if self.result == "BADSIG":
            summary |= SignatureSummary.RED
        elif self.result == "EXPSIG":
            summary |= SignatureSummary.SIG_EXPIRED
        elif self.result == "EXPKEYSIG":
            summary |= SignatureSummary.KEY_EXPIRED
        elif self.result == "REVKEYSIG":
            summary |= SignatureSummary.KEY_REVOKED
        if self.no_pubkey or self.errsig_rc == _ERRSIG_NO_PUBKEY:
            summary |= SignatureSummary.KEY_MISSING
        if self.result == "GOODSIG" and self.validsig_fpr:
            summary |= SignatureSummary.GREEN
            if self.trusted:
                summary |= SignatureSummary.VALID
        return summary


def parse_status(status: str) -> list[SignatureInfo]:
    """Fold ``[GNUPG:]`` status lines into one SignatureInfo per signature.

    Each signature starts at NEWSIG. Older gpg versions do not emit NEWSIG,
    so a verdict keyword arriving for a signature that already has one also
    starts a new signature.
    """
    blocks: list[_SignatureStatus] = []
    current: _SignatureStatus | None = None
    for raw in status.splitlines():
        if not raw.startswith(STATUS_PREFIX):
            continue
        parts = raw[len(STATUS_PREFIX) :].split()
        if not parts:
            continue
        keyword, *args = parts
        if keyword == "NEWSIG":
            current = _SignatureStatus()
            blocks.append(current)
            continue
        if keyword in _RESULT_KEYWORDS:
            if current is None or current.result is not None:
                current = _SignatureStatus()
                blocks.append(current)
            current.result = keyword
            if keyword == "ERRSIG" and len(args) >= 6:
                current.errsig_rc = args[5]
            continue
        if current is None:
            continue
        if keyword == "VALIDSIG" and args:
            current.validsig_fpr = args[0].upper()
        elif keyword in ("TRUST_FULLY", "TRUST_ULTIMATE"):
            current.trusted = True
        elif keyword == "NO_PUBKEY":
            current.no_pubkey = True
    return [
        SignatureInfo(summary=block.summary(), fingerprint=block.validsig_fpr)
        for block in blocks
        if block.result is not None
    ]


def parse_key_listing(listing: str) -> list[Key]:
    """Parse ``gpg --with-colons`` key listing output into Key objects."""
    keys: list[Key] = []
    primary: str | None = None
    subkeys: list[str] = []
    uids: list[str] = []
    expecting: str | None = None

    def flush() -> None:
        if primary is not None:
            keys.append(Key(fingerprint=primary, subkey_fingerprints=tuple(subkeys), user_ids=tuple(uids)))

    for line in listing.splitlines():
        fields = line.split(":")
        record = fields[0]
        if record == "pub":
            flush()
            primary = None
            subkeys = []
            uids = []
            expecting = "pub"
        elif record == "sub":
            expecting = "sub"
        elif record == "fpr" and len(fields) > _COLON_VALUE_FIELD:
            fpr = fields[_COLON_VALUE_FIELD].upper()
            if expecting == "pub":
                primary = fpr
                subkeys.append(fpr)
            elif expecting == "sub":
                subkeys.append(fpr)
            expecting = None
        elif record == "uid" and len(fields) > _COLON_VALUE_FIELD:
            uids.append(fields[_COLON_VALUE_FIELD])
    flush()
    return keys


@dataclass
class GnuPGProvider:
    """Run gpg for key lookup, clear-signing and verification.

    Attributes:
        binary: gpg executable; defaults to $GPG_ALIAS_GPG_BIN or ``gpg``.
        homedir: Optional GnuPG home directory passed as ``--homedir``.
    """

    binary: str = field(default_factory=lambda: os.environ.get(ENV_GPG_BIN, DEFAULT_GPG_BIN))
    homedir: Path | None = None

    def _run(self, args: Sequence[str], stdin: bytes | None = None) -> tuple[int, bytes, bytes]:
        cmd = [self.binary, "--batch", "--no-auto-key-retrieve"]
        if self.homedir is not None:
            cmd += ["--homedir", str(self.homedir)]
        cmd += list(args)
        logger.debug("gpg.run", args=cmd[1:])
        try:
            proc = subprocess.run(  # nosec B603
                cmd,
                input=stdin if stdin is not None else b"",
                capture_output=True,
                check=False,
            )
        except OSError as e:
            raise GpgNotFoundError(self.binary, details={"cause": str(e)}) from e
        return proc.returncode, proc.stdout, proc.stderr

    def get_key(self, identifier: str) -> Key:
        ecode, out, err = self._run(
            [
                "--with-colons",
                "--with-fingerprint",
                "--with-subkey-fingerprint",
                "--list-keys",
                "--",
                identifier,
            ]
        )
        if ecode != 0:
            raise KeyNotFoundError(identifier, "no such key", details={"stderr": _decode(err)})
        keys = parse_key_listing(out.decode("utf-8", errors="replace"))
        if not keys:
            raise KeyNotFoundError(identifier, "no such key")
        if len(keys) > 1:
            raise KeyNotFoundError(
                identifier,
                "ambiguous identifier",
                details={"fingerprints": [k.fingerprint for k in keys]},
            )
        return keys[0]

    def sign_clear(self, plaintext: bytes, key: Key) -> bytes:
        ecode, out, err = self._run(
            ["--local-user", key.fingerprint, "--clearsign", "--output", "-"],
            stdin=plaintext,
        )
        if ecode != 0 or not out:
            raise SigningFailedError(
                f"gpg exited with status {ecode}",
                details={"stderr": _decode(err)},
            )
        return out

    def verify_opaque(self, signed: bytes) -> VerifyResult:
        ecode, out, err = self._run(["--status-fd=2", "--output", "-", "--verify"], stdin=signed)
        status = err.decode("utf-8", errors="replace")
        signatures = parse_status(status)
        if not signatures:
            raise VerificationFailedError(
                "no signature found",
                details={"exit_code": ecode, "stderr": _strip_status(status)},
            )
        return VerifyResult(plaintext=out, signatures=tuple(signatures))


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace").strip()


def _strip_status(stderr: str) -> str:
    return "\n".join(line for line in stderr.splitlines() if not line.startswith(STATUS_PREFIX)).strip()
