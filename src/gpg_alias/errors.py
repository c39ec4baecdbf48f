"""gpg-alias Error Taxonomy.

This module defines the error hierarchy for gpg-alias. Every error that
aborts a run is a subclass of GpgAliasError and carries a code following
the gpg-alias:<area>/<name> pattern plus structured details for logging.

Rejected trust decisions are not errors: they are returned as values by
the tofu package. Only conditions that make a decision impossible are
raised.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any


class GpgAliasError(Exception):
    """Base exception for all gpg-alias errors.

    Attributes:
        code: Error code following the gpg-alias:... pattern
        message: Human-readable error message
        details: Optional additional error context
    """

    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to ``{code, message, details}`` dict."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigError(GpgAliasError):
    """Raised when the configuration file cannot be created, read, or parsed."""

    def __init__(self, path: Path, reason: str, details: dict[str, Any] | None = None) -> None:
        message = f"Invalid configuration {path}: {reason}"
        super().__init__(
            code="gpg-alias:environment/config",
            message=message,
            details={"path": str(path), "reason": reason, **(details or {})},
        )
        self.path = path
        self.reason = reason


class DataDirectoryError(GpgAliasError):
    """Raised when a config or data directory cannot be located or created.

    Directory failures indicate a misconfigured environment, so they are
    never retried.
    """

    def __init__(self, path: Path | None, reason: str, details: dict[str, Any] | None = None) -> None:
        location = str(path) if path is not None else "<unknown>"
        message = f"Could not prepare directory {location}: {reason}"
        super().__init__(
            code="gpg-alias:environment/directory",
            message=message,
            details={"path": location, "reason": reason, **(details or {})},
        )
        self.path = path
        self.reason = reason


class AnchorIOError(GpgAliasError):
    """Raised when an anchor file cannot be read or written."""

    def __init__(self, path: Path, reason: str, details: dict[str, Any] | None = None) -> None:
        message = f"Could not access anchor {path}: {reason}"
        super().__init__(
            code="gpg-alias:environment/anchor-io",
            message=message,
            details={"path": str(path), "reason": reason, **(details or {})},
        )
        self.path = path
        self.reason = reason


class UnknownAliasError(GpgAliasError):
    """Raised when a requested alias is not present in the mapping."""

    def __init__(self, alias: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="gpg-alias:alias/not-found",
            message=f"No such alias: {alias}",
            details={"alias": alias, **(details or {})},
        )
        self.alias = alias


class InvalidAliasError(GpgAliasError):
    """Raised when an alias cannot be used as an anchor file name.

    Aliases must be a single path component so that an anchor can never be
    read from or written to a location outside the anchor directory.
    """

    def __init__(self, alias: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="gpg-alias:anchor/invalid-alias",
            message=f"Alias cannot be used as an anchor name: {alias!r}",
            details={"alias": alias, **(details or {})},
        )
        self.alias = alias


class AnchorExistsError(GpgAliasError):
    """Raised when a new anchor would overwrite one that appeared concurrently."""

    def __init__(self, alias: str, path: Path, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="gpg-alias:anchor/exists",
            message=f"Anchor for alias '{alias}' already exists at {path}",
            details={"alias": alias, "path": str(path), **(details or {})},
        )
        self.alias = alias
        self.path = path


class SigningKeyError(GpgAliasError):
    """Raised when the designated signing key cannot be used to create an anchor.

    This means the signing policy itself is broken, not the alias.
    """

    def __init__(self, key: str, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="gpg-alias:anchor/signing-key",
            message=f"Missing signing key '{key}': {reason}",
            details={"key": key, "reason": reason, **(details or {})},
        )
        self.key = key
        self.reason = reason


class CryptoEngineError(GpgAliasError):
    """Base class for failures reported by the OpenPGP engine."""

    def __init__(
        self,
        message: str,
        code: str = "gpg-alias:engine/error",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(code=code, message=message, details=details or {})


class GpgNotFoundError(CryptoEngineError):
    """Raised when the gpg executable cannot be started."""

    def __init__(self, binary: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            f"Could not run gpg executable '{binary}'",
            code="gpg-alias:engine/not-found",
            details={"binary": binary, **(details or {})},
        )
        self.binary = binary


class KeyNotFoundError(CryptoEngineError):
    """Raised when a key identifier does not resolve to exactly one key."""

    def __init__(self, identifier: str, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            f"Could not get key '{identifier}': {reason}",
            code="gpg-alias:engine/key-not-found",
            details={"identifier": identifier, "reason": reason, **(details or {})},
        )
        self.identifier = identifier
        self.reason = reason


class SigningFailedError(CryptoEngineError):
    """Raised when the engine could not produce a signature."""

    def __init__(self, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            f"Could not create signature: {reason}",
            code="gpg-alias:engine/signing-failed",
            details={"reason": reason, **(details or {})},
        )
        self.reason = reason


class VerificationFailedError(CryptoEngineError):
    """Malformed artifact or no recognizable signature; see message for cause."""

    def __init__(self, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            f"Could not verify signature: {reason}",
            code="gpg-alias:engine/verification-failed",
            details={"reason": reason, **(details or {})},
        )
        self.reason = reason
