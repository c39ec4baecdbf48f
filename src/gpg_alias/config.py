"""Configuration file loading for gpg-alias.

The configuration is a TOML document with a ``[signing]`` table describing
the TOFU signing policy and an ``[aliases]`` table mapping alias names to
key identifiers::

    [signing]
    enabled = true
    key = "ABCD1234"

    [aliases]
    work = "1111AAAA"

When the file does not exist yet a commented default is written first.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Annotated

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationError,
    model_validator,
)

from gpg_alias.errors import ConfigError, UnknownAliasError
from gpg_alias.paths import ensure_dir

# Key identifiers are compared against signed anchors, so stray
# whitespace from hand-edited TOML is dropped on load.
KeyId = Annotated[str, StringConstraints(strip_whitespace=True)]

DEFAULT_CONFIG = """\
# gpg-alias configuration

[signing]
# When enabled, every alias must be anchored by a clear-signed copy of its
# key identifier, made by the key below (or one of its subkeys). The first
# lookup of a new alias asks for confirmation and creates the anchor.
enabled = false
# Fingerprint or key id of the key that signs alias anchors.
key = ""

[aliases]
# alias = "key identifier"
# work = "0123456789ABCDEF0123456789ABCDEF01234567"
"""


class GpgAliasBaseModel(BaseModel):
    """Frozen, strict base for configuration models."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
    )


class SigningPolicy(GpgAliasBaseModel):
    """Whether TOFU anchoring is enforced and which key anchors aliases."""

    enabled: bool = Field(default=False, description="Enforce alias anchoring.")
    key: KeyId = Field(default="", description="Identifier of the designated signing key.")

    @model_validator(mode="after")
    def _require_key_when_enabled(self) -> SigningPolicy:
        if self.enabled and not self.key:
            raise ValueError("signing.key must be set when signing.enabled is true")
        return self


class Config(GpgAliasBaseModel):
    signing: SigningPolicy = Field(default_factory=SigningPolicy)
    aliases: dict[str, KeyId] = Field(default_factory=dict)

    def resolve(self, alias: str) -> str:
        """Return the key identifier for alias or raise UnknownAliasError."""
        try:
            return self.aliases[alias]
        except KeyError:
            raise UnknownAliasError(alias) from None


def write_default_config(path: Path) -> bool:
    """Write DEFAULT_CONFIG to path unless it exists. Returns True if written."""
    ensure_dir(path.parent)
    try:
        with path.open("x", encoding="utf-8") as fh:
            fh.write(DEFAULT_CONFIG)
    except FileExistsError:
        return False
    except OSError as e:
        raise ConfigError(path, f"could not write default config: {e}") from e
    return True


def parse_config(text: str, path: Path) -> Config:
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(path, f"could not parse TOML: {e}") from e
    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            path,
            "schema validation failed",
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e


def load_config(path: Path) -> Config:
    """Load and validate the configuration file, creating a default one if missing."""
    write_default_config(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(path, f"could not read: {e}") from e
    return parse_config(text, path)
