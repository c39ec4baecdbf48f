"""Command-line interface for gpg-alias.

Resolves aliases from the configuration file to OpenPGP key identifiers,
checking every alias against its trust-on-first-use anchor first when
signing is enabled.

Example:
    >>> # From terminal:
    >>> # gpg-alias work                  # prints the key id for `work`
    >>> # gpg --encrypt $(gpg-alias -r work home) file.txt
    >>> # gpg-alias --sign-all            # anchor every alias, print nothing
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer

from gpg_alias import __version__
from gpg_alias.config import Config, load_config
from gpg_alias.crypto.gnupg import GnuPGProvider
from gpg_alias.crypto.provider import CryptoProvider
from gpg_alias.errors import GpgAliasError
from gpg_alias.observability.logging import configure_logging, get_logger
from gpg_alias.paths import default_config_path, default_data_dir
from gpg_alias.tofu.orchestrator import TrustOrchestrator
from gpg_alias.tofu.store import AnchorStore

logger = get_logger(__name__)

app = typer.Typer(
    help="Resolve gpg key aliases, protected by trust-on-first-use signatures.",
    add_completion=False,
)


def make_provider(homedir: Path | None) -> CryptoProvider:
    return GnuPGProvider(homedir=homedir)


def _version_callback(value: bool) -> None:
    """Print the version and exit when requested."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


def format_output(key_ids: list[str], recipients: bool) -> str:
    """Render resolved key ids for stdout.

    With ``recipients`` each id becomes ``-r <id>``, space-joined with no
    trailing newline; otherwise one id per line.
    """
    if recipients:
        return " ".join(f"-r {key_id}" for key_id in key_ids)
    return "".join(f"{key_id}\n" for key_id in key_ids)


def resolve_aliases(config: Config, orchestrator: TrustOrchestrator, aliases: list[str]) -> list[str] | None:
    """Resolve and trust-check aliases in order; None on the first rejection."""
    key_ids: list[str] = []
    for i, alias in enumerate(aliases):
        logger.debug("alias.requested", index=i, alias=alias)
        key_id = config.resolve(alias)
        decision = orchestrator.decide(alias, key_id)
        if not decision.accepted:
            return None
        key_ids.append(key_id)
    return key_ids


def sign_all_aliases(config: Config, orchestrator: TrustOrchestrator) -> bool:
    """Anchor every alias in the mapping; False on the first rejection."""
    if not config.signing.enabled:
        logger.warning("signing.disabled", detail="nothing to sign; enable [signing] first")
        return True
    for alias in sorted(config.aliases):
        decision = orchestrator.decide(alias, config.aliases[alias])
        if not decision.accepted:
            return False
        logger.info("alias.anchored", alias=alias, decision=decision.kind.value)
    return True


@app.command()
def main_command(
    aliases: Annotated[
        Optional[list[str]],
        typer.Argument(help="Alias to print.", show_default=False),
    ] = None,
    recipients: Annotated[
        bool,
        typer.Option(
            "--recipients",
            "-r",
            help="Prefix each key id with `-r ` for use on the gpg command line.",
        ),
    ] = False,
    sign_all: Annotated[
        bool,
        typer.Option("--sign-all", "-s", help="Check for unsigned aliases, sign them, then exit."),
    ] = False,
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file (default: platform config dir)."),
    ] = None,
    homedir: Annotated[
        Optional[Path],
        typer.Option("--homedir", help="GnuPG home directory."),
    ] = None,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Print version information and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Print the key ids for the given aliases."""
    configure_logging()
    if not aliases and not sign_all:
        logger.error("cli.usage", detail="at least one alias is required unless --sign-all is given")
        raise typer.Exit(1)

    try:
        config = load_config(config_file or default_config_path())
        orchestrator = TrustOrchestrator(
            make_provider(homedir),
            config.signing,
            AnchorStore(default_data_dir()),
        )
        if sign_all:
            ok = sign_all_aliases(config, orchestrator)
            raise typer.Exit(0 if ok else 1)
        key_ids = resolve_aliases(config, orchestrator, aliases or [])
    except GpgAliasError as e:
        logger.error(e.code, message=e.message, **e.details)
        raise typer.Exit(1) from e

    if key_ids is None:
        raise typer.Exit(1)
    typer.echo(format_output(key_ids, recipients), nl=False)


def main() -> None:
    """Run the gpg-alias CLI."""
    app()


if __name__ == "__main__":
    main()
