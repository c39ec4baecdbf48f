"""Observability module for gpg-alias.

Structured logging to stderr via structlog, with per-alias context binding.

Example:
    >>> from gpg_alias.observability import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.warning("anchor.missing", alias="work")
"""

from gpg_alias.observability.logging import (
    alias_context,
    configure_logging,
    get_logger,
)

__all__ = [
    "alias_context",
    "configure_logging",
    "get_logger",
]
