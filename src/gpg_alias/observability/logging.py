"""Structured logging for gpg-alias.

stdout belongs to the key identifiers (``gpg $(gpg-alias -r work)``), so
every log record is rendered to stderr. Only records from the ``gpg_alias``
logger hierarchy are shown; third-party libraries stay quiet.

Records emitted while a trust decision is in progress carry the alias being
decided under the ``alias`` key, see :func:`alias_context`.

Environment Variables:
    GPG_ALIAS_LOG_FORMAT: "console" (default) or "json"
    GPG_ALIAS_LOG_LEVEL: DEBUG, INFO (default), WARNING or ERROR
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from structlog.typing import Processor

LOGGER_NAMESPACE = "gpg_alias"
ALIAS_KEY = "alias"

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "console"

ENV_LOG_FORMAT = "GPG_ALIAS_LOG_FORMAT"
ENV_LOG_LEVEL = "GPG_ALIAS_LOG_LEVEL"

_logging_configured = False


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def _processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def _renderer(log_format: str) -> Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    # Colours only when a person is reading stderr.
    return structlog.dev.ConsoleRenderer(
        colors=sys.stderr.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def configure_logging(
    log_format: str | None = None,
    log_level: str | None = None,
    force: bool = False,
) -> None:
    """Install the stderr handler for gpg-alias log records.

    Args:
        log_format: "json" or "console"; defaults to $GPG_ALIAS_LOG_FORMAT.
        log_level: Minimum level name; defaults to $GPG_ALIAS_LOG_LEVEL.
            Unknown names fall back to INFO.
        force: Reconfigure even if logging was already set up, e.g. after
            sys.stderr has been replaced.
    """
    global _logging_configured

    if _logging_configured and not force:
        return

    log_format = (log_format or os.environ.get(ENV_LOG_FORMAT, DEFAULT_LOG_FORMAT)).lower()
    level = _level_from_name(log_level or os.environ.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL))
    processors = _processors()

    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.addFilter(logging.Filter(LOGGER_NAMESPACE))
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_format),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    _logging_configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, configuring defaults on first use.

    ``name`` should be a module ``__name__`` under the gpg_alias package;
    other names are filtered out by the handler.
    """
    if not _logging_configured:
        configure_logging()
    return structlog.stdlib.get_logger(name)


@contextmanager
def alias_context(alias: str) -> Iterator[None]:
    """Tag every record logged inside the block with ``alias``.

    The previous context is restored on exit, also when the block raises.

    Example:
        >>> with alias_context("work"):
        ...     logger.warning("anchor.missing")  # includes alias="work"
    """
    with structlog.contextvars.bound_contextvars(**{ALIAS_KEY: alias}):
        yield
