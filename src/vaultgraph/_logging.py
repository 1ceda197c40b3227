"""Logging configuration for vaultgraph.

Modules log through the standard library:

    import logging
    log = logging.getLogger(__name__)

The core (parser, resolver, backlinks, tree) only ever logs at DEBUG, for
entries it skipped or targets it could not resolve. Nothing is printed unless
the embedding application (or the ``vg`` CLI) calls ``configure_logging``.

The log level can be configured via the VAULTGRAPH_LOG_LEVEL environment variable:
    - DEBUG: Skipped entries, resolution steps
    - INFO: General operational messages (default)
    - WARNING: Unexpected situations that were handled
    - ERROR: Errors that prevented an operation
"""

import logging
import os
import sys

PACKAGE_LOGGER = "vaultgraph"
LOG_LEVEL_ENV = "VAULTGRAPH_LOG_LEVEL"


def configure_logging() -> None:
    """Configure logging for the vaultgraph package.

    Call this once at application startup (the CLI does it in its group callback).
    Subsequent calls are no-ops. Handlers attached by someone else (a test
    harness, the embedding application) do not count as configured.
    """
    root_logger = logging.getLogger(PACKAGE_LOGGER)

    if _own_handlers(root_logger):
        return

    level_name = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(PACKAGE_LOGGER)
    handler.setLevel(level)

    # [level] logger: message
    formatter = logging.Formatter(
        fmt="[%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)

    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    # Avoid duplicate messages through the root logger
    root_logger.propagate = False


def set_quiet_mode(quiet: bool) -> None:
    """Suppress everything below ERROR for the package logger.

    Args:
        quiet: True to silence warnings, False to restore the configured level.
    """
    root_logger = logging.getLogger(PACKAGE_LOGGER)
    if quiet:
        level = logging.ERROR
    else:
        level_name = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
        level = getattr(logging, level_name, logging.INFO)

    root_logger.setLevel(level)
    for handler in _own_handlers(root_logger):
        handler.setLevel(level)


def _own_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if h.get_name() == PACKAGE_LOGGER]
