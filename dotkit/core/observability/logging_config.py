"""
Logging configuration — one-time setup for the dotkit CLI.

User-facing progress is printed by the CLI with click; logging carries
the diagnostic trail underneath it (which paths were renamed, which
commands ran).  Every module does ``logger = logging.getLogger(__name__)``.

Level precedence:
    --debug / --verbose / --quiet  >  DOTKIT_LOG_LEVEL  >  WARNING

DOTKIT_LOG_FILE adds a file handler, at DOTKIT_LOG_FILE_LEVEL if set.
"""

from __future__ import annotations

import logging
import os
import sys

_FMT_CONSOLE = "%(message)s"
_FMT_CONSOLE_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_FMT_DETAILED = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"

_DATEFMT_SHORT = "%H:%M:%S"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

ENV_LEVEL = "DOTKIT_LOG_LEVEL"
ENV_FILE = "DOTKIT_LOG_FILE"
ENV_FILE_LEVEL = "DOTKIT_LOG_FILE_LEVEL"


def resolve_level(verbose: bool = False, quiet: bool = False, debug: bool = False) -> str:
    """Pick the console level from CLI flags, falling back to the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LEVEL, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Configure the root logger for the process.

    Args:
        level: Console level name.
        log_file: Optional path of a log file.
        log_file_level: Level for the file handler (default: ``level``).
    """
    numeric_level = _parse_level(level)

    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DETAILED, _DATEFMT_SHORT
    elif numeric_level <= logging.INFO:
        fmt, datefmt = _FMT_CONSOLE_VERBOSE, _DATEFMT_SHORT
    else:
        fmt, datefmt = _FMT_CONSOLE, None

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)

    effective_level = numeric_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else numeric_level
        effective_level = min(effective_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_DETAILED, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    root.setLevel(effective_level)
    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Convert a level name to its numeric value; unknown names mean WARNING."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
