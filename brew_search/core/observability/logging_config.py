"""
Logging setup for the brew-search CLI.

main.py calls ``setup_logging`` once, before any command runs.  Modules
log through ``logging.getLogger(__name__)`` and never add handlers.

Console level, highest priority first:
    --debug / --verbose / --quiet  >  BREW_SEARCH_LOG_LEVEL  >  WARNING

BREW_SEARCH_LOG_FILE adds a file handler; BREW_SEARCH_LOG_FILE_LEVEL
sets its level independently of the console.
"""

from __future__ import annotations

import logging
import sys

# ── Formats ─────────────────────────────────────────────────────

_CLOCK = "%H:%M:%S"

# (max level, format, datefmt); first row whose level >= the console level wins
_CONSOLE_LAYOUTS: tuple[tuple[int, str, str | None], ...] = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s", _CLOCK),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", _CLOCK),
)
_CONSOLE_DEFAULT = "%(message)s"

_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# requests/urllib3 log every connection at DEBUG
_NOISY_LOGGERS = ("urllib3", "charset_normalizer", "asyncio")


def _console_formatter(level: int) -> logging.Formatter:
    for max_level, fmt, datefmt in _CONSOLE_LAYOUTS:
        if level <= max_level:
            return logging.Formatter(fmt, datefmt=datefmt)
    return logging.Formatter(_CONSOLE_DEFAULT)


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Install the console handler and, optionally, a file handler.

    Replaces any handlers already on the root logger, so calling it
    again (as each CLI invocation in a test run does) is safe.

    Args:
        level: Console level name.  Unknown names mean WARNING.
        log_file: Path of an extra log file, if any.
        log_file_level: Level for ``log_file``; defaults to ``level``.
        quiet_third_party: Hold the HTTP stack's loggers at WARNING
            unless the console is at DEBUG.
    """
    console_level = _parse_level(level)

    # stderr keeps stdout clean for the finder and brew output
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    handlers[0].setLevel(console_level)
    handlers[0].setFormatter(_console_formatter(console_level))

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(_parse_level(log_file_level) if log_file_level else console_level)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
        handlers.append(file_handler)

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(min(h.level for h in handlers))

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def resolve_level(
    *, debug: bool, verbose: bool, quiet: bool, env_level: str | None
) -> str:
    """Pick the console level from CLI flags, falling back to the env var."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return env_level or "WARNING"


def _parse_level(name: str | None) -> int:
    value = logging.getLevelName(name.upper()) if name else None
    return value if isinstance(value, int) else logging.WARNING
