"""
Logging configuration — central setup for the CLI.

Called once at startup by main.py.  Every module that does
``logger = logging.getLogger(__name__)`` inherits this config.

Levels are resolved in precedence order:
    CLI flag  >  UNITCTL_LOG_LEVEL env var  >  unitctl.yml  >  WARNING

Two sinks are kept apart:
    - diagnostics (``unitctl.*``) go to stderr, optionally also to
      UNITCTL_DEBUG_LOG;
    - raw output of external actions (``unitctl.actions``) goes only to
      the action log file, or nowhere. It never reaches the terminal,
      where the resolution tree is being drawn.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

ACTION_LOGGER = "unitctl.actions"

# ── Format strings ──────────────────────────────────────────────

# WARNING level — minimal, no noise
_FMT_MINIMAL = "%(message)s"

# INFO level — timestamped with module context
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_DATEFMT_VERBOSE = "%H:%M:%S"

# DEBUG level — full diagnostic with file:line
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_DEBUG = "%H:%M:%S"

# File output — always full detail
_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

# Action log — timestamp and the raw line
_FMT_ACTION = "%(asctime)s %(message)s"
_DATEFMT_ACTION = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    action_log: str | Path | None = None,
) -> None:
    """Configure Python logging for the entire process.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a diagnostic log file.
        log_file_level: Optional separate level for the log file.
            Defaults to the same as ``level``.
        action_log: Optional path receiving raw output of external
            actions. Without it that output is discarded.
    """
    numeric_level = _parse_level(level)

    # ── Console handler (stderr) ────────────────────────────────
    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG, _DATEFMT_DEBUG
    elif numeric_level <= logging.INFO:
        fmt, datefmt = _FMT_VERBOSE, _DATEFMT_VERBOSE
    else:
        fmt, datefmt = _FMT_MINIMAL, None

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    # ── Root logger ─────────────────────────────────────────────
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)

    # Effective root level = minimum of console and file levels
    effective_level = numeric_level

    # ── File handler (optional) ─────────────────────────────────
    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else numeric_level
        effective_level = min(effective_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    root.setLevel(effective_level)

    setup_action_log(action_log)

    # Don't propagate exceptions from logging itself
    logging.raiseExceptions = False


def setup_action_log(path: str | Path | None) -> logging.Logger:
    """Point the action logger at ``path``, or at nothing.

    The action logger never propagates to the root logger.
    """
    logger = logging.getLogger(ACTION_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False
    logger.setLevel(logging.INFO)

    if path is None:
        logger.addHandler(logging.NullHandler())
        return logger

    target = Path(path).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    fh = logging.FileHandler(target, encoding="utf-8")
    fh.setFormatter(logging.Formatter(_FMT_ACTION, datefmt=_DATEFMT_ACTION))
    logger.addHandler(fh)
    return logger


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
