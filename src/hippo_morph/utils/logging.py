"""Structured logging for the morphing engine.

Every module logs through a child of the ``hippo_morph`` logger. Nothing is
configured on import: the host application opts in with :func:`setup_logger`
or routes the ``hippo_morph`` namespace through its own handlers.

What reaches each level:

- ERROR: TopologyMismatch diagnostics (a weighted species was dropped from
  the blend because its vertex count differs from the reference topology)
- WARNING: IndexOutOfRange, LengthMismatch and MissingSource diagnostics,
  sessions initialized without any topology, unusable face indices
- INFO: session (re)initialization with species and vertex counts
- DEBUG: per-pass blend summaries, zero-sum fallbacks and passes that kept
  the previous buffer because every weighted species was excluded
"""

import logging
import sys
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = 'hippo_morph'


class ColoredFormatter(logging.Formatter):
    """Colorize the level name of console records with ANSI escape codes."""

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        original_levelname = record.levelname

        if record.levelname in self.COLORS:
            record.levelname = (
                f"{self.COLORS[record.levelname]}"
                f"{record.levelname}"
                f"{self.RESET}"
            )

        try:
            return super().format(record)
        finally:
            record.levelname = original_levelname


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    verbose: bool = True,
    log_file: Optional[Path] = None,
    log_level: str = "INFO"
) -> logging.Logger:
    """
    Configure console and file output for morphing diagnostics.

    The file handler always records DEBUG, so a session log keeps a line for
    every blend pass and fallback. The console handler honours ``log_level``:
    "ERROR" shows only dropped species (TopologyMismatch), "WARNING" adds
    rejected weight updates and missing meshes.

    Args:
        name: Logger name (``'hippo_morph'`` covers the whole package)
        verbose: If True, attach a colored console handler
        log_file: Optional path for a persistent DEBUG log
        log_level: Console level: "DEBUG", "INFO", "WARNING" or "ERROR"

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logger(log_level='WARNING')
        >>> session.set_weights([1.0, 0.0, 0.0])  # mismatches now reach stdout
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    # Re-running setup replaces handlers instead of stacking duplicates
    logger.handlers.clear()
    logger.propagate = False

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(fh)

    if verbose:
        ch = logging.StreamHandler(sys.stdout)
        ch.setLevel(getattr(logging, log_level.upper()))
        ch.setFormatter(ColoredFormatter('%(levelname)s: %(message)s'))
        logger.addHandler(ch)

    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger by name.

    Modules pass ``__name__`` so their records land under ``hippo_morph.*``
    and pick up whatever :func:`setup_logger` attached to the package root.
    """
    return logging.getLogger(name)
