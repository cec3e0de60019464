################################################################################
# TAR-DOCKA
#
# @file:        logging.py
# @module:      tar_docka.helpers.logging
# @description: Central logging setup with structured extra fields
# @author:      Markus F. (TZERO78) & KI-Assistenten
# @repository:  https://github.com/TZERO78/tar-docka
# @version:     1.0.0
#
# ------------------------------------------------------------------------------
# Copyright (c) 2025 Markus F. (TZERO78)
# MIT-Lizenz: siehe LICENSE oder https://opensource.org/licenses/MIT
################################################################################

"""
Logging helpers for Tar-Docka.

Modules obtain their logger via get_logger(__name__). The CLI configures the
handlers once through log_manager.configure(). Fields passed via
``extra={...}`` are appended to the message as key=value pairs.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from .constants import LOG_DATE_FORMAT, LOG_FORMAT

LOGGER_NAMESPACE = "tar_docka"

# Attributes present on every LogRecord; everything else came in via extra=
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


class Colors:
    """ANSI color codes for console log output."""

    RESET = "\033[0m"
    DIM = "\033[2m"
    CYAN = "\033[36m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    MAGENTA = "\033[35m"

    LEVELS = {
        "DEBUG": DIM,
        "INFO": CYAN,
        "WARNING": YELLOW,
        "ERROR": RED,
        "CRITICAL": MAGENTA,
    }


class StructuredFormatter(logging.Formatter):
    """
    Formatter that appends ``extra`` fields to the log line.

    Example:
        logger.info("Volume archived", extra={"volume": "pgdata"})
        -> 2025-01-01 10:00:00 - tar_docka.cores... - INFO - Volume archived [volume=pgdata]
    """

    def __init__(self, fmt: str = LOG_FORMAT, datefmt: str = LOG_DATE_FORMAT, use_colors: bool = False):
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_colors = use_colors

    @staticmethod
    def extract_fields(record: logging.LogRecord) -> dict:
        return {
            key: value
            for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = self.extract_fields(record)
        if fields:
            rendered = " ".join(f"{k}={v}" for k, v in sorted(fields.items()))
            line = f"{line} [{rendered}]"
        if self.use_colors:
            color = Colors.LEVELS.get(record.levelname, "")
            if color:
                line = f"{color}{line}{Colors.RESET}"
        return line


class LogManager:
    """Owns the handlers of the package logger."""

    def __init__(self):
        self._logger = logging.getLogger(LOGGER_NAMESPACE)

    def configure(
        self,
        level: Union[str, int] = "INFO",
        log_file: Optional[Union[str, Path]] = None,
        max_size_mb: int = 100,
        backup_count: int = 5,
        use_colors: Optional[bool] = None,
    ) -> None:
        """
        (Re)configure console and optional file logging.

        Args:
            level: Log level name or number
            log_file: Optional path of a rotating log file
            max_size_mb: Rotation size of the log file
            backup_count: Number of rotated files to keep
            use_colors: Force colors on/off (default: only on a TTY)
        """
        if isinstance(level, str):
            numeric = logging.getLevelName(level.upper())
            if not isinstance(numeric, int):
                raise ValueError(f"Invalid log level: {level}")
            level = numeric

        for handler in self._logger.handlers[:]:
            self._logger.removeHandler(handler)
            handler.close()

        if use_colors is None:
            use_colors = sys.stderr.isatty()

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(StructuredFormatter(use_colors=use_colors))
        self._logger.addHandler(console_handler)

        if log_file:
            path = Path(log_file).expanduser()
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                file_handler = RotatingFileHandler(
                    path,
                    maxBytes=max_size_mb * 1024 * 1024,
                    backupCount=backup_count,
                    encoding="utf-8",
                )
                file_handler.setFormatter(StructuredFormatter())
                self._logger.addHandler(file_handler)
            except OSError as e:
                self._logger.warning(f"Could not create log file {path}: {e}")

        self._logger.setLevel(level)


log_manager = LogManager()


def get_logger(name: str) -> logging.Logger:
    """Return a logger below the tar_docka namespace."""
    if name != LOGGER_NAMESPACE and not name.startswith(LOGGER_NAMESPACE + "."):
        name = f"{LOGGER_NAMESPACE}.{name}"
    return logging.getLogger(name)
