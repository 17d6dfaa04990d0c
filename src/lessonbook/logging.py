"""Centralized logging configuration for lessonbook.

Provides rotating file logs with consistent formatting across all components.
"""

from __future__ import annotations

import logging
import os
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Default configuration
DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_FILE = "lessonbook.log"
DEFAULT_MAX_BYTES = 5 * 1024 * 1024  # 5MB
DEFAULT_BACKUP_COUNT = 5
DEFAULT_LOG_LEVEL = "INFO"

# Log format
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_EMAIL_RE = re.compile(r"([A-Za-z0-9._%+-])[A-Za-z0-9._%+-]*@([A-Za-z0-9.-]+\.[A-Za-z]{2,})")


def setup_logging(
    log_dir: str | Path | None = None,
    log_file: str = DEFAULT_LOG_FILE,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    level: str | None = None,
    console: bool = True,
) -> logging.Logger:
    """Set up logging with rotating file handler.

    Args:
        log_dir: Directory for log files. Defaults to 'logs' in current directory.
                 Can be overridden with LESSONBOOK_LOG_DIR environment variable.
        log_file: Log file name. Defaults to 'lessonbook.log'.
        max_bytes: Maximum size per log file before rotation. Defaults to 5MB.
        backup_count: Number of backup files to keep. Defaults to 5.
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to INFO.
               Can be overridden with LESSONBOOK_LOG_LEVEL environment variable.
        console: Whether to also log to console. Defaults to True.

    Returns:
        The root lessonbook logger.
    """
    if log_dir is None:
        log_dir = os.environ.get("LESSONBOOK_LOG_DIR", DEFAULT_LOG_DIR)
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    if level is None:
        level = os.environ.get("LESSONBOOK_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("lessonbook")
    logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    log_path = log_dir / log_file
    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    logger.info("lessonbook logging initialized (level=%s, file=%s)", level, log_path)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a component.

    Args:
        name: Component name (e.g., 'registration', 'notifications').
              Will be prefixed with 'lessonbook.'.

    Returns:
        Logger instance for the component.
    """
    if not name.startswith("lessonbook."):
        name = f"lessonbook.{name}"
    return logging.getLogger(name)


def mask_email(email: str) -> str:
    """Mask an e-mail address, keeping the first character and the domain.

    Args:
        email: Address to mask.

    Returns:
        Masked address, e.g. ``j***@example.com``.
    """
    return _EMAIL_RE.sub(r"\1***@\2", email)


def sanitize_for_log(text: str) -> str:
    """Remove personal and secret data from log output.

    Args:
        text: Text that may contain e-mail addresses, phone numbers or credentials.

    Returns:
        Sanitized text safe for logging.
    """
    patterns = [
        (r"(SMTP_PASS|password|passwd)=\S+", r"\1=[REDACTED]"),
        (r"Bearer [a-zA-Z0-9._-]+", "Bearer [REDACTED]"),
        (r"\+?\d[\d ]{7,}\d", "[PHONE]"),
    ]

    result = mask_email(text)
    for pat, replacement in patterns:
        result = re.sub(pat, replacement, result)

    return result
