#!/usr/bin/env python3
"""
Logging configuration for the importer.

Console output goes to stderr so that records written to stdout stay
machine-readable. A rotating log file is added when a log directory is given
(or LOG_DIR is set).

Usage:
    from mwimport.logging_config import setup_logging

    logger = setup_logging(
        name="mwimport",
        source_id="enwiki",
        log_dir="/var/log/mwimport",  # Optional
    )
    logger.info("Starting import...")
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    name: str = "mwimport",
    source_id: Optional[str] = None,
    log_dir: Optional[str] = None,
    level: int = logging.INFO,
    max_bytes: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5,
    console: bool = True,
) -> logging.Logger:
    """
    Set up logging to stderr and, optionally, a rotating file.

    Args:
        name: Logger name; child loggers (name.*) inherit the handlers
        source_id: Wiki identifier for the log filename (e.g., "enwiki")
        log_dir: Directory for log files (default: LOG_DIR env var, else no file)
        level: Logging level (default: INFO)
        max_bytes: Max log file size before rotation
        backup_count: Number of rotated log files to keep
        console: Whether to also log to stderr

    Returns:
        Configured logger instance

    Log files are named: {source_id}-{name}.log (e.g., enwiki-mwimport.log)
    """
    if log_dir is None:
        log_dir = get_log_dir()

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Clear any existing handlers (for re-initialization)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    log_file = None
    if log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        log_file = log_path / (f"{source_id}-{name}.log" if source_id else f"{name}.log")

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        logger.debug(f"Logging to {log_file}")
    return logger


def get_log_dir(default: Optional[str] = None) -> Optional[Path]:
    """
    Get the log directory from the LOG_DIR environment variable.

    Returns the default (None = file logging off) when LOG_DIR is unset.
    """
    value = os.environ.get("LOG_DIR", default)
    return Path(value) if value else None
