"""Logging for harden_host runs.

Console progress is printed by the steps themselves; this module keeps a
persistent, rotating record of every run under /var/log/harden_host/ so an
operator can reconstruct what a run changed after the fact.

Key Features:
- Rotating file handlers with configurable size and backup count
- Structured logging format with timestamps and severity levels
- Automatic fallback to stderr if file logging fails
- Concise one-line summaries of command results
"""

from __future__ import annotations

from logging import (
    Logger, Formatter, StreamHandler, getLogger, getLevelName, INFO, WARNING
)
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union
import sys
import subprocess
from lib.types import BYTES_PER_MB

# Default log configuration
DEFAULT_LOG_MAX_BYTES = 5 * BYTES_PER_MB  # 5 MB
DEFAULT_LOG_BACKUP_COUNT = 5
DEFAULT_LOG_LEVEL = INFO
DEFAULT_LOG_DIR = "/var/log/harden_host"

# Format: timestamp - severity - logger - message
STANDARD_LOG_FORMAT = "%(asctime)s - %(levelname)-8s - %(name)s - %(message)s"
STANDARD_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _ensure_fallback_handler(logger: Logger, level: int = INFO) -> None:
    """Add a stderr handler as fallback if no handlers are configured.
    
    Args:
        logger: Logger instance to add fallback handler to
        level: Log level for the handler
    """
    if logger.handlers:
        return

    handler = StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(get_standard_formatter())
    logger.addHandler(handler)


def get_standard_formatter() -> Formatter:
    """Get the standard formatter for all harden_host logs."""
    return Formatter(STANDARD_LOG_FORMAT, STANDARD_DATE_FORMAT)


def get_rotating_logger(
    name: str,
    log_file: str,
    max_bytes: int = DEFAULT_LOG_MAX_BYTES,
    backup_count: int = DEFAULT_LOG_BACKUP_COUNT,
    level: int = DEFAULT_LOG_LEVEL
) -> Logger:
    """Return a logger configured with a rotating file handler.
    
    Args:
        name: Logger name
        log_file: Path to log file
        max_bytes: Maximum size of log file before rotation
        backup_count: Number of backup files to keep
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        
    Returns:
        Configured Logger instance with rotating file handler
    """
    logger = getLogger(name)
    if not logger.handlers:
        logger.setLevel(level)
        logger.propagate = False

    log_path = Path(log_file)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print(f"Error creating log directory {log_path.parent}: {e}", file=sys.stderr)
        _ensure_fallback_handler(logger, level)
        return logger

    log_file_path = str(log_path.resolve())
    for handler in logger.handlers:
        if isinstance(handler, RotatingFileHandler) and handler.baseFilename == log_file_path:
            return logger

    try:
        handler = RotatingFileHandler(log_file_path, maxBytes=max_bytes, backupCount=backup_count)
        handler.setLevel(level)
        handler.setFormatter(get_standard_formatter())
        logger.addHandler(handler)
    except OSError as e:
        print(f"Error opening log file {log_file_path}: {e}", file=sys.stderr)
        _ensure_fallback_handler(logger, level)
        return logger

    return logger


def get_run_logger(
    name: str = "harden_host",
    log_dir: Optional[str] = None,
    level: Union[int, str] = DEFAULT_LOG_LEVEL
) -> Logger:
    """Get the logger for a hardening run.

    Example:
        logger = get_run_logger(level="DEBUG")
        logger.info('Hardening SSH')
    """
    if isinstance(level, str):
        level = getLevelName(level)
    log_file = Path(log_dir or DEFAULT_LOG_DIR) / f"{name}.log"
    return get_rotating_logger(name, str(log_file), level=level)


def log_message(logger: Logger, message: str, level: int = INFO) -> None:
    """Write a log message with graceful error handling.
    
    Args:
        logger: Logger instance to use
        message: Message to log
        level: Log level (INFO, WARNING, ERROR, etc.)
    """
    try:
        logger.log(level, message)
    except OSError as e:
        log_target = "unknown log"
        for handler in logger.handlers:
            if isinstance(handler, RotatingFileHandler):
                log_target = handler.baseFilename
                break
        print(f"Error writing to log {log_target}: {e}", file=sys.stderr)


def log_subprocess_result(
    logger: Logger,
    action: str,
    result: subprocess.CompletedProcess[str],
    success_level: int = INFO,
    failure_level: int = WARNING
) -> bool:
    """Log concise command result details and return success state."""
    if result.returncode == 0:
        logger.log(success_level, f"✓ {action}")
        return True

    stderr_raw = result.stderr or ""
    if isinstance(stderr_raw, bytes):
        stderr_raw = stderr_raw.decode(errors="replace")
    stderr = stderr_raw.strip().splitlines()
    if stderr:
        detail_lines = stderr[:3]
        details = " | ".join(detail_lines)
        if len(stderr) > 3:
            details += " | ..."
    else:
        details = f"exit code {result.returncode}"
    logger.log(failure_level, f"⚠ {action} failed: {details}")
    return False
