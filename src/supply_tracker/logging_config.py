"""
Logging configuration for the Tactical Supply tracker.

This module sets up application-wide logging with both file and console output.
Different modules get their own loggers while sharing the same configuration.

The audit trail (one "[timestamp] message" line per inventory action) is a
separate, non-propagating logger so it never mixes with diagnostic output.
"""

import logging
import os
from datetime import datetime
from logging.handlers import RotatingFileHandler


# Log format - includes timestamp, logger name, level, and message
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Audit lines look like: [Sat Oct 18 20:15:02 2026] Added equipment: Tent (ID: 4)
AUDIT_FORMAT = "[%(asctime)s] %(message)s"
AUDIT_DATE_FORMAT = "%a %b %d %H:%M:%S %Y"

AUDIT_LOGGER_PREFIX = "supply_tracker.audit"

LOG_MAX_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def _rotating_handler(path, level, formatter):
    # 10 MB per file, 5 backups
    handler = RotatingFileHandler(path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(log_dir="logs", log_level=logging.INFO):
    """
    Set up application-wide logging configuration.

    This creates handlers for:
    - Console output (WARNING and above, so the menu stays readable)
    - General application log file (log_level and above)
    - Error log file (ERROR and above)

    Args:
        log_dir: Directory for app.log / errors.log (created if missing)
        log_level: Minimum level to log (default: logging.INFO)
    """
    if not os.path.exists(log_dir):
        os.makedirs(log_dir)

    app_log_file = os.path.join(log_dir, "app.log")
    error_log_file = os.path.join(log_dir, "errors.log")

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(formatter)

    app_file_handler = _rotating_handler(app_log_file, log_level, formatter)
    error_file_handler = _rotating_handler(error_log_file, logging.ERROR, formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    root_logger.addHandler(console_handler)
    root_logger.addHandler(app_file_handler)
    root_logger.addHandler(error_file_handler)

    root_logger.info("=" * 80)
    root_logger.info(f"Tactical Supply Tracker Started - {datetime.now().strftime(DATE_FORMAT)}")
    root_logger.info(f"Log Level: {logging.getLevelName(log_level)}")
    root_logger.info(f"Logs Directory: {os.path.abspath(log_dir)}")
    root_logger.info("=" * 80)


def get_logger(name):
    """
    Get a logger for a specific module.

    Args:
        name: Name for the logger (typically __name__ of the module)

    Returns:
        Logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Loaded 12 equipment items")
    """
    return logging.getLogger(name)


def setup_audit_logger(log_file):
    """
    Set up the audit logger that appends one line per inventory action.

    One logger exists per audit file, so independent stores writing to
    different files never share handlers.

    The handler opens the file lazily (delay=True). An open failure is raised
    as OSError from the logging call; AuditTrail catches it.

    Args:
        log_file: Path of the append-only audit file (e.g. equipment.log)

    Returns:
        Logger instance for audit lines
    """
    log_file = os.path.abspath(os.fspath(log_file))

    logger = logging.getLogger(f"{AUDIT_LOGGER_PREFIX}.{log_file}")
    logger.setLevel(logging.INFO)

    # Audit lines must not end up in app.log / console
    logger.propagate = False

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    audit_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8", delay=True)
    audit_handler.setLevel(logging.INFO)
    audit_handler.setFormatter(logging.Formatter(AUDIT_FORMAT, datefmt=AUDIT_DATE_FORMAT))

    logger.addHandler(audit_handler)

    return logger


def close_audit_logger(logger):
    """Flush and detach every handler of an audit logger."""
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
