"""Logging setup for applications embedding the client.

The library itself only creates module loggers (`opldap.client` etc.) and
never installs handlers. Host programs call `setup_logging()` once:

- Console handler (stderr).
- Optional file handler rotated daily (midnight, UTC), keeping
  `retention_days` files.
- Level names are case-insensitive; unknown names fall back to INFO.
"""
from __future__ import annotations

import glob
import logging
import os
import time
from logging.handlers import TimedRotatingFileHandler

_LOG_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s"
_LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Handlers installed by us, removed again on reconfiguration.
_file_handler: logging.Handler | None = None
_console_handler: logging.Handler | None = None


def parse_level(level: str | None) -> int:
    level_str = (level or "INFO").strip().upper()
    if level_str not in _LEVELS:
        level_str = "INFO"
    return getattr(logging, level_str, logging.INFO)


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    retention_days: int = 30,
) -> None:
    """Configure the root logger. Safe to call repeatedly."""
    global _file_handler, _console_handler

    log_level = parse_level(level)
    retention_days = max(1, min(365, int(retention_days or 30)))

    root = logging.getLogger()

    if _file_handler and _file_handler in root.handlers:
        root.removeHandler(_file_handler)
        _file_handler.close()
    _file_handler = None
    if _console_handler and _console_handler in root.handlers:
        root.removeHandler(_console_handler)

    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_LOG_DATE_FORMAT)

    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    _console_handler = ch
    root.addHandler(ch)

    if log_file:
        log_dir = os.path.dirname(os.path.abspath(log_file))
        os.makedirs(log_dir, exist_ok=True)
        fh = TimedRotatingFileHandler(
            log_file,
            when="midnight",
            interval=1,
            backupCount=retention_days,
            encoding="utf-8",
            utc=True,
        )
        fh.suffix = "%Y-%m-%d"
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        _file_handler = fh
        root.addHandler(fh)
        _cleanup_old_logs(log_file, retention_days)

    root.setLevel(log_level)

    # ldap3 logs protocol detail through its own logger when enabled
    logging.getLogger("ldap3").setLevel(max(log_level, logging.WARNING))

    logging.getLogger("opldap").debug(
        "logging configured: level=%s file=%s retention=%d days",
        logging.getLevelName(log_level), log_file or "-", retention_days,
    )


def _cleanup_old_logs(log_file: str, retention_days: int) -> None:
    """Remove rotated files older than retention_days."""
    cutoff = time.time() - (retention_days * 86400)
    for f in glob.glob(f"{log_file}.*"):
        try:
            if os.path.getmtime(f) < cutoff:
                os.remove(f)
        except OSError:
            continue
