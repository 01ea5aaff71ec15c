"""
Logging configuration for the NevMo gateway.

Console logging always; a rotating file handler when LOG_FILE is set.
Provider credentials (Basic/Bearer headers, access_token values) are masked
before any handler sees the record.
"""
import logging
import os
import re
from logging.handlers import RotatingFileHandler
from typing import Any

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MAX_BYTES = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5

_AUTH_HEADER_RE = re.compile(r"((?:Bearer|Basic)\s+)([A-Za-z0-9._~+/=-]+)", re.IGNORECASE)
_ACCESS_TOKEN_KV_RE = re.compile(r"(access_token[\"']?\s*[:=]\s*[\"']?)([A-Za-z0-9._~+/=-]+)", re.IGNORECASE)
_SECRET_KEYS = {"access_token", "authorization", "consumer_secret", "subscription_key"}


def _sanitize_str(s: str) -> str:
    s = _AUTH_HEADER_RE.sub(lambda m: m.group(1) + "[REDACTED]", s)
    return _ACCESS_TOKEN_KV_RE.sub(lambda m: m.group(1) + "[REDACTED]", s)


def _sanitize(obj: Any) -> Any:
    if isinstance(obj, str):
        return _sanitize_str(obj)
    if isinstance(obj, dict):
        return {
            k: "[REDACTED]" if str(k).lower() in _SECRET_KEYS else _sanitize(v)
            for k, v in obj.items()
        }
    if isinstance(obj, (list, tuple)):
        return type(obj)(_sanitize(v) for v in obj)
    return obj


class SensitiveDataFilter(logging.Filter):
    """Masks credentials in the message and its format args."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = _sanitize_str(record.msg)
        if isinstance(record.args, tuple):
            record.args = tuple(_sanitize(a) for a in record.args)
        elif isinstance(record.args, dict):
            record.args = _sanitize(record.args)
        return True


def setup_logging() -> None:
    """
    Configure the root logger.

    ENV:
      - APP_ENV: production|development (default: production)
      - LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default: INFO in prod, DEBUG otherwise)
      - LOG_FILE: optional path of a rotating log file
    """
    app_env = os.getenv("APP_ENV", "production").lower()
    default_level = "INFO" if app_env == "production" else "DEBUG"
    level = getattr(logging, os.getenv("LOG_LEVEL", default_level).upper(), logging.INFO)

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    sensitive = SensitiveDataFilter()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    # Avoid duplicate handlers if setup_logging is called multiple times
    root_logger.handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(sensitive)
    root_logger.addHandler(console_handler)

    log_file = os.getenv("LOG_FILE")
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=MAX_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(sensitive)
        root_logger.addHandler(file_handler)

    # httpx logs every request line at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING if app_env == "production" else logging.INFO)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Convenience wrapper to get a named logger.
    """
    return logging.getLogger(name)
