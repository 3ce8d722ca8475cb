"""
Unified logging setup for the auto-navigation engine and its host.

Defaults:
- INFO/DEBUG to stdout, WARNING/ERROR to stderr
- Level INFO (overridable via env)
- Optional JSON format and optional rotating file handler via env

Env options (optional):
- AUTONAV_LOG_LEVEL=DEBUG|INFO|WARNING|ERROR (default INFO)
- AUTONAV_LOG_JSON=1 (JSON formatting)
- AUTONAV_LOG_FILE=/path/to/file.log (RotatingFileHandler)
- AUTONAV_LOG_DIR=/path/to/dir (uses <service>.log when AUTONAV_LOG_FILE unset)
"""

from __future__ import annotations

import json
import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Optional


_INITIALIZED = False
_DEFAULT_SERVICE = ''
_TRUTHY = ('1', 'true', 'yes', 'on')

__all__ = [
    'setup_logging',
    'get_logger',
    'module_logger',
    'reset_logging',
]


class _ServiceFilter(logging.Filter):
    def __init__(self, service: str):
        super().__init__()
        self.service = service

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, 'service', None):
            record.service = self.service
        return True


class _JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            'ts': self.formatTime(record, datefmt='%Y-%m-%dT%H:%M:%S'),
            'level': record.levelname,
            'name': record.name,
            'service': getattr(record, 'service', ''),
            'message': record.getMessage(),
        }
        if record.exc_info:
            payload['exc_info'] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


class _MinLevelFilter(logging.Filter):
    def __init__(self, min_level: int):
        super().__init__()
        self.min_level = min_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= self.min_level


class _MaxLevelFilter(logging.Filter):
    def __init__(self, max_level: int):
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= self.max_level


def _get_level(level: Optional[str]) -> int:
    name = (level or os.getenv('AUTONAV_LOG_LEVEL') or 'INFO').upper()
    value = getattr(logging, name, logging.INFO)
    return value if isinstance(value, int) else logging.INFO


def setup_logging(service: str = 'autonavigation', level: Optional[str] = None,
                  json_format: Optional[bool] = None) -> None:
    """Configure unified logging once. Safe to call multiple times.

    Args:
        service: service label stamped on every record
        level: optional level override (DEBUG/INFO/...) else from env
        json_format: optional flag to force JSON format, else from env
    """
    global _INITIALIZED
    global _DEFAULT_SERVICE
    if _INITIALIZED:
        return

    logger = logging.getLogger()
    logger.setLevel(_get_level(level))

    # Formatter
    use_json = (str(json_format).lower() in _TRUTHY) if json_format is not None \
        else (os.getenv('AUTONAV_LOG_JSON', '').lower() in _TRUTHY)
    if use_json:
        formatter = _JSONFormatter()
    else:
        formatter = logging.Formatter('%(asctime)s %(levelname)s %(name)s [%(service)s] %(message)s')

    service_filter = _ServiceFilter(service)

    # Split streams: INFO/DEBUG -> stdout, WARNING/ERROR -> stderr
    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.setFormatter(formatter)
    stdout_handler.addFilter(service_filter)
    stdout_handler.addFilter(_MaxLevelFilter(logging.INFO))
    logger.addHandler(stdout_handler)

    stderr_handler = logging.StreamHandler(stream=sys.stderr)
    stderr_handler.setFormatter(formatter)
    stderr_handler.addFilter(service_filter)
    stderr_handler.addFilter(_MinLevelFilter(logging.WARNING))
    logger.addHandler(stderr_handler)

    # Optional file handler
    log_path = os.getenv('AUTONAV_LOG_FILE')
    if not log_path:
        log_dir = os.getenv('AUTONAV_LOG_DIR')
        if log_dir:
            log_path = str(Path(log_dir) / f'{service}.log')

    if log_path:
        try:
            Path(log_path).parent.mkdir(parents=True, exist_ok=True)
            fh = logging.handlers.RotatingFileHandler(log_path, maxBytes=5 * 1024 * 1024, backupCount=5, encoding='utf-8')
            fh.setFormatter(formatter)
            fh.addFilter(service_filter)
            logger.addHandler(fh)
        except OSError:
            logger.warning(f"Could not open log file {log_path}, using console only")

    _DEFAULT_SERVICE = service
    _INITIALIZED = True


def reset_logging() -> None:
    """Remove handlers installed by setup_logging (used by tests and host reloads)."""
    global _INITIALIZED
    root = logging.getLogger()
    for handler in list(root.handlers):
        if any(isinstance(f, _ServiceFilter) for f in handler.filters):
            root.removeHandler(handler)
            handler.close()
    _INITIALIZED = False


def get_logger(name: Optional[str] = None, **context) -> logging.LoggerAdapter:
    base = logging.getLogger(name or __name__)
    # Ensure 'service' in context so formatter always sees it; rely on filter as fallback
    if 'service' not in context:
        context['service'] = _DEFAULT_SERVICE
    return logging.LoggerAdapter(base, context)


def module_logger(**context) -> logging.LoggerAdapter:
    """Convenience to get a logger for the caller's module."""
    name = sys._getframe(1).f_globals.get('__name__', __name__)
    return get_logger(name, **context)
