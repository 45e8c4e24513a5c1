"""
Logging for the NoteShare backend.

Everything under the ``noteshare`` logger goes to stdout as one JSON object
per line (coloured text when ``debug`` is on) and, when ``log_to_file`` is
set, to rotating files under ``log_dir``. Structured fields are passed with
``extra=`` and end up under the ``extra`` key of the JSON line.
"""
import json
import logging
import logging.config
import sys
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from ..config import get_settings

# attributes every LogRecord has; anything else came in through extra=
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {'message', 'asctime'}

# third party loggers and the level they are capped at
LIBRARY_LEVELS = {
    'uvicorn': 'INFO',
    'uvicorn.access': 'INFO',
    'sqlalchemy': 'WARNING',
    'aiosqlite': 'WARNING',
}

LEVEL_COLORS = {
    'DEBUG': '\033[36m',
    'INFO': '\033[32m',
    'WARNING': '\033[33m',
    'ERROR': '\033[31m',
    'CRITICAL': '\033[35m',
}

_MAX_LOG_BYTES = 10 * 1024 * 1024


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            'timestamp': datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            entry['exception'] = {
                'type': exc_type.__name__ if exc_type else None,
                'message': str(exc_value) if exc_value else None,
                'traceback': self.formatException(record.exc_info),
            }

        extra = {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRS}
        if extra:
            entry['extra'] = extra

        # ids and timestamps in extra are not JSON types
        return json.dumps(entry, ensure_ascii=False, default=str)


class ColoredFormatter(logging.Formatter):
    """Human readable console output for local development."""

    RESET = '\033[0m'
    DIM = '\033[90m'

    def format(self, record: logging.LogRecord) -> str:
        # colour a copy, the file handlers format the same record
        styled = logging.makeLogRecord(vars(record))
        color = LEVEL_COLORS.get(record.levelname, '')
        styled.levelname = f"{color}{record.levelname}{self.RESET}"
        styled.name = f"{self.DIM}{record.name}{self.RESET}"
        return super().format(styled)


def get_log_level(level_str: Optional[str] = None) -> int:
    """Numeric level for a name such as ``"debug"``; unknown names mean INFO."""
    name = (level_str or get_settings().log_level).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def _rotating_handler(path: Path, formatter: str, level: str) -> Dict[str, Any]:
    return {
        'class': 'logging.handlers.RotatingFileHandler',
        'filename': str(path),
        'maxBytes': _MAX_LOG_BYTES,
        'backupCount': 5,
        'encoding': 'utf-8',
        'formatter': formatter,
        'level': level,
    }


def build_logging_config() -> Dict[str, Any]:
    """dictConfig for the current settings."""
    settings = get_settings()

    handlers: Dict[str, Any] = {
        'console': {
            'class': 'logging.StreamHandler',
            'stream': sys.stdout,
            'formatter': 'colored' if settings.debug else 'json',
            'level': get_log_level(),
        },
    }
    if settings.log_to_file:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers['file'] = _rotating_handler(log_dir / 'noteshare.log', 'plain', 'DEBUG')
        handlers['error_file'] = _rotating_handler(log_dir / 'error.log', 'json', 'ERROR')

    loggers: Dict[str, Any] = {
        'noteshare': {'handlers': list(handlers), 'level': 'DEBUG', 'propagate': False},
    }
    for name, level in LIBRARY_LEVELS.items():
        loggers[name] = {'handlers': ['console'], 'level': level, 'propagate': False}

    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'json': {'()': JSONFormatter},
            'colored': {
                '()': ColoredFormatter,
                'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
                'datefmt': '%H:%M:%S',
            },
            'plain': {
                'format': '%(asctime)s %(levelname)-8s %(name)s %(funcName)s:%(lineno)d %(message)s',
            },
        },
        'handlers': handlers,
        'loggers': loggers,
        'root': {'handlers': ['console'], 'level': 'WARNING'},
    }


def setup_logging() -> None:
    """Install the logging config. Safe to call more than once."""
    settings = get_settings()
    logging.config.dictConfig(build_logging_config())
    get_logger('logging').info("Logging configured", extra={
        'log_level': settings.log_level,
        'environment': settings.environment,
        'log_to_file': settings.log_to_file,
    })


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``noteshare`` namespace."""
    return logging.getLogger(f"noteshare.{name}")


class LoggingMiddleware:
    """ASGI middleware logging one line per HTTP request, with status and duration."""

    def __init__(self, app, logger_name: str = "http"):
        self.app = app
        self.logger = get_logger(logger_name)

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        request_id = uuid.uuid4().hex[:12]
        started = time.perf_counter()
        request_fields = {
            'request_id': request_id,
            'method': scope['method'],
            'path': scope['path'],
            'client_ip': scope['client'][0] if scope.get('client') else None,
        }

        def elapsed_ms() -> float:
            return round((time.perf_counter() - started) * 1000, 2)

        async def send_with_logging(message):
            if message["type"] == "http.response.start":
                self.logger.info(
                    f"{scope['method']} {scope['path']} {message.get('status')}",
                    extra={**request_fields, 'status_code': message.get('status'), 'duration_ms': elapsed_ms()},
                )
            await send(message)

        try:
            await self.app(scope, receive, send_with_logging)
        except Exception as exc:
            self.logger.error(
                f"{scope['method']} {scope['path']} failed",
                extra={**request_fields, 'duration_ms': elapsed_ms(), 'exception_type': type(exc).__name__},
            )
            raise
