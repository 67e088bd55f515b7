"""
Logging setup for the allocation console.

Activity events go through structlog; everything else uses standard logging
handlers, rendered as JSON or plain text depending on LOG_FORMAT. Both carry
the current request id and admin actor.
"""

import sys
import logging
import logging.handlers
from typing import Optional
from datetime import datetime, timezone
from pathlib import Path
from contextvars import ContextVar

import structlog
from pythonjsonlogger.json import JsonFormatter

from hostel_allocator.config.settings import settings

# Bound per request by RequestContextMiddleware
request_id: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
actor_email: ContextVar[Optional[str]] = ContextVar('actor_email', default=None)

_HANDLER_MARK = '_hostel_allocator'
_LOG_FILE_BYTES = 10 * 1024 * 1024

_configured = False


def add_request_context(logger, method_name, event_dict):
    """structlog processor stamping request id, actor and environment"""
    if request_id.get():
        event_dict['request_id'] = request_id.get()
    if actor_email.get():
        event_dict['actor'] = actor_email.get()
    event_dict['timestamp'] = datetime.now(timezone.utc).isoformat()
    event_dict['environment'] = settings.ENVIRONMENT
    return event_dict


class RequestContextFilter(logging.Filter):
    """Copy the request context onto standard log records"""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, 'request_id', None):
            record.request_id = request_id.get()
        if not getattr(record, 'actor', None):
            record.actor = actor_email.get()
        return True


class AllocatorJsonFormatter(JsonFormatter):

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['actor'] = getattr(record, 'actor', None)
        if record.exc_info:
            log_record['exception'] = self.formatException(record.exc_info)


def _configure_structlog():
    renderer = (
        structlog.processors.JSONRenderer()
        if settings.LOG_FORMAT == "json"
        else structlog.processors.KeyValueRenderer(key_order=['event', 'action'])
    )
    structlog.configure(
        processors=[
            add_request_context,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def _build_formatter() -> logging.Formatter:
    if settings.LOG_FORMAT == "json":
        return AllocatorJsonFormatter('%(asctime)s %(name)s %(levelname)s %(message)s %(request_id)s')
    return logging.Formatter('%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s')


def _install_handler(root: logging.Logger, handler: logging.Handler, formatter: logging.Formatter):
    handler.setFormatter(formatter)
    handler.addFilter(RequestContextFilter())
    setattr(handler, _HANDLER_MARK, True)
    root.addHandler(handler)


def _configure_handlers():
    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.LOG_LEVEL, logging.INFO))

    # Only handlers installed here are replaced on reconfiguration
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            root.removeHandler(handler)

    formatter = _build_formatter()
    _install_handler(root, logging.StreamHandler(sys.stdout), formatter)

    if settings.LOG_FILE:
        log_path = Path(settings.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        _install_handler(
            root,
            logging.handlers.RotatingFileHandler(log_path, maxBytes=_LOG_FILE_BYTES, backupCount=5),
            formatter,
        )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.LOG_SQL_QUERIES else logging.WARNING
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


class LoggerAdapter:
    """Logger that merges bound context into every record's extra"""

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self._context = {}

    def add_context(self, **kwargs) -> "LoggerAdapter":
        self._context.update(kwargs)
        return self

    def _log(self, level: int, message: str, *args, **kwargs):
        extra = dict(self._context)
        extra.update(kwargs.get('extra') or {})
        kwargs['extra'] = extra
        self.logger.log(level, message, *args, **kwargs)

    def debug(self, message: str, *args, **kwargs):
        self._log(logging.DEBUG, message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs):
        self._log(logging.INFO, message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs):
        self._log(logging.WARNING, message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs):
        self._log(logging.ERROR, message, *args, **kwargs)

    def exception(self, message: str, *args, **kwargs):
        kwargs.setdefault('exc_info', True)
        self._log(logging.ERROR, message, *args, **kwargs)


def get_logger(name: Optional[str] = None) -> LoggerAdapter:
    return LoggerAdapter(logging.getLogger(name or 'hostel_allocator'))


def setup_logging(force: bool = False):
    """Configure logging once per process; ``force`` reapplies settings"""
    global _configured
    if _configured and not force:
        return

    if settings.ENABLE_STRUCTURED_LOGGING:
        _configure_structlog()
    _configure_handlers()
    _configured = True

    get_logger(__name__).info("Logging configured", extra={
        'log_level': settings.LOG_LEVEL,
        'log_format': settings.LOG_FORMAT,
        'structured_logging': settings.ENABLE_STRUCTURED_LOGGING,
    })


__all__ = [
    'get_logger',
    'setup_logging',
    'LoggerAdapter',
    'RequestContextFilter',
    'request_id',
    'actor_email',
]
