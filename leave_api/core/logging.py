"""
Logging Configuration and Utilities

Structured logging on top of the standard library: a single root handler
(JSON via python-json-logger, or plain text) with structlog wrapping the
stdlib loggers so application code can log key/value events.
"""

import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog
from pythonjsonlogger.json import JsonFormatter

# Context variables for request tracking
request_id: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
user_id: ContextVar[Optional[str]] = ContextVar('user_id', default=None)

SENSITIVE_KEYS = ('password', 'token', 'secret', 'otp', 'code', 'cookie', 'authorization')


class RequestContextProcessor:
    """Add request context to log records"""

    def __init__(self, environment: str = "development"):
        self.environment = environment

    def __call__(self, logger, method_name, event_dict):
        req_id = request_id.get()
        if req_id:
            event_dict['request_id'] = req_id

        uid = user_id.get()
        if uid:
            event_dict['user_id'] = uid

        event_dict['timestamp'] = datetime.now(timezone.utc).isoformat()
        event_dict['service'] = 'leave-api'
        event_dict['environment'] = self.environment
        return event_dict


class SecurityLogProcessor:
    """Mask sensitive values before they reach a handler"""

    def __call__(self, logger, method_name, event_dict):
        self._sanitize_event_dict(event_dict)
        return event_dict

    def _sanitize_event_dict(self, event_dict: Dict[str, Any]):
        for key in list(event_dict.keys()):
            if key == 'event':
                continue
            if any(sensitive in key.lower() for sensitive in SENSITIVE_KEYS):
                event_dict[key] = '[REDACTED]'
            elif isinstance(event_dict[key], dict):
                self._sanitize_event_dict(event_dict[key])


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter for structured logging"""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['module'] = record.module
        log_record['function'] = record.funcName
        log_record['line'] = record.lineno


def _configure_library_loggers(log_level: str) -> None:
    """Reduce noise from external libraries"""
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if log_level == "DEBUG" else logging.WARNING
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("celery").setLevel(logging.INFO)


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    environment: str = "development",
) -> None:
    """Initialize logging configuration"""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    if log_format == "json":
        formatter: logging.Formatter = CustomJsonFormatter(
            '%(asctime)s %(name)s %(levelname)s %(message)s'
        )
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    processors = [
        structlog.stdlib.filter_by_level,
        RequestContextProcessor(environment),
        SecurityLogProcessor(),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.processors.KeyValueRenderer(key_order=['event']))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    _configure_library_loggers(log_level)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structlog logger bound to the given module name.

    Args:
        name: Logger name, usually ``__name__``

    Returns:
        Bound structlog logger writing through the stdlib root handler
    """
    return structlog.get_logger(name or "leave_api")


__all__ = [
    'get_logger',
    'setup_logging',
    'request_id',
    'user_id',
]
