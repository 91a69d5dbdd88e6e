"""
Logging utilities for the Invoice service.
"""
import atexit
import logging
import threading

from invoice.logging.config import logging_settings
from invoice.logging.handlers import get_app_handler, get_audit_handler, get_console_handler, flush_handlers
from invoice.logging.filters import RequestContextFilter, EntityContextFilter
from invoice.logging.slack_handler import slack_handler

_setup_lock = threading.RLock()


def _configure(logger: logging.Logger, handler: logging.Handler, level: int) -> logging.Logger:
    logger.handlers.clear()
    logger.filters.clear()
    logger.addFilter(RequestContextFilter())
    logger.addFilter(EntityContextFilter())
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def get_app_logger(name: str | None = None):
    logger = logging.getLogger(name or 'invoice')
    if logger.handlers:
        return logger
    # service and repository loggers are first requested from worker threads
    with _setup_lock:
        if logger.handlers:
            return logger
        _configure(logger, get_app_handler(), logging_settings.level)
        if logging_settings.to_console:
            logger.addHandler(get_console_handler())
        logger.addHandler(slack_handler)
    return logger


def init_audit_logger():
    logger = logging.getLogger('invoice.audit')
    if logger.handlers:
        return logger
    with _setup_lock:
        if logger.handlers:
            return logger
        return _configure(logger, get_audit_handler(), logging.INFO)


def initialize_logging():
    is_valid, message = logging_settings.validate()
    if not is_valid:
        print(f"Warning: {message}")
    atexit.register(flush_handlers)
    get_app_logger('invoice').info(
        f"logging_initialized | level={logging.getLevelName(logging_settings.level)} firehose={logging_settings.firehose_enabled}"
    )
