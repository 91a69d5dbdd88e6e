"""
Method-level logging for services and repositories.

Classes opt in with `@loggable`. The wrapped methods only log once a
LoggingAspect has been registered, which `logging_aspect_configuration`
does for the development profile alone; otherwise the original method runs
directly.
"""
import functools
import inspect
import logging
from typing import Optional

from invoice.core.constants import Profiles
from invoice.logging.utils import get_app_logger

_registered_aspect: Optional["LoggingAspect"] = None


class LoggingAspect:
    """Logs entry, exit and exceptions of the methods it wraps."""

    def __init__(self, configs):
        self.configs = configs

    def logger(self, module: str) -> logging.Logger:
        return get_app_logger(module)

    def log_around(self, func, name: str, module: str, args, kwargs):
        log = self.logger(module)
        debug = log.isEnabledFor(logging.DEBUG)
        if debug:
            log.debug(f"Enter: {name}() with argument[s] = {_format_args(args, kwargs)}")
        try:
            result = func(*args, **kwargs)
        except ValueError as exc:
            log.error(f"Illegal argument: {_format_args(args, kwargs)} in {name}()")
            self.log_after_throwing(log, name, exc)
            raise
        except Exception as exc:
            self.log_after_throwing(log, name, exc)
            raise
        if debug:
            log.debug(f"Exit: {name}() with result = {result!r}")
        return result

    def log_after_throwing(self, log: logging.Logger, name: str, exc: BaseException):
        cause = exc.__cause__ if exc.__cause__ is not None else "NULL"
        if self.configs.accepts_profile(Profiles.DEVELOPMENT):
            log.error(f"Exception in {name}() with cause = '{cause}' and exception = '{exc}'", exc_info=exc)
        else:
            log.error(f"Exception in {name}() with cause = {cause}")


def _format_args(args, kwargs) -> str:
    # drop the bound instance
    values = [repr(a) for a in args[1:]]
    values += [f"{k}={v!r}" for k, v in kwargs.items()]
    return f"[{', '.join(values)}]"


def register_logging_aspect(aspect: Optional[LoggingAspect]) -> None:
    global _registered_aspect
    _registered_aspect = aspect


def get_logging_aspect() -> Optional[LoggingAspect]:
    return _registered_aspect


def logging_aspect_configuration(configs) -> Optional[LoggingAspect]:
    """Register the aspect when the development profile is active."""
    aspect = LoggingAspect(configs) if configs.accepts_profile(Profiles.DEVELOPMENT) else None
    register_logging_aspect(aspect)
    return aspect


def _wrap(func, name: str, module: str):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        aspect = _registered_aspect
        if aspect is None:
            return func(*args, **kwargs)
        return aspect.log_around(func, name, module, args, kwargs)
    return wrapper


def loggable(cls):
    """
    Class decorator applying the logging aspect to every public method,
    inherited ones included, logged under the decorated class's module.
    """
    for attr, value in inspect.getmembers(cls, inspect.isfunction):
        if attr.startswith("_"):
            continue
        setattr(cls, attr, _wrap(value, f"{cls.__name__}.{attr}", cls.__module__))
    return cls
