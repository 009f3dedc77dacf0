"""
outer_frontiers.log - Logging module with proper Python exception handling.

Usage:
    from outer_frontiers import log

    log.info("Hello")
    log.warn("Something wrong")

    try:
        do_something()
    except Exception as e:
        log.error(e, "Failed to do something")  # includes traceback

Messages go to the standard ``logging`` logger named ``outer_frontiers``,
so host applications configure handlers and levels the usual way.
"""

import logging
import traceback

_logger = logging.getLogger("outer_frontiers")


def debug(msg_or_exc, context: str = ""):
    """Log debug message or exception with context."""
    _emit(logging.DEBUG, msg_or_exc, context)


def info(msg_or_exc, context: str = ""):
    """Log info message or exception with context."""
    _emit(logging.INFO, msg_or_exc, context)


def warn(msg_or_exc, context: str = ""):
    """Log warning message or exception with context."""
    _emit(logging.WARNING, msg_or_exc, context)


def warning(msg_or_exc, context: str = ""):
    """Alias for warn()."""
    warn(msg_or_exc, context)


def error(msg_or_exc, context: str = ""):
    """Log error message or exception with context."""
    _emit(logging.ERROR, msg_or_exc, context)


def exception(msg: str = ""):
    """Log error with current exception traceback."""
    _logger.exception(msg)


def set_level(level: int):
    _logger.setLevel(level)


def _emit(level: int, msg_or_exc, context: str):
    if not _logger.isEnabledFor(level):
        return
    if isinstance(msg_or_exc, BaseException):
        _logger.log(level, _format_exception(msg_or_exc, context))
    elif context:
        _logger.log(level, "%s: %s", context, msg_or_exc)
    else:
        _logger.log(level, "%s", msg_or_exc)


def _format_exception(exc: BaseException, context: str) -> str:
    """Format exception with type, message and traceback."""
    exc_type = type(exc).__name__
    exc_msg = str(exc)
    tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    if context:
        return f"{context}: {exc_type}: {exc_msg}\n{tb}"
    return f"{exc_type}: {exc_msg}\n{tb}"
