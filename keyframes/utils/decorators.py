"""
Failure logging decorators for engine seams.

``suppress_exceptions`` guards diagnostics that must never interrupt
playback (host loop metrics). ``log_errors`` records which compile entry
point failed before the error reaches the template author.
"""
import logging
from functools import wraps
from typing import Any, Callable, Optional, ParamSpec, TypeVar

from keyframes.logging.logger import get_logger

P = ParamSpec('P')
T = TypeVar('T')

logger = get_logger(__name__)


def _report(log: Optional[logging.Logger], level: str, text: str) -> None:
    # Unknown level names fall back to error.
    target = log or logger
    getattr(target, level, target.error)(text, exc_info=True)


def suppress_exceptions(
    logger_instance: Optional[Any] = None,
    message: str = "Operation failed",
    return_value: Any = None,
    log_level: str = "error",
) -> Callable[[Callable[P, T]], Callable[P, Optional[T]]]:
    """Log any exception from the wrapped call and return ``return_value``.

    Example:
        @suppress_exceptions(logger, "[ANIM] Metrics logging failed", log_level="debug")
        def _log_profile_summary(self) -> None:
            ...
    """
    def decorator(func: Callable[P, T]) -> Callable[P, Optional[T]]:
        @wraps(func)
        def guarded(*args: P.args, **kwargs: P.kwargs) -> Optional[T]:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                _report(logger_instance, log_level, f"{message}: {e}")
                return return_value
        return guarded
    return decorator


def log_errors(
    logger_instance: Optional[Any] = None,
    message: str = "Error in {func_name}",
    log_level: str = "error",
    reraise: bool = True,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Log a failure of the wrapped call, naming it via ``{func_name}``.

    The exception is re-raised unless ``reraise`` is False, in which case
    the call returns None.
    """
    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        prefix = message.format(func_name=func.__name__)

        @wraps(func)
        def logged(*args: P.args, **kwargs: P.kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                _report(logger_instance, log_level, f"{prefix}: {e}")
                if reraise:
                    raise
                return None  # type: ignore[return-value]
        return logged
    return decorator
