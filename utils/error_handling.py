import functools
import logging
from utils.exceptions import TuningException


def handle_engine_errors(operation_name: str):
    """
    Decorator for engine entry points.

    Project exceptions propagate untouched; anything else is logged against the
    owning engine class and re-raised as a TuningException naming the operation.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            try:
                return func(self, *args, **kwargs)
            except TuningException:
                raise
            except Exception as e:
                logger = getattr(self, 'logger', None) or logging.getLogger(__name__)
                logger.error(f"[{type(self).__name__}] {operation_name} failed: {e}", exc_info=True)
                raise TuningException(f"{operation_name} failed: {e}") from e
        return wrapper
    return decorator
