"""
Utility decorators for view3d
"""

import time
import logging
import functools
from typing import Callable, Any

logger = logging.getLogger(__name__)

# Frame ticks slower than this are reported at INFO
SLOW_CALL_MS = 8.0


def timed(func: Callable) -> Callable:
    """
    Decorator to log execution time of a function.

    Usage:
        @timed
        def tick():
            ...

    Logs: "tick took 1.2ms" (DEBUG, or INFO when slower than SLOW_CALL_MS)
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> Any:
        start = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed_ms = (time.perf_counter() - start) * 1000
        level = logging.INFO if elapsed_ms > SLOW_CALL_MS else logging.DEBUG
        logger.log(level, f"{func.__qualname__} took {elapsed_ms:.1f}ms")
        return result
    return wrapper


__all__ = ['timed']
