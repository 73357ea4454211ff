"""Performance monitoring utilities for newsdesk-console.

Provides a context manager for timing remote calls and logging the slow ones.
"""

import time
import logging
from contextlib import contextmanager

from newsdesk_console.config import get_console_config

_handler_installed = False


def get_perf_logger() -> logging.Logger:
    """Return the performance logger, adding a console handler on first use."""
    global _handler_installed
    perf_logger = logging.getLogger(get_console_config().performance_logger_name)
    if not _handler_installed:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(logging.Formatter(
            '⏱️  %(message)s'
        ))
        perf_logger.addHandler(console_handler)
        _handler_installed = True
    return perf_logger


@contextmanager
def timer(operation_name: str, threshold_ms: float = None, log_args: bool = False, **kwargs):
    """Context manager for timing operations.

    Args:
        operation_name: Name of the operation being timed
        threshold_ms: Only log if operation takes longer than this (in milliseconds);
            defaults to the configured slow request threshold
        log_args: Whether to log kwargs in the message
        **kwargs: Additional context to include in log message

    Example:
        with timer("GET ghanapolitan/article", log_args=True, page=2):
            response = session.get(url)
    """
    if threshold_ms is None:
        threshold_ms = get_console_config().slow_request_threshold_ms
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000

        if elapsed_ms >= threshold_ms:
            msg = f"{operation_name}: {elapsed_ms:.2f}ms"
            if log_args and kwargs:
                args_str = ", ".join(f"{k}={v}" for k, v in kwargs.items())
                msg += f" ({args_str})"

            get_perf_logger().warning(msg)
