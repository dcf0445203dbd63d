"""
archivestats timing - Wall-clock measurement of zero-argument computations
"""
import functools
import logging
import time
from typing import Any, Callable, NamedTuple, Optional

logger = logging.getLogger(__name__)


class Measurement(NamedTuple):
    """Result of a measured computation."""
    label: str
    result: Any
    elapsed_ms: Optional[float]


def measure(
    label: str,
    func: Callable[[], Any],
    log: Optional[logging.Logger] = None,
) -> Measurement:
    """
    Run ``func`` once and time it.

    Args:
        label: Name reported alongside the result
        func: Zero-argument callable to run
        log: Logger to report to (default: this module's logger)

    Returns:
        Measurement with the result and elapsed milliseconds

    Example:
        >>> m = measure('pipeline', aggregator.pipeline_total)
        >>> m.result, m.elapsed_ms
        (18, 24.5)
    """
    started = time.perf_counter()
    result = func()
    elapsed_ms = (time.perf_counter() - started) * 1000
    (log or logger).info("%s: result=%s elapsed=%.2f ms", label, result, elapsed_ms)
    return Measurement(label, result, elapsed_ms)


def timed(label: str, log: Optional[logging.Logger] = None):
    """
    Decorator form of ``measure``; the wrapped callable returns a Measurement.

    Example:
        >>> @timed('local')
        ... def run():
        ...     return aggregator.local_total()
        >>> run().result
        18
    """
    def decorator(func: Callable[[], Any]) -> Callable[[], Measurement]:
        @functools.wraps(func)
        def wrapper() -> Measurement:
            return measure(label, func, log)
        return wrapper
    return decorator


def untimed(label: str, func: Callable[[], Any]) -> Measurement:
    """Run ``func`` without timing; ``elapsed_ms`` is None."""
    return Measurement(label, func(), None)
