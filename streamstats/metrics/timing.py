"""
Decorators and context manager that time code into a Statistics registry.

Successful runs are recorded under ``<tag>_success`` and failing runs under
``<tag>_error``; register those tags as SAMPLES to collect them.
"""

from functools import wraps
from typing import Callable, TypeVar

from .statistics import Statistics, TimerHandle

T = TypeVar("T")


def measure_async(stats: Statistics, tag: str):
    """
    Decorator for timing an async function.

    Usage:
        @measure_async(stats, "fetch")
        async def fetch(url):
            ...
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            timer = stats.timer(tag)
            try:
                result = await func(*args, **kwargs)
            except Exception:
                timer.err()
                raise
            timer.ok()
            return result

        return wrapper

    return decorator


def measure_sync(stats: Statistics, tag: str):
    """
    Decorator for timing a sync function.

    Usage:
        @measure_sync(stats, "render")
        def render(page):
            ...
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs):
            timer = stats.timer(tag)
            try:
                result = func(*args, **kwargs)
            except Exception:
                timer.err()
                raise
            timer.ok()
            return result

        return wrapper

    return decorator


class measure:
    """
    Context manager for timing a code block.

    Usage:
        with measure(stats, "parse"):
            document = parse(raw)
    """

    __slots__ = ("stats", "tag", "timer")

    def __init__(self, stats: Statistics, tag: str):
        self.stats = stats
        self.tag = tag
        self.timer: TimerHandle = None

    def __enter__(self):
        self.timer = self.stats.timer(self.tag)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.timer.ok()
        else:
            self.timer.err()
        return False  # Don't suppress exceptions
