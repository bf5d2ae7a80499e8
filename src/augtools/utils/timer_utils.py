from __future__ import annotations

import time
from functools import wraps
from typing import Any, Callable

from augtools.loggers import logger

__all__ = ["timer", "timed_context", "TimerContext"]


def timer(name: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator logging how long each call of a function takes.

    Parameters
    ----------
        name (str): Label used in the log message.

    Example
    -------
        @timer("Spatial augmentation")
        def run():
            ...

        run()
        # Output: `Spatial augmentation took 3.1244 seconds`
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:  # noqa
            with TimerContext(name, function=func.__qualname__):
                return func(*args, **kwargs)

        return wrapper

    return decorator


class TimerContext:
    """Measure wall time of a block with ``time.perf_counter``.

    The duration is logged at INFO on exit, also when the block raises, and
    stays available as `elapsed`.
    """

    start_time: float
    elapsed: float

    def __init__(self, name: str, **context: Any) -> None:  # noqa: ANN401
        self.name = name
        self.context = context
        self.elapsed = 0.0

    def __enter__(self) -> TimerContext:
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        self.elapsed = time.perf_counter() - self.start_time
        logger.info(
            f"{self.name} took {self.elapsed:.4f} seconds",
            seconds=round(self.elapsed, 4),
            failed=exc_type is not None,
            **self.context,
        )


def timed_context(name: str, **context: Any) -> TimerContext:  # noqa: ANN401
    """
    Context manager logging how long a block takes; extra keyword arguments
    are added to the log event.

    Example
    -------
        with timed_context("Flip by resampling", axes=[0]):
            ...
    """
    return TimerContext(name, **context)
