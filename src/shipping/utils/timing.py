"""Timing instrumentation applied at composition time.

Nothing in the domain model times itself. The composition root wraps the
methods it wants measured with ``instrument()``, which keeps the cross-cutting
concern out of the code being measured.
"""

import functools
import time
from collections.abc import Callable
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


def timed(label: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator that logs how long each call to the wrapped callable took."""

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000
                logger.debug("Call timed", operation=label, elapsed_ms=round(elapsed_ms, 3))

        return wrapper

    return decorator


def instrument(target: Any, *method_names: str) -> Any:
    """Wrap the named methods of ``target`` with ``timed`` in place and return it."""
    for name in method_names:
        method = getattr(target, name)
        setattr(target, name, timed(f"{type(target).__name__}.{name}")(method))
    return target
