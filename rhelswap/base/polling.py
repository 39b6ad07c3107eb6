"""
Timeout-bound polling.

Re-reads a value at a fixed interval until it satisfies a predicate or
the deadline passes.  Sleeping happens on the calling thread only, so
callers that must not block an event loop run this through
:mod:`rhelswap.base.async_support`.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

logger = logging.getLogger("rhelswap")

T = TypeVar("T")


def poll_until(
    probe: Callable[[], T],
    predicate: Callable[[T], bool],
    *,
    timeout: float = 300.0,
    interval: float = 5.0,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
    description: str = "condition",
) -> T:
    """Call *probe* until *predicate* accepts its result.

    Errors raised by *probe* propagate immediately; nothing is retried.

    Args:
        probe: Zero-argument callable returning the observed value.
        predicate: Returns True once the observed value is the awaited one.
        timeout: Seconds before giving up.
        interval: Seconds to sleep between probes.
        sleep: Sleep function (injected in tests).
        clock: Monotonic clock in seconds (injected in tests).
        description: Text used in log and error messages.

    Returns:
        The first probed value accepted by *predicate*.

    Raises:
        TimeoutError: If the deadline passes first.
    """
    deadline = clock() + timeout
    attempt = 0
    while clock() < deadline:
        attempt += 1
        value = probe()
        if predicate(value):
            return value
        logger.debug(
            "Poll %d for %s observed %r, next check in %.1fs",
            attempt,
            description,
            value,
            interval,
        )
        sleep(interval)
    raise TimeoutError(f"Timed out after {timeout:g}s waiting for {description}")
