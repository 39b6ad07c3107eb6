"""
Async support for rhelswap.

The cache and the license updater are written as plain blocking code:
directory calls, snapshot reads / writes and the stop / start polling
sleep all block the calling thread.  Event-loop hosts (an ASGI app, a
WebSocket server) call the ``a``-prefixed variants instead, which run the
blocking body in a worker thread via :func:`asyncio.to_thread` so a
five-minute status poll never stalls unrelated requests.

Usage::

    class SnapshotCache(AsyncMixin):
        __async_methods__ = ("get_data", "clear_cache")

        def get_data(self, project_id: str) -> CacheResult: ...

    result = await cache.aget_data("my-project")
"""

from __future__ import annotations

import asyncio
import functools
from typing import Any, Callable, Coroutine, TypeVar

T = TypeVar("T")


def async_wrap(
    fn: Callable[..., T],
) -> Callable[..., Coroutine[Any, Any, T]]:
    """Return an async version of *fn* that runs it in a thread.

    The wrapper preserves the original function's name and docstring.

    Args:
        fn: A synchronous callable to wrap.

    Returns:
        An async callable with the same parameters and return type.
    """

    @functools.wraps(fn)
    async def _wrapper(*args: Any, **kwargs: Any) -> T:
        return await asyncio.to_thread(fn, *args, **kwargs)

    return _wrapper


class AsyncMixin:
    """Mixin that generates ``a<method>`` variants for the listed methods.

    Subclasses name the blocking methods to expose in ``__async_methods__``.
    Methods inherited from a parent class are picked up as well, and an
    ``a<method>`` already defined by hand is left untouched.
    """

    __async_methods__: tuple[str, ...] = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        for name in cls.__async_methods__:
            attr = getattr(cls, name, None)
            if attr is None or not callable(attr):
                raise TypeError(f"{cls.__name__}.{name} is not a method")
            async_name = f"a{name}"
            if async_name not in vars(cls):
                setattr(cls, async_name, async_wrap(attr))
