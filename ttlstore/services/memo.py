"""Decorator that memoizes function results in a TTLStore."""

from __future__ import annotations

import functools
import inspect
from typing import Any, Callable

from ttlstore.services.store import TTLStore


def _call_key(fn: Callable[..., Any], args: tuple, kwargs: dict) -> list:
    return [fn.__module__ + "." + fn.__qualname__, list(args), kwargs]


def memoize(store: TTLStore, ttl: int | None = None) -> Callable:
    """Cache results of the decorated function for ``ttl`` ms (store default if None).

    Works on plain and ``async def`` functions. Exceptions are not cached.
    """

    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        if inspect.iscoroutinefunction(fn):

            @functools.wraps(fn)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                key = _call_key(fn, args, kwargs)
                if key in store:
                    return store.get(key)
                result = await fn(*args, **kwargs)
                store.put(key, result, ttl=ttl)
                return result

            return async_wrapper

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            key = _call_key(fn, args, kwargs)
            if key in store:
                return store.get(key)
            result = fn(*args, **kwargs)
            store.put(key, result, ttl=ttl)
            return result

        return wrapper

    return decorator
