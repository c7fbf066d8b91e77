"""Helpers for user-supplied callables that may be sync or async."""

from __future__ import annotations

import inspect
from typing import Any, Callable

from ..telemetry import get_logger


async def maybe_await(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


async def call_maybe_async(func: Callable[..., Any], *args: Any) -> Any:
    """Call ``func`` and await its result when it returns an awaitable."""
    return await maybe_await(func(*args))


async def deliver(callback: Callable[..., Any] | None, name: str, *args: Any) -> None:
    """Invoke a result callback.

    Errors raised by the callback are logged and not propagated: a failing
    ``on_success`` must not turn into an ``on_error`` delivery.
    """
    if callback is None:
        return
    try:
        await call_maybe_async(callback, *args)
    except Exception as e:
        get_logger().error("Callback raised", callback=name, error=repr(e))
