"""Invoke helpers — call sync or async handlers uniformly.

``handle_func`` accepts both ``def`` and ``async def`` functions. Any code
that calls a user-provided function must handle both cases. This module
provides a single helper so the sync/async check lives in exactly one
place.

Usage::

    from arbor._internal.invoke import invoke

    await invoke(fn, w, request)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's awaitable.

    Works with both sync and async callables::

        # sync — runs inline on the event loop
        def hello(w, r):
            w.write("world!")

        # async — coroutine is awaited
        async def hello(w, r):
            w.write(await load_greeting())
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
