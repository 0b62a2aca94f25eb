"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

One-shot deferred values with external resolve/reject controls.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Generator
from typing import Any, Generic, Literal, TypeVar

from .errors import DeferredRejectedError

logger = logging.getLogger("loopkit.deferred")

T = TypeVar("T")

DeferredState = Literal["pending", "fulfilled", "rejected"]


class Deferred(Generic[T]):
    """
    Future value paired with resolve/reject controls.

    The first call to `resolve` or `reject` settles the value; later calls are
    ignored. Consumers either await the deferred (or `value`) or register
    callbacks with `add_callbacks`.
    """

    __slots__ = ("_future",)

    def __init__(self, *, loop: asyncio.AbstractEventLoop | None = None) -> None:
        if loop is None:
            loop = asyncio.get_running_loop()
        self._future: asyncio.Future[T] = loop.create_future()

    @property
    def value(self) -> asyncio.Future[T]:
        return self._future

    @property
    def state(self) -> DeferredState:
        if not self._future.done():
            return "pending"
        if self._future.cancelled() or self._future.exception() is not None:
            return "rejected"
        return "fulfilled"

    def resolve(self, result: T) -> None:
        if self._future.done():
            logger.debug("Ignoring resolve on settled deferred (state=%s)", self.state)
            return
        self._future.set_result(result)

    def reject(self, error: BaseException | Any) -> None:
        if self._future.done():
            logger.debug("Ignoring reject on settled deferred (state=%s)", self.state)
            return
        if not isinstance(error, BaseException):
            error = DeferredRejectedError(error)
        self._future.set_exception(error)
        # Reading the exception stops asyncio from reporting it as never
        # retrieved. Awaiters and callbacks still receive it.
        self._future.exception()

    def add_callbacks(
        self,
        on_fulfilled: Callable[[T], Any] | None = None,
        on_rejected: Callable[[BaseException], Any] | None = None,
    ) -> None:
        """Register callbacks run on the loop once the value settles."""

        def _dispatch(future: asyncio.Future[T]) -> None:
            if future.cancelled():
                if on_rejected is not None:
                    on_rejected(asyncio.CancelledError())
                return
            error = future.exception()
            if error is not None:
                if on_rejected is not None:
                    on_rejected(error)
                return
            if on_fulfilled is not None:
                on_fulfilled(future.result())

        self._future.add_done_callback(_dispatch)

    def __await__(self) -> Generator[Any, None, T]:
        return self._future.__await__()


def defer(*, loop: asyncio.AbstractEventLoop | None = None) -> Deferred[Any]:
    """Create a pending deferred on `loop` (default: the running loop)."""
    return Deferred(loop=loop)
