"""Quiescence-window debouncing for rapidly changing input values."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Debouncer(Generic[T]):
    """Delay propagation of a value until it stops changing for ``window_ms``.

    Every ``push`` cancels the pending timer and starts a new one, so only the
    latest value is ever emitted. ``value`` is the settled output and
    ``on_settle`` (if given) is invoked with it each time a timer fires.
    Must be used from inside a running event loop.
    """

    def __init__(
        self,
        initial: T,
        window_ms: int,
        on_settle: Callable[[T], None] | None = None,
    ) -> None:
        if window_ms < 0:
            raise ValueError("Debounce window must be non-negative")
        self._value = initial
        self._pending: T = initial
        self._window_ms = window_ms
        self._on_settle = on_settle
        self._timer: asyncio.TimerHandle | None = None
        self._closed = False

    @property
    def value(self) -> T:
        return self._value

    @property
    def window_ms(self) -> int:
        return self._window_ms

    @property
    def is_pending(self) -> bool:
        return self._timer is not None

    def push(self, value: T) -> None:
        """Record a new input value and restart the quiescence timer."""

        if self._closed:
            raise RuntimeError("Debouncer has been closed")
        self._cancel_timer()
        self._pending = value
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._window_ms / 1000, self._fire)

    def flush(self) -> None:
        """Emit the pending value immediately, if any."""

        if self._timer is not None:
            self._cancel_timer()
            self._emit()

    def close(self) -> None:
        """Cancel any pending timer. Further pushes are rejected."""

        self._cancel_timer()
        self._closed = True

    def _fire(self) -> None:
        self._timer = None
        self._emit()

    def _emit(self) -> None:
        self._value = self._pending
        logger.debug("Debounced value settled after %sms", self._window_ms)
        if self._on_settle is not None:
            self._on_settle(self._value)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
