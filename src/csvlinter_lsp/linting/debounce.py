# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-key debouncing of actions on the asyncio event loop."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any

from ..constants import DEFAULT_DEBOUNCE_MS

LOGGER = logging.getLogger(__name__)

DebouncedAction = Callable[..., Any]


@dataclass(slots=True)
class PendingTimer:
    """Armed timer waiting for the debounce window of ``key`` to elapse."""

    key: Hashable
    handle: asyncio.TimerHandle

    def cancel(self) -> None:
        """Cancel the underlying timer."""
        self.handle.cancel()


class DebounceRegistry:
    """Coalesce bursts of scheduling requests into one delayed call per key.

    Scheduling a key that already has a pending timer cancels that timer
    first, so only the latest request inside the window fires. Keys are
    independent of each other. Coroutine actions are run as tasks tracked by
    the registry until they finish.
    """

    def __init__(self, *, default_delay_ms: int = DEFAULT_DEBOUNCE_MS) -> None:
        self.default_delay_ms = default_delay_ms
        self._timers: dict[Hashable, PendingTimer] = {}
        self._tasks: set[asyncio.Future[Any]] = set()

    def __len__(self) -> int:
        return len(self._timers)

    def pending(self, key: Hashable) -> bool:
        """Return ``True`` when a timer is armed for ``key``."""
        return key in self._timers

    def schedule(self, key: Hashable, delay_ms: int | None, action: DebouncedAction, *args: Any) -> None:
        """Run ``action(*args)`` after ``delay_ms`` unless ``key`` is rescheduled first.

        Must be called from a thread running an event loop.

        Args:
            key: Identity the timer is attached to (a document URI).
            delay_ms: Debounce window in milliseconds; ``None`` uses the default.
            action: Callable or coroutine function to invoke.
            *args: Arguments passed to ``action`` when it fires.
        """

        self.cancel(key)
        delay = self.default_delay_ms if delay_ms is None else max(delay_ms, 0)
        loop = asyncio.get_running_loop()
        handle = loop.call_later(delay / 1000, self._fire, key, action, args)
        self._timers[key] = PendingTimer(key=key, handle=handle)

    def cancel(self, key: Hashable) -> bool:
        """Cancel the pending timer for ``key``; return whether one existed."""

        timer = self._timers.pop(key, None)
        if timer is None:
            return False
        timer.cancel()
        return True

    def cancel_all(self) -> None:
        """Cancel every pending timer."""

        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()

    async def join(self) -> None:
        """Wait until every action started by a fired timer has finished."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _fire(self, key: Hashable, action: DebouncedAction, args: tuple[Any, ...]) -> None:
        # Drop the entry first so the action may schedule a fresh timer for the same key.
        self._timers.pop(key, None)
        result = action(*args)
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Future[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            LOGGER.error("Debounced action failed", exc_info=exc)


__all__ = ["DebounceRegistry", "PendingTimer"]
