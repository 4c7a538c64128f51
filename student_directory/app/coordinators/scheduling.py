"""
Cancelable deferred callbacks.

:class:`ScheduledTask` wraps :meth:`asyncio.AbstractEventLoop.call_later`
so that the owner can cancel a pending callback when it is torn down.
At most one callback is pending per task; scheduling again replaces it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional


logger = logging.getLogger(__name__)


class ScheduledTask:
    def __init__(self) -> None:
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, delay: float, callback: Callable[[], None]) -> None:
        """Run ``callback`` on the running loop after ``delay`` seconds."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(delay, self._fire, callback)

    def cancel(self) -> bool:
        """Cancel the pending callback.  Returns whether one was pending."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        logger.debug("Cancelled scheduled callback")
        return True

    def _fire(self, callback: Callable[[], None]) -> None:
        self._handle = None
        callback()
