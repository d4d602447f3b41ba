"""
Frame schedulers driving the engine from outside.

A scheduler exposes ``request_frame(callback)`` and later calls
``callback(timestamp)`` exactly once with a timestamp in seconds, in the
spirit of a browser animation frame request.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

LOG = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


class AsyncioFrameScheduler:
    """
    Schedule frame callbacks on an asyncio event loop at a fixed rate.

    The loop is resolved lazily so the scheduler can be created before the
    loop is running.
    """

    def __init__(self, fps: float = 30.0, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self.fps = max(1.0, float(fps))
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def interval(self) -> float:
        return 1.0 / self.fps

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def _resolve_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def _fire(self, callback: FrameCallback) -> None:
        self._handle = None
        callback(self._resolve_loop().time())

    def request_frame(self, callback: FrameCallback) -> None:
        if self._handle is not None:
            LOG.debug("Frame already pending; ignoring duplicate request.")
            return
        loop = self._resolve_loop()
        self._handle = loop.call_later(self.interval, self._fire, callback)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
