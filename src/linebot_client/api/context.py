"""Cancellation token for calls."""

from __future__ import annotations

import asyncio
import time
from typing import Optional

from linebot_client.api.errors import Cancelled, ContextError, DeadlineExceeded


class CallContext:
    """Explicit cancellation token with an optional deadline.

    A context ends either when ``cancel()`` is called or when its deadline
    passes, whichever happens first; ``err`` then holds the reason and never
    changes again. One context may be shared by several calls, and ending it
    stops all of them, but calls never end each other's contexts.
    """

    def __init__(self, deadline: Optional[float] = None):
        # deadline is on the time.monotonic() clock
        self._deadline = deadline
        self._done = asyncio.Event()
        self._err: Optional[ContextError] = None

    @classmethod
    def with_timeout(cls, seconds: float) -> CallContext:
        return cls(deadline=time.monotonic() + seconds)

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    def remaining(self) -> Optional[float]:
        """Seconds until the deadline, clamped at zero; ``None`` without one."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def cancel(self) -> None:
        self._finish(Cancelled())

    @property
    def err(self) -> Optional[ContextError]:
        if self._err is None and self._deadline is not None and time.monotonic() >= self._deadline:
            self._finish(DeadlineExceeded())
        return self._err

    def done(self) -> bool:
        return self.err is not None

    async def wait(self) -> ContextError:
        """Block until the context ends and return the reason."""
        try:
            await asyncio.wait_for(self._done.wait(), timeout=self.remaining())
        except asyncio.TimeoutError:
            self._finish(DeadlineExceeded())
        assert self._err is not None
        return self._err

    def _finish(self, err: ContextError) -> None:
        if self._err is None:
            self._err = err
            self._done.set()
