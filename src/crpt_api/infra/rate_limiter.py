from __future__ import annotations

import logging
import math
import threading
import time
from collections import deque
from datetime import timedelta
from typing import Optional

from ..core.errors import CancellationError, ConfigurationError
from ..core.ports.rate_limiter_port import RateLimiterPort

logger = logging.getLogger(__name__)


class Replenisher(threading.Thread):
    """Background ticker that restores a limiter's capacity once per window.

    Ticks are scheduled at a fixed rate (``start + k * interval``) so that a slow
    tick does not stretch later windows. If the thread falls more than a whole
    interval behind, the missed ticks are skipped rather than replayed.
    """

    def __init__(self, limiter: FixedWindowRateLimiter, interval: float) -> None:
        super().__init__(name="crpt-api-replenisher", daemon=True)
        self._limiter = limiter
        self._interval = interval
        self._stopped = threading.Event()

    def run(self) -> None:
        next_tick = time.monotonic() + self._interval
        while not self._stopped.wait(max(0.0, next_tick - time.monotonic())):
            self._limiter.replenish()
            next_tick += self._interval
            now = time.monotonic()
            if next_tick <= now:
                skipped = int((now - next_tick) // self._interval) + 1
                next_tick += skipped * self._interval
                logger.debug("Replenisher fell behind; skipped %d tick(s)", skipped)

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stopped.set()
        if self.is_alive() and threading.current_thread() is not self:
            self.join(timeout)


class FixedWindowRateLimiter(RateLimiterPort):
    """Fixed-window rate limiter: at most ``max_requests`` permits per window.

    Permits are consumed by :meth:`acquire` and never handed back by callers;
    a :class:`Replenisher` resets the counter to ``max_requests`` at the end of
    every window. A burst of ``max_requests`` calls goes through back-to-back,
    after which callers block until the next tick.

    Blocked callers are served in arrival order. A caller that gives up (timeout
    or :meth:`close`) leaves the queue without consuming a permit.

    Example:
        # CRPT: 2 documents per second
        with FixedWindowRateLimiter(max_requests=2, window_seconds=1.0) as limiter:
            limiter.acquire()
            post_document()
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float | timedelta,
        *,
        autostart: bool = True,
    ) -> None:
        """Initialize the limiter and, unless ``autostart`` is False, start replenishing.

        Args:
            max_requests: Permits available per window (positive integer)
            window_seconds: Window length in seconds, or a ``timedelta``
            autostart: Start the background replenisher immediately. With False,
                      call :meth:`start` later or drive :meth:`replenish` by hand.

        Raises:
            ConfigurationError: If either limit is not positive.
        """
        if isinstance(max_requests, bool) or not isinstance(max_requests, int) or max_requests <= 0:
            raise ConfigurationError(f"max_requests must be a positive integer, got {max_requests!r}")
        if isinstance(window_seconds, timedelta):
            window_seconds = window_seconds.total_seconds()
        if (
            isinstance(window_seconds, bool)
            or not isinstance(window_seconds, (int, float))
            or not math.isfinite(window_seconds)
            or window_seconds <= 0
        ):
            raise ConfigurationError(f"window_seconds must be a positive duration, got {window_seconds!r}")

        self._max_requests = max_requests
        self._window = float(window_seconds)
        self._available = max_requests
        self._cond = threading.Condition(threading.Lock())
        self._waiters: deque[object] = deque()
        self._closed = False
        self._started = False
        self._replenisher = Replenisher(self, self._window)

        if autostart:
            self.start()

    @property
    def max_requests(self) -> int:
        return self._max_requests

    @property
    def window_seconds(self) -> float:
        return self._window

    @property
    def available(self) -> int:
        with self._cond:
            return self._available

    @property
    def waiting(self) -> int:
        """Number of callers currently blocked in :meth:`acquire`."""
        with self._cond:
            return len(self._waiters)

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    @property
    def running(self) -> bool:
        return self._replenisher.is_alive()

    def start(self) -> None:
        """Start the background replenisher. Calling it again is a no-op."""
        with self._cond:
            if self._closed:
                raise CancellationError("rate limiter is closed")
            if self._started:
                return
            self._started = True
        self._replenisher.start()
        logger.debug("Rate limiter started: %d permit(s) per %.3fs", self._max_requests, self._window)

    def acquire(self, timeout: Optional[float] = None) -> None:
        """Block until a permit is available, then consume it.

        Args:
            timeout: Maximum seconds to wait. None waits until a permit is granted
                    or the limiter is closed.

        Raises:
            CancellationError: If the timeout elapsed or the limiter was closed
                              before a permit was granted. No permit is consumed.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._cond:
            if self._closed:
                raise CancellationError("rate limiter is closed")

            # Fast path: nobody is queued ahead of us
            if self._available > 0 and not self._waiters:
                self._available -= 1
                return

            ticket = object()
            self._waiters.append(ticket)
            logger.debug("Capacity exhausted; waiting (%d queued)", len(self._waiters))
            try:
                while True:
                    if self._closed:
                        raise CancellationError("rate limiter closed while waiting for capacity")
                    if self._available > 0 and self._waiters[0] is ticket:
                        self._available -= 1
                        return
                    if deadline is None:
                        self._cond.wait()
                        continue
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        logger.debug("Gave up waiting for capacity after %ss", timeout)
                        raise CancellationError(f"timed out after {timeout}s waiting for capacity")
                    self._cond.wait(remaining)
            finally:
                self._waiters.remove(ticket)
                # The head of the queue may have changed
                self._cond.notify_all()

    def replenish(self) -> None:
        """Reset available permits to ``max_requests`` and wake all waiters.

        Idempotent when the limiter is already full.
        """
        with self._cond:
            restored = self._max_requests - self._available
            self._available = self._max_requests
            waiting = len(self._waiters)
            self._cond.notify_all()
        logger.debug("Replenished %d permit(s); %d caller(s) waiting", restored, waiting)

    def close(self) -> None:
        """Stop replenishing and cancel every caller still waiting in :meth:`acquire`."""
        with self._cond:
            if self._closed:
                return
            self._closed = True
            waiting = len(self._waiters)
            self._cond.notify_all()
        self._replenisher.stop()
        logger.debug("Rate limiter closed; cancelled %d waiting caller(s)", waiting)

    def __enter__(self) -> FixedWindowRateLimiter:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
