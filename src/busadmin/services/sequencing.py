"""Request sequencing and input debouncing for list screens."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RequestSequencer:
    """Monotonic counter used to keep only the latest response for a list.

    Each request takes a token from :meth:`issue`; when the response arrives it
    is applied only if :meth:`is_current` still holds for that token. Superseded
    calls are not cancelled, their results are just ignored.
    """

    def __init__(self, lock: Optional[threading.RLock] = None) -> None:
        self._latest = 0
        # callers may share their own lock so results apply atomically with other state
        self._lock = lock or threading.Lock()

    def issue(self) -> int:
        with self._lock:
            self._latest += 1
            return self._latest

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._latest

    def apply_if_current(self, token: int, apply: Callable[[], None]) -> bool:
        """Run ``apply`` only if ``token`` is still the latest.

        The check and ``apply`` happen under one lock, so no newer token can be
        issued in between.
        """
        with self._lock:
            if token != self._latest:
                return False
            apply()
            return True

    @property
    def latest(self) -> int:
        return self._latest


class Debouncer(Generic[T]):
    """Deliver only the last value submitted within ``delay`` seconds."""

    def __init__(self, callback: Callable[[T], None], delay: float) -> None:
        self.callback = callback
        self.delay = delay
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[tuple[T]] = None
        self._lock = threading.Lock()

    def submit(self, value: T) -> None:
        with self._lock:
            self._cancel_timer()
            self._pending = (value,)
            self._timer = threading.Timer(self.delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def flush(self) -> bool:
        """Deliver the pending value now. Returns ``False`` when nothing was pending."""
        with self._lock:
            self._cancel_timer()
            pending, self._pending = self._pending, None
        if pending is None:
            return False
        self.callback(pending[0])
        return True

    def cancel(self) -> None:
        with self._lock:
            self._cancel_timer()
            self._pending = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self) -> None:
        with self._lock:
            pending, self._pending = self._pending, None
            self._timer = None
        if pending is None:
            return
        try:
            self.callback(pending[0])
        except Exception:
            logger.exception("Debounced callback failed")
