"""
Purpose: Owns the zero-or-one active Geo and its lifecycle.

NONE -> ACTIVE -> (cleared | expired) -> NONE

What it does:
- create / clear the active marker and mirror it into the key-value store
- restore a persisted marker on startup, dropping it if it already expired
- arm one timer at the expiry instant and fire expiry listeners exactly once

Rule: The manager owns state transitions and timing. Formatting and sharing live elsewhere.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from typing import Callable, List, Optional, Union

from .models import LatLon, Lifespan, Marker, coerce_lifespan, is_expired
from .store import KeyValueStore

logger = logging.getLogger(__name__)

ACTIVE_GEO_STORAGE_KEY = "heggeo_active_geo"

# floor for re-arming a timer that fired before the clock reached expiry
MIN_REARM_SECONDS = 0.05


class MarkerStateException(Exception):
    """Raised when an invalid marker transition is attempted."""
    pass


class NoLocationException(MarkerStateException):
    """The device location is unknown, so no Geo can be dropped."""

    def __init__(self, message: str = "Cannot drop a Geo without your current location."):
        super().__init__(message)


class AlreadyActiveException(MarkerStateException):
    """A Geo is already active; it must be cleared before dropping another."""

    def __init__(self, marker: Marker):
        self.marker = marker
        super().__init__("You already have an active Geo. Clear it first.")


def _system_clock_ms() -> int:
    return int(time.time() * 1000)


class MarkerManager:
    """
    Explicitly owned container for the single active marker.

    Each instance has its own store, clock and timer factory, so independent
    managers never share state. Timers fire on a worker thread, so every
    transition happens under `_lock`.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        clock: Callable[[], int] = _system_clock_ms,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
        storage_key: str = ACTIVE_GEO_STORAGE_KEY,
    ):
        self.store = store
        self.clock = clock
        self.timer_factory = timer_factory
        self.storage_key = storage_key

        self._lock = threading.RLock()
        self._active: Optional[Marker] = None
        self._timer = None
        self._expiry_listeners: List[Callable[[Marker], None]] = []

    # --- Public API ---

    @property
    def active(self) -> Optional[Marker]:
        return self._active

    def add_expiry_listener(self, listener: Callable[[Marker], None]) -> None:
        """
        Register a callback invoked once with the marker that just expired.
        """
        self._expiry_listeners.append(listener)

    def create(self, location: Optional[LatLon], lifespan: Union[Lifespan, int, None]) -> Marker:
        """
        Drop a new Geo at `location`.

        `lifespan` is a Bounded/Unbounded variant, a number of milliseconds,
        or None for no expiry.
        """
        if location is None:
            raise NoLocationException()

        lifespan = coerce_lifespan(lifespan)

        with self._lock:
            if self._active is not None:
                raise AlreadyActiveException(self._active)

            marker = Marker.new(location, lifespan, now_ms=self.clock())
            self._active = marker
            self._persist(marker)
            self._arm_timer(marker)

        logger.info("Dropped Geo %s at %.4f, %.4f", marker.id, marker.latitude, marker.longitude)
        return marker

    def clear(self) -> None:
        """
        Remove the active marker. No-op when none is active.
        """
        with self._lock:
            marker = self._active
            self._cancel_timer()
            self._active = None
            self._forget()

        if marker is not None:
            logger.info("Cleared Geo %s", marker.id)

    def load_persisted(self) -> Optional[Marker]:
        """
        Restore the marker saved by a previous session.

        An unreadable record or an already expired marker is removed from
        the store and treated as absent.
        """
        try:
            raw = self.store.get(self.storage_key)
        except OSError as e:
            logger.warning("Could not read persisted Geo, starting without one: %s", e)
            return None
        if raw is None:
            return None

        try:
            marker = Marker.from_record(json.loads(raw))
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            logger.warning("Discarding unreadable persisted Geo: %s", e)
            self._forget()
            return None

        with self._lock:
            if is_expired(marker, self.clock()):
                logger.info("Persisted Geo %s expired while away, discarding", marker.id)
                self._forget()
                return None

            self._cancel_timer()
            self._active = marker
            self._arm_timer(marker)

        return marker

    def check_expiry(self, now_ms: Optional[int] = None) -> bool:
        """
        Expire the active marker if its lifespan has elapsed.

        Returns True only on the call that performed the transition; repeated
        calls after expiry are harmless no-ops.
        """
        with self._lock:
            marker = self._active
            if marker is None:
                return False

            now_ms = self.clock() if now_ms is None else now_ms
            if not is_expired(marker, now_ms):
                return False

            self._cancel_timer()
            self._active = None
            self._forget()

        logger.info("Geo %s expired", marker.id)
        for listener in list(self._expiry_listeners):
            listener(marker)
        return True

    def remaining_ms(self, now_ms: Optional[int] = None) -> Optional[int]:
        """
        Countdown for a display. None when there is no marker or it never expires.
        """
        marker = self._active
        if marker is None:
            return None
        return marker.remaining_ms(self.clock() if now_ms is None else now_ms)

    def close(self) -> None:
        """
        Cancel any pending expiry timer. The active marker itself is kept.
        """
        with self._lock:
            self._cancel_timer()

    # --- Timer helpers ---

    def _arm_timer(self, marker: Marker) -> None:
        expires_at = marker.expires_at_ms()
        if expires_at is None:
            return  # unbounded: nothing to schedule

        delay_s = max(0.0, (expires_at - self.clock()) / 1000.0)
        timer = self.timer_factory(delay_s, self._on_timer, args=(marker.id,))
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self, marker_id: str) -> None:
        with self._lock:
            marker = self._active
            if marker is None or marker.id != marker_id:
                return  # stale timer for a marker that is already gone
            self._timer = None

            if not is_expired(marker, self.clock()):
                # fired ahead of the clock; wait out the remainder
                remaining = marker.remaining_ms(self.clock()) or 0
                expires_in_s = max(MIN_REARM_SECONDS, remaining / 1000.0)
                timer = self.timer_factory(expires_in_s, self._on_timer, args=(marker.id,))
                timer.daemon = True
                self._timer = timer
                timer.start()
                return

        # listeners run outside the lock, same as on the polling path
        self.check_expiry()

    # --- Persistence helpers ---

    def _persist(self, marker: Marker) -> None:
        try:
            self.store.set(self.storage_key, json.dumps(marker.to_record()))
        except OSError as e:
            logger.warning("Could not persist Geo %s, keeping it in memory only: %s", marker.id, e)

    def _forget(self) -> None:
        try:
            self.store.remove(self.storage_key)
        except OSError as e:
            logger.warning("Could not remove persisted Geo: %s", e)
