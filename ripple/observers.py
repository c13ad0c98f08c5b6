"""
Ripple Observer Registry
========================

Per-façade storage for observation callbacks.

``ObserverSet`` keeps callbacks in registration order, unique by identity, each
with a paused flag stored alongside (paused callbacks stay registered but are
skipped during notification). ``Observer`` is the handle handed out by
``observe()``; it only knows the ObserverSet and its own callback, so it never
keeps the observed façade alive.
"""

import logging
from typing import Any, Callable, Dict, List

from .exceptions import DuplicateObserverError, StaleObserverError
from .registry import mutation_lock

logger = logging.getLogger(__name__)

ObservationCallback = Callable[[Any], None]


class ObserverSet:
    """Ordered, identity-unique set of callbacks with paused flags."""

    __slots__ = ("_callbacks", "_paused")

    def __init__(self) -> None:
        # keyed by id(); the stored callback keeps the id valid
        self._callbacks: Dict[int, ObservationCallback] = {}
        self._paused: Dict[int, bool] = {}

    def add(self, callback: ObservationCallback) -> None:
        """Register ``callback``; raise DuplicateObserverError if already present."""
        if callback in self:
            raise DuplicateObserverError("callback already registered for observation")
        key = id(callback)
        self._callbacks[key] = callback
        self._paused[key] = False

    def remove(self, callback: ObservationCallback) -> None:
        """Unregister ``callback``; raise StaleObserverError if it is not registered."""
        if callback not in self:
            raise StaleObserverError(
                "callback not or no longer registered for observation"
            )
        key = id(callback)
        del self._callbacks[key]
        del self._paused[key]

    def pause(self, callback: ObservationCallback) -> None:
        if callback in self:
            self._paused[id(callback)] = True

    def resume(self, callback: ObservationCallback) -> None:
        if callback in self:
            self._paused[id(callback)] = False

    def is_paused(self, callback: ObservationCallback) -> bool:
        return callback in self and self._paused[id(callback)]

    def is_active(self, callback: ObservationCallback) -> bool:
        return callback in self and not self._paused[id(callback)]

    def active(self) -> List[ObservationCallback]:
        """Snapshot of the non-paused callbacks in registration order."""
        return [
            callback
            for key, callback in self._callbacks.items()
            if not self._paused[key]
        ]

    def __contains__(self, callback: object) -> bool:
        return self._callbacks.get(id(callback)) is callback

    def __len__(self) -> int:
        return len(self._callbacks)


class Observer:
    """
    Handle for one registered callback.

    Example:
        ```python
        handle = observe(state, print)
        handle.pause()      # deliveries are skipped
        handle.resume()     # deliveries continue
        handle.destroy()    # callback removed; a second destroy() raises
        ```

    The handle is also a context manager that destroys the registration on
    exit, unless it was already destroyed inside the block.
    """

    __slots__ = ("_observers", "_callback")

    def __init__(self, observers: ObserverSet, callback: ObservationCallback) -> None:
        self._observers = observers
        self._callback = callback

    @property
    def callback(self) -> ObservationCallback:
        return self._callback

    @property
    def paused(self) -> bool:
        """True while the callback is registered but paused."""
        return self._observers.is_paused(self._callback)

    @property
    def active(self) -> bool:
        """True while the callback is registered (paused or not)."""
        return self._callback in self._observers

    def pause(self) -> None:
        """Stop delivery until ``resume()``; redundant calls are harmless."""
        with mutation_lock:
            self._observers.pause(self._callback)

    def resume(self) -> None:
        """Restart delivery; redundant calls are harmless."""
        with mutation_lock:
            self._observers.resume(self._callback)

    def destroy(self) -> None:
        """Unregister the callback.

        Raises:
            StaleObserverError: If the callback was already destroyed.
        """
        with mutation_lock:
            self._observers.remove(self._callback)
        logger.debug("Destroyed observer %r", self._callback)

    def __enter__(self) -> "Observer":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.active:
            self.destroy()

    def __repr__(self) -> str:
        if not self.active:
            state = "destroyed"
        elif self.paused:
            state = "paused"
        else:
            state = "active"
        return f"Observer({self._callback!r}, {state})"
