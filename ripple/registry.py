"""
Ripple Identity Registry - Façade Metadata Arena
================================================

Every façade owns one ``ObservableContext`` record, attached by the registry
when the façade is registered. The registry itself is an arena of weak
references indexed by ``id(facade)``, so that:

- membership is exact: only registered, live façades are found
- the registry never keeps a façade alive, and neither does the containment
  graph: parents are held through ``weakref.ref``
- a callback that refers back to its own façade forms an ordinary reference
  cycle that the garbage collector can reclaim
- slots disappear on their own: a ``weakref.finalize`` hook releases the arena
  slot when the façade is reclaimed

A second index maps ``id(raw)`` to the façade slot, which makes wrapping
idempotent per raw value. Raw builtins such as ``dict`` and ``list`` cannot be
weakly referenced, but the façade holds its raw value strongly, so the raw id
stays valid for exactly as long as the slot exists.
"""

import logging
import threading
import weakref
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from .observers import ObserverSet

logger = logging.getLogger(__name__)

# Serializes mutation-plus-propagation and observer bookkeeping. Re-entrant so
# callbacks may mutate observed data from inside a notification.
mutation_lock = threading.RLock()


@dataclass(eq=False)
class ObservableContext:
    """Metadata owned by one façade."""

    raw: Any
    name: str
    parent: Optional[weakref.ref]
    strict: bool
    weak_values: bool
    observers: "ObserverSet"

    def parent_facade(self) -> Any:
        """Return the live parent façade, or None at the root or once reclaimed."""
        if self.parent is None:
            return None
        return self.parent()


class IdentityRegistry:
    """
    Arena of weak façade references keyed by façade identity.

    Slots are allocated by ``register`` and freed by the finalizer attached to
    the façade. Lookups always confirm the slot still refers to the very same
    object, so a recycled ``id()`` can never be mistaken for a façade.
    """

    def __init__(self) -> None:
        self._facades: Dict[int, weakref.ref] = {}
        self._by_raw: Dict[int, int] = {}

    def register(self, facade: Any, context: ObservableContext) -> None:
        """Attach ``context`` to ``facade`` and allocate its slot."""
        key = id(facade)
        raw_key = id(context.raw)
        facade._meta = context
        self._facades[key] = weakref.ref(facade)
        self._by_raw[raw_key] = key
        weakref.finalize(facade, self._release, key, raw_key)

    def _live(self, key: int) -> Any:
        ref = self._facades.get(key)
        return ref() if ref is not None else None

    def lookup(self, obj: Any) -> Optional[ObservableContext]:
        """Return the context of ``obj`` if it is a registered façade."""
        facade = self._live(id(obj))
        if facade is None or facade is not obj:
            return None
        return facade._meta

    def facade_for(self, raw: Any) -> Any:
        """Return the live façade already wrapping ``raw``, or None."""
        key = self._by_raw.get(id(raw))
        if key is None:
            return None
        facade = self._live(key)
        if facade is None or facade._meta.raw is not raw:
            return None
        return facade

    def _release(self, key: int, raw_key: int) -> None:
        if self._live(key) is not None:
            # slot already reused by a newer façade
            return
        self._facades.pop(key, None)
        if self._by_raw.get(raw_key) == key:
            del self._by_raw[raw_key]
        logger.debug("Released observable slot %#x", key)

    def __contains__(self, obj: Any) -> bool:
        return self.lookup(obj) is not None

    def __len__(self) -> int:
        return len(self._facades)


# Global registry instance
registry = IdentityRegistry()
