"""
Ripple UniqueCollectionFacade
=============================

Façade for ``set``, other ``MutableSet`` types and ``weakref.WeakSet``.

Members of a set have no addressable slot, so every notification uses the
wildcard path ``"*"``. Notifications are sent even when the underlying
operation turns out to be a no-op (adding a present member, discarding an
absent one): the call itself is what is reported.
"""

from collections.abc import MutableSet
from typing import Any, Callable, Iterable, Iterator

from ..kinds import Kind, is_object_typed
from ..propagation import ABSENT, WILDCARD, ObservationType
from ..registry import mutation_lock
from .base import ObservableFacade


class UniqueCollectionFacade(ObservableFacade, MutableSet):
    """Façade for a unique-value collection."""

    __slots__ = ()

    kind = Kind.UNIQUE_COLLECTION

    def __contains__(self, value: object) -> bool:
        return value in self._raw

    def __iter__(self) -> Iterator[Any]:
        return iter(self._raw)

    def __len__(self) -> int:
        return len(self._raw)

    @classmethod
    def _from_iterable(cls, it: Iterable[Any]) -> set:
        # results of |, &, -, ^ are plain sets, not façades
        return set(it)

    def add(self, value: Any) -> None:
        with mutation_lock:
            value = self._adopt(value, WILDCARD)
            self._raw.add(value)
            self._notify(ObservationType.CHANGE, WILDCARD, value, ABSENT)

    def discard(self, value: Any) -> None:
        with mutation_lock:
            self._raw.discard(value)
            self._notify(ObservationType.CHANGE, WILDCARD, ABSENT, value)

    def remove(self, value: Any) -> None:
        with mutation_lock:
            self._raw.remove(value)
            self._notify(ObservationType.CHANGE, WILDCARD, ABSENT, value)

    def pop(self) -> Any:
        with mutation_lock:
            value = self._raw.pop()
            self._notify(ObservationType.CHANGE, WILDCARD, ABSENT, value)
            return value

    def clear(self) -> None:
        with mutation_lock:
            self._raw.clear()
            self._notify(ObservationType.CHANGE, WILDCARD)

    def update(self, *others: Iterable[Any]) -> None:
        with mutation_lock:
            for other in others:
                for value in list(other):
                    self.add(value)

    def difference_update(self, *others: Iterable[Any]) -> None:
        with mutation_lock:
            for other in others:
                for value in list(other):
                    if value in self._raw:
                        self.discard(value)

    def intersection_update(self, *others: Iterable[Any]) -> None:
        with mutation_lock:
            keep = set(self._raw).intersection(*others)
            for value in list(self._raw):
                if value not in keep:
                    self.discard(value)

    def symmetric_difference_update(self, other: Iterable[Any]) -> None:
        with mutation_lock:
            for value in set(other):
                if value in self._raw:
                    self.discard(value)
                else:
                    self.add(value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ObservableFacade):
            other = other._raw
        return self._raw == other

    __hash__ = None  # type: ignore[assignment]

    def _wrap_members(self, adopt: Callable[[Any, Any], Any]) -> None:
        if self._context.weak_values:
            # weakly held members cannot own a freshly built façade
            return
        for value in list(self._raw):
            if is_object_typed(value):
                wrapped = adopt(value, WILDCARD)
                if wrapped is not value:
                    self._raw.discard(value)
                    self._raw.add(wrapped)
