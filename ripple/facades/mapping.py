"""
Ripple Mapping Façades
======================

``RecordFacade`` wraps plain ``dict`` records, ``KeyedCollectionFacade`` wraps
every other mutable mapping (``OrderedDict``, ``defaultdict``, ``Counter``,
``UserDict``, weak dictionaries, ...). Both intercept item assignment and
deletion; the derived ``MutableMapping`` operations (``pop``, ``update``,
``setdefault``, ...) are expressed through those two so every key they touch
is reported on its own. On a ``Counter`` the counting operations (``update``,
``subtract``, ``|=``) keep their ``Counter`` meaning: the resulting count of each
key is computed first and then assigned, one notification per key.

The two kinds differ in how removal is reported:

======================  ==========================  ==========================
Operation               RecordFacade                KeyedCollectionFacade
======================  ==========================  ==========================
``f[k] = v``            change ``k``                change ``k``
``del f[k]``            delete ``k``                change ``k``
``clear()``             one delete per key          one change ``*``
======================  ==========================  ==========================
"""

from collections import Counter, defaultdict
from collections.abc import MutableMapping
from typing import Any, Callable, Iterator

from ..kinds import Kind, is_object_typed
from ..propagation import ABSENT, WILDCARD, ObservationType
from ..registry import mutation_lock
from .base import ObservableFacade

_MISSING = object()


class _MappingFacade(ObservableFacade, MutableMapping):
    """Shared implementation of the mapping façades."""

    __slots__ = ()

    _delete_kind = ObservationType.DELETE

    def __getitem__(self, key: Any) -> Any:
        return self._raw[key]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._raw)

    def __len__(self) -> int:
        return len(self._raw)

    def __contains__(self, key: object) -> bool:
        return key in self._raw

    def __reversed__(self) -> Iterator[Any]:
        return reversed(self._raw)

    def get(self, key: Any, default: Any = None) -> Any:
        return self._raw.get(key, default)

    def __setitem__(self, key: Any, value: Any) -> None:
        with mutation_lock:
            value_old = self._raw.get(key, ABSENT)
            value = self._adopt(value, key)
            self._raw[key] = value
            self._notify(ObservationType.CHANGE, key, value, value_old)

    def __delitem__(self, key: Any) -> None:
        with mutation_lock:
            value_old = self._raw[key]
            del self._raw[key]
            self._notify(self._delete_kind, key, ABSENT, value_old)

    def pop(self, key: Any, default: Any = _MISSING) -> Any:
        with mutation_lock:
            if key not in self._raw:
                if default is _MISSING:
                    raise KeyError(key)
                return default
            value = self._raw[key]
            del self[key]
            return value

    def popitem(self, *args: Any, **kwargs: Any) -> Any:
        # delegate the choice of item (LIFO for dict, ``last=`` for OrderedDict)
        with mutation_lock:
            key, value_old = self._raw.popitem(*args, **kwargs)
            self._notify(self._delete_kind, key, ABSENT, value_old)
            return key, value_old

    def clear(self) -> None:
        with mutation_lock:
            for key in list(self._raw):
                del self[key]

    def setdefault(self, key: Any, default: Any = None) -> Any:
        with mutation_lock:
            if key not in self._raw:
                self[key] = default
            return self._raw[key]

    def __ior__(self, other: Any) -> "_MappingFacade":
        self.update(other)
        return self

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ObservableFacade):
            other = other._raw
        return self._raw == other

    __hash__ = None  # type: ignore[assignment]

    def _wrap_members(self, adopt: Callable[[Any, Any], Any]) -> None:
        for key, value in list(self._raw.items()):
            if is_object_typed(value):
                self._raw[key] = adopt(value, key)


class RecordFacade(_MappingFacade):
    """Façade for a plain ``dict``."""

    __slots__ = ()

    kind = Kind.RECORD


class KeyedCollectionFacade(_MappingFacade):
    """Façade for key/value collections other than plain ``dict``."""

    __slots__ = ()

    kind = Kind.KEYED_COLLECTION
    _delete_kind = ObservationType.CHANGE

    def __getitem__(self, key: Any) -> Any:
        raw = self._raw
        if (
            isinstance(raw, defaultdict)
            and raw.default_factory is not None
            and key not in raw
        ):
            # the read inserts a default; route it through observation
            with mutation_lock:
                self[key] = raw.default_factory()
        return raw[key]

    def update(self, *args: Any, **kwargs: Any) -> None:
        if not isinstance(self._raw, Counter):
            super().update(*args, **kwargs)
            return
        # Counter.update adds counts; tally first, then assign each sum
        self._recount(Counter(*args, **kwargs), 1)

    def subtract(self, *args: Any, **kwargs: Any) -> None:
        if not isinstance(self._raw, Counter):
            raise AttributeError(
                f"'{type(self._raw).__name__}' object has no attribute 'subtract'"
            )
        self._recount(Counter(*args, **kwargs), -1)

    def _recount(self, tally: Counter, sign: int) -> None:
        with mutation_lock:
            for key, count in tally.items():
                self[key] = self._raw.get(key, 0) + sign * count

    def __ior__(self, other: Any) -> "KeyedCollectionFacade":
        if not isinstance(self._raw, Counter):
            return super().__ior__(other)
        with mutation_lock:
            if isinstance(other, ObservableFacade):
                other = other._raw
            # Counter union keeps the larger count and drops non-positive ones
            result = self._raw | Counter(other)
            for key in [key for key in self._raw if key not in result]:
                del self[key]
            for key, count in result.items():
                if self._raw.get(key, ABSENT) != count:
                    self[key] = count
        return self

    def clear(self) -> None:
        with mutation_lock:
            self._raw.clear()
            self._notify(ObservationType.CHANGE, WILDCARD)

    def move_to_end(self, key: Any, last: bool = True) -> None:
        with mutation_lock:
            self._raw.move_to_end(key, last)
            self._notify(ObservationType.CHANGE, WILDCARD)

    def _wrap_members(self, adopt: Callable[[Any, Any], Any]) -> None:
        if self._context.weak_values:
            # weakly held members cannot own a freshly built façade
            return
        super()._wrap_members(adopt)
