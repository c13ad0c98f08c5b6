"""
Ripple SequenceFacade
=====================

Façade for mutable sequences (``list``, ``collections.deque``,
``collections.UserList`` and other ``MutableSequence`` types).

Index-addressed operations report the normalized (non-negative) index as their
path token, so ``f[-1] = x`` on a three-element list reports ``"2"``. Slice
assignment is reported as a splice at the slice start, with the removed items
as the old value and the stored items as the new value. Reordering operations
(``sort``, ``reverse``) affect every slot and report the wildcard path ``"*"``
without values.

``extend``, ``remove``, ``+=`` and ``*=`` are composed from the intercepted
primitives, one notification per affected element.
"""

import operator
from collections.abc import MutableSequence
from typing import Any, Callable, Iterable, Iterator, List

from ..kinds import Kind, is_object_typed
from ..propagation import ABSENT, WILDCARD, ObservationType
from ..registry import mutation_lock
from .base import ObservableFacade


class SequenceFacade(ObservableFacade, MutableSequence):
    """Façade for a mutable sequence."""

    __slots__ = ()

    kind = Kind.SEQUENCE

    def __getitem__(self, index: Any) -> Any:
        return self._raw[index]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._raw)

    def __reversed__(self) -> Iterator[Any]:
        return reversed(self._raw)

    def __len__(self) -> int:
        return len(self._raw)

    def __contains__(self, value: object) -> bool:
        return value in self._raw

    def index(self, value: Any, *args: Any) -> int:
        return self._raw.index(value, *args)

    def count(self, value: Any) -> int:
        return self._raw.count(value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ObservableFacade):
            other = other._raw
        return self._raw == other

    __hash__ = None  # type: ignore[assignment]

    def _position(self, index: Any) -> int:
        index = operator.index(index)
        length = len(self._raw)
        position = index + length if index < 0 else index
        if not 0 <= position < length:
            raise IndexError(f"{type(self._raw).__name__} index out of range")
        return position

    # ------------------------------------------------------------------
    # Intercepted operations
    # ------------------------------------------------------------------

    def __setitem__(self, index: Any, value: Any) -> None:
        with mutation_lock:
            if isinstance(index, slice):
                self._splice(index, value)
                return
            position = self._position(index)
            value_old = self._raw[position]
            value = self._adopt(value, position)
            self._raw[position] = value
            self._notify(ObservationType.CHANGE, position, value, value_old)

    def __delitem__(self, index: Any) -> None:
        with mutation_lock:
            if isinstance(index, slice):
                start = index.indices(len(self._raw))[0]
                removed = list(self._raw[index])
                del self._raw[index]
                self._notify(ObservationType.DELETE, start, ABSENT, removed)
                return
            position = self._position(index)
            value_old = self._raw[position]
            del self._raw[position]
            self._notify(ObservationType.DELETE, position, ABSENT, value_old)

    def _splice(self, index: slice, values: Iterable[Any]) -> None:
        start, _, step = index.indices(len(self._raw))
        removed = list(self._raw[index])
        stored = [
            self._adopt(value, start + offset * step)
            for offset, value in enumerate(list(values))
        ]
        self._raw[index] = stored
        self._notify(ObservationType.CHANGE, start, stored, removed)

    def insert(self, index: int, value: Any) -> None:
        with mutation_lock:
            index = operator.index(index)
            length = len(self._raw)
            # same clamping as list.insert
            position = max(index + length, 0) if index < 0 else min(index, length)
            value = self._adopt(value, position)
            self._raw.insert(index, value)
            self._notify(ObservationType.CHANGE, position, value, ABSENT)

    def append(self, value: Any) -> None:
        with mutation_lock:
            value = self._adopt(value, len(self._raw))
            self._raw.append(value)
            self._notify(ObservationType.CHANGE, len(self._raw) - 1, value, ABSENT)

    def pop(self, index: int = -1) -> Any:
        with mutation_lock:
            if not self._raw:
                raise IndexError(f"pop from empty {type(self._raw).__name__}")
            position = self._position(index)
            value_old = self._raw.pop() if index == -1 else self._raw.pop(index)
            self._notify(ObservationType.CHANGE, position, ABSENT, value_old)
            return value_old

    # deque operations

    def appendleft(self, value: Any) -> None:
        with mutation_lock:
            value = self._adopt(value, 0)
            self._raw.appendleft(value)
            self._notify(ObservationType.CHANGE, 0, value, ABSENT)

    def popleft(self) -> Any:
        with mutation_lock:
            value_old = self._raw.popleft()
            self._notify(ObservationType.CHANGE, 0, ABSENT, value_old)
            return value_old

    def extendleft(self, values: Iterable[Any]) -> None:
        with mutation_lock:
            for value in list(values):
                self.appendleft(value)

    def rotate(self, steps: int = 1) -> None:
        with mutation_lock:
            self._raw.rotate(steps)
            self._notify(ObservationType.CHANGE, WILDCARD)

    def clear(self) -> None:
        with mutation_lock:
            removed = list(self._raw)
            self._raw.clear()
            self._notify(ObservationType.DELETE, 0, ABSENT, removed)

    def sort(self, *, key: Any = None, reverse: bool = False) -> None:
        with mutation_lock:
            self._raw.sort(key=key, reverse=reverse)
            self._notify(ObservationType.CHANGE, WILDCARD)

    def reverse(self) -> None:
        with mutation_lock:
            self._raw.reverse()
            self._notify(ObservationType.CHANGE, WILDCARD)

    def __imul__(self, times: int) -> "SequenceFacade":
        with mutation_lock:
            if times <= 0:
                self.clear()
            else:
                items: List[Any] = list(self._raw)
                for _ in range(times - 1):
                    self.extend(items)
        return self

    def _wrap_members(self, adopt: Callable[[Any, Any], Any]) -> None:
        for position, value in enumerate(list(self._raw)):
            if is_object_typed(value):
                self._raw[position] = adopt(value, position)
