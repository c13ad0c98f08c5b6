"""
Ripple NumericBufferFacade
==========================

Façade for fixed-width numeric buffers: ``array.array`` with a numeric
typecode, ``bytearray`` and one-dimensional integer or floating
``numpy.ndarray``.

Buffers hold scalars only, so nothing is ever wrapped. Writes report the
offset they start at together with copies of the affected sub-range taken
before and after the write. Sub-range copies are of the same buffer type as
the raw value (a numpy slice is copied, never handed out as a view).

The buffer length is fixed while observed: resizing methods of the raw type
are refused, slice assignment must keep the slice length, and ``del f[i]``
resets the element to zero instead of removing it.
"""

import array
import operator
from collections.abc import Sequence
from typing import Any, Iterable, List, Optional

import numpy as np

from ..kinds import Kind
from ..propagation import ABSENT, ObservationType
from ..registry import mutation_lock
from .base import ObservableFacade


class NumericBufferFacade(ObservableFacade, Sequence):
    """Façade for a numeric buffer."""

    __slots__ = ()

    kind = Kind.NUMERIC_BUFFER
    _refused = frozenset(
        {
            "append",
            "extend",
            "insert",
            "pop",
            "remove",
            "clear",
            "frombytes",
            "fromfile",
            "fromlist",
            "fromunicode",
            "byteswap",
            "put",
            "resize",
            "partition",
            "itemset",
            "setfield",
        }
    )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def __getitem__(self, index: Any) -> Any:
        if isinstance(index, slice):
            return self._copy(index)
        return self._raw[index]

    def __len__(self) -> int:
        return len(self._raw)

    def __iter__(self):
        return iter(self._raw)

    def __eq__(self, other: object) -> Any:
        if isinstance(other, ObservableFacade):
            other = other._raw
        return self._raw == other

    __hash__ = None  # type: ignore[assignment]

    def tolist(self) -> List[Any]:
        """Return the buffer contents as a list of Python scalars."""
        if isinstance(self._raw, bytearray):
            return list(self._raw)
        return self._raw.tolist()

    def _copy(self, index: slice) -> Any:
        chunk = self._raw[index]
        if isinstance(chunk, np.ndarray):
            return chunk.copy()
        return chunk

    def _coerce(self, values: Iterable[Any]) -> Any:
        """Build a buffer of the raw type from ``values``."""
        raw = self._raw
        if isinstance(values, ObservableFacade):
            values = values._raw
        if isinstance(raw, array.array):
            if isinstance(values, array.array) and values.typecode == raw.typecode:
                return values
            return array.array(raw.typecode, list(values))
        if isinstance(raw, bytearray):
            return bytearray(values)
        return np.asarray(values, dtype=raw.dtype)

    def _position(self, index: Any) -> int:
        index = operator.index(index)
        length = len(self._raw)
        position = index + length if index < 0 else index
        if not 0 <= position < length:
            raise IndexError(f"{type(self._raw).__name__} index out of range")
        return position

    def _write(self, index: slice, values: Any) -> None:
        """Store ``values`` into ``index`` and report it at the slice start."""
        start = index.indices(len(self._raw))[0]
        value_old = self._copy(index)
        self._raw[index] = values
        self._notify(ObservationType.CHANGE, start, self._copy(index), value_old)

    # ------------------------------------------------------------------
    # Intercepted operations
    # ------------------------------------------------------------------

    def __setitem__(self, index: Any, value: Any) -> None:
        with mutation_lock:
            if isinstance(index, slice):
                values = self._coerce(value)
                expected = len(range(*index.indices(len(self._raw))))
                if len(values) != expected:
                    raise ValueError(
                        f"cannot assign {len(values)} values to a slice of "
                        f"length {expected}: observed buffers have a fixed size"
                    )
                self._write(index, values)
                return
            position = self._position(index)
            value_old = self._raw[position]
            self._raw[position] = value
            self._notify(
                ObservationType.CHANGE, position, self._raw[position], value_old
            )

    def __delitem__(self, index: Any) -> None:
        with mutation_lock:
            position = self._position(index)
            value_old = self._raw[position]
            # the slot stays, only its value is cleared
            self._raw[position] = 0
            self._notify(ObservationType.DELETE, position, ABSENT, value_old)

    def set(self, values: Iterable[Any], offset: int = 0) -> None:
        """Copy ``values`` into the buffer starting at ``offset``."""
        with mutation_lock:
            values = self._coerce(values)
            length = len(self._raw)
            offset = operator.index(offset)
            if offset < 0:
                offset += length
            if offset < 0 or offset + len(values) > length:
                raise IndexError("source does not fit into the buffer at offset")
            self._write(slice(offset, offset + len(values)), values)

    def fill(
        self, value: Any, start: int = 0, end: Optional[int] = None
    ) -> "NumericBufferFacade":
        """Set every element of ``[start, end)`` to ``value``."""
        with mutation_lock:
            start, end, _ = slice(start, end).indices(len(self._raw))
            count = max(end - start, 0)
            self._write(slice(start, end), self._coerce([value] * count))
        return self

    def copy_within(
        self, target: int, start: int = 0, end: Optional[int] = None
    ) -> "NumericBufferFacade":
        """Copy ``[start, end)`` over the elements starting at ``target``."""
        with mutation_lock:
            length = len(self._raw)
            target = slice(target, None).indices(length)[0]
            start, end, _ = slice(start, end).indices(length)
            count = min(max(end - start, 0), length - target)
            value_old = self._copy(slice(start, end))
            chunk = self._copy(slice(start, start + count))
            self._raw[target : target + count] = chunk
            self._notify(
                ObservationType.CHANGE,
                target,
                self._copy(slice(target, target + count)),
                value_old,
            )
        return self

    def sort(self, *, key: Any = None, reverse: bool = False) -> None:
        with mutation_lock:
            values = sorted(self.tolist(), key=key, reverse=reverse)
            self._rewrite(values)

    def reverse(self) -> None:
        with mutation_lock:
            values = self.tolist()
            values.reverse()
            self._rewrite(values)

    def _rewrite(self, values: List[Any]) -> None:
        value_old = self._copy(slice(None))
        self._raw[:] = self._coerce(values)
        self._notify(ObservationType.CHANGE, 0, self._copy(slice(None)), value_old)
