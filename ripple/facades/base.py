"""
Ripple ObservableFacade - Base Class for All Façades
====================================================

A façade stands in for a raw container. It implements the container's read
interface by forwarding to the raw value and reimplements every mutating
operation so it can:

1. snapshot the value(s) about to change
2. wrap object-typed values before they are stored (``_adopt``)
3. apply the real operation to the raw value
4. report the change through the propagation engine
5. return whatever the real operation returned

Attribute lookups that the façade class does not define fall through to the
raw value, so non-mutating methods (``copy``, ``index``, ``tobytes``, ...) run
with the raw value as receiver. Mutating methods of the raw type that a
façade does not intercept are listed in ``_refused`` and raise
``AttributeError`` instead of silently bypassing observation.
"""

import copy
from typing import Any, Callable, FrozenSet, Optional

from ..exceptions import InternalConsistencyError
from ..kinds import Kind, is_object_typed
from ..propagation import ABSENT, ObservationType, notify
from ..registry import ObservableContext, registry


class ObservableFacade:
    """Common behaviour of all façades. Subclasses set ``kind``."""

    __slots__ = ("_raw", "_meta", "__weakref__")

    kind: Optional[Kind] = None
    _refused: FrozenSet[str] = frozenset()

    def __init__(self, raw: Any) -> None:
        self._raw = raw

    # ------------------------------------------------------------------
    # Read passthrough
    # ------------------------------------------------------------------

    def __getattr__(self, name: str) -> Any:
        if name in ("_raw", "_meta"):
            raise AttributeError(name)
        if name in type(self)._refused:
            raise AttributeError(
                f"'{name}' would modify the {type(self._raw).__name__} without "
                f"notifying observers and is not available on {type(self).__name__}"
            )
        return getattr(self._raw, name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._raw!r})"

    def __str__(self) -> str:
        return str(self._raw)

    def __copy__(self) -> Any:
        return copy.copy(self._raw)

    def __deepcopy__(self, memo: dict) -> Any:
        return copy.deepcopy(self._raw, memo)

    # ------------------------------------------------------------------
    # Mutation helpers
    # ------------------------------------------------------------------

    @property
    def _context(self) -> ObservableContext:
        context = registry.lookup(self)
        if context is None:
            raise InternalConsistencyError(
                f"internal error: {type(self).__name__} is not registered"
            )
        return context

    def _adopt(self, value: Any, name: Any) -> Any:
        """Wrap ``value`` for storage at slot ``name`` of this façade."""
        context = self._context
        if context.weak_values or not is_object_typed(value):
            return value
        from ..builder import build

        return build(value, name=name, parent=self, strict=context.strict)

    def _notify(
        self,
        kind: ObservationType,
        path: Any,
        value_new: Any = ABSENT,
        value_old: Any = ABSENT,
    ) -> None:
        notify(kind, self, str(path), value_new, value_old)

    def _wrap_members(self, adopt: Callable[[Any, Any], Any]) -> None:
        """Replace object-typed members of the raw value with façades.

        Called once by the builder right after registration. ``adopt`` builds
        the façade for a member without descending into it.
        """
        pass
