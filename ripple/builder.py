"""
Ripple Façade Builder
=====================

Turns raw values into registered façades. ``build`` wraps the value it is
given and then every object-typed value reachable from it, replacing members
with their façades directly on the raw containers. No notifications are sent
while building.

The descent is iterative: a work stack holds façades whose members still have
to be wrapped, so arbitrarily deep nesting never hits the recursion limit.
Each façade is registered before its members are visited, which lets cyclic
raw graphs resolve to the façade already built for a container.
"""

import logging
import weakref
from typing import Any, Callable, Dict, List, Tuple, Type

from .exceptions import InputContractError, UnsupportedKindError
from .facades import (
    KeyedCollectionFacade,
    NumericBufferFacade,
    ObservableFacade,
    RecordFacade,
    SequenceFacade,
    UniqueCollectionFacade,
)
from .kinds import Kind, classify, holds_values_weakly, is_object_typed
from .observers import ObserverSet
from .registry import ObservableContext, mutation_lock, registry

logger = logging.getLogger(__name__)

_FACADES: Dict[Kind, Type[ObservableFacade]] = {
    Kind.RECORD: RecordFacade,
    Kind.SEQUENCE: SequenceFacade,
    Kind.UNIQUE_COLLECTION: UniqueCollectionFacade,
    Kind.KEYED_COLLECTION: KeyedCollectionFacade,
    Kind.NUMERIC_BUFFER: NumericBufferFacade,
}


def _build_one(value: Any, name: Any, parent: Any, strict: bool) -> Tuple[Any, bool]:
    """Wrap ``value`` alone. Returns ``(result, created)``."""
    if not is_object_typed(value):
        raise InputContractError("can convert objects to observables only")

    if value in registry:
        return value, False
    existing = registry.facade_for(value)
    if existing is not None:
        return existing, False

    classification = classify(value)
    if classification.kind is Kind.OPAQUE:
        return value, False
    if classification.kind is Kind.UNSUPPORTED:
        if strict:
            raise UnsupportedKindError(
                f"cannot observe values of type {type(value).__name__}"
            )
        return value, False

    facade = _FACADES[classification.kind](value)
    context = ObservableContext(
        raw=value,
        name=str(name),
        parent=weakref.ref(parent) if parent is not None else None,
        strict=strict,
        weak_values=holds_values_weakly(value),
        observers=ObserverSet(),
    )
    registry.register(facade, context)
    logger.debug(
        "Wrapped %s as %s (name=%r)",
        type(value).__name__,
        type(facade).__name__,
        context.name,
    )
    return facade, True


def build(value: Any, name: Any = "", parent: Any = None, strict: bool = True) -> Any:
    """
    Return the façade for ``value``, wrapping it and its descendants as needed.

    Already-wrapped values are returned unchanged, keeping their original
    name and parent. Opaque values, and unsupported ones when ``strict`` is
    false, are returned as they are.

    Args:
        value: Object-typed value to wrap.
        name: Slot the value occupies in ``parent`` (path token).
        parent: Owning façade, or None for a root.
        strict: Whether unsupported kinds raise instead of passing through.

    Raises:
        InputContractError: If ``value`` is a scalar or a routine.
        UnsupportedKindError: If ``strict`` and an unsupported kind is met.
    """
    with mutation_lock:
        root, created = _build_one(value, name, parent, strict)
        if not created:
            return root

        pending: List[ObservableFacade] = [root]
        while pending:
            facade = pending.pop()
            facade._wrap_members(_member_adopter(facade, strict, pending))
        return root


def _member_adopter(
    owner: ObservableFacade, strict: bool, pending: List[ObservableFacade]
) -> Callable[[Any, Any], Any]:
    def adopt(member: Any, name: Any) -> Any:
        wrapped, created = _build_one(member, name, owner, strict)
        if created:
            pending.append(wrapped)
        return wrapped

    return adopt
