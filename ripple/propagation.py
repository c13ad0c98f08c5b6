"""
Ripple Propagation - Bubbling Change Notifications
==================================================

A mutation on a façade is reported once per ancestor level:

1. every active callback registered on the mutated façade receives an
   ``Observation`` whose path is relative to that façade
2. the walk moves to the parent façade, prefixing the path with the name the
   child occupies in it (``"c"`` becomes ``"b.c"``), and repeats until the
   root is reached

Delivery is synchronous and innermost-first. Callbacks may mutate observed
data themselves; such nested mutations propagate completely before the outer
walk resumes. A thread-local counter bounds how deeply these re-entrant
dispatches may nest.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator

from .config import get_config
from .exceptions import InternalConsistencyError, PropagationDepthError
from .registry import registry

logger = logging.getLogger(__name__)


# ============================================================================
# SENTINEL VALUES
# ============================================================================


class _ABSENT:
    """Sentinel for 'no value' in an observation (distinct from None)."""

    def __repr__(self):
        return "ABSENT"

    def __bool__(self):
        return False


ABSENT = _ABSENT()


# ============================================================================
# OBSERVATIONS
# ============================================================================


class ObservationType(str, Enum):
    """Type of an observation; compares equal to its plain string value."""

    CHANGE = "change"
    DELETE = "delete"


WILDCARD = "*"


@dataclass(frozen=True, eq=False)
class Observation:
    """
    One notification delivered to one callback level.

    Attributes:
        kind: ``ObservationType.CHANGE`` or ``ObservationType.DELETE``
        target: the façade the callback is registered on
        path: dotted address of the mutated location, relative to ``target``
        value_new: value after the mutation, ``ABSENT`` if not applicable
        value_old: value before the mutation, ``ABSENT`` if not applicable
    """

    kind: ObservationType
    target: Any
    path: str
    value_new: Any = ABSENT
    value_old: Any = ABSENT


# ============================================================================
# PROPAGATION
# ============================================================================


class PropagationContext:
    """Tracks nested dispatch depth per thread."""

    _local = threading.local()

    @classmethod
    def _get_state(cls) -> dict:
        if not hasattr(cls._local, "state"):
            cls._local.state = {"depth": 0}
        return cls._local.state

    @classmethod
    def depth(cls) -> int:
        return cls._get_state()["depth"]

    @classmethod
    @contextmanager
    def dispatching(cls) -> Iterator[None]:
        state = cls._get_state()
        limit = get_config().max_propagation_depth
        if state["depth"] >= limit:
            raise PropagationDepthError(
                f"Observation callbacks re-entered propagation more than {limit} times"
            )
        state["depth"] += 1
        try:
            yield
        finally:
            state["depth"] -= 1

    @classmethod
    def _reset(cls) -> None:
        cls._local.__dict__.clear()


def notify(
    kind: ObservationType,
    facade: Any,
    path: str,
    value_new: Any = ABSENT,
    value_old: Any = ABSENT,
) -> None:
    """
    Deliver a mutation to ``facade`` and each of its ancestors.

    Args:
        kind: type of the observation
        facade: the façade that was mutated
        path: path token relative to ``facade``
        value_new: value after the mutation
        value_old: value before the mutation

    Raises:
        InternalConsistencyError: If a façade on the walk has no context.
        PropagationDepthError: If re-entrant dispatch exceeds the configured depth.
    """
    with PropagationContext.dispatching():
        target = facade
        while True:
            context = registry.lookup(target)
            if context is None:
                logger.error(
                    "No observable context for %s during propagation of %r",
                    type(target).__name__,
                    path,
                )
                raise InternalConsistencyError(
                    "internal error: missing information context"
                )

            observation = Observation(kind, target, path, value_new, value_old)
            observers = context.observers
            for callback in observers.active():
                # an earlier callback may have paused or destroyed this one
                if observers.is_active(callback):
                    callback(observation)

            parent = context.parent_facade()
            if parent is None:
                if context.parent is not None:
                    logger.debug(
                        "Parent of %r was reclaimed, bubbling stops", context.name
                    )
                return
            path = f"{context.name}.{path}"
            target = parent
