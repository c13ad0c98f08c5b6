"""
Ripple Public API
=================

The four entry points of the library:

- ``wrap(value)`` returns the observable façade for a container
- ``is_wrapped(value)`` tells whether a value is such a façade
- ``unwrap(facade)`` returns the raw container behind a façade
- ``observe(facade, callback)`` registers a callback and returns its handle

Example:
    ```python
    from ripple import observe, wrap

    state = wrap({"user": {"name": "Ada"}})
    observe(state, lambda o: print(o.kind, o.path, o.value_old, o.value_new))
    state["user"]["name"] = "Grace"   # change user.name Ada Grace
    ```
"""

import logging
from typing import Any, Optional

from .builder import build
from .config import get_config
from .exceptions import InputContractError, NotObservableError
from .kinds import is_object_typed
from .observers import ObservationCallback, Observer
from .registry import mutation_lock, registry

logger = logging.getLogger(__name__)


def wrap(value: Any, strict: Optional[bool] = None) -> Any:
    """
    Return the observable façade for ``value``.

    Wrapping is idempotent: a façade is returned as is, and a raw value that is
    already wrapped yields its existing façade.

    Args:
        value: Container to observe.
        strict: Raise on unsupported kinds (True) or return them unwrapped
            (False). ``None`` uses the configured default.

    Raises:
        InputContractError: If ``value`` is a scalar or a routine.
        UnsupportedKindError: If ``value`` (or something nested in it) cannot
            be observed and wrapping is strict.
    """
    if strict is None:
        strict = get_config().strict
    return build(value, strict=strict)


def is_wrapped(value: Any) -> bool:
    """Return True if ``value`` is a registered façade."""
    if not is_object_typed(value):
        raise InputContractError("argument has to be an object")
    return value in registry


def unwrap(facade: Any) -> Any:
    """Return the raw value behind ``facade``."""
    if not is_object_typed(facade):
        raise InputContractError("argument has to be an object")
    context = registry.lookup(facade)
    if context is None:
        raise NotObservableError("argument not an observable")
    return context.raw


def observe(facade: Any, callback: ObservationCallback) -> Observer:
    """
    Register ``callback`` on ``facade``.

    The callback receives one ``Observation`` for each mutation of ``facade``
    or of any façade nested below it.

    Raises:
        NotObservableError: If ``facade`` is not a registered façade.
        TypeError: If ``callback`` is not callable.
        DuplicateObserverError: If ``callback`` is already registered here.
    """
    if not callable(callback):
        raise TypeError("observation callback must be callable")
    with mutation_lock:
        context = registry.lookup(facade)
        if context is None:
            raise NotObservableError("argument not an observable")
        context.observers.add(callback)
    logger.debug("Observing %s with %r", type(facade).__name__, callback)
    return Observer(context.observers, callback)


# Aliases
observable = wrap
is_observable = is_wrapped
raw = unwrap
observer = observe
