"""
Ripple Kind Classifier
======================

Decides which façade strategy applies to a value. Classification walks an
ordered list of ``(predicate, Classification)`` rules and returns the first
match, so more specific container types (weak collections, numeric buffers)
are recognised before the generic abstract base classes they also satisfy.

Kinds:
- RECORD: a plain ``dict``
- SEQUENCE: any ``MutableSequence`` (``list``, ``deque``, ``UserList``, ...)
- UNIQUE_COLLECTION: ``set`` and other ``MutableSet`` types, weak: ``WeakSet``
- KEYED_COLLECTION: any other ``MutableMapping``, weak: ``WeakKeyDictionary``
  and ``WeakValueDictionary``
- NUMERIC_BUFFER: ``array.array`` with a numeric typecode, ``bytearray`` and
  one-dimensional integer/floating ``numpy.ndarray``
- OPAQUE: immutable value-like objects that are passed through untouched
- UNSUPPORTED: everything else
"""

import array
import datetime
import functools
import numbers
import pathlib
import re
import types
import uuid
import weakref
from collections.abc import MutableMapping, MutableSequence, MutableSet
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Tuple

import numpy as np

from .exceptions import InputContractError


class Kind(Enum):
    """Structural classification of a value."""

    RECORD = "record"
    SEQUENCE = "sequence"
    UNIQUE_COLLECTION = "unique_collection"
    KEYED_COLLECTION = "keyed_collection"
    NUMERIC_BUFFER = "numeric_buffer"
    OPAQUE = "opaque"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class Classification:
    """Result of ``classify``: the kind plus the weak-variant flag."""

    kind: Kind
    weak: bool = False


# numbers.Number covers bool, int, float, complex, Decimal, Fraction and numpy scalars
_SCALAR_TYPES = (type(None), numbers.Number, str, bytes)

_ROUTINE_TYPES = (
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.BuiltinMethodType,
    functools.partial,
    type,
)

_OPAQUE_TYPES = (
    datetime.date,
    datetime.time,
    datetime.timedelta,
    re.Pattern,
    BaseException,
    tuple,
    frozenset,
    range,
    uuid.UUID,
    pathlib.PurePath,
    Enum,
)

_NUMERIC_TYPECODES = frozenset("bBhHiIlLqQfd")


def is_object_typed(value: Any) -> bool:
    """Return True for values that may be wrapped (not scalars, not routines)."""
    return not isinstance(value, _SCALAR_TYPES) and not isinstance(
        value, _ROUTINE_TYPES
    )


def holds_values_weakly(value: Any) -> bool:
    """Return True for containers whose members or values are only weakly referenced."""
    return isinstance(value, (weakref.WeakSet, weakref.WeakValueDictionary))


def is_numeric_buffer(value: Any) -> bool:
    """Return True for fixed-width numeric buffers."""
    if isinstance(value, bytearray):
        return True
    if isinstance(value, array.array):
        return value.typecode in _NUMERIC_TYPECODES
    if isinstance(value, np.ndarray):
        return value.ndim == 1 and (
            np.issubdtype(value.dtype, np.integer)
            or np.issubdtype(value.dtype, np.floating)
        )
    return False


_KIND_RULES: List[Tuple[Callable[[Any], bool], Classification]] = [
    (
        lambda x: isinstance(x, weakref.WeakSet),
        Classification(Kind.UNIQUE_COLLECTION, weak=True),
    ),
    (
        lambda x: isinstance(x, MutableSet),
        Classification(Kind.UNIQUE_COLLECTION),
    ),
    (
        lambda x: isinstance(
            x, (weakref.WeakKeyDictionary, weakref.WeakValueDictionary)
        ),
        Classification(Kind.KEYED_COLLECTION, weak=True),
    ),
    (
        lambda x: isinstance(x, MutableMapping) and type(x) is not dict,
        Classification(Kind.KEYED_COLLECTION),
    ),
    (is_numeric_buffer, Classification(Kind.NUMERIC_BUFFER)),
    # array.array with a non-numeric typecode is a MutableSequence too
    (
        lambda x: isinstance(x, MutableSequence) and not isinstance(x, array.array),
        Classification(Kind.SEQUENCE),
    ),
    (lambda x: type(x) is dict, Classification(Kind.RECORD)),
    (lambda x: isinstance(x, _OPAQUE_TYPES), Classification(Kind.OPAQUE)),
]

_UNSUPPORTED = Classification(Kind.UNSUPPORTED)


def classify(value: Any) -> Classification:
    """
    Classify a value for wrapping.

    Args:
        value: Any object-typed value.

    Returns:
        The matching Classification, ``Kind.UNSUPPORTED`` if no rule applies.

    Raises:
        InputContractError: If ``value`` is a scalar or a routine.

    Example:
        ```python
        classify({"a": 1}).kind       # Kind.RECORD
        classify(weakref.WeakSet())   # Classification(UNIQUE_COLLECTION, weak=True)
        classify(object()).kind       # Kind.UNSUPPORTED
        ```
    """
    if not is_object_typed(value):
        raise InputContractError(
            f"can classify objects only, got {type(value).__name__}"
        )
    for predicate, classification in _KIND_RULES:
        if predicate(value):
            return classification
    return _UNSUPPORTED
