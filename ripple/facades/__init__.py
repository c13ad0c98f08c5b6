"""
Ripple Façades
==============

One façade class per observable kind. A façade forwards reads to the raw value
it wraps and reimplements every mutating operation so the change is reported
to observers.
"""

from .base import ObservableFacade
from .buffer import NumericBufferFacade
from .mapping import KeyedCollectionFacade, RecordFacade
from .sequence import SequenceFacade
from .unique import UniqueCollectionFacade

__all__ = [
    "ObservableFacade",
    "RecordFacade",
    "KeyedCollectionFacade",
    "SequenceFacade",
    "UniqueCollectionFacade",
    "NumericBufferFacade",
]
