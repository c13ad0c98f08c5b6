"""
Ripple - Deep Observation of Nested Python Data

Wrap a container once and every change anywhere below it is reported to the
callbacks observing it, with the kind of change, a dotted path relative to
the observer, and the values before and after.

Supported containers: ``dict`` records, mutable sequences (``list``,
``deque``, ...), sets, other mutable mappings (``OrderedDict``,
``defaultdict``, weak dictionaries, ...) and numeric buffers (``array.array``,
``bytearray``, 1-D ``numpy.ndarray``).
"""

import logging

from .api import (
    is_observable,
    is_wrapped,
    observable,
    observe,
    observer,
    raw,
    unwrap,
    wrap,
)
from .config import RippleConfig, configure, get_config, reset_config
from .exceptions import (
    DuplicateObserverError,
    InputContractError,
    InternalConsistencyError,
    NotObservableError,
    ObservableError,
    PropagationDepthError,
    StaleObserverError,
    UnsupportedKindError,
)
from .kinds import Classification, Kind, classify
from .observers import Observer, ObserverSet
from .propagation import ABSENT, WILDCARD, Observation, ObservationType

__version__ = "0.1.0"

# Library logging stays silent unless the application configures handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Entry points
    "wrap",
    "is_wrapped",
    "unwrap",
    "observe",
    # Aliases
    "observable",
    "is_observable",
    "raw",
    "observer",
    # Observations
    "Observation",
    "ObservationType",
    "ABSENT",
    "WILDCARD",
    "Observer",
    "ObserverSet",
    # Introspection
    "Kind",
    "Classification",
    "classify",
    # Configuration
    "RippleConfig",
    "configure",
    "get_config",
    "reset_config",
    # Exceptions
    "ObservableError",
    "InputContractError",
    "UnsupportedKindError",
    "NotObservableError",
    "DuplicateObserverError",
    "StaleObserverError",
    "InternalConsistencyError",
    "PropagationDepthError",
    "__version__",
]
