"""
Ripple Exceptions
=================

Every error raised by ripple derives from ``ObservableError``. Each concrete
error also inherits from the builtin exception a caller would naturally expect
(``TypeError`` for bad input, ``ValueError`` for misuse of an observer, ...),
so generic ``except`` clauses keep working.
"""


class ObservableError(Exception):
    """Base class for all ripple errors."""

    pass


class InputContractError(ObservableError, TypeError):
    """A non-object value was passed where an object is required."""

    pass


class UnsupportedKindError(ObservableError, TypeError):
    """Strict wrapping met a value whose kind cannot be observed."""

    pass


class NotObservableError(ObservableError, ValueError):
    """The argument is not a registered observable façade."""

    pass


class DuplicateObserverError(ObservableError, ValueError):
    """The callback is already registered on this façade."""

    pass


class StaleObserverError(ObservableError, ValueError):
    """The observer handle no longer refers to a registered callback."""

    pass


class InternalConsistencyError(ObservableError, RuntimeError):
    """Propagation reached a façade without registry metadata.

    This never happens under correct usage and indicates a defect in ripple.
    """

    pass


class PropagationDepthError(ObservableError, RecursionError):
    """Callbacks kept mutating observed data beyond the configured depth."""

    pass
