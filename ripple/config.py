"""
Ripple Configuration
====================

Process-wide settings for wrapping and propagation.

- ``strict``: default for ``wrap(value, strict=None)``. When true, values of an
  unsupported kind raise ``UnsupportedKindError``; when false they are passed
  through unwrapped.
- ``max_propagation_depth``: how many notification dispatches may be nested
  inside each other (callbacks mutating observed data from within a callback)
  before ``PropagationDepthError`` is raised.

Usage:
    >>> from ripple.config import configure, get_config
    >>> configure(strict=False)
    >>> get_config().strict
    False
"""

from dataclasses import dataclass, fields, replace

DEFAULT_MAX_PROPAGATION_DEPTH = 256


@dataclass(frozen=True)
class RippleConfig:
    """Immutable snapshot of the active settings."""

    strict: bool = True
    max_propagation_depth: int = DEFAULT_MAX_PROPAGATION_DEPTH


_config = RippleConfig()


def get_config() -> RippleConfig:
    """Return the active configuration."""
    return _config


def configure(**overrides) -> RippleConfig:
    """Update the active configuration and return it.

    Raises:
        TypeError: If an unknown setting name is given.
        ValueError: If ``max_propagation_depth`` is not a positive integer.
    """
    global _config

    known = {f.name for f in fields(RippleConfig)}
    unknown = set(overrides) - known
    if unknown:
        raise TypeError(f"Unknown ripple setting(s): {', '.join(sorted(unknown))}")

    depth = overrides.get("max_propagation_depth", _config.max_propagation_depth)
    if not isinstance(depth, int) or depth < 1:
        raise ValueError("max_propagation_depth must be a positive integer")

    _config = replace(_config, **overrides)
    return _config


def reset_config() -> None:
    """Restore the default configuration (used by tests)."""
    global _config
    _config = RippleConfig()
