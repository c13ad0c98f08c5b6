"""
Shared pytest fixtures and configuration for ripple tests.
"""

import pytest

from ripple.config import reset_config
from ripple.propagation import PropagationContext


@pytest.fixture(autouse=True)
def reset_ripple_state():
    """Reset configuration and dispatch depth before each test."""
    reset_config()
    PropagationContext._reset()
    yield
    reset_config()


class Recorder:
    """Callable that records every observation it receives."""

    def __init__(self):
        self.observations = []

    def __call__(self, observation):
        self.observations.append(observation)

    @property
    def count(self):
        return len(self.observations)

    @property
    def last(self):
        return self.observations[-1]

    def summary(self):
        """Observations as ``(kind, path, value_new, value_old)`` tuples."""
        return [
            (o.kind, o.path, o.value_new, o.value_old) for o in self.observations
        ]

    def clear(self):
        self.observations.clear()


@pytest.fixture
def recorder():
    """Provide a fresh observation recorder."""
    return Recorder()


@pytest.fixture
def make_recorder():
    """Factory for tests that need several independent recorders."""
    return Recorder
