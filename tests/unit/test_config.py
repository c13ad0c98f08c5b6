"""
Tests for process-wide configuration.
"""

import pytest

from ripple import RippleConfig, configure, get_config, reset_config
from ripple.config import DEFAULT_MAX_PROPAGATION_DEPTH


@pytest.mark.unit
def test_defaults():
    """Wrapping is strict and the depth limit is the documented default."""
    config = get_config()

    assert config.strict is True
    assert config.max_propagation_depth == DEFAULT_MAX_PROPAGATION_DEPTH


@pytest.mark.unit
def test_configure_returns_updated_snapshot():
    previous = get_config()

    updated = configure(strict=False)

    assert updated.strict is False
    assert get_config() is updated
    # snapshots are immutable, the old one is untouched
    assert previous.strict is True


@pytest.mark.unit
def test_configure_rejects_unknown_settings():
    with pytest.raises(TypeError, match="Unknown ripple setting"):
        configure(verbose=True)


@pytest.mark.unit
@pytest.mark.parametrize("depth", [0, -1, 2.5])
def test_configure_rejects_invalid_depth(depth):
    with pytest.raises(ValueError, match="positive integer"):
        configure(max_propagation_depth=depth)


@pytest.mark.unit
def test_reset_restores_defaults():
    configure(strict=False, max_propagation_depth=4)

    reset_config()

    assert get_config() == RippleConfig()


@pytest.mark.unit
def test_config_is_frozen():
    with pytest.raises(AttributeError):
        get_config().strict = False
