"""
Tests for ObserverSet and the Observer handle.
"""

import pytest

from ripple import DuplicateObserverError, StaleObserverError, observe, wrap
from ripple.observers import Observer, ObserverSet


def _noop(observation):
    pass


class TestObserverSet:
    """Registration order, identity uniqueness and paused flags."""

    @pytest.mark.unit
    def test_active_keeps_registration_order(self):
        observers = ObserverSet()
        first, second, third = (lambda o: 1), (lambda o: 2), (lambda o: 3)

        for callback in (first, second, third):
            observers.add(callback)

        assert observers.active() == [first, second, third]
        assert len(observers) == 3

    @pytest.mark.unit
    def test_duplicate_callback_is_rejected(self):
        observers = ObserverSet()
        observers.add(_noop)

        with pytest.raises(DuplicateObserverError, match="already registered"):
            observers.add(_noop)

    @pytest.mark.unit
    def test_equal_but_distinct_callbacks_are_both_registered(self):
        """Uniqueness is by identity, not equality."""

        class Handler:
            def __eq__(self, other):
                return True

            __hash__ = object.__hash__

            def __call__(self, observation):
                pass

        observers = ObserverSet()
        observers.add(Handler())
        observers.add(Handler())

        assert len(observers) == 2

    @pytest.mark.unit
    def test_paused_callbacks_are_skipped_but_registered(self):
        observers = ObserverSet()
        observers.add(_noop)

        observers.pause(_noop)

        assert observers.active() == []
        assert _noop in observers
        assert observers.is_paused(_noop)
        assert not observers.is_active(_noop)

        observers.resume(_noop)
        assert observers.active() == [_noop]

    @pytest.mark.unit
    def test_remove_unknown_callback_raises(self):
        observers = ObserverSet()

        with pytest.raises(StaleObserverError):
            observers.remove(_noop)

    @pytest.mark.unit
    def test_active_is_a_snapshot(self):
        """Changes after the snapshot do not alter it."""
        observers = ObserverSet()
        observers.add(_noop)
        snapshot = observers.active()

        observers.remove(_noop)

        assert snapshot == [_noop]
        assert observers.active() == []


class TestObserverHandle:
    """The handle returned by observe()."""

    @pytest.mark.unit
    @pytest.mark.observable
    def test_pause_and_resume_control_delivery(self, recorder):
        state = wrap({"a": 1})
        handle = observe(state, recorder)

        # Act: paused mutations are not delivered
        handle.pause()
        state["a"] = 2
        handle.pause()
        assert recorder.count == 0
        assert handle.paused

        handle.resume()
        handle.resume()
        state["a"] = 3

        # Assert
        assert recorder.count == 1
        assert recorder.last.value_new == 3
        assert not handle.paused

    @pytest.mark.unit
    @pytest.mark.observable
    def test_destroy_stops_delivery(self, recorder):
        state = wrap([])
        handle = observe(state, recorder)

        handle.destroy()
        state.append(1)

        assert recorder.count == 0
        assert not handle.active

    @pytest.mark.unit
    def test_second_destroy_raises(self, recorder):
        handle = observe(wrap({}), recorder)
        handle.destroy()

        with pytest.raises(StaleObserverError, match="no longer registered"):
            handle.destroy()

    @pytest.mark.unit
    def test_pause_after_destroy_is_harmless(self, recorder):
        handle = observe(wrap({}), recorder)
        handle.destroy()

        handle.pause()
        handle.resume()

        assert not handle.paused
        assert not handle.active

    @pytest.mark.unit
    def test_callback_can_be_registered_again_after_destroy(self, recorder):
        state = wrap({})
        observe(state, recorder).destroy()

        observe(state, recorder)
        state["x"] = 1

        assert recorder.count == 1

    @pytest.mark.unit
    @pytest.mark.observable
    def test_context_manager_destroys_on_exit(self, recorder):
        state = wrap({})

        with observe(state, recorder) as handle:
            assert isinstance(handle, Observer)
            state["inside"] = 1

        state["outside"] = 2

        assert [o.path for o in recorder.observations] == ["inside"]
        assert not handle.active

    @pytest.mark.unit
    def test_context_manager_tolerates_destroy_inside_block(self, recorder):
        with observe(wrap({}), recorder) as handle:
            handle.destroy()

        assert not handle.active

    @pytest.mark.unit
    def test_repr_reflects_state(self):
        handle = observe(wrap({}), _noop)
        assert "active" in repr(handle)

        handle.pause()
        assert "paused" in repr(handle)

        handle.destroy()
        assert "destroyed" in repr(handle)
