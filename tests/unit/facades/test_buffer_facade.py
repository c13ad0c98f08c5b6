"""
Tests for NumericBufferFacade (array.array, bytearray, numpy.ndarray).
"""

import array

import numpy as np
import pytest

from ripple import ABSENT, ObservationType, observe, wrap
from ripple.facades import NumericBufferFacade

CHANGE = ObservationType.CHANGE
DELETE = ObservationType.DELETE


def _as_list(value):
    if isinstance(value, (bytearray, bytes)):
        return list(value)
    return value.tolist()


def _ranges(recorder):
    """Observations with buffer snapshots converted to lists."""
    return [
        (o.kind, o.path, _as_list(o.value_new), _as_list(o.value_old))
        for o in recorder.observations
    ]


@pytest.fixture(
    params=[
        lambda values: array.array("i", values),
        lambda values: bytearray(values),
        lambda values: np.array(values, dtype=np.int64),
    ],
    ids=["array", "bytearray", "ndarray"],
)
def make_buffer(request):
    """Each buffer flavour built from a list of small integers."""
    return request.param


class TestBufferWrites:
    """Behaviour shared by every buffer flavour."""

    @pytest.mark.unit
    def test_wrap_yields_buffer_facade(self, make_buffer):
        state = wrap(make_buffer([1, 2, 3]))

        assert isinstance(state, NumericBufferFacade)
        assert state.tolist() == [1, 2, 3]
        assert len(state) == 3

    @pytest.mark.unit
    @pytest.mark.observable
    def test_fill_reports_prior_and_filled_range(self, make_buffer, recorder):
        state = wrap(make_buffer([1, 2, 3]))
        observe(state, recorder)

        result = state.fill(7, 1, 3)

        assert result is state
        assert _ranges(recorder) == [(CHANGE, "1", [7, 7], [2, 3])]
        assert state.tolist() == [1, 7, 7]

    @pytest.mark.unit
    @pytest.mark.observable
    def test_fill_with_negative_start(self, make_buffer, recorder):
        state = wrap(make_buffer([1, 2, 3, 4]))
        observe(state, recorder)

        state.fill(0, -2)

        assert _ranges(recorder) == [(CHANGE, "2", [0, 0], [3, 4])]

    @pytest.mark.unit
    @pytest.mark.observable
    def test_index_assignment(self, make_buffer, recorder):
        state = wrap(make_buffer([1, 2, 3]))
        observe(state, recorder)

        state[-1] = 9

        observation = recorder.last
        assert (observation.kind, observation.path) == (CHANGE, "2")
        assert observation.value_old == 3
        assert observation.value_new == 9

    @pytest.mark.unit
    @pytest.mark.observable
    def test_slice_assignment_keeps_size(self, make_buffer, recorder):
        state = wrap(make_buffer([1, 2, 3, 4]))
        observe(state, recorder)

        state[1:3] = [8, 9]

        assert _ranges(recorder) == [(CHANGE, "1", [8, 9], [2, 3])]
        with pytest.raises(ValueError, match="fixed size"):
            state[1:3] = [1, 2, 3]
        assert state.tolist() == [1, 8, 9, 4]

    @pytest.mark.unit
    @pytest.mark.observable
    def test_set_copies_in_at_offset(self, make_buffer, recorder):
        state = wrap(make_buffer([1, 2, 3, 4]))
        observe(state, recorder)

        state.set([5, 6], 2)

        assert _ranges(recorder) == [(CHANGE, "2", [5, 6], [3, 4])]
        with pytest.raises(IndexError):
            state.set([1, 2, 3], 2)
        assert recorder.count == 1

    @pytest.mark.unit
    @pytest.mark.observable
    def test_copy_within(self, make_buffer, recorder):
        state = wrap(make_buffer([1, 2, 3, 4, 5]))
        observe(state, recorder)

        state.copy_within(0, 3)

        assert _ranges(recorder) == [(CHANGE, "0", [4, 5], [4, 5])]
        assert state.tolist() == [4, 5, 3, 4, 5]

    @pytest.mark.unit
    @pytest.mark.observable
    def test_copy_within_overlapping(self, make_buffer, recorder):
        state = wrap(make_buffer([1, 2, 3, 4, 5]))
        observe(state, recorder)

        state.copy_within(1, 0, 3)

        assert state.tolist() == [1, 1, 2, 3, 5]
        assert _ranges(recorder) == [(CHANGE, "1", [1, 2, 3], [1, 2, 3])]

    @pytest.mark.unit
    @pytest.mark.observable
    def test_sort_and_reverse_snapshot_the_whole_buffer(self, make_buffer, recorder):
        state = wrap(make_buffer([3, 1, 2]))
        observe(state, recorder)

        state.sort()
        state.reverse()

        assert _ranges(recorder) == [
            (CHANGE, "0", [1, 2, 3], [3, 1, 2]),
            (CHANGE, "0", [3, 2, 1], [1, 2, 3]),
        ]

    @pytest.mark.unit
    def test_slices_are_copies(self, make_buffer):
        state = wrap(make_buffer([1, 2, 3]))

        chunk = state[0:2]
        chunk[0] = 100

        assert state.tolist() == [1, 2, 3]

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["append", "extend", "insert", "pop", "remove"])
    def test_resizing_methods_are_refused(self, make_buffer, name):
        state = wrap(make_buffer([1, 2]))

        with pytest.raises(AttributeError, match="without notifying observers"):
            getattr(state, name)

    @pytest.mark.unit
    @pytest.mark.observable
    def test_buffer_inside_record_bubbles(self, make_buffer, recorder):
        state = wrap({"pixels": make_buffer([0, 0])})
        observe(state, recorder)

        state["pixels"][1] = 5

        assert recorder.last.path == "pixels.1"

    @pytest.mark.unit
    @pytest.mark.observable
    def test_delete_resets_the_slot_to_zero(self, make_buffer, recorder):
        """Deletion keeps the length and leaves a zero in the slot."""
        state = wrap(make_buffer([1, 2, 3]))
        observe(state, recorder)

        del state[-2]

        assert recorder.summary() == [(DELETE, "1", ABSENT, 2)]
        assert state.tolist() == [1, 0, 3]
        assert len(state) == 3

    @pytest.mark.unit
    def test_delete_out_of_range(self, make_buffer, recorder):
        state = wrap(make_buffer([1]))
        observe(state, recorder)

        with pytest.raises(IndexError):
            del state[1]

        assert recorder.count == 0


class TestBufferFlavours:
    """Type-specific behaviour."""

    @pytest.mark.unit
    @pytest.mark.observable
    def test_array_delete_reports_delete(self, recorder):
        state = wrap(array.array("d", [1.0, 2.0]))
        observe(state, recorder)

        del state[0]

        assert recorder.summary() == [(DELETE, "0", ABSENT, 1.0)]
        assert state.tolist() == [0.0, 2.0]

    @pytest.mark.unit
    @pytest.mark.observable
    def test_ndarray_reports_the_stored_value(self, recorder):
        """The new value is read back after numpy's dtype conversion."""
        state = wrap(np.zeros(2, dtype=np.int32))
        observe(state, recorder)

        state[0] = 3.7

        assert recorder.last.value_new == 3
        assert recorder.last.value_old == 0

    @pytest.mark.unit
    def test_ndarray_snapshots_are_ndarrays(self, recorder):
        state = wrap(np.array([1.5, 2.5]))
        observe(state, recorder)

        state.fill(0.0)

        assert isinstance(recorder.last.value_old, np.ndarray)
        assert np.array_equal(recorder.last.value_old, [1.5, 2.5])
        assert state.dtype == np.float64
        assert state.sum() == 0.0

    @pytest.mark.unit
    def test_bytearray_rejects_out_of_range_bytes(self, recorder):
        state = wrap(bytearray(b"\x00"))
        observe(state, recorder)

        with pytest.raises(ValueError):
            state[0] = 300

        assert recorder.count == 0
        assert state.decode() == "\x00"
