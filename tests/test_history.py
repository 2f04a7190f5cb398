# Tests for undo/redo history
import pytest

from spektra.processing.adjustments import AdjustmentVector
from spektra.utils.history import AdjustmentHistory, HistoryStack


class TestHistoryStack:
    """Tests for the HistoryStack class."""

    def test_push_and_undo(self):
        stack = HistoryStack[dict](max_size=10)

        stack.push({"value": 1}, "initial")
        assert not stack.can_undo()  # Need 2 entries to undo

        stack.push({"value": 2}, "change 1")
        assert stack.can_undo()

        result = stack.undo()
        assert result == {"value": 1}
        assert not stack.can_undo()
        assert stack.can_redo()

    def test_redo(self):
        stack = HistoryStack[dict](max_size=10)
        stack.push({"value": 1}, "initial")
        stack.push({"value": 2}, "change")

        stack.undo()
        result = stack.redo()
        assert result == {"value": 2}
        assert not stack.can_redo()

    def test_undo_on_empty_returns_none(self):
        stack = HistoryStack[int]()
        assert stack.undo() is None
        assert stack.redo() is None

    def test_max_size_limit(self):
        stack = HistoryStack[int](max_size=5)
        for i in range(10):
            stack.push(i, f"push {i}")

        assert stack.get_undo_count() == 4  # 5 entries - 1

    def test_clear_redo_on_new_push(self):
        stack = HistoryStack[int](max_size=10)
        stack.push(1, "one")
        stack.push(2, "two")
        stack.push(3, "three")

        stack.undo()
        stack.undo()
        assert stack.get_redo_count() == 2

        stack.push(4, "four")
        assert not stack.can_redo()

    def test_deep_copy(self):
        stack = HistoryStack[dict](max_size=10, deep_copy=True)

        data = {"nested": {"value": 1}}
        stack.push(data, "initial")
        data["nested"]["value"] = 999

        assert stack.get_current_state()["nested"]["value"] == 1

    def test_on_change_called(self):
        calls = []
        stack = HistoryStack[int](on_change=lambda: calls.append(1))
        stack.push(1)
        stack.push(2)
        stack.undo()
        stack.clear()
        assert len(calls) == 4

    def test_failing_on_change_does_not_break_push(self):
        def boom():
            raise RuntimeError("listener failed")

        stack = HistoryStack[int](on_change=boom)
        stack.push(1)
        assert stack.get_current_state() == 1


class TestAdjustmentHistory:
    """Tests for the adjustment-vector history."""

    def test_seeded_with_identity(self):
        history = AdjustmentHistory()
        assert history.get_current_state() == AdjustmentVector()
        assert not history.can_undo()

    def test_seeded_with_initial_vector(self):
        start = AdjustmentVector(exposure=10)
        history = AdjustmentHistory(initial=start)
        assert history.get_current_state() == start

    def test_record_skips_duplicates(self):
        history = AdjustmentHistory()
        assert history.record(AdjustmentVector(contrast=20), "contrast")
        assert not history.record(AdjustmentVector(contrast=20), "contrast again")
        assert history.get_undo_count() == 1

    def test_undo_never_passes_initial(self):
        history = AdjustmentHistory()
        history.record(AdjustmentVector(tint=5))
        history.record(AdjustmentVector(tint=10))

        assert history.undo() == AdjustmentVector(tint=5)
        assert history.undo() == AdjustmentVector()
        assert history.undo() is None
        assert history.get_current_state() == AdjustmentVector()

    def test_states_are_stored_as_is(self):
        """Vectors are immutable, so no copies are made."""
        vec = AdjustmentVector(dehaze=30)
        history = AdjustmentHistory()
        history.record(vec)
        assert history.get_current_state() is vec

    def test_coalesce_folds_a_drag_into_one_entry(self):
        history = AdjustmentHistory(debounce_seconds=60)
        for value in (10, 20, 30):
            history.record(AdjustmentVector(exposure=value), "set exposure", coalesce=True)
        assert history.get_undo_count() == 1
        assert history.get_current_state().exposure == 30
        assert history.undo() == AdjustmentVector()

    def test_coalesce_needs_matching_description(self):
        history = AdjustmentHistory(debounce_seconds=60)
        history.record(AdjustmentVector(exposure=10), "set exposure", coalesce=True)
        history.record(AdjustmentVector(exposure=10, tint=5), "set tint", coalesce=True)
        assert history.get_undo_count() == 2

    def test_coalesce_window_expires(self):
        history = AdjustmentHistory(debounce_seconds=0)
        history.record(AdjustmentVector(exposure=10), "set exposure", coalesce=True)
        history.record(AdjustmentVector(exposure=20), "set exposure", coalesce=True)
        assert history.get_undo_count() == 2

    def test_seed_entry_is_never_coalesced(self):
        history = AdjustmentHistory(debounce_seconds=60)
        history.record(AdjustmentVector(exposure=10), "initial", coalesce=True)
        assert history.get_undo_count() == 1

    @pytest.mark.parametrize("max_size", [2, 3])
    def test_respects_max_size(self, max_size):
        history = AdjustmentHistory(max_size=max_size)
        for value in range(1, 6):
            history.record(AdjustmentVector(exposure=value))
        assert history.get_undo_count() == max_size - 1
