"""Tests for the selection transitions and the state owner."""

from __future__ import annotations

import pytest

from memoapp.errors import FailureKind, RemoteFailure
from memoapp.models import Category, EditBuffer, Memo, SessionPhase
from memoapp.state import AppState, SelectionState

from fakes import RecordingView


class TestSelectionState:
    def test_select_category_clears_memo(self):
        sel = SelectionState(category_id=1, memo_id=5).select_category(2)
        assert sel == SelectionState(category_id=2, memo_id=None)

    def test_collapse_clears_both(self):
        assert SelectionState(category_id=1, memo_id=5).collapse() == SelectionState()

    def test_select_memo_requires_category(self):
        with pytest.raises(ValueError):
            SelectionState().select_memo(5)

    def test_select_and_clear_memo(self):
        sel = SelectionState(category_id=1).select_memo(5)
        assert sel.memo_id == 5
        assert sel.clear_memo() == SelectionState(category_id=1)

    def test_is_open(self):
        sel = SelectionState(category_id=1)
        assert sel.is_open(1)
        assert not sel.is_open(2)
        assert not SelectionState().is_open(None)


class TestAppState:
    def test_initial_snapshot(self):
        snap = AppState().snapshot()
        assert snap.session_phase is SessionPhase.NONE
        assert snap.categories == ()
        assert not snap.detail_open
        assert not snap.login_enabled
        assert snap.credential_input_enabled
        assert not snap.new_memo_enabled
        assert not snap.delete_memo_enabled

    def test_login_enabled_tracks_credential(self):
        state = AppState()
        state.credential_input = "  123e4567-e89b-42d3-a456-426614174000 "
        assert state.snapshot().login_enabled
        state.credential_input = "123e4567-e89b-12d3-a456-426614174000"
        assert not state.snapshot().login_enabled

    def test_login_disabled_once_pending(self):
        state = AppState()
        state.credential_input = "123e4567-e89b-42d3-a456-426614174000"
        state.phase = SessionPhase.PENDING
        snap = state.snapshot()
        assert not snap.login_enabled
        assert not snap.credential_input_enabled

    def test_open_category_bumps_generation(self):
        state = AppState()
        first = state.open_category(1)
        second = state.open_category(2)
        assert second > first
        assert not state.is_current_category(first)
        assert state.is_current_category(second)

    def test_collapse_invalidates_pending_loads(self):
        state = AppState()
        cat_gen = state.open_category(1)
        state.memos = [Memo(5, 1, "a", "b")]
        memo_gen = state.open_memo(5)
        state.collapse()
        assert not state.is_current_category(cat_gen)
        assert not state.is_current_memo(memo_gen)
        assert state.memos == []
        assert state.selection == SelectionState()

    def test_close_memo_closes_detail(self):
        state = AppState()
        state.open_category(1)
        state.open_memo(5)
        state.edit_buffer = EditBuffer("t", "c")
        state.detail_open = True
        state.close_memo()
        assert state.selection.memo_id is None
        assert state.edit_buffer == EditBuffer()
        assert not state.detail_open

    def test_load_memos_keeps_memos_created_during_load(self):
        state = AppState()
        state.open_category(1)
        state.memos.append(Memo(99, 1, "New Memo", ""))
        state.open_memo(99)
        state.detail_open = True
        state.load_memos([Memo(20, 1, "Groceries", "milk"), Memo(99, 1, "New Memo", "")])
        assert [m.id for m in state.memos] == [20, 99]
        assert state.selection.memo_id == 99
        assert state.detail_open

    def test_load_memos_deselects_missing_memo(self):
        state = AppState()
        state.open_category(1)
        state.open_memo(7)
        state.detail_open = True
        state.load_memos([Memo(20, 1, "Groceries", "milk")])
        assert state.selection == SelectionState(category_id=1)
        assert not state.detail_open

    def test_replace_and_remove_memo(self):
        state = AppState()
        state.memos = [Memo(1, 2, "old", "x"), Memo(3, 2, "keep", "y")]
        assert state.replace_memo(1, title="new", content="z")
        assert state.memos[0] == Memo(1, 2, "new", "z")
        assert not state.replace_memo(42, title="n", content="n")
        assert state.remove_memo(1)
        assert [m.id for m in state.memos] == [3]
        assert not state.remove_memo(1)

    def test_failure_bookkeeping(self):
        state = AppState()
        state.record_failure(RemoteFailure(FailureKind.STATUS, "GET /category returned 500", 500))
        snap = state.snapshot()
        assert snap.degraded
        assert "500" in snap.last_error
        state.record_success()
        assert not state.snapshot().degraded
        assert state.snapshot().last_error is None

    def test_snapshot_is_immutable(self):
        state = AppState()
        state.categories = [Category(1, "Personal")]
        snap = state.snapshot()
        state.categories.append(Category(2, "Work"))
        assert len(snap.categories) == 1
        with pytest.raises(AttributeError):
            snap.detail_open = True

    def test_selected_category_name(self):
        state = AppState()
        state.categories = [Category(1, "Personal"), Category(2, "Restaurants")]
        state.open_category(2)
        assert state.snapshot().selected_category_name == "Restaurants"


class BrokenView:
    def render(self, snapshot) -> None:
        raise RuntimeError("paint failed")


class TestPublish:
    def test_publish_reaches_all_views(self):
        state = AppState()
        a, b = RecordingView(), RecordingView()
        state.add_view(a)
        state.add_view(b)
        state.publish()
        assert len(a.snapshots) == len(b.snapshots) == 1

    def test_broken_view_does_not_stop_others(self):
        state = AppState()
        good = RecordingView()
        state.add_view(BrokenView())
        state.add_view(good)
        state.publish()
        assert len(good.snapshots) == 1

    def test_remove_view(self):
        state = AppState()
        view = RecordingView()
        state.add_view(view)
        state.remove_view(view)
        state.publish()
        assert view.snapshots == []

    def test_render_single_view_logs_failure(self, caplog):
        state = AppState()
        with caplog.at_level("ERROR", logger="memoapp.state"):
            state.render(BrokenView())
        assert "paint failed" in caplog.text
