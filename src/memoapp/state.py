"""Core state owner: the single mutable state tree shared by the controllers.

Controllers receive an AppState instance instead of reaching for a global.
Every mutation goes through a controller; views only ever see Snapshots.

Ordering:
    Navigation actions bump a generation counter before suspending on the
    remote store. A completion compares the generation it started with
    against the current one and is dropped when stale, so a slow response
    can never overwrite the result of a newer action.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from memoapp.credentials import is_valid_credential
from memoapp.errors import RemoteFailure
from memoapp.models import (
    Category,
    EditBuffer,
    Identifier,
    Memo,
    Session,
    SessionPhase,
    Snapshot,
)

if TYPE_CHECKING:
    from memoapp.views.base import ViewProjector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionState:
    """Which category and memo are open. Pure transitions, no I/O."""

    category_id: Identifier | None = None
    memo_id: Identifier | None = None

    def is_open(self, category_id: Identifier) -> bool:
        return self.category_id is not None and self.category_id == category_id

    def select_category(self, category_id: Identifier) -> SelectionState:
        return SelectionState(category_id=category_id, memo_id=None)

    def collapse(self) -> SelectionState:
        return SelectionState()

    def select_memo(self, memo_id: Identifier) -> SelectionState:
        if self.category_id is None:
            raise ValueError("cannot select a memo without an open category")
        return replace(self, memo_id=memo_id)

    def clear_memo(self) -> SelectionState:
        return replace(self, memo_id=None)


class AppState:
    """Owns the state tree and publishes snapshots to registered views."""

    def __init__(self) -> None:
        self.phase = SessionPhase.NONE
        self.session: Session | None = None
        self.credential_input = ""
        self.categories: list[Category] = []
        self.memos: list[Memo] = []
        self.selection = SelectionState()
        self.edit_buffer = EditBuffer()
        self.detail_open = False
        self.degraded = False
        self.last_error: str | None = None
        self._category_generation = 0
        self._memo_generation = 0
        self._views: list[ViewProjector] = []

    # ── Navigation transitions ───────────────────────────────

    def open_category(self, category_id: Identifier) -> int:
        """Select ``category_id`` and start a memo-list load. Returns its generation."""
        self.selection = self.selection.select_category(category_id)
        self.memos = []
        self._close_detail()
        self._category_generation += 1
        return self._category_generation

    def collapse(self) -> None:
        self.selection = self.selection.collapse()
        self.memos = []
        self._close_detail()
        self._category_generation += 1

    def open_memo(self, memo_id: Identifier) -> int:
        """Select ``memo_id`` and start a detail load. Returns its generation."""
        self.selection = self.selection.select_memo(memo_id)
        self._memo_generation += 1
        return self._memo_generation

    def close_memo(self) -> None:
        self.selection = self.selection.clear_memo()
        self._close_detail()

    def _close_detail(self) -> None:
        self.edit_buffer = EditBuffer()
        self.detail_open = False
        self._memo_generation += 1

    @property
    def category_generation(self) -> int:
        return self._category_generation

    def is_current_category(self, generation: int) -> bool:
        return generation == self._category_generation

    def is_current_memo(self, generation: int) -> bool:
        return generation == self._memo_generation

    # ── Memo list helpers ────────────────────────────────────

    def load_memos(self, loaded: list[Memo]) -> None:
        """Install a fetched memo list for the open category.

        The list was empty when the load started, so anything in it now was
        created meanwhile; those entries are kept after the loaded ones. A
        selected memo that ends up missing is deselected.
        """
        loaded_ids = {m.id for m in loaded}
        created = [m for m in self.memos if m.id not in loaded_ids]
        self.memos = list(loaded) + created
        memo_id = self.selection.memo_id
        if memo_id is not None and self.find_memo(memo_id) is None:
            self.close_memo()

    def find_memo(self, memo_id: Identifier) -> Memo | None:
        for memo in self.memos:
            if memo.id == memo_id:
                return memo
        return None

    def replace_memo(self, memo_id: Identifier, *, title: str, content: str) -> bool:
        for i, memo in enumerate(self.memos):
            if memo.id == memo_id:
                self.memos[i] = replace(memo, title=title, content=content)
                return True
        return False

    def remove_memo(self, memo_id: Identifier) -> bool:
        before = len(self.memos)
        self.memos = [m for m in self.memos if m.id != memo_id]
        return len(self.memos) < before

    # ── Remote outcome bookkeeping ───────────────────────────

    def record_success(self) -> None:
        self.degraded = False
        self.last_error = None

    def record_failure(self, failure: RemoteFailure) -> None:
        self.degraded = True
        self.last_error = str(failure)

    # ── Snapshots ────────────────────────────────────────────

    def _category_name(self) -> str | None:
        for category in self.categories:
            if category.id == self.selection.category_id:
                return category.name
        return None

    def snapshot(self) -> Snapshot:
        awaiting_login = self.phase is SessionPhase.NONE
        return Snapshot(
            session_phase=self.phase,
            session=self.session,
            categories=tuple(self.categories),
            selected_category_id=self.selection.category_id,
            selected_category_name=self._category_name(),
            memos=tuple(self.memos),
            selected_memo_id=self.selection.memo_id,
            memo_edit_buffer=self.edit_buffer,
            detail_open=self.detail_open,
            login_enabled=awaiting_login and is_valid_credential(self.credential_input.strip()),
            credential_input_enabled=awaiting_login,
            degraded=self.degraded,
            last_error=self.last_error,
        )

    def add_view(self, view: ViewProjector) -> None:
        self._views.append(view)

    def remove_view(self, view: ViewProjector) -> None:
        if view in self._views:
            self._views.remove(view)

    def render(self, view: ViewProjector, snap: Snapshot | None = None) -> None:
        """Hand a snapshot to one view, logging instead of raising if it fails."""
        try:
            view.render(snap or self.snapshot())
        except Exception as e:
            logger.error("View %r failed to render: %s", view, e)

    def publish(self) -> Snapshot:
        """Hand a fresh snapshot to every view. A failing view doesn't stop the rest."""
        snap = self.snapshot()
        for view in list(self._views):
            self.render(view, snap)
        return snap
