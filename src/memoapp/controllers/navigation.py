"""Navigation: opening categories and memos, with degraded-mode fallbacks."""

from __future__ import annotations

import logging

from memoapp.errors import RemoteFailure
from memoapp.fallback import OfflinePolicy
from memoapp.models import EditBuffer, Identifier
from memoapp.remote.base import RemoteStore
from memoapp.state import AppState

logger = logging.getLogger(__name__)


class NavigationController:
    def __init__(self, state: AppState, store: RemoteStore, policy: OfflinePolicy) -> None:
        self._state = state
        self._store = store
        self._policy = policy

    async def toggle_category(self, category_id: Identifier) -> None:
        """Open ``category_id``, or collapse it if it is already open."""
        state = self._state
        if state.selection.is_open(category_id):
            state.collapse()
            state.publish()
            return

        generation = state.open_category(category_id)
        state.publish()

        result = await self._store.list_memos(category_id)
        if not state.is_current_category(generation):
            logger.debug("Dropping stale memo list for category %s", category_id)
            return

        if isinstance(result, RemoteFailure):
            logger.warning("Failed to fetch memos for category %s: %s", category_id, result)
            state.record_failure(result)
            state.load_memos(self._policy.memos(category_id) or [])
        else:
            state.record_success()
            state.load_memos(result.value)
        state.publish()

    async def select_memo(self, memo_id: Identifier) -> None:
        """Open the detail pane for ``memo_id``.

        Once the memo is selected the pane always opens: with the fetched
        record, the demo record, or the locally loaded entry.
        """
        state = self._state
        if state.selection.category_id is None or state.find_memo(memo_id) is None:
            logger.debug("Ignoring selection of memo %s: not in the open category", memo_id)
            return

        generation = state.open_memo(memo_id)
        state.publish()

        result = await self._store.get_memo(memo_id)
        if not state.is_current_memo(generation):
            logger.debug("Dropping stale detail for memo %s", memo_id)
            return

        if isinstance(result, RemoteFailure):
            logger.warning("Failed to fetch memo %s: %s", memo_id, result)
            state.record_failure(result)
            buffer = self._policy.memo_detail(memo_id)
            if buffer is None:
                local = state.find_memo(memo_id)
                buffer = EditBuffer(local.title, local.content) if local else EditBuffer.blank()
        else:
            state.record_success()
            buffer = EditBuffer(title=result.value.title, content=result.value.content)

        state.edit_buffer = buffer
        state.detail_open = True
        state.publish()
