"""Memo collection: create, edit, update and delete with optimistic local state.

Updates and deletes are applied locally before the remote call and are never
rolled back. Creates append the server record; in offline demo mode a
failed create appends a local-only record instead.
"""

from __future__ import annotations

import logging

from memoapp.controllers.navigation import NavigationController
from memoapp.errors import RemoteFailure
from memoapp.fallback import LocalIdAllocator, OfflinePolicy
from memoapp.models import NEW_MEMO_TITLE, EditBuffer, Identifier, Memo
from memoapp.remote.base import RemoteStore
from memoapp.state import AppState

logger = logging.getLogger(__name__)


class MemoCollectionController:
    def __init__(
        self,
        state: AppState,
        store: RemoteStore,
        policy: OfflinePolicy,
        navigation: NavigationController,
        id_allocator: LocalIdAllocator | None = None,
    ) -> None:
        self._state = state
        self._store = store
        self._policy = policy
        self._navigation = navigation
        self._ids = id_allocator or LocalIdAllocator()

    # ── Create ───────────────────────────────────────────────

    async def create_memo(self, category_id: Identifier, initial_content: str = "") -> Memo | None:
        """Create a memo in the open category and select it.

        Returns the memo that was added to the list, or None if nothing was
        added. Nothing is sent unless ``category_id`` is the open category.
        """
        state = self._state
        if not state.selection.is_open(category_id):
            logger.debug("Ignoring create in category %s: not the open category", category_id)
            return None
        generation = state.category_generation

        payload = {"category_id": category_id, "title": NEW_MEMO_TITLE, "content": initial_content}
        result = await self._store.create_memo(payload)

        if isinstance(result, RemoteFailure):
            logger.warning("Failed to create memo in category %s: %s", category_id, result)
            state.record_failure(result)
            if not self._policy.synthesizes_created_memos():
                state.publish()
                return None
            memo = Memo(
                id=self._ids.next_id(m.id for m in state.memos),
                category_id=category_id,
                title=NEW_MEMO_TITLE,
                content=initial_content,
            )
            logger.info("Created local-only memo %s (no server copy)", memo.id)
        else:
            state.record_success()
            memo = result.value

        if not state.is_current_category(generation) or not state.selection.is_open(category_id):
            logger.info("Category changed while creating memo %s; not adding it", memo.id)
            state.publish()
            return None

        state.memos.append(memo)
        state.publish()
        # Re-fetches the record just received.
        await self._navigation.select_memo(memo.id)
        return memo

    async def add_memo(self, content: str) -> Memo | None:
        """Quick-add form: create a memo with ``content`` in the open category."""
        text = content.strip()
        category_id = self._state.selection.category_id
        if not text or category_id is None:
            return None
        return await self.create_memo(category_id, text)

    # ── Edit / update ────────────────────────────────────────

    def edit(self, *, title: str | None = None, content: str | None = None) -> None:
        """Change the detail form without saving."""
        state = self._state
        if not state.detail_open:
            return
        buffer = state.edit_buffer
        state.edit_buffer = EditBuffer(
            title=buffer.title if title is None else title,
            content=buffer.content if content is None else content,
        )
        state.publish()

    async def update_memo(self, memo_id: Identifier, title: str, content: str) -> None:
        state = self._state
        if state.selection.memo_id is None:
            return

        if not state.replace_memo(memo_id, title=title, content=content):
            logger.debug("Memo %s not in the loaded list; remote update only", memo_id)
        if state.selection.memo_id == memo_id:
            state.edit_buffer = EditBuffer(title=title, content=content)
        state.publish()

        result = await self._store.update_memo(memo_id, {"title": title, "content": content})
        if isinstance(result, RemoteFailure):
            logger.warning("Failed to save memo %s (kept local edit): %s", memo_id, result)
            state.record_failure(result)
        else:
            state.record_success()
        state.publish()

    async def save_memo(self) -> None:
        """Save the detail form to the selected memo."""
        state = self._state
        memo_id = state.selection.memo_id
        if memo_id is None:
            return
        await self.update_memo(memo_id, state.edit_buffer.title, state.edit_buffer.content)

    # ── Delete ───────────────────────────────────────────────

    async def delete_memo(self, memo_id: Identifier) -> None:
        state = self._state
        if state.selection.memo_id is None:
            return

        state.remove_memo(memo_id)
        state.close_memo()
        state.publish()

        result = await self._store.delete_memo(memo_id)
        if isinstance(result, RemoteFailure):
            logger.warning("Failed to delete memo %s (removed locally): %s", memo_id, result)
            state.record_failure(result)
        else:
            state.record_success()
        state.publish()
