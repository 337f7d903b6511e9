"""MemoApp: wires the state owner, remote store and controllers together.

Responsibilities:
1. Build the controllers around one injected AppState
2. Expose every user action (login, navigation, memo CRUD)
3. Event-driven dispatch: submit() schedules an action and returns at once
4. View registration: every state change is pushed to all views
5. Lifecycle: close the remote store on shutdown
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import TYPE_CHECKING, Any

from memoapp.config import MemoAppConfig
from memoapp.controllers.memos import MemoCollectionController
from memoapp.controllers.navigation import NavigationController
from memoapp.controllers.session import SessionController
from memoapp.fallback import LocalIdAllocator, OfflinePolicy
from memoapp.models import Identifier, Memo, Snapshot
from memoapp.remote.http import HttpRemoteStore
from memoapp.state import AppState

if TYPE_CHECKING:
    from memoapp.remote.base import RemoteStore
    from memoapp.views.base import ViewProjector

logger = logging.getLogger(__name__)


class MemoApp:
    """Application facade. One instance per user session."""

    def __init__(
        self,
        store: RemoteStore,
        *,
        offline_demo: bool = False,
        state: AppState | None = None,
        id_allocator: LocalIdAllocator | None = None,
    ) -> None:
        self.state = state or AppState()
        self.store = store
        self.policy = OfflinePolicy(enabled=offline_demo)
        self.session = SessionController(self.state, store, self.policy)
        self.navigation = NavigationController(self.state, store, self.policy)
        self.memos = MemoCollectionController(
            self.state, store, self.policy, self.navigation, id_allocator=id_allocator
        )
        self._tasks: set[asyncio.Task] = set()

    @classmethod
    def from_config(cls, config: MemoAppConfig) -> MemoApp:
        store = HttpRemoteStore.from_url(config.remote.base_url, timeout=config.remote.timeout)
        logger.info(
            "Using memo API at %s (offline demo: %s)",
            config.remote.base_url,
            "on" if config.mode.offline_demo else "off",
        )
        return cls(store, offline_demo=config.mode.offline_demo)

    # ── Views ────────────────────────────────────────────────

    def add_view(self, view: ViewProjector) -> None:
        self.state.add_view(view)
        self.state.render(view)
        logger.debug("Registered view: %r", view)

    def snapshot(self) -> Snapshot:
        return self.state.snapshot()

    # ── Actions ──────────────────────────────────────────────

    def set_credential_input(self, raw: str) -> bool:
        return self.session.set_credential_input(raw)

    async def login(self, raw: str | None = None) -> bool:
        return await self.session.login(raw)

    async def toggle_category(self, category_id: Identifier) -> None:
        await self.navigation.toggle_category(category_id)

    async def select_memo(self, memo_id: Identifier) -> None:
        await self.navigation.select_memo(memo_id)

    async def create_memo(self, category_id: Identifier | None = None, initial_content: str = "") -> Memo | None:
        """New-memo button. Defaults to the open category."""
        if category_id is None:
            category_id = self.state.selection.category_id
            if category_id is None:
                return None
        return await self.memos.create_memo(category_id, initial_content)

    async def add_memo(self, content: str) -> Memo | None:
        return await self.memos.add_memo(content)

    def edit(self, *, title: str | None = None, content: str | None = None) -> None:
        self.memos.edit(title=title, content=content)

    async def update_memo(self, memo_id: Identifier, title: str, content: str) -> None:
        await self.memos.update_memo(memo_id, title, content)

    async def save_memo(self) -> None:
        await self.memos.save_memo()

    async def delete_memo(self, memo_id: Identifier | None = None) -> None:
        """Delete button. Defaults to the selected memo."""
        if memo_id is None:
            memo_id = self.state.selection.memo_id
            if memo_id is None:
                return
        await self.memos.delete_memo(memo_id)

    # ── Event-driven dispatch ────────────────────────────────

    def submit(self, action: Coroutine[Any, Any, Any]) -> asyncio.Task:
        """Schedule an action and return immediately, like a UI event handler."""
        task = asyncio.get_running_loop().create_task(action)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Action failed: %s", exc, exc_info=exc)

    async def wait_idle(self) -> None:
        """Wait until no submitted action is in flight."""
        while True:
            pending = [t for t in self._tasks if not t.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    # ── Lifecycle ────────────────────────────────────────────

    async def close(self) -> None:
        await self.wait_idle()
        close = getattr(self.store, "close", None)
        if close and callable(close):
            await close()
