"""RemoteStore protocol: what the core needs from any backend."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from memoapp.errors import Result
from memoapp.models import Category, Identifier, Memo


@runtime_checkable
class RemoteStore(Protocol):
    """CRUD accessors for categories and memos.

    Implementations never raise for remote problems; they return a
    RemoteFailure instead.
    """

    async def list_categories(self) -> Result[list[Category]]: ...

    async def list_memos(self, category_id: Identifier) -> Result[list[Memo]]: ...

    async def get_memo(self, memo_id: Identifier) -> Result[Memo]: ...

    async def create_memo(self, payload: dict[str, Any]) -> Result[Memo]:
        """Create a memo from ``{category_id, title, content}``; server assigns the id."""
        ...

    async def update_memo(self, memo_id: Identifier, payload: dict[str, Any]) -> Result[None]: ...

    async def delete_memo(self, memo_id: Identifier) -> Result[None]: ...
