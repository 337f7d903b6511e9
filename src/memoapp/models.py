"""Domain types and the immutable snapshot handed to views."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

logger = logging.getLogger(__name__)

Identifier = Union[int, str]

NEW_MEMO_TITLE = "New Memo"


@dataclass(frozen=True)
class Category:
    """A top-level grouping of memos."""

    id: Identifier
    name: str

    @classmethod
    def from_dict(cls, data: Any) -> Category | None:
        if not isinstance(data, dict) or data.get("id") is None:
            return None
        return cls(id=data["id"], name=str(data.get("name") or ""))


@dataclass(frozen=True)
class Memo:
    """A single memo belonging to exactly one category."""

    id: Identifier
    category_id: Identifier | None
    title: str = ""
    content: str = ""

    @classmethod
    def from_dict(cls, data: Any, category_id: Identifier | None = None) -> Memo | None:
        """Build a memo from a JSON object; None if it has no usable id.

        ``category_id`` is used when the payload does not name its category
        (list responses are already scoped to one).
        """
        if not isinstance(data, dict) or data.get("id") is None:
            return None
        return cls(
            id=data["id"],
            category_id=data.get("category_id", category_id),
            title=str(data.get("title") or ""),
            content=str(data.get("content") or ""),
        )


@dataclass(frozen=True)
class EditBuffer:
    """Contents of the memo detail form."""

    title: str = ""
    content: str = ""

    @classmethod
    def blank(cls) -> EditBuffer:
        return cls(title=NEW_MEMO_TITLE, content="")


@dataclass(frozen=True)
class Session:
    """An authenticated session. Only exists after the credential validated."""

    token: str


class SessionPhase(str, Enum):
    NONE = "none"
    PENDING = "pending"
    ACTIVE = "active"


@dataclass(frozen=True)
class Snapshot:
    """Read-only projection of the whole core state.

    ``new_memo_enabled`` and ``delete_memo_enabled`` are derived from the
    selection; ``degraded`` is True when the last settled remote call failed.
    """

    session_phase: SessionPhase = SessionPhase.NONE
    session: Session | None = None
    categories: tuple[Category, ...] = ()
    selected_category_id: Identifier | None = None
    selected_category_name: str | None = None
    memos: tuple[Memo, ...] = ()
    selected_memo_id: Identifier | None = None
    memo_edit_buffer: EditBuffer = field(default_factory=EditBuffer)
    detail_open: bool = False
    login_enabled: bool = False
    credential_input_enabled: bool = True
    degraded: bool = False
    last_error: str | None = None

    @property
    def new_memo_enabled(self) -> bool:
        return self.selected_category_id is not None

    @property
    def delete_memo_enabled(self) -> bool:
        return self.selected_memo_id is not None

    def find_memo(self, memo_id: Identifier) -> Memo | None:
        for memo in self.memos:
            if memo.id == memo_id:
                return memo
        return None


def decode_list(payload: Any, factory) -> list:
    """Decode a JSON array with ``factory``; anything else becomes []."""
    if not isinstance(payload, list):
        logger.debug("Expected a list payload, got %s", type(payload).__name__)
        return []
    items = []
    for raw in payload:
        item = factory(raw)
        if item is None:
            logger.debug("Skipping malformed item: %r", raw)
            continue
        items.append(item)
    return items
