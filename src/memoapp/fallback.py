"""Offline/demo policy: fixed local data substituted when the remote fails.

Only consulted when the policy is enabled. With it disabled (strict mode)
controllers surface the failure and never fabricate records.
"""

from __future__ import annotations

import itertools
import time
from collections.abc import Iterable
from dataclasses import dataclass

from memoapp.models import Category, EditBuffer, Identifier, Memo

RESTAURANTS_CATEGORY_ID = 2

DEMO_CATEGORIES: tuple[Category, ...] = (
    Category(id=1, name="Personal"),
    Category(id=RESTAURANTS_CATEGORY_ID, name="Restaurants"),
    Category(id=3, name="Work"),
)

DEMO_MEMOS: dict[Identifier, tuple[Memo, ...]] = {
    RESTAURANTS_CATEGORY_ID: (
        Memo(
            id=10,
            category_id=RESTAURANTS_CATEGORY_ID,
            title="Blue Plate",
            content="Blue Plate is a restaurant.",
        ),
        Memo(
            id=11,
            category_id=RESTAURANTS_CATEGORY_ID,
            title="Daily Grill",
            content="Daily Grill is a restaurant.",
        ),
    ),
}

# Detail records differ from the list records on purpose (11 has an address).
DEMO_DETAILS: dict[Identifier, EditBuffer] = {
    11: EditBuffer(title="Daily Grill", content="13 Newcastle Ave. Woodbridge, VA 22191"),
    10: EditBuffer(title="Blue Plate", content="Blue Plate is a restaurant."),
}


class LocalIdAllocator:
    """Issues ids for memos that only exist locally.

    Seeded from the wall clock in milliseconds and strictly increasing, so two
    allocations never repeat even within the same millisecond.
    """

    def __init__(self, clock=time.time) -> None:
        self._clock = clock
        self._last = 0

    def next_id(self, taken: Iterable[Identifier] = ()) -> int:
        taken_ids = set(taken)
        candidate = max(int(self._clock() * 1000), self._last + 1)
        for candidate in itertools.count(candidate):
            if candidate not in taken_ids:
                break
        self._last = candidate
        return candidate


@dataclass
class OfflinePolicy:
    """Decides what to show when a remote call fails."""

    enabled: bool = False

    def categories(self) -> list[Category] | None:
        if not self.enabled:
            return None
        return list(DEMO_CATEGORIES)

    def memos(self, category_id: Identifier) -> list[Memo] | None:
        if not self.enabled:
            return None
        return list(DEMO_MEMOS.get(category_id, ()))

    def memo_detail(self, memo_id: Identifier) -> EditBuffer | None:
        if not self.enabled:
            return None
        return DEMO_DETAILS.get(memo_id, EditBuffer.blank())

    def synthesizes_created_memos(self) -> bool:
        return self.enabled
