"""ViewProjector protocol: any rendering surface that consumes snapshots."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from memoapp.models import Snapshot


@runtime_checkable
class ViewProjector(Protocol):
    """Read-only consumer of core state."""

    def render(self, snapshot: Snapshot) -> None:
        """Draw the given snapshot. Must not mutate core state."""
        ...
