"""Error taxonomy and the Result type returned by the remote layer.

Remote failures are values, not exceptions: every RemoteStore call returns
either Ok(value) or RemoteFailure, and controllers decide what to do with it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class MemoAppError(Exception):
    """Base exception for memoapp."""


class ConfigError(MemoAppError):
    """Invalid configuration value."""


class FailureKind(str, Enum):
    """Why a remote call did not succeed."""

    TRANSPORT = "transport"  # connection refused, timeout, DNS...
    STATUS = "status"  # non-2xx response
    DECODE = "decode"  # 2xx with an unusable body


@dataclass(frozen=True)
class RemoteFailure:
    """Any non-success outcome of a remote call."""

    kind: FailureKind
    message: str
    status: int | None = None

    def __str__(self) -> str:
        if self.status is not None:
            return f"{self.kind.value} error ({self.status}): {self.message}"
        return f"{self.kind.value} error: {self.message}"


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful remote call carrying its decoded value."""

    value: T


Result = Union[Ok[T], RemoteFailure]
