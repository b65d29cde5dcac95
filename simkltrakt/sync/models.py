from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, TypedDict

SyncStatus = Literal["success", "noop", "error"]


@dataclass(frozen=True)
class SyncOutcome:
    status: SyncStatus
    movies_added: int = 0
    episodes_added: int = 0
    error: str | None = None

    @classmethod
    def nothing_to_sync(cls) -> SyncOutcome:
        return cls(status="noop")

    @classmethod
    def failed(cls, error: str) -> SyncOutcome:
        return cls(status="error", error=error)


class SyncLogEntry(TypedDict, total=False):
    timestamp: str
    status: Literal["success", "error"]
    movies_added: int
    episodes_added: int
    error: str
