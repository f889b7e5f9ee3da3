from __future__ import annotations

from bugtracker.client.http import BugTrackerClient
from bugtracker.client.state import (
    ActionResult,
    BugListStore,
    BugStatsStore,
    PendingRequest,
    StoreStatus,
)

__all__ = [
    "BugTrackerClient",
    "StoreStatus",
    "PendingRequest",
    "ActionResult",
    "BugListStore",
    "BugStatsStore",
]
