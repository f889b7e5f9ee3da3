"""Bug tracker: bug records, queries and dashboard statistics over HTTP."""
from __future__ import annotations

from bugtracker.config import BugTrackerConfig
from bugtracker.web.app import create_app

__all__ = [
    "BugTrackerConfig",
    "create_app",
]
