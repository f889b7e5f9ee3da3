from __future__ import annotations

from bugtracker.store.db import Database
from bugtracker.store.migrations import run_migrations
from bugtracker.store.repositories import BugRepository, Criteria, UserRepository

__all__ = [
    "Database",
    "run_migrations",
    "Criteria",
    "BugRepository",
    "UserRepository",
]
