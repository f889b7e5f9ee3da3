from __future__ import annotations

from bugtracker.model.bug import Bug, BugEnvironment, BugPriority, BugStatus
from bugtracker.model.query import BugPage, BugQuery, Pagination, SortField
from bugtracker.model.stats import BugStats, GroupCount
from bugtracker.model.user import User, UserRole

__all__ = [
    # bug
    "BugStatus",
    "BugPriority",
    "BugEnvironment",
    "Bug",
    # query
    "SortField",
    "BugQuery",
    "Pagination",
    "BugPage",
    # stats
    "GroupCount",
    "BugStats",
    # user
    "UserRole",
    "User",
]
