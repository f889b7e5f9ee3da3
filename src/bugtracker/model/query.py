from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from bugtracker.model.bug import Bug

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_PAGE_SIZE = 100
DEFAULT_SORT = "-createdAt"


@dataclass(frozen=True)
class SortField:
    field: str
    descending: bool = False

    def __str__(self) -> str:
        return f"-{self.field}" if self.descending else self.field


@dataclass(frozen=True)
class BugQuery:
    """Normalized filter, sort and page specification for listing bugs.

    ``None`` means the filter is absent. Sort fields use the JSON field names
    of a bug (``createdAt``, ``reportedBy``, ...).
    """

    status: str | None = None
    priority: str | None = None
    search: str | None = None
    reported_by: str | None = None
    assigned_to: str | None = None
    sort: tuple[SortField, ...] = (SortField("createdAt", descending=True),)
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def to_params(self) -> dict[str, str]:
        """Render back to query-string parameters, omitting absent filters."""
        params: dict[str, str] = {}
        for key, value in (
            ("status", self.status),
            ("priority", self.priority),
            ("search", self.search),
            ("reportedBy", self.reported_by),
            ("assignedTo", self.assigned_to),
        ):
            if value is not None:
                params[key] = value
        params["sort"] = ",".join(str(s) for s in self.sort)
        params["page"] = str(self.page)
        params["limit"] = str(self.limit)
        return params


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def compute(cls, page: int, limit: int, total: int) -> Pagination:
        return cls(
            page=page,
            limit=limit,
            total=total,
            pages=max(1, math.ceil(total / limit)),
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "pages": self.pages,
        }


@dataclass(frozen=True)
class BugPage:
    items: tuple[Bug, ...]
    pagination: Pagination
    query: BugQuery = field(default_factory=BugQuery, compare=False)

    @property
    def count(self) -> int:
        return len(self.items)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "count": self.count,
            "pagination": self.pagination.to_dict(),
            "data": [bug.to_dict() for bug in self.items],
        }
