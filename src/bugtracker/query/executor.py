from __future__ import annotations

import logging

from bugtracker.errors import NotFoundError, ValidationError
from bugtracker.model.bug import Bug
from bugtracker.model.query import BugPage, BugQuery, Pagination
from bugtracker.store.repositories import SORTABLE_COLUMNS, BugRepository, Criteria

logger = logging.getLogger(__name__)

# Insertion order breaks ties so that pagination is deterministic.
TIE_BREAK = "seq ASC"


def compile_criteria(query: BugQuery) -> Criteria:
    """Translate a descriptor into SQL for the bugs table.

    Raises ValidationError for sort fields that are not bug fields.
    """
    clauses: list[str] = []
    params: list[str] = []

    if query.status is not None:
        clauses.append("status = ?")
        params.append(query.status)
    if query.priority is not None:
        clauses.append("priority = ?")
        params.append(query.priority)
    for column, needle in (
        ("title", query.search),
        ("reported_by", query.reported_by),
        ("assigned_to", query.assigned_to),
    ):
        if needle is not None:
            # casefold() is registered on the connection by Database.connect
            clauses.append(f"instr(casefold({column}), ?) > 0")
            params.append(needle.casefold())

    order: list[str] = []
    for sort_field in query.sort:
        column = SORTABLE_COLUMNS.get(sort_field.field)
        if column is None:
            raise ValidationError.for_field(
                "sort",
                f"Cannot sort by {sort_field.field!r}. "
                f"Sortable fields: {', '.join(sorted(SORTABLE_COLUMNS))}",
            )
        order.append(f"{column} {'DESC' if sort_field.descending else 'ASC'}")
    order.append(TIE_BREAK)

    return Criteria(
        where=" AND ".join(clauses) or "1 = 1",
        params=tuple(params),
        order_by=", ".join(order),
    )


class QueryExecutor:
    """Runs descriptors and id lookups against the bug collection."""

    def __init__(self, repo: BugRepository) -> None:
        self._repo = repo

    def execute(self, query: BugQuery) -> BugPage:
        """Return the requested page plus totals for the whole match set."""
        criteria = compile_criteria(query)
        with self._repo.consistent_read():
            total = self._repo.count(criteria)
            # Offsets past the last match select nothing and can overflow SQLite.
            items = (
                self._repo.find(criteria, limit=query.limit, offset=query.offset)
                if query.offset < total
                else ()
            )
        logger.debug(
            "Query %s matched %d bugs, returning %d", query, total, len(items)
        )
        return BugPage(
            items=items,
            pagination=Pagination.compute(query.page, query.limit, total),
            query=query,
        )

    def get(self, bug_id: str) -> Bug:
        bug = self._repo.get(bug_id)
        if bug is None:
            logger.warning("Bug not found: %s", bug_id)
            raise NotFoundError(f"Bug not found with id of {bug_id}")
        return bug
