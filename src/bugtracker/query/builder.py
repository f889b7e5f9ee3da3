"""Turn loosely-typed filter input into a :class:`BugQuery`.

A filter is *absent* when its key is missing, ``None``, or a string that is
blank after stripping. Stored statuses, priorities and titles are never
empty, so an empty filter could not narrow the result anyway; treating it as
absent keeps ``?status=`` from silently returning nothing.

No validation happens here: an unknown status or sort field is passed
through and left for the executor to judge.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from bugtracker.model.query import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    DEFAULT_SORT,
    MAX_PAGE_SIZE,
    BugQuery,
    SortField,
)

# query-string key -> BugQuery attribute
FILTER_KEYS = {
    "status": "status",
    "priority": "priority",
    "search": "search",
    "reportedBy": "reported_by",
    "assignedTo": "assigned_to",
}


def build_query(
    params: Mapping[str, Any],
    *,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int = MAX_PAGE_SIZE,
) -> BugQuery:
    """Build a normalized descriptor from raw filter parameters."""
    filters = {
        attr: value
        for key, attr in FILTER_KEYS.items()
        if (value := _present(params.get(key))) is not None
    }
    limit = min(_positive_int(params.get("limit"), default_limit), max_limit)
    return BugQuery(
        **filters,
        sort=parse_sort(_present(params.get("sort")) or DEFAULT_SORT),
        page=_positive_int(params.get("page"), DEFAULT_PAGE),
        limit=limit,
    )


def parse_sort(expression: str) -> tuple[SortField, ...]:
    """Parse ``"-priority,title"`` into sort fields; ``-`` means descending."""
    result: list[SortField] = []
    for part in expression.split(","):
        part = part.strip()
        if not part or part == "-":
            continue
        if part.startswith("-"):
            result.append(SortField(part[1:].strip(), descending=True))
        else:
            result.append(SortField(part))
    if not result:
        return parse_sort(DEFAULT_SORT)
    return tuple(result)


def _present(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _positive_int(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(str(value).strip())
    except ValueError:
        return default
    return number if number >= 1 else default
