from __future__ import annotations

from bugtracker.model.bug import BugStatus
from bugtracker.model.stats import BugStats, GroupCount
from bugtracker.store.repositories import BugRepository


class Aggregator:
    """Collection-wide statistics, recomputed on every call."""

    def __init__(self, repo: BugRepository) -> None:
        self._repo = repo

    def summary(self) -> BugStats:
        with self._repo.consistent_read():
            by_status = self._repo.count_by("status")
            by_priority = self._repo.count_by("priority")
        return BugStats(
            total_bugs=sum(by_status.values()),
            open_bugs=by_status.get(BugStatus.OPEN.value, 0),
            resolved_bugs=by_status.get(BugStatus.RESOLVED.value, 0),
            status_distribution=_distribution(by_status),
            priority_distribution=_distribution(by_priority),
        )


def _distribution(counts: dict[str, int]) -> tuple[GroupCount, ...]:
    """Largest group first; equal counts ordered by key."""
    return tuple(
        GroupCount(key, count)
        for key, count in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
        if count > 0
    )
