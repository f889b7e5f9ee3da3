from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class GroupCount:
    key: str
    count: int


@dataclass(frozen=True)
class BugStats:
    """Collection-wide bug counts.

    Groups with no bugs are left out of the distributions, so a missing
    status or priority means zero.
    """

    total_bugs: int
    open_bugs: int
    resolved_bugs: int
    status_distribution: tuple[GroupCount, ...] = ()
    priority_distribution: tuple[GroupCount, ...] = ()

    def status_count(self, status: str) -> int:
        return _lookup(self.status_distribution, status)

    def priority_count(self, priority: str) -> int:
        return _lookup(self.priority_distribution, priority)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalBugs": self.total_bugs,
            "openBugs": self.open_bugs,
            "resolvedBugs": self.resolved_bugs,
            "statusDistribution": [
                {"_id": g.key, "count": g.count} for g in self.status_distribution
            ],
            "priorityDistribution": [
                {"_id": g.key, "count": g.count} for g in self.priority_distribution
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BugStats:
        return cls(
            total_bugs=data["totalBugs"],
            open_bugs=data["openBugs"],
            resolved_bugs=data["resolvedBugs"],
            status_distribution=tuple(
                GroupCount(g["_id"], g["count"]) for g in data["statusDistribution"]
            ),
            priority_distribution=tuple(
                GroupCount(g["_id"], g["count"]) for g in data["priorityDistribution"]
            ),
        )


def _lookup(groups: tuple[GroupCount, ...], key: str) -> int:
    for group in groups:
        if group.key == key:
            return group.count
    return 0
