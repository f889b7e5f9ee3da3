from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 1000
PERSON_MAX_LENGTH = 50

DEFAULT_ASSIGNEE = "Unassigned"
UNKNOWN = "Unknown"


class BugStatus(StrEnum):
    OPEN = "open"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class BugPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class BugEnvironment:
    os: str = UNKNOWN
    browser: str = UNKNOWN
    version: str = UNKNOWN

    def to_dict(self) -> dict[str, str]:
        return {"os": self.os, "browser": self.browser, "version": self.version}


@dataclass(frozen=True)
class Bug:
    id: str
    title: str
    description: str
    reported_by: str
    status: BugStatus = BugStatus.OPEN
    priority: BugPriority = BugPriority.MEDIUM
    assigned_to: str = DEFAULT_ASSIGNEE
    steps_to_reproduce: tuple[str, ...] = ()
    environment: BugEnvironment = field(default_factory=BugEnvironment)
    created_at: str = ""  # ISO 8601, UTC
    updated_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON shape served by the API."""
        return {
            "_id": self.id,
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "reportedBy": self.reported_by,
            "assignedTo": self.assigned_to,
            "stepsToReproduce": list(self.steps_to_reproduce),
            "environment": self.environment.to_dict(),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Bug:
        """Build a Bug from its API JSON representation."""
        env = data.get("environment") or {}
        return cls(
            id=data.get("id") or data["_id"],
            title=data["title"],
            description=data["description"],
            reported_by=data["reportedBy"],
            status=BugStatus(data.get("status", BugStatus.OPEN)),
            priority=BugPriority(data.get("priority", BugPriority.MEDIUM)),
            assigned_to=data.get("assignedTo", DEFAULT_ASSIGNEE),
            steps_to_reproduce=tuple(data.get("stepsToReproduce", ())),
            environment=BugEnvironment(
                os=env.get("os", UNKNOWN),
                browser=env.get("browser", UNKNOWN),
                version=env.get("version", UNKNOWN),
            ),
            created_at=data.get("createdAt", ""),
            updated_at=data.get("updatedAt", ""),
        )
