from __future__ import annotations

import dataclasses
import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from bugtracker.errors import NotFoundError
from bugtracker.model.bug import Bug, BugEnvironment, BugPriority, BugStatus
from bugtracker.store.repositories import BugRepository
from bugtracker.validation import (
    validate_bug_fields,
    validate_priority,
    validate_status,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_timestamp(moment: datetime | None = None) -> str:
    """ISO 8601 UTC with millisecond precision, e.g. ``2025-01-15T10:00:00.000Z``."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def generate_id() -> str:
    """Generate a 24-character hex ID."""
    return uuid.uuid4().hex[:24]


class BugService:
    """Write operations on bugs: create, update, status/priority change, delete.

    Each mutation refreshes ``updated_at``. Concurrent writers are not
    coordinated; the last write wins.
    """

    def __init__(self, repo: BugRepository, clock: Clock | None = None) -> None:
        self._repo = repo
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def create(self, payload: Any) -> Bug:
        fields = validate_bug_fields(payload)
        now = utc_timestamp(self._clock())
        env = fields.pop("environment", {})
        bug = Bug(
            id=generate_id(),
            environment=BugEnvironment(**env),
            created_at=now,
            updated_at=now,
            **fields,
        )
        self._repo.create(bug)
        logger.info("Bug created: %s", bug.id)
        return bug

    def get(self, bug_id: str) -> Bug:
        bug = self._repo.get(bug_id)
        if bug is None:
            raise NotFoundError(f"Bug not found with id of {bug_id}")
        return bug

    def update(self, bug_id: str, payload: Any) -> Bug:
        """Apply the fields present in ``payload``; others keep their values."""
        fields = validate_bug_fields(payload, partial=True)
        bug = self.get(bug_id)
        env = fields.pop("environment", None)
        if env:
            fields["environment"] = dataclasses.replace(bug.environment, **env)
        updated = self._touch(dataclasses.replace(bug, **fields))
        self._store(updated)
        logger.info("Bug updated: %s fields=%s", bug_id, sorted(fields))
        return updated

    def update_status(self, bug_id: str, payload: Any) -> Bug:
        status: BugStatus = validate_status(payload)
        bug = self._touch(dataclasses.replace(self.get(bug_id), status=status))
        self._store(bug)
        logger.info("Bug status updated: %s -> %s", bug_id, status)
        return bug

    def update_priority(self, bug_id: str, payload: Any) -> Bug:
        priority: BugPriority = validate_priority(payload)
        bug = self._touch(dataclasses.replace(self.get(bug_id), priority=priority))
        self._store(bug)
        logger.info("Bug priority updated: %s -> %s", bug_id, priority)
        return bug

    def delete(self, bug_id: str) -> None:
        if not self._repo.delete(bug_id):
            raise NotFoundError(f"Bug not found with id of {bug_id}")
        logger.info("Bug deleted: %s", bug_id)

    def _touch(self, bug: Bug) -> Bug:
        # updated_at never moves behind created_at or its previous value
        now = utc_timestamp(self._clock())
        return dataclasses.replace(
            bug, updated_at=max(now, bug.created_at, bug.updated_at)
        )

    def _store(self, bug: Bug) -> None:
        # The bug may have been deleted between read and write.
        if not self._repo.save(bug):
            raise NotFoundError(f"Bug not found with id of {bug.id}")
