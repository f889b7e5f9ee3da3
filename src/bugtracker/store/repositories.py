from __future__ import annotations

import json
import sqlite3
from contextlib import AbstractContextManager
from dataclasses import dataclass

from bugtracker.model.bug import Bug, BugEnvironment, BugPriority, BugStatus
from bugtracker.model.user import User, UserRole
from bugtracker.store.db import Database

# JSON field name -> column
SORTABLE_COLUMNS = {
    "_id": "id",
    "id": "id",
    "title": "title",
    "description": "description",
    "status": "status",
    "priority": "priority",
    "reportedBy": "reported_by",
    "assignedTo": "assigned_to",
    "stepsToReproduce": "steps_to_reproduce",
    "environment.os": "env_os",
    "environment.browser": "env_browser",
    "environment.version": "env_version",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}

GROUPABLE_COLUMNS = frozenset({"status", "priority"})


@dataclass(frozen=True)
class Criteria:
    """A compiled WHERE clause and ORDER BY list for the bugs table."""

    where: str = "1 = 1"
    params: tuple = ()
    order_by: str = "seq ASC"


class BugRepository:
    """Repository for Bug persistence."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def create(self, bug: Bug) -> None:
        """Insert a new bug."""
        with self._db.transaction():
            self._db.execute(
                """INSERT INTO bugs
                   (id, title, description, status, priority, reported_by,
                    assigned_to, steps_to_reproduce, env_os, env_browser,
                    env_version, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (bug.id, *_bug_values(bug)),
            )

    def get(self, bug_id: str) -> Bug | None:
        """Retrieve a bug by ID, or None if not found."""
        row = self._db.fetch_one("SELECT * FROM bugs WHERE id = ?", (bug_id,))
        if row is None:
            return None
        return _row_to_bug(row)

    def save(self, bug: Bug) -> bool:
        """Overwrite every mutable column of an existing bug.

        Returns False when no bug has the given id.
        """
        with self._db.transaction():
            cursor = self._db.execute(
                """UPDATE bugs SET
                   title = ?, description = ?, status = ?, priority = ?,
                   reported_by = ?, assigned_to = ?, steps_to_reproduce = ?,
                   env_os = ?, env_browser = ?, env_version = ?,
                   created_at = ?, updated_at = ?
                   WHERE id = ?""",
                (*_bug_values(bug), bug.id),
            )
        return cursor.rowcount > 0

    def delete(self, bug_id: str) -> bool:
        """Delete a bug. Returns False when no bug has the given id."""
        with self._db.transaction():
            cursor = self._db.execute("DELETE FROM bugs WHERE id = ?", (bug_id,))
        return cursor.rowcount > 0

    def find(
        self, criteria: Criteria, limit: int = 10, offset: int = 0
    ) -> tuple[Bug, ...]:
        """Return one slice of the bugs matching ``criteria``."""
        rows = self._db.fetch_all(
            f"SELECT * FROM bugs WHERE {criteria.where} "  # noqa: S608
            f"ORDER BY {criteria.order_by} LIMIT ? OFFSET ?",
            (*criteria.params, limit, offset),
        )
        return tuple(_row_to_bug(r) for r in rows)

    def count(self, criteria: Criteria | None = None) -> int:
        """Return the number of bugs matching ``criteria`` (all bugs if None)."""
        criteria = criteria or Criteria()
        row = self._db.fetch_one(
            f"SELECT COUNT(*) as cnt FROM bugs WHERE {criteria.where}",  # noqa: S608
            criteria.params,
        )
        assert row is not None
        return row["cnt"]

    def count_by(self, column: str) -> dict[str, int]:
        """Return counts of bugs grouped by ``status`` or ``priority``."""
        if column not in GROUPABLE_COLUMNS:
            raise ValueError(
                f"Column {column!r} not in groupable columns: {sorted(GROUPABLE_COLUMNS)}"
            )
        rows = self._db.fetch_all(
            f"SELECT {column} AS grp, COUNT(*) as cnt FROM bugs GROUP BY {column}"  # noqa: S608
        )
        return {row["grp"]: row["cnt"] for row in rows}

    def consistent_read(self) -> AbstractContextManager[Database]:
        """Hold the database lock so several reads see the same rows."""
        return self._db.transaction()


class UserRepository:
    """Repository for User persistence."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def create(self, user: User) -> None:
        """Insert a new user; raises sqlite3.IntegrityError on duplicate email."""
        with self._db.transaction():
            self._db.execute(
                """INSERT INTO users (id, name, email, password_hash, role, created_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (
                    user.id,
                    user.name,
                    user.email,
                    user.password_hash,
                    user.role.value,
                    user.created_at,
                ),
            )

    def get(self, user_id: str) -> User | None:
        """Retrieve a user by ID, or None if not found."""
        row = self._db.fetch_one("SELECT * FROM users WHERE id = ?", (user_id,))
        if row is None:
            return None
        return _row_to_user(row)

    def get_by_email(self, email: str) -> User | None:
        """Retrieve a user by (lower-cased) email, or None if not found."""
        row = self._db.fetch_one(
            "SELECT * FROM users WHERE email = ?", (email.lower(),)
        )
        if row is None:
            return None
        return _row_to_user(row)


# ---------------------------------------------------------------------------
# Row-to-dataclass conversion helpers
# ---------------------------------------------------------------------------


def _bug_values(bug: Bug) -> tuple:
    return (
        bug.title,
        bug.description,
        bug.status.value,
        bug.priority.value,
        bug.reported_by,
        bug.assigned_to,
        json.dumps(list(bug.steps_to_reproduce)),
        bug.environment.os,
        bug.environment.browser,
        bug.environment.version,
        bug.created_at,
        bug.updated_at,
    )


def _row_to_bug(row: sqlite3.Row) -> Bug:
    return Bug(
        id=row["id"],
        title=row["title"],
        description=row["description"],
        status=BugStatus(row["status"]),
        priority=BugPriority(row["priority"]),
        reported_by=row["reported_by"],
        assigned_to=row["assigned_to"],
        steps_to_reproduce=tuple(json.loads(row["steps_to_reproduce"])),
        environment=BugEnvironment(
            os=row["env_os"],
            browser=row["env_browser"],
            version=row["env_version"],
        ),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=UserRole(row["role"]),
        created_at=row["created_at"],
    )
