from __future__ import annotations

from bugtracker.store.db import Database

SCHEMA = """
CREATE TABLE IF NOT EXISTS bugs (
    seq INTEGER PRIMARY KEY AUTOINCREMENT,
    id TEXT NOT NULL UNIQUE,
    title TEXT NOT NULL,
    description TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'open',
    priority TEXT NOT NULL DEFAULT 'medium',
    reported_by TEXT NOT NULL,
    assigned_to TEXT NOT NULL DEFAULT 'Unassigned',
    steps_to_reproduce TEXT NOT NULL DEFAULT '[]',
    env_os TEXT NOT NULL DEFAULT 'Unknown',
    env_browser TEXT NOT NULL DEFAULT 'Unknown',
    env_version TEXT NOT NULL DEFAULT 'Unknown',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_bugs_status_priority_created
    ON bugs (status, priority, created_at);

CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    email TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    role TEXT NOT NULL DEFAULT 'user',
    created_at TEXT NOT NULL DEFAULT ''
);
"""


def run_migrations(db: Database) -> None:
    """Create all tables."""
    db.connection.executescript(SCHEMA)
    db.commit()
