from __future__ import annotations

import pytest

from bugtracker.config import BugTrackerConfig
from bugtracker.service import BugService
from bugtracker.store.db import Database
from bugtracker.store.migrations import run_migrations
from bugtracker.store.repositories import BugRepository, UserRepository
from bugtracker.web.app import create_app

from tests.test_bugtracker.factories import StepClock


@pytest.fixture
def db():
    """Create a fresh in-memory database with migrations for each test."""
    database = Database(":memory:")
    database.connect()
    run_migrations(database)
    yield database
    database.close()


@pytest.fixture
def bug_repo(db) -> BugRepository:
    return BugRepository(db)


@pytest.fixture
def user_repo(db) -> UserRepository:
    return UserRepository(db)


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def service(bug_repo, clock) -> BugService:
    return BugService(bug_repo, clock=clock)


@pytest.fixture
def config() -> BugTrackerConfig:
    return BugTrackerConfig(secret_key="test-secret")


@pytest.fixture
def app(db, config, clock):
    """Create a Flask app for testing, with a deterministic clock."""
    application = create_app(db=db, config=config)
    application.config["TESTING"] = True
    application.extensions["bug_service"] = BugService(
        application.extensions["bug_repo"], clock=clock
    )
    return application


@pytest.fixture
def client(app):
    """Create a Flask test client."""
    return app.test_client()
