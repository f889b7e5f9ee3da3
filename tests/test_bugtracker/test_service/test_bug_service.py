from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

import pytest

from bugtracker.errors import NotFoundError, ValidationError
from bugtracker.model.bug import BugEnvironment, BugPriority, BugStatus
from bugtracker.service import BugService, generate_id, utc_timestamp

from tests.test_bugtracker.factories import StepClock, bug_payload


class TestHelpers:
    def test_utc_timestamp_format(self) -> None:
        moment = datetime(2025, 3, 1, 8, 30, 15, 123456, tzinfo=timezone.utc)
        assert utc_timestamp(moment) == "2025-03-01T08:30:15.123Z"

    def test_utc_timestamp_converts_offsets(self) -> None:
        moment = datetime(2025, 3, 1, 10, 0, tzinfo=timezone(timedelta(hours=2)))
        assert utc_timestamp(moment) == "2025-03-01T08:00:00.000Z"

    def test_generate_id(self) -> None:
        ids = {generate_id() for _ in range(50)}
        assert len(ids) == 50
        assert all(re.fullmatch(r"[0-9a-f]{24}", i) for i in ids)


class TestCreate:
    def test_defaults_applied(self, service) -> None:
        bug = service.create(bug_payload())
        assert bug.status == BugStatus.OPEN
        assert bug.priority == BugPriority.MEDIUM
        assert bug.assigned_to == "Unassigned"
        assert bug.environment == BugEnvironment()
        assert bug.created_at == bug.updated_at == "2025-01-15T10:00:00.000Z"

    def test_round_trip_through_get(self, service) -> None:
        bug = service.create(
            bug_payload(
                priority="high",
                stepsToReproduce=["Open cart", "Click checkout"],
                environment={"os": "Windows", "browser": "Edge"},
            )
        )
        fetched = service.get(bug.id)
        assert fetched == bug
        assert fetched.title == "Checkout button unresponsive"
        assert fetched.priority == BugPriority.HIGH
        assert fetched.steps_to_reproduce == ("Open cart", "Click checkout")
        assert fetched.environment == BugEnvironment(os="Windows", browser="Edge")

    def test_values_are_trimmed(self, service) -> None:
        bug = service.create(bug_payload(title="  Padded  ", reportedBy=" Bob "))
        assert bug.title == "Padded"
        assert bug.reported_by == "Bob"

    def test_invalid_payload_creates_nothing(self, service, bug_repo) -> None:
        with pytest.raises(ValidationError):
            service.create({"title": ""})
        assert bug_repo.count() == 0


class TestUpdate:
    def test_partial_update_keeps_other_fields(self, service) -> None:
        bug = service.create(bug_payload(priority="low"))
        updated = service.update(bug.id, {"title": "Renamed"})
        assert updated.title == "Renamed"
        assert updated.priority == BugPriority.LOW
        assert updated.description == bug.description
        assert updated.created_at == bug.created_at
        assert updated.updated_at > bug.updated_at
        assert service.get(bug.id) == updated

    def test_id_in_body_ignored(self, service) -> None:
        bug = service.create(bug_payload())
        updated = service.update(bug.id, {"id": "hijack", "_id": "hijack", "title": "x"})
        assert updated.id == bug.id

    def test_environment_merged(self, service) -> None:
        bug = service.create(bug_payload(environment={"os": "Linux", "browser": "Firefox"}))
        updated = service.update(bug.id, {"environment": {"version": "121"}})
        assert updated.environment == BugEnvironment(os="Linux", browser="Firefox", version="121")

    def test_invalid_value_rejected_and_record_unchanged(self, service) -> None:
        bug = service.create(bug_payload())
        with pytest.raises(ValidationError):
            service.update(bug.id, {"title": "x" * 101})
        assert service.get(bug.id) == bug

    def test_missing_bug(self, service) -> None:
        with pytest.raises(NotFoundError):
            service.update("ghost", {"title": "x"})


class TestStatusAndPriority:
    def test_update_status(self, service) -> None:
        bug = service.create(bug_payload())
        updated = service.update_status(bug.id, {"status": "resolved"})
        assert updated.status == BugStatus.RESOLVED
        assert updated.updated_at > bug.updated_at

    def test_bogus_status_leaves_record_unchanged(self, service) -> None:
        bug = service.create(bug_payload())
        with pytest.raises(ValidationError, match="Must be one of"):
            service.update_status(bug.id, {"status": "bogus"})
        assert service.get(bug.id) == bug

    def test_missing_status(self, service) -> None:
        bug = service.create(bug_payload())
        with pytest.raises(ValidationError, match="Status is required"):
            service.update_status(bug.id, {})

    def test_update_priority(self, service) -> None:
        bug = service.create(bug_payload())
        updated = service.update_priority(bug.id, {"priority": "critical"})
        assert updated.priority == BugPriority.CRITICAL
        assert updated.updated_at > bug.updated_at

    def test_status_on_missing_bug(self, service) -> None:
        with pytest.raises(NotFoundError):
            service.update_status("ghost", {"status": "open"})


class TestTimestamps:
    def test_updated_at_never_moves_backwards(self, bug_repo) -> None:
        clock = StepClock(step=timedelta(seconds=-10))
        service = BugService(bug_repo, clock=clock)
        bug = service.create(bug_payload())
        updated = service.update_status(bug.id, {"status": "closed"})
        assert updated.updated_at >= updated.created_at
        assert updated.updated_at == bug.updated_at


class TestDelete:
    def test_delete(self, service) -> None:
        bug = service.create(bug_payload())
        service.delete(bug.id)
        with pytest.raises(NotFoundError):
            service.get(bug.id)

    def test_delete_missing(self, service) -> None:
        with pytest.raises(NotFoundError):
            service.delete("ghost")
