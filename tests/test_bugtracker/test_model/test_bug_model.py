from __future__ import annotations

import pytest

from bugtracker.model.bug import Bug, BugEnvironment, BugPriority, BugStatus

from tests.test_bugtracker.factories import make_bug


class TestBugStatus:
    def test_all_values(self) -> None:
        expected = {"open", "in-progress", "resolved", "closed"}
        assert {v.value for v in BugStatus} == expected

    def test_is_str(self) -> None:
        assert isinstance(BugStatus.IN_PROGRESS, str)
        assert BugStatus.IN_PROGRESS == "in-progress"


class TestBugPriority:
    def test_all_values(self) -> None:
        expected = {"low", "medium", "high", "critical"}
        assert {v.value for v in BugPriority} == expected


class TestBugDefaults:
    def test_defaults(self) -> None:
        bug = Bug(id="b", title="t", description="d", reported_by="r")
        assert bug.status == BugStatus.OPEN
        assert bug.priority == BugPriority.MEDIUM
        assert bug.assigned_to == "Unassigned"
        assert bug.steps_to_reproduce == ()
        assert bug.environment == BugEnvironment("Unknown", "Unknown", "Unknown")

    def test_frozen(self) -> None:
        bug = make_bug()
        with pytest.raises(AttributeError):
            bug.title = "changed"  # type: ignore[misc]


class TestBugSerialization:
    def test_to_dict_uses_camel_case(self) -> None:
        bug = make_bug(
            id="abc",
            steps_to_reproduce=("open page", "click"),
            environment=BugEnvironment(os="Linux", browser="Firefox", version="121"),
        )
        data = bug.to_dict()
        assert data["_id"] == "abc"
        assert data["id"] == "abc"
        assert data["reportedBy"] == "tester"
        assert data["assignedTo"] == "Unassigned"
        assert data["stepsToReproduce"] == ["open page", "click"]
        assert data["environment"] == {"os": "Linux", "browser": "Firefox", "version": "121"}
        assert data["createdAt"] == "2025-01-15T10:00:00.000Z"
        assert data["status"] == "open"

    def test_from_dict_restores_bug(self) -> None:
        bug = make_bug(
            status=BugStatus.RESOLVED,
            priority=BugPriority.CRITICAL,
            steps_to_reproduce=("a",),
        )
        assert Bug.from_dict(bug.to_dict()) == bug

    def test_from_dict_accepts_mongo_style_id_only(self) -> None:
        data = make_bug(id="xyz").to_dict()
        del data["id"]
        assert Bug.from_dict(data).id == "xyz"
