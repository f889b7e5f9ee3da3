from __future__ import annotations

from bugtracker.model.bug import Bug
from bugtracker.service import BugService

SAMPLE_BUGS = (
    {
        "title": "Login page crashes on Safari",
        "description": "The login form freezes after clicking submit on Safari 17. "
        "Console shows a TypeError in the auth handler.",
        "reportedBy": "Dana",
        "priority": "critical",
        "stepsToReproduce": ["Open /login in Safari 17", "Submit valid credentials"],
        "environment": {"os": "macOS 14", "browser": "Safari", "version": "17.2"},
    },
    {
        "title": "Refund fails when amount exceeds original charge",
        "description": "Refunds larger than the original charge return a 500 "
        "instead of a validation message.",
        "reportedBy": "Priya",
        "priority": "high",
        "assignedTo": "Sam",
    },
    {
        "title": "Export button hard to find",
        "description": "Users expect the export action in the toolbar but it "
        "lives under Settings > Advanced.",
        "reportedBy": "Lee",
        "priority": "low",
        "status": "in-progress",
    },
)


def seed_sample_bugs(service: BugService) -> list[Bug]:
    """Create the sample bugs and return them."""
    return [service.create(dict(payload)) for payload in SAMPLE_BUGS]
