from __future__ import annotations

import pytest

from bugtracker.model.query import BugPage, BugQuery, Pagination, SortField

from tests.test_bugtracker.factories import make_bug


class TestPagination:
    @pytest.mark.parametrize(
        ("total", "limit", "pages"),
        [(0, 10, 1), (1, 10, 1), (10, 10, 1), (11, 10, 2), (3, 1, 3), (25, 7, 4)],
    )
    def test_pages_is_ceiling_with_minimum_one(self, total, limit, pages) -> None:
        assert Pagination.compute(1, limit, total).pages == pages

    def test_to_dict(self) -> None:
        assert Pagination.compute(2, 5, 12).to_dict() == {
            "page": 2,
            "limit": 5,
            "total": 12,
            "pages": 3,
        }


class TestBugQuery:
    def test_defaults(self) -> None:
        query = BugQuery()
        assert query.page == 1
        assert query.limit == 10
        assert query.sort == (SortField("createdAt", descending=True),)
        assert query.status is None

    @pytest.mark.parametrize(("page", "limit", "offset"), [(1, 10, 0), (2, 10, 10), (3, 1, 2)])
    def test_offset(self, page, limit, offset) -> None:
        query = BugQuery(page=page, limit=limit)
        assert query.offset == offset
        # skip count lies in (page*limit - limit - 1, page*limit]
        assert page * limit - limit <= query.offset < page * limit

    def test_to_params_omits_absent_filters(self) -> None:
        params = BugQuery(status="open", page=2).to_params()
        assert params == {"status": "open", "sort": "-createdAt", "page": "2", "limit": "10"}

    def test_to_params_renders_multiple_sort_fields(self) -> None:
        query = BugQuery(
            assigned_to="sam",
            sort=(SortField("priority", descending=True), SortField("title")),
        )
        params = query.to_params()
        assert params["sort"] == "-priority,title"
        assert params["assignedTo"] == "sam"


class TestBugPage:
    def test_to_dict_envelope(self) -> None:
        page = BugPage(
            items=(make_bug(id="a"), make_bug(id="b")),
            pagination=Pagination.compute(1, 10, 2),
        )
        data = page.to_dict()
        assert data["success"] is True
        assert data["count"] == 2
        assert data["pagination"]["total"] == 2
        assert [b["id"] for b in data["data"]] == ["a", "b"]
