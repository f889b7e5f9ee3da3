"""Client-side state for the bug list and dashboard views.

Each store holds its filter/page state, the last successful result, and a
status flag. Every fetch is numbered; a response is applied only if no newer
fetch has been issued since, so a slow reply can never overwrite a fresher
one. On failure the previous result is cleared in both stores.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, Protocol, TypeVar

from bugtracker.errors import BugTrackerError
from bugtracker.model.bug import Bug
from bugtracker.model.query import DEFAULT_LIMIT, BugPage, BugQuery, Pagination
from bugtracker.model.stats import BugStats
from bugtracker.query.builder import build_query

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BugApi(Protocol):
    """The subset of :class:`~bugtracker.client.http.BugTrackerClient` the stores use."""

    def list_bugs(self, query: BugQuery | None = None) -> BugPage: ...
    def create_bug(self, fields: dict[str, Any]) -> Bug: ...
    def update_bug(self, bug_id: str, fields: dict[str, Any]) -> Bug: ...
    def update_status(self, bug_id: str, status: str) -> Bug: ...
    def delete_bug(self, bug_id: str) -> None: ...
    def stats(self) -> BugStats: ...


class StoreStatus(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class PendingRequest(Generic[T]):
    seq: int
    payload: T


@dataclass(frozen=True)
class ActionResult:
    success: bool
    data: Any = None
    error: BugTrackerError | None = None


class _SequencedStore:
    """Status bookkeeping with last-request-wins semantics."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._seq = 0
        self.status = StoreStatus.IDLE
        self.error: BugTrackerError | None = None

    @property
    def loading(self) -> bool:
        return self.status == StoreStatus.LOADING

    def _start(self, payload: T) -> PendingRequest[T]:
        with self._lock:
            self._seq += 1
            self.status = StoreStatus.LOADING
            self.error = None
            return PendingRequest(self._seq, payload)

    def _is_current(self, request: PendingRequest) -> bool:
        # caller holds the lock
        if request.seq != self._seq:
            logger.debug(
                "Discarding stale response #%d (latest is #%d)", request.seq, self._seq
            )
            return False
        return True


class BugListStore(_SequencedStore):
    """Filter, pagination and result state behind the bug list view."""

    def __init__(
        self,
        api: BugApi,
        initial_filters: Mapping[str, str] | None = None,
        *,
        limit: int = DEFAULT_LIMIT,
        stats_store: BugStatsStore | None = None,
    ) -> None:
        super().__init__()
        self._api = api
        self._initial_filters = dict(initial_filters or {})
        self._stats_store = stats_store
        self.filters: dict[str, str] = dict(self._initial_filters)
        self.page = 1
        self.limit = limit
        self.bugs: tuple[Bug, ...] = ()
        self.pagination = Pagination.compute(1, limit, 0)

    @property
    def query(self) -> BugQuery:
        return build_query({**self.filters, "page": self.page, "limit": self.limit})

    # -- state changes ------------------------------------------------------

    def set_filter(self, key: str, value: str | None) -> StoreStatus:
        """Change one filter and go back to the first page."""
        if value is None:
            self.filters.pop(key, None)
        else:
            self.filters[key] = value
        self.page = 1
        return self.refresh()

    def clear_filters(self) -> StoreStatus:
        self.filters = dict(self._initial_filters)
        self.page = 1
        return self.refresh()

    def go_to_page(self, page: int) -> StoreStatus:
        self.page = max(1, page)
        return self.refresh()

    # -- fetching -----------------------------------------------------------

    def begin(self) -> PendingRequest[BugQuery]:
        """Start a fetch for the current state; the store enters LOADING."""
        return self._start(self.query)

    def resolve(self, request: PendingRequest[BugQuery], page: BugPage) -> bool:
        """Apply a fetched page. Returns False if a newer fetch superseded it."""
        with self._lock:
            if not self._is_current(request):
                return False
            self.bugs = page.items
            self.pagination = page.pagination
            self.status = StoreStatus.LOADED
            return True

    def reject(self, request: PendingRequest[BugQuery], error: BugTrackerError) -> bool:
        """Record a failed fetch. Returns False if a newer fetch superseded it."""
        with self._lock:
            if not self._is_current(request):
                return False
            self.bugs = ()
            self.pagination = Pagination.compute(
                request.payload.page, request.payload.limit, 0
            )
            self.status = StoreStatus.FAILED
            self.error = error
            return True

    def refresh(self) -> StoreStatus:
        """Fetch the current page synchronously."""
        request = self.begin()
        try:
            page = self._api.list_bugs(request.payload)
        except BugTrackerError as exc:
            logger.error("Error fetching bugs: %s", exc)
            self.reject(request, exc)
        else:
            self.resolve(request, page)
        return self.status

    # -- writes -------------------------------------------------------------

    def create_bug(self, fields: dict[str, Any]) -> ActionResult:
        try:
            bug = self._api.create_bug(fields)
        except BugTrackerError as exc:
            logger.error("Error creating bug: %s", exc)
            return ActionResult(success=False, error=exc)
        self.refresh()
        self._refresh_stats()
        return ActionResult(success=True, data=bug)

    def update_bug(self, bug_id: str, updates: dict[str, Any]) -> ActionResult:
        try:
            bug = self._api.update_bug(bug_id, updates)
        except BugTrackerError as exc:
            logger.error("Error updating bug: %s", exc)
            return ActionResult(success=False, error=exc)
        self._replace(bug)
        self._refresh_stats()
        return ActionResult(success=True, data=bug)

    def update_status(self, bug_id: str, status: str) -> ActionResult:
        try:
            bug = self._api.update_status(bug_id, status)
        except BugTrackerError as exc:
            logger.error("Error updating bug status: %s", exc)
            return ActionResult(success=False, error=exc)
        self._replace(bug)
        self._refresh_stats()
        return ActionResult(success=True, data=bug)

    def delete_bug(self, bug_id: str) -> ActionResult:
        try:
            self._api.delete_bug(bug_id)
        except BugTrackerError as exc:
            logger.error("Error deleting bug: %s", exc)
            return ActionResult(success=False, error=exc)
        with self._lock:
            self.bugs = tuple(b for b in self.bugs if b.id != bug_id)
        self._refresh_stats()
        return ActionResult(success=True)

    def _replace(self, bug: Bug) -> None:
        with self._lock:
            self.bugs = tuple(bug if b.id == bug.id else b for b in self.bugs)

    def _refresh_stats(self) -> None:
        if self._stats_store is not None:
            self._stats_store.refresh()


class BugStatsStore(_SequencedStore):
    """Dashboard statistics state."""

    def __init__(self, api: BugApi) -> None:
        super().__init__()
        self._api = api
        self.stats: BugStats | None = None

    def begin(self) -> PendingRequest[None]:
        return self._start(None)

    def resolve(self, request: PendingRequest[None], stats: BugStats) -> bool:
        with self._lock:
            if not self._is_current(request):
                return False
            self.stats = stats
            self.status = StoreStatus.LOADED
            return True

    def reject(self, request: PendingRequest[None], error: BugTrackerError) -> bool:
        with self._lock:
            if not self._is_current(request):
                return False
            self.stats = None
            self.status = StoreStatus.FAILED
            self.error = error
            return True

    def refresh(self) -> StoreStatus:
        request = self.begin()
        try:
            stats = self._api.stats()
        except BugTrackerError as exc:
            logger.error("Error fetching bug stats: %s", exc)
            self.reject(request, exc)
        else:
            self.resolve(request, stats)
        return self.status
