"""HTTP client for the bug tracker API, built on :mod:`httpx`."""
from __future__ import annotations

import logging
from typing import Any

import httpx

from bugtracker.errors import (
    FieldError,
    NetworkError,
    RequestTimeoutError,
    error_from_status_code,
)
from bugtracker.model.bug import Bug
from bugtracker.model.query import BugPage, BugQuery, Pagination
from bugtracker.model.stats import BugStats

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class BugTrackerClient:
    """Thin wrapper around :class:`httpx.Client` that maps failures into bugtracker errors.

    The bearer token is held by the client instance; use :meth:`with_token`
    to derive an authenticated client after logging in.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport
        self.token = token
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def with_token(self, token: str) -> BugTrackerClient:
        """Return a new client sending ``token`` with every request."""
        return BugTrackerClient(
            self._base_url,
            token=token,
            timeout=self._timeout,
            transport=self._transport,
        )

    # -- bugs ---------------------------------------------------------------

    def list_bugs(self, query: BugQuery | None = None) -> BugPage:
        query = query or BugQuery()
        body = self._request("GET", "/api/bugs", params=query.to_params())
        return BugPage(
            items=tuple(Bug.from_dict(b) for b in body["data"]),
            pagination=Pagination(**body["pagination"]),
            query=query,
        )

    def get_bug(self, bug_id: str) -> Bug:
        return Bug.from_dict(self._request("GET", f"/api/bugs/{bug_id}")["data"])

    def create_bug(self, fields: dict[str, Any]) -> Bug:
        return Bug.from_dict(self._request("POST", "/api/bugs", json=fields)["data"])

    def update_bug(self, bug_id: str, fields: dict[str, Any]) -> Bug:
        body = self._request("PUT", f"/api/bugs/{bug_id}", json=fields)
        return Bug.from_dict(body["data"])

    def update_status(self, bug_id: str, status: str) -> Bug:
        body = self._request(
            "PATCH", f"/api/bugs/{bug_id}/status", json={"status": status}
        )
        return Bug.from_dict(body["data"])

    def update_priority(self, bug_id: str, priority: str) -> Bug:
        body = self._request(
            "PATCH", f"/api/bugs/{bug_id}/priority", json={"priority": priority}
        )
        return Bug.from_dict(body["data"])

    def delete_bug(self, bug_id: str) -> None:
        self._request("DELETE", f"/api/bugs/{bug_id}")

    def stats(self) -> BugStats:
        return BugStats.from_dict(self._request("GET", "/api/bugs/stats/summary")["data"])

    # -- auth ---------------------------------------------------------------

    def register(self, name: str, email: str, password: str) -> dict[str, Any]:
        """Register and return ``{token, user}``."""
        return self._request(
            "POST",
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )

    def login(self, email: str, password: str) -> dict[str, Any]:
        """Log in and return ``{token, user}``."""
        return self._request(
            "POST", "/api/auth/login", json={"email": email, "password": password}
        )

    def me(self) -> dict[str, Any]:
        return self._request("GET", "/api/auth/me")["data"]

    def health(self) -> dict[str, Any]:
        return self._request("GET", "/api/health")

    # -- plumbing -----------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a request and return the parsed JSON body.

        Raises a bugtracker error on non-2xx status or transport failure.
        """
        logger.debug("%s %s params=%s", method, path, params)
        try:
            resp = self._client.request(method, path, params=params, json=json)
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(str(exc), cause=exc) from exc
        except httpx.TransportError as exc:
            raise NetworkError(
                "Network error. Please check your connection.", cause=exc
            ) from exc

        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if resp.status_code >= 300:
            logger.debug("API error %s on %s %s", resp.status_code, method, path)
            errors = [
                FieldError(e.get("field", ""), e.get("message", ""))
                for e in body.get("errors", [])
                if isinstance(e, dict)
            ]
            raise error_from_status_code(
                resp.status_code,
                body.get("message") or resp.reason_phrase,
                errors=errors,
            )
        return body

    def close(self) -> None:
        """Close the underlying httpx client."""
        self._client.close()

    def __enter__(self) -> BugTrackerClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
