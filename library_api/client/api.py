"""REST client for the library API, used by front ends and scripts.

Attaches the session's bearer token, stores the principal on login/register,
clears the session on any 401 and asks for confirmation before destructive
calls.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import httpx

from library_api.client.session import LoginRequired, SessionState

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SEC = 30.0

Confirm = Callable[[str], bool]


class ApiError(Exception):
    """Non-2xx response other than 401; ``errors`` holds field messages for inline display."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        errors: list[str] | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.errors = errors or []
        super().__init__(message)


class ActionCancelled(Exception):
    """The user declined the confirmation prompt; no request was sent."""


def _always_confirm(_prompt: str) -> bool:
    return True


class LibraryClient:
    """Thin synchronous wrapper over the REST endpoints under ``{base_url}``."""

    def __init__(
        self,
        base_url: str,
        session: SessionState,
        confirm: Confirm | None = None,
        transport: httpx.BaseTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT_SEC,
    ) -> None:
        self.session = session
        self._confirm = confirm or _always_confirm
        self._http = httpx.Client(
            base_url=base_url.rstrip("/"),
            transport=transport,
            timeout=timeout,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> LibraryClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(self, method: str, path: str, json: Any = None) -> dict[str, Any]:
        headers = {}
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        resp = self._http.request(method, path, json=json, headers=headers)
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {"data": body}

        if resp.status_code == 401:
            message = body.get("message") or "Not authorized"
            logger.info("%s %s returned 401 (%s); clearing session", method, path, message)
            self.session.clear()
            raise LoginRequired(message)
        if resp.status_code >= 400:
            raise ApiError(
                body.get("message") or f"Request failed with status {resp.status_code}",
                resp.status_code,
                body.get("errors"),
            )
        return body

    def _confirmed(self, prompt: str) -> None:
        if not self._confirm(prompt):
            raise ActionCancelled(prompt)

    # auth

    def register(
        self, name: str, email: str, password: str, role: str | None = None
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": name, "email": email, "password": password}
        if role:
            payload["role"] = role
        body = self._request("POST", "/auth/register", payload)
        self.session.set(body["user"], body["token"])
        return body["user"]

    def login(self, email: str, password: str) -> dict[str, Any]:
        body = self._request("POST", "/auth/login", {"email": email, "password": password})
        self.session.set(body["user"], body["token"])
        return body["user"]

    def logout(self) -> None:
        self.session.clear()

    def profile(self) -> dict[str, Any]:
        self.session.ensure_access()
        user = self._request("GET", "/auth/profile")["user"]
        self.session.update_user(user)
        return user

    def list_users(self) -> list[dict[str, Any]]:
        self.session.ensure_access(admin_only=True)
        return self._request("GET", "/auth/users")["data"]

    def update_user_role(self, user_id: int, role: str) -> dict[str, Any]:
        self.session.ensure_access(admin_only=True)
        return self._request("PUT", f"/auth/users/{user_id}/role", {"role": role})["data"]

    def delete_user(self, user_id: int) -> None:
        self.session.ensure_access(admin_only=True)
        self._confirmed("Are you sure you want to delete this user?")
        self._request("DELETE", f"/auth/users/{user_id}")

    # books

    def list_books(self) -> list[dict[str, Any]]:
        self.session.ensure_access()
        return self._request("GET", "/books")["data"]

    def list_pending_books(self) -> list[dict[str, Any]]:
        self.session.ensure_access(admin_only=True)
        return self._request("GET", "/books/pending")["data"]

    def get_book(self, book_id: int) -> dict[str, Any]:
        self.session.ensure_access()
        return self._request("GET", f"/books/{book_id}")["data"]

    def create_book(self, book: dict[str, Any]) -> dict[str, Any]:
        self.session.ensure_access()
        return self._request("POST", "/books", book)["data"]

    def update_book(self, book_id: int, book: dict[str, Any]) -> dict[str, Any]:
        self.session.ensure_access(admin_only=True)
        return self._request("PUT", f"/books/{book_id}", book)["data"]

    def delete_book(self, book_id: int) -> None:
        self.session.ensure_access(admin_only=True)
        self._confirmed("Are you sure you want to delete this book?")
        self._request("DELETE", f"/books/{book_id}")

    def approve_book(self, book_id: int) -> dict[str, Any]:
        self.session.ensure_access(admin_only=True)
        return self._request("PUT", f"/books/{book_id}/approve")["data"]

    def reject_book(self, book_id: int) -> dict[str, Any]:
        self.session.ensure_access(admin_only=True)
        self._confirmed("Are you sure you want to reject this book?")
        return self._request("PUT", f"/books/{book_id}/reject")["data"]

    # members

    def list_members(self) -> list[dict[str, Any]]:
        self.session.ensure_access()
        return self._request("GET", "/members")["data"]

    def get_member(self, member_id: int) -> dict[str, Any]:
        self.session.ensure_access()
        return self._request("GET", f"/members/{member_id}")["data"]

    def create_member(self, member: dict[str, Any]) -> dict[str, Any]:
        self.session.ensure_access(admin_only=True)
        return self._request("POST", "/members", member)["data"]

    def update_member(self, member_id: int, member: dict[str, Any]) -> dict[str, Any]:
        self.session.ensure_access(admin_only=True)
        return self._request("PUT", f"/members/{member_id}", member)["data"]

    def delete_member(self, member_id: int) -> None:
        self.session.ensure_access(admin_only=True)
        self._confirmed("Are you sure you want to delete this member?")
        self._request("DELETE", f"/members/{member_id}")

    def health(self) -> dict[str, Any]:
        return self._request("GET", "/health")
