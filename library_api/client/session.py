"""Client-side session state: the signed-in user and token, with synchronous change notifications."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

Subscriber = Callable[[dict[str, Any] | None], None]


class LoginRequired(Exception):
    """No session (or it was revoked by a 401); the caller should send the user to login."""

    def __init__(self, message: str = "Please log in to continue.") -> None:
        self.message = message
        super().__init__(message)


class AccessDenied(Exception):
    """Signed in, but the user's role does not allow this view."""

    def __init__(self, message: str = "Admin access required.") -> None:
        self.message = message
        super().__init__(message)


class SessionState:
    """
    Holds the current principal and bearer token.

    Construct one per client and pass it to whatever needs it. Subscribers get
    the current user (or None) immediately on subscribe and again, in
    subscription order, after every change.
    """

    def __init__(self, storage_path: str | os.PathLike[str] | None = None) -> None:
        self._user: dict[str, Any] | None = None
        self._token: str | None = None
        self._subscribers: list[Subscriber] = []
        self._storage_path = Path(storage_path) if storage_path else None
        if self._storage_path is not None:
            self._load()

    @property
    def user(self) -> dict[str, Any] | None:
        return self._user

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    @property
    def is_admin(self) -> bool:
        return self._user is not None and self._user.get("role") == "Admin"

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback``; returns a function that unsubscribes it."""
        self._subscribers.append(callback)
        callback(self._user)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def set(self, user: dict[str, Any], token: str) -> None:
        self._user = user
        self._token = token
        self._save()
        self._publish()

    def update_user(self, user: dict[str, Any]) -> None:
        """Replace the user (e.g. after a profile refresh) keeping the token."""
        self._user = user
        self._save()
        self._publish()

    def clear(self) -> None:
        self._user = None
        self._token = None
        self._save()
        self._publish()

    def ensure_access(self, admin_only: bool = False) -> None:
        """Route guard: raise LoginRequired or AccessDenied when the view is not allowed."""
        if not self.is_authenticated:
            raise LoginRequired()
        if admin_only and not self.is_admin:
            raise AccessDenied()

    def _publish(self) -> None:
        for callback in list(self._subscribers):
            callback(self._user)

    def _save(self) -> None:
        if self._storage_path is None:
            return
        if self._token is None:
            self._storage_path.unlink(missing_ok=True)
            return
        self._storage_path.write_text(
            json.dumps({"token": self._token, "user": self._user}),
            encoding="utf-8",
        )

    def _load(self) -> None:
        if not self._storage_path.exists():
            return
        try:
            data = json.loads(self._storage_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning("Ignoring unreadable session file %s", self._storage_path)
            return
        if isinstance(data, dict) and data.get("token"):
            self._token = data["token"]
            self._user = data.get("user")
