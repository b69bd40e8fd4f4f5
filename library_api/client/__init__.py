"""Python client for the library API: session state and REST calls."""

from library_api.client.api import ActionCancelled, ApiError, LibraryClient
from library_api.client.session import AccessDenied, LoginRequired, SessionState

__all__ = [
    "AccessDenied",
    "ActionCancelled",
    "ApiError",
    "LibraryClient",
    "LoginRequired",
    "SessionState",
]
