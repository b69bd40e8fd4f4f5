"""Shared fixtures for API tests: fresh schema per test and helpers to register/login users."""

import unittest
from typing import Any

from fastapi.testclient import TestClient

from library_api.core.database import SessionLocal, engine
from library_api.main import app
from library_api.models import Base

API = "/api"


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def book_payload(isbn: str = "978-0000000001", **overrides: Any) -> dict[str, Any]:
    """Build a minimal valid book body for tests."""
    payload = {
        "title": "The Pragmatic Programmer",
        "author": "Andrew Hunt",
        "ISBN": isbn,
        "category": "Software",
    }
    payload.update(overrides)
    return payload


class ApiTestCase(unittest.TestCase):
    """Creates all tables before each test and drops them afterwards."""

    def setUp(self) -> None:
        Base.metadata.create_all(engine)
        self.client = TestClient(app)

    def tearDown(self) -> None:
        self.client.close()
        Base.metadata.drop_all(engine)

    def db(self):
        session = SessionLocal()
        self.addCleanup(session.close)
        return session

    def register(
        self,
        email: str,
        password: str = "secret123",
        name: str = "Test User",
        role: str | None = None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {"name": name, "email": email, "password": password}
        if role is not None:
            body["role"] = role
        resp = self.client.post(f"{API}/auth/register", json=body)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()

    def admin_token(self, email: str = "admin@library.com") -> str:
        return self.register(email, name="Admin", role="Admin")["token"]

    def member_token(self, email: str = "member@library.com") -> str:
        return self.register(email, name="Member")["token"]

    def create_book(self, token: str, **overrides: Any) -> dict[str, Any]:
        resp = self.client.post(
            f"{API}/books", json=book_payload(**overrides), headers=auth_header(token)
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["data"]

    def approved_book(self, admin_token: str, **overrides: Any) -> dict[str, Any]:
        book = self.create_book(admin_token, **overrides)
        resp = self.client.put(
            f"{API}/books/{book['id']}/approve", headers=auth_header(admin_token)
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        return resp.json()["data"]
