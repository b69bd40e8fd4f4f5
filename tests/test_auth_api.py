"""API tests for registration, login, profile, the access gate and admin user management."""

import unittest

from library_api.core.security import decode_access_token
from library_api.models import User
from tests.support import API, ApiTestCase, auth_header


class TestRegister(ApiTestCase):

    def test_register_defaults_to_member_and_token_matches_user(self) -> None:
        body = self.register("a@x.com")
        self.assertTrue(body["success"])
        self.assertEqual(body["user"]["role"], "Member")
        self.assertEqual(body["user"]["email"], "a@x.com")
        self.assertEqual(decode_access_token(body["token"]), body["user"]["id"])
        self.assertNotIn("password", body["user"])
        self.assertNotIn("passwordHash", body["user"])

    def test_distinct_emails_get_distinct_ids(self) -> None:
        first = self.register("one@x.com")["user"]["id"]
        second = self.register("two@x.com")["user"]["id"]
        self.assertNotEqual(first, second)

    def test_duplicate_email_rejected(self) -> None:
        self.register("a@x.com")
        resp = self.client.post(
            f"{API}/auth/register",
            json={"name": "Again", "email": "A@X.com", "password": "secret123"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["success"], False)
        self.assertEqual(resp.json()["message"], "User already exists with this email")

    def test_password_is_hashed_in_storage(self) -> None:
        user_id = self.register("a@x.com")["user"]["id"]
        stored = self.db().get(User, user_id)
        self.assertNotEqual(stored.password_hash, "secret123")
        self.assertTrue(stored.password_hash.startswith("$2"))

    def test_validation_errors_listed(self) -> None:
        resp = self.client.post(
            f"{API}/auth/register",
            json={"name": "A", "email": "not-an-email", "password": "123", "role": "Root"},
        )
        self.assertEqual(resp.status_code, 400)
        body = resp.json()
        self.assertEqual(body["message"], "Validation Error")
        fields = {error.split(":")[0] for error in body["errors"]}
        self.assertEqual(fields, {"name", "email", "password", "role"})

    def test_malformed_emails_rejected(self) -> None:
        for email in ("a@@b.com", "<x>@y.z", "a@b..com", "plain@localhost"):
            with self.subTest(email=email):
                resp = self.client.post(
                    f"{API}/auth/register",
                    json={"name": "Some One", "email": email, "password": "secret123"},
                )
                self.assertEqual(resp.status_code, 400)
                self.assertTrue(resp.json()["errors"][0].startswith("email:"))

    def test_email_is_lower_cased(self) -> None:
        body = self.register("Ada.Lovelace@Library.COM")
        self.assertEqual(body["user"]["email"], "ada.lovelace@library.com")


class TestLogin(ApiTestCase):

    def test_scenario_register_then_login(self) -> None:
        self.register("a@x.com", password="right-password")

        wrong = self.client.post(
            f"{API}/auth/login", json={"email": "a@x.com", "password": "wrong-password"}
        )
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(wrong.json()["message"], "Invalid credentials")

        right = self.client.post(
            f"{API}/auth/login", json={"email": "a@x.com", "password": "right-password"}
        )
        self.assertEqual(right.status_code, 200)
        body = right.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["user"]["role"], "Member")
        self.assertEqual(decode_access_token(body["token"]), body["user"]["id"])

    def test_unknown_email(self) -> None:
        resp = self.client.post(
            f"{API}/auth/login", json={"email": "nobody@x.com", "password": "secret123"}
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "Invalid credentials")


class TestProfileAndGate(ApiTestCase):

    def test_profile_requires_token(self) -> None:
        resp = self.client.get(f"{API}/auth/profile")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "Not authorized, no token provided")
        self.assertEqual(resp.headers.get("www-authenticate"), "Bearer")

    def test_profile_rejects_garbage_token(self) -> None:
        resp = self.client.get(f"{API}/auth/profile", headers=auth_header("garbage"))
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "Invalid token")

    def test_profile_returns_current_user(self) -> None:
        body = self.register("a@x.com", name="Ada")
        resp = self.client.get(f"{API}/auth/profile", headers=auth_header(body["token"]))
        self.assertEqual(resp.status_code, 200)
        user = resp.json()["user"]
        self.assertEqual(user["name"], "Ada")
        self.assertIn("createdAt", user)

    def test_role_change_applies_to_existing_token(self) -> None:
        admin = self.admin_token()
        member = self.register("m@x.com")
        pending_url = f"{API}/books/pending"

        self.assertEqual(
            self.client.get(pending_url, headers=auth_header(member["token"])).status_code, 403
        )
        promote = self.client.put(
            f"{API}/auth/users/{member['user']['id']}/role",
            json={"role": "Admin"},
            headers=auth_header(admin),
        )
        self.assertEqual(promote.status_code, 200)
        self.assertEqual(
            self.client.get(pending_url, headers=auth_header(member["token"])).status_code, 200
        )

    def test_deleted_user_token_rejected(self) -> None:
        admin = self.admin_token()
        member = self.register("m@x.com")
        resp = self.client.delete(
            f"{API}/auth/users/{member['user']['id']}", headers=auth_header(admin)
        )
        self.assertEqual(resp.status_code, 200)
        resp = self.client.get(f"{API}/auth/profile", headers=auth_header(member["token"]))
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "User not found")


class TestUserManagement(ApiTestCase):

    def test_member_cannot_manage_users(self) -> None:
        member = self.member_token()
        other = self.register("other@x.com")["user"]["id"]
        headers = auth_header(member)
        self.assertEqual(self.client.get(f"{API}/auth/users", headers=headers).status_code, 403)
        self.assertEqual(
            self.client.get(f"{API}/auth/users/{other}", headers=headers).status_code, 403
        )
        resp = self.client.put(
            f"{API}/auth/users/{other}/role", json={"role": "Admin"}, headers=headers
        )
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(
            resp.json()["message"], "User role 'Member' is not authorized to access this route"
        )
        self.assertEqual(
            self.client.delete(f"{API}/auth/users/{other}", headers=headers).status_code, 403
        )

    def test_admin_lists_users_without_hashes(self) -> None:
        admin = self.admin_token()
        self.register("m@x.com")
        resp = self.client.get(f"{API}/auth/users", headers=auth_header(admin))
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["count"], 2)
        for user in body["data"]:
            self.assertNotIn("passwordHash", user)

    def test_admin_cannot_change_own_role_or_delete_self(self) -> None:
        body = self.register("admin@x.com", role="Admin")
        headers = auth_header(body["token"])
        own_id = body["user"]["id"]

        resp = self.client.put(
            f"{API}/auth/users/{own_id}/role", json={"role": "Member"}, headers=headers
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "You cannot change your own role")

        resp = self.client.delete(f"{API}/auth/users/{own_id}", headers=headers)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "You cannot delete your own account")

    def test_unknown_and_malformed_user_ids(self) -> None:
        headers = auth_header(self.admin_token())
        self.assertEqual(self.client.get(f"{API}/auth/users/999", headers=headers).status_code, 404)
        resp = self.client.get(f"{API}/auth/users/not-an-id", headers=headers)
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["message"], "User not found")


if __name__ == "__main__":
    unittest.main()
