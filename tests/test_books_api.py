"""API tests for the book catalog: submissions, role-filtered visibility, admin writes and approval."""

import unittest

from tests.support import API, ApiTestCase, auth_header, book_payload


class TestSubmitBook(ApiTestCase):

    def test_member_submission_starts_pending(self) -> None:
        body = self.register("m@x.com")
        book = self.create_book(body["token"])
        self.assertEqual(book["approvalStatus"], "pending")
        self.assertEqual(book["requestedBy"]["id"], body["user"]["id"])
        self.assertIsNone(book["reviewedBy"])
        self.assertIsNone(book["reviewedAt"])
        self.assertTrue(book["availability"])
        self.assertEqual(book["ISBN"], "978-0000000001")

    def test_admin_submission_also_starts_pending(self) -> None:
        book = self.create_book(self.admin_token())
        self.assertEqual(book["approvalStatus"], "pending")

    def test_client_cannot_set_approval_status(self) -> None:
        token = self.member_token()
        resp = self.client.post(
            f"{API}/books",
            json=book_payload(approvalStatus="approved"),
            headers=auth_header(token),
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["data"]["approvalStatus"], "pending")

    def test_requires_authentication(self) -> None:
        resp = self.client.post(f"{API}/books", json=book_payload())
        self.assertEqual(resp.status_code, 401)

    def test_missing_fields(self) -> None:
        resp = self.client.post(
            f"{API}/books",
            json={"title": "  ", "author": "Someone"},
            headers=auth_header(self.member_token()),
        )
        self.assertEqual(resp.status_code, 400)
        fields = {error.split(":")[0] for error in resp.json()["errors"]}
        self.assertEqual(fields, {"title", "ISBN", "category"})

    def test_duplicate_isbn_scenario(self) -> None:
        admin = self.admin_token()
        member = self.member_token()
        self.create_book(admin, isbn="111")
        resp = self.client.post(
            f"{API}/books", json=book_payload(isbn="111"), headers=auth_header(member)
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["success"], False)
        self.assertEqual(resp.json()["message"], "Book with this ISBN already exists")


class TestVisibility(ApiTestCase):

    def test_pending_book_hidden_from_other_members(self) -> None:
        admin = self.admin_token()
        author = self.member_token("author@x.com")
        reader = self.member_token("reader@x.com")
        book = self.create_book(author)

        listed = self.client.get(f"{API}/books", headers=auth_header(reader)).json()
        self.assertEqual(listed["count"], 0)
        resp = self.client.get(f"{API}/books/{book['id']}", headers=auth_header(reader))
        self.assertEqual(resp.status_code, 403)

        self.client.put(f"{API}/books/{book['id']}/approve", headers=auth_header(admin))

        listed = self.client.get(f"{API}/books", headers=auth_header(reader)).json()
        self.assertEqual([b["id"] for b in listed["data"]], [book["id"]])
        resp = self.client.get(f"{API}/books/{book['id']}", headers=auth_header(reader))
        self.assertEqual(resp.status_code, 200)

    def test_admin_sees_all_statuses_newest_first(self) -> None:
        admin = self.admin_token()
        approved = self.approved_book(admin, isbn="1")
        pending = self.create_book(admin, isbn="2")
        resp = self.client.get(f"{API}/books", headers=auth_header(admin))
        self.assertEqual([b["id"] for b in resp.json()["data"]], [pending["id"], approved["id"]])

    def test_pending_listing(self) -> None:
        admin = self.admin_token()
        self.approved_book(admin, isbn="1")
        pending = self.create_book(self.member_token(), isbn="2")
        resp = self.client.get(f"{API}/books/pending", headers=auth_header(admin))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([b["id"] for b in resp.json()["data"]], [pending["id"]])

    def test_missing_and_malformed_ids(self) -> None:
        headers = auth_header(self.admin_token())
        resp = self.client.get(f"{API}/books/12345", headers=headers)
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["message"], "Book not found")
        resp = self.client.get(f"{API}/books/5f2b-bad-id", headers=headers)
        self.assertEqual(resp.status_code, 404)

    def test_out_of_range_and_loose_ids_are_not_found(self) -> None:
        admin = self.admin_token()
        book = self.approved_book(admin)
        member_headers = auth_header(self.member_token())
        for raw in ("99999999999999999999", "2147483648", "0_1", "+1", "%201", "-1"):
            with self.subTest(raw=raw):
                resp = self.client.get(f"{API}/books/{raw}", headers=member_headers)
                self.assertEqual(resp.status_code, 404)
                self.assertEqual(resp.json()["message"], "Book not found")
        resp = self.client.put(
            f"{API}/books/99999999999999999999/approve", headers=auth_header(admin)
        )
        self.assertEqual(resp.status_code, 404)
        # The canonical form still resolves.
        resp = self.client.get(f"{API}/books/{book['id']}", headers=member_headers)
        self.assertEqual(resp.status_code, 200)


class TestApprovalWorkflow(ApiTestCase):

    def test_approve_records_reviewer(self) -> None:
        admin_body = self.register("admin@x.com", role="Admin")
        book = self.create_book(self.member_token())
        resp = self.client.put(
            f"{API}/books/{book['id']}/approve", headers=auth_header(admin_body["token"])
        )
        self.assertEqual(resp.status_code, 200)
        data = resp.json()["data"]
        self.assertEqual(data["approvalStatus"], "approved")
        self.assertEqual(data["reviewedBy"]["id"], admin_body["user"]["id"])
        self.assertIsNotNone(data["reviewedAt"])

    def test_approve_then_reject_fails(self) -> None:
        admin = self.admin_token()
        book = self.create_book(admin)
        first = self.client.put(f"{API}/books/{book['id']}/approve", headers=auth_header(admin))
        self.assertEqual(first.status_code, 200)
        second = self.client.put(f"{API}/books/{book['id']}/reject", headers=auth_header(admin))
        self.assertEqual(second.status_code, 400)
        self.assertEqual(second.json()["message"], "Book has already been approved")
        current = self.client.get(f"{API}/books/{book['id']}", headers=auth_header(admin))
        self.assertEqual(current.json()["data"]["approvalStatus"], "approved")

    def test_reject_then_approve_fails(self) -> None:
        admin = self.admin_token()
        book = self.create_book(admin)
        self.client.put(f"{API}/books/{book['id']}/reject", headers=auth_header(admin))
        resp = self.client.put(f"{API}/books/{book['id']}/approve", headers=auth_header(admin))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "Book has already been rejected")

    def test_approve_missing_book(self) -> None:
        resp = self.client.put(
            f"{API}/books/999/approve", headers=auth_header(self.admin_token())
        )
        self.assertEqual(resp.status_code, 404)

    def test_member_cannot_decide(self) -> None:
        member = self.member_token()
        book = self.create_book(member)
        for action in ("approve", "reject"):
            resp = self.client.put(
                f"{API}/books/{book['id']}/{action}", headers=auth_header(member)
            )
            self.assertEqual(resp.status_code, 403)


class TestAdminWrites(ApiTestCase):

    def test_member_cannot_update_or_delete(self) -> None:
        admin = self.admin_token()
        member = self.member_token()
        book = self.approved_book(admin)
        headers = auth_header(member)
        resp = self.client.put(
            f"{API}/books/{book['id']}", json=book_payload(title="Changed"), headers=headers
        )
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(self.client.delete(f"{API}/books/{book['id']}", headers=headers).status_code, 403)
        # rejected before the lookup, so a missing id is still 403
        self.assertEqual(self.client.delete(f"{API}/books/999", headers=headers).status_code, 403)

    def test_admin_update_keeps_approval_state(self) -> None:
        admin = self.admin_token()
        book = self.approved_book(admin)
        resp = self.client.put(
            f"{API}/books/{book['id']}",
            json=book_payload(title="Second Edition", availability=False),
            headers=auth_header(admin),
        )
        self.assertEqual(resp.status_code, 200)
        data = resp.json()["data"]
        self.assertEqual(data["title"], "Second Edition")
        self.assertFalse(data["availability"])
        self.assertEqual(data["approvalStatus"], "approved")

    def test_update_to_taken_isbn(self) -> None:
        admin = self.admin_token()
        self.create_book(admin, isbn="A")
        other = self.create_book(admin, isbn="B")
        resp = self.client.put(
            f"{API}/books/{other['id']}", json=book_payload(isbn="A"), headers=auth_header(admin)
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "Book with this ISBN already exists")

    def test_admin_delete(self) -> None:
        admin = self.admin_token()
        book = self.create_book(admin)
        resp = self.client.delete(f"{API}/books/{book['id']}", headers=auth_header(admin))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"success": True, "message": "Book deleted successfully"})
        resp = self.client.get(f"{API}/books/{book['id']}", headers=auth_header(admin))
        self.assertEqual(resp.status_code, 404)


if __name__ == "__main__":
    unittest.main()
