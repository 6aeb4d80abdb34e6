"""API tests for the admin dashboard endpoints."""

import unittest

from support import ADMIN_EMAIL, ApiTestCase


class TestAdminAccess(ApiTestCase):
    def test_non_admin_is_forbidden(self) -> None:
        token = self.user_token("a", "a@x.com")
        for path in ("/admin/stats", "/admin/users", "/admin/posts", "/admin/subscribers", "/admin/contacts"):
            resp = self.client.get(path, headers=self.auth(token))
            self.assertEqual(resp.status_code, 403, path)
            self.assertEqual(resp.json()["detail"], "Admin access required")

    def test_anonymous_is_unauthenticated(self) -> None:
        self.assertEqual(self.client.get("/admin/stats").status_code, 401)
        self.assertEqual(self.client.delete("/admin/posts/1").status_code, 401)

    def test_non_admin_cannot_use_admin_delete(self) -> None:
        owner = self.user_token("a", "a@x.com")
        post_id = self.create_post(owner).json()["id"]
        resp = self.client.delete(f"/admin/posts/{post_id}", headers=self.auth(owner))
        self.assertEqual(resp.status_code, 403)


class TestAdminDashboard(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = self.user_token("boss", ADMIN_EMAIL)
        self.user = self.user_token("a", "a@x.com")

    def test_stats_counts(self) -> None:
        self.create_post(self.user)
        self.create_post(self.user)
        self.client.post("/contact", json={"name": "n", "email": "n@x.com", "message": "m"})
        self.client.post("/subscribe", json={"email": "s@x.com"})
        resp = self.client.get("/admin/stats", headers=self.auth(self.admin))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"users": 2, "posts": 2, "contacts": 1, "subscribers": 1})

    def test_user_listing_excludes_password(self) -> None:
        users = self.client.get("/admin/users", headers=self.auth(self.admin)).json()
        self.assertEqual([u["email"] for u in users], [ADMIN_EMAIL, "a@x.com"])
        for u in users:
            self.assertEqual(set(u), {"id", "username", "email", "role"})

    def test_post_listing(self) -> None:
        self.create_post(self.user, title="One")
        posts = self.client.get("/admin/posts", headers=self.auth(self.admin)).json()
        self.assertEqual([p["title"] for p in posts], ["One"])

    def test_edit_user_role_and_email(self) -> None:
        post_id = self.create_post(self.user).json()["id"]
        users = self.client.get("/admin/users", headers=self.auth(self.admin)).json()
        user_id = next(u["id"] for u in users if u["email"] == "a@x.com")
        resp = self.client.put(
            f"/admin/users/{user_id}",
            json={"email": "renamed@x.com", "role": "admin"},
            headers=self.auth(self.admin),
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["role"], "admin")
        self.assertEqual(resp.json()["email"], "renamed@x.com")
        self.assertEqual(self.client.get(f"/getpostbyid/{post_id}").json()["email"], "renamed@x.com")

    def test_old_token_keeps_old_role_until_expiry(self) -> None:
        users = self.client.get("/admin/users", headers=self.auth(self.admin)).json()
        user_id = next(u["id"] for u in users if u["email"] == "a@x.com")
        self.client.put(f"/admin/users/{user_id}", json={"role": "admin"}, headers=self.auth(self.admin))
        self.assertEqual(self.client.get("/admin/stats", headers=self.auth(self.user)).status_code, 403)
        fresh = self.login("a@x.com")
        self.assertEqual(self.client.get("/admin/stats", headers=self.auth(fresh)).status_code, 200)

    def test_edit_user_email_conflict(self) -> None:
        users = self.client.get("/admin/users", headers=self.auth(self.admin)).json()
        user_id = next(u["id"] for u in users if u["email"] == "a@x.com")
        resp = self.client.put(
            f"/admin/users/{user_id}", json={"email": ADMIN_EMAIL}, headers=self.auth(self.admin)
        )
        self.assertEqual(resp.status_code, 409)

    def test_edit_missing_user(self) -> None:
        resp = self.client.put("/admin/users/9999", json={"role": "user"}, headers=self.auth(self.admin))
        self.assertEqual(resp.status_code, 404)

    def test_edit_user_rejects_unknown_role(self) -> None:
        resp = self.client.put("/admin/users/1", json={"role": "root"}, headers=self.auth(self.admin))
        self.assertEqual(resp.status_code, 422)

    def test_admin_delete_missing_post(self) -> None:
        resp = self.client.delete("/admin/posts/9999", headers=self.auth(self.admin))
        self.assertEqual(resp.status_code, 404)


class TestHealth(ApiTestCase):
    def test_health_reports_database_and_uploads(self) -> None:
        resp = self.client.get("/health/")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["database"], "connected")
        self.assertTrue(body["upload_dir_writable"])


if __name__ == "__main__":
    unittest.main()
