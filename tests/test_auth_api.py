"""API tests for registration, login, session check, logout and the access guard."""

import unittest
from types import SimpleNamespace

import jwt

from app.core.config import get_settings
from app.core.security import create_access_token, decode_access_token
from support import ADMIN_EMAIL, ApiTestCase


class TestRegister(ApiTestCase):
    """Role is 'admin' only for the configured admin email."""

    def test_regular_email_gets_user_role(self) -> None:
        resp = self.register("a", "a@x.com")
        self.assertEqual(resp.status_code, 201)
        body = resp.json()
        self.assertEqual(body["role"], "user")
        self.assertEqual(body["email"], "a@x.com")
        self.assertNotIn("password", body)
        self.assertNotIn("password_hash", body)

    def test_admin_email_gets_admin_role(self) -> None:
        resp = self.register("boss", ADMIN_EMAIL)
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["role"], "admin")

    def test_duplicate_email_is_conflict(self) -> None:
        self.assertEqual(self.register("a", "a@x.com").status_code, 201)
        resp = self.register("other", "a@x.com")
        self.assertEqual(resp.status_code, 409)

    def test_invalid_email_rejected(self) -> None:
        resp = self.register("a", "not-an-email")
        self.assertEqual(resp.status_code, 422)

    def test_blank_username_rejected(self) -> None:
        resp = self.register("   ", "a@x.com")
        self.assertEqual(resp.status_code, 422)


class TestLogin(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.register("a", "a@x.com")

    def test_token_claims_match_stored_user(self) -> None:
        resp = self.client.post("/login", json={"email": "a@x.com", "password": "p"})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["status"], "Success")
        self.assertEqual(body["user"], {"email": "a@x.com", "username": "a", "role": "user"})
        claims = decode_access_token(body["token"])
        self.assertEqual(claims["email"], "a@x.com")
        self.assertEqual(claims["username"], "a")
        self.assertEqual(claims["role"], "user")
        self.assertEqual(claims["exp"] - claims["iat"], get_settings().JWT_EXPIRE_MINUTES * 60)

    def test_login_sets_httponly_cookie(self) -> None:
        resp = self.client.post("/login", json={"email": "a@x.com", "password": "p"})
        set_cookie = resp.headers.get("set-cookie", "")
        self.assertIn(f"{get_settings().AUTH_COOKIE_NAME}=", set_cookie)
        self.assertIn("HttpOnly", set_cookie)

    def test_mixed_case_domain_logs_in_as_registered(self) -> None:
        resp = self.register("bob", "Bob@Example.COM")
        self.assertEqual(resp.status_code, 201, resp.text)
        for email in ("Bob@Example.COM", "Bob@example.com", " Bob@EXAMPLE.com "):
            resp = self.client.post("/login", json={"email": email, "password": "p"})
            self.assertEqual(resp.status_code, 200, email)
            self.assertEqual(resp.json()["user"]["email"], "Bob@example.com")

    def test_wrong_password_and_unknown_email_look_the_same(self) -> None:
        wrong = self.client.post("/login", json={"email": "a@x.com", "password": "nope"})
        unknown = self.client.post("/login", json={"email": "b@x.com", "password": "p"})
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.json(), unknown.json())


class TestCheckAuth(ApiTestCase):
    def test_register_login_check_auth_example(self) -> None:
        self.register("a", "a@x.com")
        token = self.login("a@x.com")
        resp = self.client.get("/check-auth", headers=self.auth(token))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"email": "a@x.com", "username": "a", "role": "user"})

    def test_cookie_session_and_logout(self) -> None:
        self.register("a", "a@x.com")
        self.client.post("/login", json={"email": "a@x.com", "password": "p"})
        self.assertEqual(self.client.get("/check-auth").status_code, 200)

        resp = self.client.get("/logout")
        self.assertEqual(resp.status_code, 200)
        self.client.cookies.clear()
        self.assertEqual(self.client.get("/check-auth").status_code, 401)

    def test_missing_token_is_unauthenticated(self) -> None:
        resp = self.client.get("/check-auth")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["detail"], "Not authenticated")
        self.assertEqual(resp.headers.get("www-authenticate"), "Bearer")

    def test_garbage_token_is_invalid(self) -> None:
        resp = self.client.get("/check-auth", headers=self.auth("not.a.jwt"))
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["detail"], "Invalid or expired token")

    def test_expired_token_is_invalid(self) -> None:
        user = SimpleNamespace(id=1, email="a@x.com", username="a", role="user")
        token = create_access_token(user, expires_minutes=-5)
        resp = self.client.get("/check-auth", headers=self.auth(token))
        self.assertEqual(resp.status_code, 401)

    def test_token_signed_with_other_secret_is_invalid(self) -> None:
        token = jwt.encode(
            {"sub": "1", "email": "a@x.com", "username": "a", "role": "admin"},
            "some-other-secret",
            algorithm="HS256",
        )
        resp = self.client.get("/admin/stats", headers=self.auth(token))
        self.assertEqual(resp.status_code, 401)

    def test_token_for_deleted_user_is_not_found(self) -> None:
        user = SimpleNamespace(id=999, email="ghost@x.com", username="ghost", role="user")
        resp = self.client.get("/check-auth", headers=self.auth(create_access_token(user)))
        self.assertEqual(resp.status_code, 404)


if __name__ == "__main__":
    unittest.main()
