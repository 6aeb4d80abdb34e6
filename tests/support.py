"""Shared base class for API tests: fresh SQLite schema and client per test."""

import unittest
from collections.abc import Generator
from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import get_settings
from app.core.database import get_db
from app.main import app
from app.models import Base

ADMIN_EMAIL = "admin@x.com"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class ApiTestCase(unittest.TestCase):
    """TestClient wired to an isolated in-memory database and the configured upload directory."""

    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(self.engine)
        self.SessionTesting = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.upload_dir = Path(get_settings().UPLOAD_DIR)
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        self._clear_uploads()

        def override_get_db() -> Generator[Session, None, None]:
            db = self.SessionTesting()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self) -> None:
        self.client.close()
        app.dependency_overrides.clear()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()
        self._clear_uploads()

    def _clear_uploads(self) -> None:
        for path in self.upload_dir.iterdir():
            if path.is_file():
                path.unlink()

    def register(self, username: str, email: str, password: str = "p"):
        return self.client.post(
            "/register",
            json={"username": username, "email": email, "password": password},
        )

    def login(self, email: str, password: str = "p") -> str:
        """Log in and return the token. The cookie is dropped so each request picks its caller explicitly."""
        resp = self.client.post("/login", json={"email": email, "password": password})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.client.cookies.clear()
        return resp.json()["token"]

    def user_token(self, username: str, email: str) -> str:
        self.assertEqual(self.register(username, email).status_code, 201)
        return self.login(email)

    @staticmethod
    def auth(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    def create_post(
        self,
        token: str,
        title: str = "Hello",
        description: str = "First post",
        filename: str | None = None,
        content: bytes = PNG_BYTES,
    ):
        files = {"file": (filename, content, "image/png")} if filename else None
        return self.client.post(
            "/create",
            data={"title": title, "description": description},
            files=files,
            headers=self.auth(token),
        )

    def uploaded_names(self) -> list[str]:
        return sorted(p.name for p in self.upload_dir.iterdir() if p.is_file())
