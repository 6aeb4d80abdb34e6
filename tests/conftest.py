"""Test environment: in-memory SQLite, temporary upload directory, fast bcrypt. Runs before app import."""

import os
import tempfile

os.environ["APP_ENV"] = "dev"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["ADMIN_EMAIL"] = "admin@x.com"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="blog-test-uploads-")
os.environ["AUTH_COOKIE_SECURE"] = "false"

import app.core.security as security  # noqa: E402

security.BCRYPT_ROUNDS = 4
