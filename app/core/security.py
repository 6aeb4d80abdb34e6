"""Password hashing and JWT creation/verification for authentication."""

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt
from email_validator import EmailNotValidError, validate_email

from app.core.config import settings

if TYPE_CHECKING:
    from app.models.user import User

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 1
PASSWORD_MAX_LEN = 128

ROLE_USER = "user"
ROLE_ADMIN = "admin"


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def normalize_email(email: str) -> str:
    """
    Canonical stored form of an email (domain lowercased, as EmailStr does).
    Input that does not validate is returned stripped so lookups simply miss.
    """
    raw = email.strip()
    try:
        return validate_email(raw, check_deliverability=False).normalized
    except EmailNotValidError:
        return raw


def role_for_email(email: str, admin_email: str | None) -> str:
    """Registration role: 'admin' iff email matches the configured admin email."""
    if admin_email and email.strip().lower() == admin_email.strip().lower():
        return ROLE_ADMIN
    return ROLE_USER


def create_access_token(user: "User", expires_minutes: int | None = None) -> str:
    """Create a JWT carrying the user's identity and role claims (sub, email, username, role, exp)."""
    now = datetime.now(UTC)
    minutes = expires_minutes if expires_minutes is not None else settings.JWT_EXPIRE_MINUTES
    payload: dict[str, Any] = {
        "sub": str(user.id),
        "email": user.email,
        "username": user.username,
        "role": user.role,
        "exp": now + timedelta(minutes=minutes),
        "iat": now,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, email, username, role, exp, iat).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.JWT_ALGORITHM],
    )
