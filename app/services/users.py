"""User account writes shared by registration and the admin dashboard."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.security import hash_password, normalize_email, role_for_email
from app.models import Post, User

logger = logging.getLogger(__name__)


class EmailAlreadyExistsError(Exception):
    """Raised when an email is already registered to another user."""


class UserNotFoundError(Exception):
    """Raised when no user matches the requested id."""


def register_user(
    db: Session,
    username: str,
    email: str,
    password: str,
    admin_email: str | None,
) -> User:
    """Create a user; role is 'admin' iff email matches admin_email."""
    email = normalize_email(email)
    if db.query(User).filter(User.email == email).first() is not None:
        raise EmailAlreadyExistsError(email)
    user = User(
        username=username.strip(),
        email=email,
        password_hash=hash_password(password),
        role=role_for_email(email, admin_email),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent registration for the same email.
        db.rollback()
        raise EmailAlreadyExistsError(email) from e
    db.refresh(user)
    logger.info("Registered user id=%s role=%s", user.id, user.role)
    return user


def update_user(
    db: Session,
    user_id: int,
    username: str | None = None,
    email: str | None = None,
    role: str | None = None,
) -> User:
    """
    Apply the provided fields to a user and persist.

    An email change is copied onto the user's posts (posts.email is the
    denormalized owner email). Existing tokens keep their old claims until
    they expire.
    """
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(f"User {user_id} not found.")
    if email is not None:
        email = normalize_email(email)
    if email is not None and email != user.email:
        taken = db.query(User).filter(User.email == email, User.id != user_id).first()
        if taken is not None:
            raise EmailAlreadyExistsError(email)
        user.email = email
        db.query(Post).filter(Post.owner_id == user_id).update(
            {Post.email: email}, synchronize_session=False
        )
    if username is not None:
        user.username = username.strip()
    if role is not None:
        user.role = role
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise EmailAlreadyExistsError(email or "") from e
    db.refresh(user)
    logger.info("Updated user id=%s (username=%s, role=%s)", user.id, user.username, user.role)
    return user
