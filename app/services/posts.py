"""Post lifecycle: create, edit, delete (owner and admin), read, search and like.

Attachment writes are paired with compensating deletes: a file stored for a
record that then fails to persist is removed again, and a replaced or deleted
post's previous file is removed only after the database commit succeeds.
"""

import logging
from typing import TYPE_CHECKING

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import Post, SavedPost
from app.services.attachments import AttachmentStore

if TYPE_CHECKING:
    from fastapi import UploadFile

    from app.schemas.auth import CurrentUser

logger = logging.getLogger(__name__)

ATTACHMENT_FIELD = "file"


class PostNotFoundError(Exception):
    """Raised when no post matches the requested id (or, for owner deletes, id and owner)."""


class PostPermissionError(Exception):
    """Raised when the caller is authenticated but does not own the post."""


class PostValidationError(Exception):
    """Raised when title or description is blank."""


class PostStoreError(Exception):
    """Raised when the database rejects a post write; the session has been rolled back."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


def _require_text(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise PostValidationError(f"{field} must be non-empty.")
    return value.strip()


def _has_upload(upload: "UploadFile | None") -> bool:
    return upload is not None and bool(getattr(upload, "filename", None))


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def get_post(db: Session, post_id: int) -> Post:
    post = db.get(Post, post_id)
    if post is None:
        raise PostNotFoundError(f"Post {post_id} not found.")
    return post


def list_posts(
    db: Session,
    search: str | None = None,
    sort: str | None = None,
    owner_id: int | None = None,
) -> list[Post]:
    """
    Return all matching posts (no pagination).

    search matches title OR description, case-insensitive substring.
    sort='latest' orders newest first; otherwise insertion (id) order.
    """
    query = db.query(Post)
    if owner_id is not None:
        query = query.filter(Post.owner_id == owner_id)
    if search and search.strip():
        pattern = f"%{_escape_like(search.strip())}%"
        query = query.filter(
            or_(
                Post.title.ilike(pattern, escape="\\"),
                Post.description.ilike(pattern, escape="\\"),
            )
        )
    if sort == "latest":
        query = query.order_by(Post.created_at.desc(), Post.id.desc())
    else:
        query = query.order_by(Post.id)
    return query.all()


def create_post(
    db: Session,
    store: AttachmentStore,
    owner: "CurrentUser",
    title: str | None,
    description: str | None,
    upload: "UploadFile | None" = None,
) -> Post:
    """
    Persist a new post owned by the caller, storing the attachment first.

    If the record cannot be committed, the just-stored attachment is deleted
    and PostStoreError is raised.
    """
    title = _require_text(title, "Title")
    description = _require_text(description, "Description")

    stored_name = None
    if _has_upload(upload):
        stored_name = store.store(upload.file, upload.filename, field=ATTACHMENT_FIELD)

    post = Post(
        title=title,
        description=description,
        file=stored_name,
        owner_id=owner.id,
        email=owner.email,
        likes=0,
    )
    try:
        db.add(post)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to create post for user_id=%s", owner.id)
        if stored_name:
            logger.warning("Removing attachment %s of unsaved post", stored_name)
            store.delete(stored_name)
        raise PostStoreError("Could not save post.", cause=e) from e
    db.refresh(post)
    logger.info("Created post id=%s owner_id=%s file=%s", post.id, owner.id, stored_name)
    return post


def edit_post(
    db: Session,
    store: AttachmentStore,
    post_id: int,
    caller: "CurrentUser",
    title: str | None = None,
    description: str | None = None,
    upload: "UploadFile | None" = None,
) -> Post:
    """
    Update an owned post. Admins get no bypass here.

    Omitted title/description are left unchanged. A replacement upload is
    stored first; the previous file is deleted only once the update commits.
    """
    post = get_post(db, post_id)
    if post.owner_id != caller.id:
        raise PostPermissionError("Not authorized to edit this post.")

    new_title = _require_text(title, "Title") if title is not None else None
    new_description = (
        _require_text(description, "Description") if description is not None else None
    )

    previous_file = post.file
    stored_name = None
    if _has_upload(upload):
        stored_name = store.store(upload.file, upload.filename, field=ATTACHMENT_FIELD)
        post.file = stored_name
    if new_title is not None:
        post.title = new_title
    if new_description is not None:
        post.description = new_description

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to update post id=%s", post_id)
        if stored_name:
            store.delete(stored_name)
        raise PostStoreError("Could not update post.", cause=e) from e

    if stored_name and previous_file and previous_file != stored_name:
        store.delete(previous_file)
    db.refresh(post)
    return post


def _delete_record(db: Session, store: AttachmentStore, post: Post) -> None:
    stored_name = post.file
    post_id = post.id
    try:
        db.query(SavedPost).filter(SavedPost.post_id == post_id).delete(
            synchronize_session=False
        )
        db.delete(post)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to delete post id=%s", post_id)
        raise PostStoreError("Could not delete post.", cause=e) from e
    if stored_name:
        store.delete(stored_name)


def delete_own_post(db: Session, store: AttachmentStore, post_id: int, caller: "CurrentUser") -> None:
    """
    Owner-scoped delete. A missing post and a post owned by someone else are
    indistinguishable to the caller (both raise PostPermissionError).
    """
    post = (
        db.query(Post)
        .filter(Post.id == post_id, Post.owner_id == caller.id)
        .first()
    )
    if post is None:
        raise PostPermissionError("Not authorized or post not found.")
    _delete_record(db, store, post)


def delete_post_as_admin(db: Session, store: AttachmentStore, post_id: int, admin: "CurrentUser") -> None:
    """Delete any post regardless of owner. Caller must already be verified as admin."""
    post = get_post(db, post_id)
    owner_id = post.owner_id
    _delete_record(db, store, post)
    logger.info("Admin user_id=%s deleted post id=%s (owner_id=%s)", admin.id, post_id, owner_id)


def like_post(db: Session, post_id: int) -> int:
    """Increment the like counter by one (no per-user dedup) and return the new count."""
    updated = (
        db.query(Post)
        .filter(Post.id == post_id)
        .update({Post.likes: Post.likes + 1}, synchronize_session=False)
    )
    if not updated:
        db.rollback()
        raise PostNotFoundError(f"Post {post_id} not found.")
    db.commit()
    return get_post(db, post_id).likes
