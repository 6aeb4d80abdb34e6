"""Admin dashboard: counts, full listings, user edits and ownership-free post deletion."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.v1.auth import require_admin
from app.api.v1.posts import get_attachment_store, raise_for_post_error
from app.core.database import get_db
from app.models import Contact, Post, Subscriber, User
from app.schemas.admin import AdminStatsResponse
from app.schemas.auth import CurrentUser, MessageResponse, UserListItem, UserUpdateRequest
from app.schemas.posts import PostResponse
from app.schemas.subscribers import ContactResponse, SubscriberResponse
from app.services.attachments import AttachmentStore
from app.services.posts import PostNotFoundError, PostStoreError, delete_post_as_admin
from app.services.users import EmailAlreadyExistsError, UserNotFoundError, update_user

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/stats", response_model=AdminStatsResponse)
def get_stats(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> AdminStatsResponse:
    return AdminStatsResponse(
        users=db.query(User).count(),
        posts=db.query(Post).count(),
        contacts=db.query(Contact).count(),
        subscribers=db.query(Subscriber).count(),
    )


@router.get("/users", response_model=list[UserListItem])
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> list[UserListItem]:
    """List all users without password hashes."""
    users = db.query(User).order_by(User.id).all()
    return [UserListItem.model_validate(u) for u in users]


@router.put("/users/{user_id}", response_model=UserListItem)
def edit_user(
    user_id: int,
    body: UserUpdateRequest,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserListItem:
    """
    Update username, email and/or role. Tokens already issued keep their old
    claims (including role) until they expire.
    """
    try:
        user = update_user(
            db,
            user_id,
            username=body.username,
            email=str(body.email) if body.email is not None else None,
            role=body.role,
        )
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    except EmailAlreadyExistsError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered.",
        )
    logger.info("Admin user_id=%s edited user id=%s", admin.id, user_id)
    return UserListItem.model_validate(user)


@router.get("/posts", response_model=list[PostResponse])
def list_all_posts(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> list[PostResponse]:
    posts = db.query(Post).order_by(Post.id).all()
    return [PostResponse.model_validate(p) for p in posts]


@router.delete("/posts/{post_id}", response_model=MessageResponse)
def delete_any_post(
    post_id: int,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    store: Annotated[AttachmentStore, Depends(get_attachment_store)],
) -> MessageResponse:
    """Delete any post and its attachment, whoever owns it."""
    try:
        delete_post_as_admin(db, store, post_id, admin)
    except (PostNotFoundError, PostStoreError) as e:
        raise_for_post_error(e)
    return MessageResponse(message="Post deleted successfully")


@router.get("/subscribers", response_model=list[SubscriberResponse])
def list_subscribers(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> list[SubscriberResponse]:
    subscribers = (
        db.query(Subscriber)
        .order_by(Subscriber.created_at.desc(), Subscriber.id.desc())
        .all()
    )
    return [SubscriberResponse.model_validate(s) for s in subscribers]


@router.get("/contacts", response_model=list[ContactResponse])
def list_contacts(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> list[ContactResponse]:
    """Contact form messages, newest first."""
    contacts = db.query(Contact).order_by(Contact.created_at.desc(), Contact.id.desc()).all()
    return [ContactResponse.model_validate(c) for c in contacts]
