"""Bookmarks: save, unsave and list posts for the current user."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.database import get_db
from app.models import Post, SavedPost
from app.schemas.auth import CurrentUser, MessageResponse
from app.schemas.posts import PostResponse, SavedPostResponse

router = APIRouter()


@router.get("", response_model=list[SavedPostResponse])
def list_saved(
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> list[SavedPostResponse]:
    """Posts the caller has saved, most recently saved first."""
    rows = (
        db.query(SavedPost, Post)
        .join(Post, Post.id == SavedPost.post_id)
        .filter(SavedPost.user_id == user.id)
        .order_by(SavedPost.created_at.desc(), SavedPost.id.desc())
        .all()
    )
    return [
        SavedPostResponse(
            post_id=post.id,
            saved_at=saved.created_at,
            post=PostResponse.model_validate(post),
        )
        for saved, post in rows
    ]


@router.post("/{post_id}", response_model=MessageResponse, status_code=201)
def save_post(
    post_id: int,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageResponse:
    if db.get(Post, post_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    existing = (
        db.query(SavedPost)
        .filter(SavedPost.user_id == user.id, SavedPost.post_id == post_id)
        .first()
    )
    if existing is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Post already saved.")
    db.add(SavedPost(user_id=user.id, post_id=post_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Post already saved.")
    return MessageResponse(message="Post saved")


@router.delete("/{post_id}", response_model=MessageResponse)
def unsave_post(
    post_id: int,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageResponse:
    deleted = (
        db.query(SavedPost)
        .filter(SavedPost.user_id == user.id, SavedPost.post_id == post_id)
        .delete(synchronize_session=False)
    )
    if not deleted:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post is not saved")
    db.commit()
    return MessageResponse(message="Post removed from saved")
