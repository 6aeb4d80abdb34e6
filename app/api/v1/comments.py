"""Comment endpoints: public listing per post, authenticated posting."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.database import get_db
from app.models import Comment, Post
from app.schemas.auth import CurrentUser
from app.schemas.comments import CommentCreateRequest, CommentResponse

router = APIRouter()


@router.get("/{post_id}", response_model=list[CommentResponse])
def list_comments(
    post_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> list[CommentResponse]:
    """All comments on a post, newest first. Comments of a deleted post are still returned."""
    comments = (
        db.query(Comment)
        .filter(Comment.post_id == post_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .all()
    )
    return [CommentResponse.model_validate(c) for c in comments]


@router.post("", response_model=CommentResponse, status_code=201)
def add_comment(
    body: CommentCreateRequest,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CommentResponse:
    """
    Comment on a post as the caller. The author name is copied from the session
    token, so later username changes do not rewrite existing comments.
    """
    if db.get(Post, body.postId) is None:
        raise HTTPException(status_code=404, detail="Post not found")
    comment = Comment(post_id=body.postId, author=user.username, text=body.text)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return CommentResponse.model_validate(comment)
