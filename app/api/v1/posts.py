"""Post endpoints: create/edit/delete with attachments, public read and search, likes."""

import logging
from typing import Annotated, NoReturn

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.config import get_settings
from app.core.database import get_db
from app.schemas.auth import CurrentUser, MessageResponse
from app.schemas.posts import LikeResponse, PostResponse
from app.services.attachments import AttachmentError, AttachmentStore, AttachmentTooLargeError
from app.services.posts import (
    PostNotFoundError,
    PostPermissionError,
    PostStoreError,
    PostValidationError,
    create_post,
    delete_own_post,
    edit_post,
    get_post,
    like_post,
    list_posts,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def get_attachment_store() -> AttachmentStore:
    """Dependency: attachment store rooted at UPLOAD_DIR."""
    return AttachmentStore.from_settings(get_settings())


def raise_for_post_error(e: Exception) -> NoReturn:
    """Translate post lifecycle / attachment errors into HTTP errors."""
    if isinstance(e, PostNotFoundError):
        raise HTTPException(status_code=404, detail="Post not found") from e
    if isinstance(e, PostPermissionError):
        raise HTTPException(status_code=403, detail=str(e)) from e
    if isinstance(e, (PostValidationError, AttachmentTooLargeError)):
        raise HTTPException(status_code=422, detail=str(e)) from e
    if isinstance(e, AttachmentError):
        logger.error("Attachment write failed: %s (%s)", e.message, e.cause)
        raise HTTPException(status_code=500, detail=e.message) from e
    if isinstance(e, PostStoreError):
        raise HTTPException(status_code=500, detail=e.message) from e
    raise e


_POST_ERRORS = (
    PostNotFoundError,
    PostPermissionError,
    PostValidationError,
    PostStoreError,
    AttachmentError,
)


@router.post("/create", response_model=PostResponse, status_code=201)
def create(
    db: Annotated[Session, Depends(get_db)],
    store: Annotated[AttachmentStore, Depends(get_attachment_store)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
    title: Annotated[str, Form(max_length=255)],
    description: Annotated[str, Form()],
    file: Annotated[UploadFile | None, File()] = None,
) -> PostResponse:
    """
    Create a post owned by the caller (multipart form: title, description, optional file).

    The file is stored first; if the post cannot be saved the file is removed again.
    """
    try:
        post = create_post(db, store, user, title, description, upload=file)
    except _POST_ERRORS as e:
        raise_for_post_error(e)
    return PostResponse.model_validate(post)


@router.get("/getposts", response_model=list[PostResponse])
def get_posts(
    db: Annotated[Session, Depends(get_db)],
    search: Annotated[str | None, Query(max_length=255)] = None,
    sort: Annotated[str | None, Query(max_length=32)] = None,
) -> list[PostResponse]:
    """
    List all posts. search: case-insensitive match on title or description.
    sort=latest: newest first; any other value keeps insertion order. No pagination.
    """
    return [PostResponse.model_validate(p) for p in list_posts(db, search=search, sort=sort)]


@router.get("/myposts", response_model=list[PostResponse])
def get_my_posts(
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> list[PostResponse]:
    """The caller's own posts, newest first."""
    posts = list_posts(db, sort="latest", owner_id=user.id)
    return [PostResponse.model_validate(p) for p in posts]


@router.get("/getpostbyid/{post_id}", response_model=PostResponse)
def get_post_by_id(
    post_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> PostResponse:
    try:
        post = get_post(db, post_id)
    except PostNotFoundError as e:
        raise_for_post_error(e)
    return PostResponse.model_validate(post)


@router.put("/editpost/{post_id}", response_model=PostResponse)
async def edit(
    post_id: int,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    store: Annotated[AttachmentStore, Depends(get_attachment_store)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
    title: Annotated[str | None, Form(max_length=255)] = None,
    description: Annotated[str | None, Form()] = None,
    file: Annotated[UploadFile | None, File()] = None,
) -> PostResponse:
    """
    Edit an owned post. Only the owner may edit (admins included).
    A new file replaces the attachment; the previous file is then deleted.
    An omitted title/description is kept; one sent empty is rejected with 422.
    """
    # Form() maps an empty field to None, same as an absent one.
    form = await request.form()
    if title is None and "title" in form:
        title = ""
    if description is None and "description" in form:
        description = ""
    try:
        post = edit_post(
            db,
            store,
            post_id,
            user,
            title=title,
            description=description,
            upload=file,
        )
    except _POST_ERRORS as e:
        raise_for_post_error(e)
    return PostResponse.model_validate(post)


@router.delete("/deletepost/{post_id}", response_model=MessageResponse)
def delete(
    post_id: int,
    db: Annotated[Session, Depends(get_db)],
    store: Annotated[AttachmentStore, Depends(get_attachment_store)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageResponse:
    """Delete an owned post and its attachment. Missing and not-owned posts both answer 403."""
    try:
        delete_own_post(db, store, post_id, user)
    except _POST_ERRORS as e:
        raise_for_post_error(e)
    return MessageResponse(message="Post deleted successfully")


@router.post("/like/{post_id}", response_model=LikeResponse)
def like(
    post_id: int,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> LikeResponse:
    """Add one like. Repeated calls by the same user each count."""
    try:
        likes = like_post(db, post_id)
    except PostNotFoundError as e:
        raise_for_post_error(e)
    return LikeResponse(id=post_id, likes=likes)
