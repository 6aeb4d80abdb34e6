"""Registration, login/logout, session check, and the auth dependencies (get_current_user, require_admin)."""

from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import get_db
from app.core.security import (
    ROLE_ADMIN,
    create_access_token,
    decode_access_token,
    normalize_email,
    verify_password,
)
from app.models.user import User
from app.schemas.auth import (
    CurrentUser,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    SessionUser,
    UserListItem,
)
from app.services.users import EmailAlreadyExistsError, register_user

router = APIRouter()
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post("/register", response_model=UserListItem, status_code=201)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> UserListItem:
    """
    Create an account. The account is an admin iff its email equals the
    configured ADMIN_EMAIL; every other registration gets role 'user'.
    """
    if not body.username.strip():
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Username must be non-empty.",
        )
    try:
        user = register_user(
            db,
            username=body.username,
            email=str(body.email),
            password=body.password,
            admin_email=get_settings().ADMIN_EMAIL,
        )
    except EmailAlreadyExistsError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered.",
        )
    return UserListItem.model_validate(user)


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> LoginResponse:
    """
    Authenticate with email and password; returns a JWT access token and sets it as an
    httponly cookie. Send it back either as the cookie or as: Authorization: Bearer <token>
    """
    user = db.query(User).filter(User.email == normalize_email(body.email)).first()
    # Same answer for unknown email and wrong password.
    if user is None or not verify_password(body.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
        )
    settings = get_settings()
    token = create_access_token(user)
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        max_age=settings.JWT_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
        secure=settings.AUTH_COOKIE_SECURE,
    )
    return LoginResponse(token=token, user=SessionUser.model_validate(user))


@router.get("/logout", response_model=MessageResponse)
def logout(response: Response) -> MessageResponse:
    """Clear the session cookie. Tokens are stateless, so a copied token stays valid until it expires."""
    response.delete_cookie(get_settings().AUTH_COOKIE_NAME)
    return MessageResponse(message="Logged out")


def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> CurrentUser:
    """
    Dependency: require a valid session token (cookie first, then Bearer header) and return its claims.
    Raises 401 if missing or invalid. Claims are trusted as issued; no database lookup is made.
    """
    token = request.cookies.get(get_settings().AUTH_COOKIE_NAME)
    if not token and credentials is not None:
        token = credentials.credentials
    if not token:
        raise _unauthorized("Not authenticated")
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")
    try:
        return CurrentUser(
            id=int(payload.get("sub")),
            email=payload.get("email"),
            username=payload.get("username"),
            role=payload.get("role"),
        )
    except (TypeError, ValueError, ValidationError):
        raise _unauthorized("Invalid token payload")


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    if current_user.role != ROLE_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


@router.get("/check-auth", response_model=SessionUser)
def check_auth(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> SessionUser:
    """Return the stored email, username and role of the token's user."""
    user = db.get(User, current_user.id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return SessionUser.model_validate(user)
