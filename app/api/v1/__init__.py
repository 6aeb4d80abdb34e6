"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import admin, auth, comments, health, posts, saved, subscribers

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, tags=["auth"])
router.include_router(posts.router, tags=["posts"])
router.include_router(comments.router, prefix="/comments", tags=["comments"])
router.include_router(saved.router, prefix="/saved", tags=["saved"])
router.include_router(subscribers.router, tags=["subscribers"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
