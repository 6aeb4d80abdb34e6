"""Health check endpoint with database and attachment directory checks."""

import os

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.posts import get_attachment_store
from app.core.config import settings
from app.core.database import check_db_connected, get_db
from app.schemas.health import HealthResponse
from app.services.attachments import AttachmentStore

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(
    db: Session = Depends(get_db),
    store: AttachmentStore = Depends(get_attachment_store),
) -> HealthResponse:
    """
    Return service health status, database connectivity and whether uploads can be stored.
    Used by load balancers and monitoring.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"
    writable = store.directory.is_dir() and os.access(store.directory, os.W_OK)

    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database=db_status,
        upload_dir_writable=writable,
    )
