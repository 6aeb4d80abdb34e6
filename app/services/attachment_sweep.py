"""Attachment sweep: delete stored files that no post references."""

import logging
import time

from sqlalchemy.orm import Session

from app.models import Post
from app.services.attachments import AttachmentStore

logger = logging.getLogger(__name__)


def sweep_orphaned_attachments(
    session: Session,
    store: AttachmentStore,
    grace_minutes: int,
    dry_run: bool = False,
) -> list[str]:
    """
    Delete files in the content directory that no post references.

    Files modified within grace_minutes are kept: they may belong to an upload
    whose post has not been committed yet. Returns the names removed (or, with
    dry_run, the names that would be removed). Safe to run repeatedly.
    """
    referenced = {
        name for (name,) in session.query(Post.file).filter(Post.file.isnot(None)).all()
    }
    cutoff = time.time() - grace_minutes * 60
    removed: list[str] = []
    for name in store.list_names():
        if name in referenced:
            continue
        path = store.path_for(name)
        if path is None:
            continue
        try:
            if path.stat().st_mtime > cutoff:
                continue
        except FileNotFoundError:
            continue
        if dry_run or store.delete(name):
            removed.append(name)

    if removed:
        logger.info(
            "Attachment sweep: %s %d unreferenced file(s)",
            "would remove" if dry_run else "removed",
            len(removed),
        )
    return removed
