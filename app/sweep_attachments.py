"""
CLI entrypoint for the attachment sweep. Run from cron, e.g.:

  python -m app.sweep_attachments [--dry-run]

Or nightly: 30 3 * * * cd /path/to/blog && .venv/bin/python -m app.sweep_attachments
"""

import argparse
import logging
import sys

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.services.attachment_sweep import sweep_orphaned_attachments
from app.services.attachments import AttachmentStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Delete attachment files that no post references."""
    parser = argparse.ArgumentParser(description="Remove unreferenced post attachments.")
    parser.add_argument("--dry-run", action="store_true", help="List files without deleting them")
    args = parser.parse_args(argv)

    settings = get_settings()
    store = AttachmentStore.from_settings(settings)
    db = SessionLocal()
    try:
        removed = sweep_orphaned_attachments(
            db,
            store,
            grace_minutes=settings.ATTACHMENT_SWEEP_GRACE_MINUTES,
            dry_run=args.dry_run,
        )
        for name in removed:
            logger.info("%s %s", "Would remove" if args.dry_run else "Removed", name)
        logger.info("Attachment sweep completed: files=%s", len(removed))
        return 0
    except Exception as e:
        logger.exception("Attachment sweep failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
