"""Tests for the unreferenced-attachment sweep."""

import os
import tempfile
import time
import unittest
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.models import Base, Post, User
from app.services.attachment_sweep import sweep_orphaned_attachments
from app.services.attachments import AttachmentStore


class TestSweepOrphanedAttachments(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.store = AttachmentStore(self.root, max_bytes=1024)
        self.engine = create_engine("sqlite://", poolclass=StaticPool)
        Base.metadata.create_all(self.engine)
        self.db = sessionmaker(bind=self.engine)()
        user = User(username="a", email="a@x.com", password_hash="x", role="user")
        self.db.add(user)
        self.db.flush()
        self.db.add(Post(title="T", description="D", owner_id=user.id, email=user.email, file="kept.png"))
        self.db.commit()

        hour_ago = time.time() - 3600
        for name in ("kept.png", "orphan.png", ".gitkeep"):
            path = self.root / name
            path.write_bytes(b"x")
            os.utime(path, (hour_ago, hour_ago))
        (self.root / "fresh.png").write_bytes(b"x")

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()
        self._tmp.cleanup()

    def test_removes_only_old_unreferenced_files(self) -> None:
        removed = sweep_orphaned_attachments(self.db, self.store, grace_minutes=30)
        self.assertEqual(removed, ["orphan.png"])
        self.assertEqual(self.store.list_names(), ["fresh.png", "kept.png"])

    def test_dotfiles_are_never_swept(self) -> None:
        removed = sweep_orphaned_attachments(self.db, self.store, grace_minutes=0)
        self.assertNotIn(".gitkeep", removed)
        self.assertTrue((self.root / ".gitkeep").exists())

    def test_dry_run_deletes_nothing(self) -> None:
        removed = sweep_orphaned_attachments(self.db, self.store, grace_minutes=30, dry_run=True)
        self.assertEqual(removed, ["orphan.png"])
        self.assertEqual(self.store.list_names(), ["fresh.png", "kept.png", "orphan.png"])

    def test_missing_directory_is_noop(self) -> None:
        store = AttachmentStore(self.root / "absent", max_bytes=1024)
        self.assertEqual(sweep_orphaned_attachments(self.db, store, grace_minutes=0), [])


if __name__ == "__main__":
    unittest.main()
