"""Attachment manager: persist uploaded post images under generated names and delete them best-effort."""

import logging
import os
import re
import secrets
import time
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

# Extensions are kept only when short and alphanumeric; anything else is dropped.
_SAFE_EXTENSION = re.compile(r"^\.[a-z0-9]{1,10}$")
_FIELD_NAME = re.compile(r"[^a-zA-Z0-9]+")


class AttachmentError(Exception):
    """Raised when an uploaded file cannot be persisted."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class AttachmentTooLargeError(AttachmentError):
    """Raised before anything is written when an upload exceeds the size limit."""


def safe_extension(filename: str | None) -> str:
    """Return the lowercased extension of filename if it is safe to reuse, else ''."""
    if not filename:
        return ""
    suffix = Path(filename.replace("\\", "/")).suffix.lower()
    return suffix if _SAFE_EXTENSION.match(suffix) else ""


def generate_name(original_filename: str | None, field: str = "file") -> str:
    """Build '<field>_<epoch ms>_<random hex><ext>'; opaque to callers."""
    prefix = _FIELD_NAME.sub("", field) or "file"
    stamp = int(time.time() * 1000)
    return f"{prefix}_{stamp}_{secrets.token_hex(4)}{safe_extension(original_filename)}"


class AttachmentStore:
    """
    Flat content directory of post attachments.

    store() enforces max_bytes before writing and never overwrites an existing
    file. delete() is advisory cleanup: errors are logged, never raised.
    """

    def __init__(self, directory: str | os.PathLike[str], max_bytes: int) -> None:
        self.directory = Path(directory)
        self.max_bytes = max_bytes

    @classmethod
    def from_settings(cls, settings: "Settings") -> "AttachmentStore":
        return cls(settings.UPLOAD_DIR, settings.MAX_UPLOAD_BYTES)

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def path_for(self, stored_name: str) -> Path | None:
        """Resolve a stored name to its path; None if the name is not a bare file name."""
        if not stored_name or stored_name in (".", ".."):
            return None
        if Path(stored_name).name != stored_name or "\\" in stored_name:
            return None
        return self.directory / stored_name

    def store(self, fileobj: BinaryIO, original_filename: str | None, field: str = "file") -> str:
        """
        Persist the uploaded bytes and return the generated stored name.

        Raises AttachmentTooLargeError if the upload exceeds max_bytes, or
        AttachmentError if the file cannot be written.
        """
        data = fileobj.read(self.max_bytes + 1)
        if len(data) > self.max_bytes:
            raise AttachmentTooLargeError(
                f"File size must not exceed {self.max_bytes // (1024 * 1024)} MB."
            )
        try:
            self.ensure_directory()
            # "x" mode: a name collision fails instead of clobbering another post's file.
            for _ in range(3):
                stored_name = generate_name(original_filename, field)
                try:
                    with open(self.directory / stored_name, "xb") as out:
                        out.write(data)
                except FileExistsError:
                    continue
                logger.debug("Stored attachment %s (%d bytes)", stored_name, len(data))
                return stored_name
        except OSError as e:
            raise AttachmentError("Could not store uploaded file.", cause=e) from e
        raise AttachmentError("Could not allocate a unique name for uploaded file.")

    def delete(self, stored_name: str | None) -> bool:
        """Remove a stored attachment. Returns True if a file was removed; failures are only logged."""
        if not stored_name:
            return False
        path = self.path_for(stored_name)
        if path is None:
            logger.warning("Refusing to delete attachment with unsafe name %r", stored_name)
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning("Attachment %s already missing; nothing to delete", stored_name)
            return False
        except OSError as e:
            logger.warning("Failed to delete attachment %s: %s", stored_name, e)
            return False
        return True

    def list_names(self) -> list[str]:
        """Names of regular files currently in the content directory; dotfiles (.gitkeep etc.) are not attachments."""
        if not self.directory.is_dir():
            return []
        return sorted(
            p.name for p in self.directory.iterdir() if p.is_file() and not p.name.startswith(".")
        )
