"""Storage for uploaded profile images."""
from __future__ import annotations

import logging
import uuid
from pathlib import Path, PurePosixPath

from fastapi import UploadFile

from chatline.core.exceptions import StorageError, ValidationError

__all__ = ["ImageStorage", "PUBLIC_PREFIX"]

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/uploads"


class ImageStorage:
    """Saves uploads under a directory and removes them by reference."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def path_for(self, image_ref: str) -> Path:
        """Map an image reference (URL or path) to its file under the root."""
        return self.root / PurePosixPath(image_ref).name

    async def save(self, upload: UploadFile) -> str:
        """Store an uploaded file and return its public path."""
        if not upload.filename:
            raise ValidationError("No image uploaded")
        suffix = PurePosixPath(upload.filename).suffix.lower()
        name = f"{uuid.uuid4().hex}{suffix}"
        data = await upload.read()
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            (self.root / name).write_bytes(data)
        except OSError as err:
            logger.error("Failed to store image %s: %s", name, err)
            raise StorageError("Error saving image", details=str(err)) from err
        return f"{PUBLIC_PREFIX}/{name}"

    def delete(self, image_ref: str | None) -> bool:
        """Remove the stored file behind ``image_ref`` if there is one.

        Best effort: failures are logged and reported as False.
        """
        if not image_ref:
            return False
        path = self.path_for(image_ref)
        if not path.is_file():
            return False
        try:
            path.unlink()
        except OSError as err:
            logger.warning("Could not delete image %s: %s", path, err)
            return False
        return True
