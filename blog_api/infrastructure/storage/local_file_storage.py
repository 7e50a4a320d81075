"""Local filesystem storage for article cover pictures.

Storage layout:
    <pictures_dir>/<slugified_stem>-<token>.<ext>
"""

import logging
import mimetypes
import uuid
from pathlib import Path

from blog_api.application.interfaces import PictureStorage
from blog_api.domain.exceptions import StorageError
from blog_api.domain.slug import slugify

logger = logging.getLogger(__name__)


def _unique_token() -> str:
    """Return a 13-character hex token for collision-free filenames."""
    return uuid.uuid4().hex[:13]


def _detect_extension(filename: str, content_type: str | None) -> str:
    """Pick the file extension (without dot) from the declared MIME type.

    Falls back to the client's suffix, then to ``bin``.
    """
    if content_type:
        guessed = mimetypes.guess_extension(content_type.split(";")[0].strip())
        if guessed:
            return guessed.lstrip(".")
    suffix = Path(filename).suffix.lstrip(".").lower()
    return slugify(suffix) or "bin"


def build_picture_filename(original_filename: str, content_type: str | None = None) -> str:
    """Safe, unique name: ``<slugified stem>-<token>.<ext>``."""
    stem = slugify(Path(original_filename).stem) or "picture"
    return f"{stem}-{_unique_token()}.{_detect_extension(original_filename, content_type)}"


class LocalFileStorage(PictureStorage):
    """Infrastructure adapter storing cover pictures in a local directory."""

    def __init__(self, pictures_dir: str, max_bytes: int | None = None):
        self._pictures_dir = Path(pictures_dir)
        self._pictures_dir.mkdir(parents=True, exist_ok=True)
        self._max_bytes = max_bytes

    async def store(
        self, content: bytes, original_filename: str, content_type: str | None = None
    ) -> str:
        if self._max_bytes is not None and len(content) > self._max_bytes:
            raise StorageError(
                f"Error uploading file: {original_filename} exceeds {self._max_bytes} bytes"
            )

        filename = build_picture_filename(original_filename, content_type)
        dest_path = self._pictures_dir / filename
        try:
            dest_path.write_bytes(content)
        except OSError as exc:
            raise StorageError(f"Error uploading file: {exc}") from exc

        logger.info("Stored cover picture: %s (%d bytes)", dest_path, len(content))
        return filename

    async def delete(self, filename: str) -> bool:
        """Delete a stored picture. Missing files and OS errors return False."""
        file_path = self.path_for(filename)
        try:
            if not file_path.is_file():
                return False
            file_path.unlink()
        except OSError as exc:
            logger.warning("Could not delete cover picture %s: %s", file_path, exc)
            return False

        logger.info("Deleted cover picture: %s", file_path)
        return True

    def path_for(self, filename: str) -> Path:
        # Stored names never contain separators; strip any to stay inside the directory
        return self._pictures_dir / Path(filename).name
