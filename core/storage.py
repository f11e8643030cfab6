import os
import shutil
from dataclasses import dataclass
from typing import BinaryIO

from PIL import Image, UnidentifiedImageError

from core.config import settings
from core.errors import PersistenceError
from core.logging_config import get_logger

logger = get_logger(__name__)

CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class StoredObject:
    key: str
    size_bytes: int
    width: int | None = None
    height: int | None = None


def normalize_filename(original_name: str) -> str:
    """Normalize filename without adding randomness.
    - Keep only the base name (no client-supplied directories)
    - Trim whitespace
    - Replace spaces with underscores
    - Preserve original extension
    """
    base = os.path.basename((original_name or "").replace("\\", "/")) or "file"
    name, ext = os.path.splitext(base)
    name = name.strip().replace(" ", "_") or "file"
    return f"{name}{ext}"


def _compress_image(path: str, size_bytes: int) -> tuple[int, int | None, int | None]:
    """Re-encode an image in its own format; keep whichever file is smaller."""
    with Image.open(path) as img:
        width, height = img.size
        ext = os.path.splitext(path)[1].lower()
        tmp_path = path + ".tmp"
        if ext in (".jpg", ".jpeg"):
            if img.mode in ("RGBA", "P"):
                img = img.convert("RGB")
            save_kwargs = {"format": "JPEG", "quality": 85, "optimize": True, "progressive": True}
        elif ext == ".png":
            save_kwargs = {"format": "PNG", "optimize": True, "compress_level": 9}
        elif ext == ".webp":
            save_kwargs = {"format": "WEBP", "quality": 85, "method": 6}
        else:
            return size_bytes, width, height

        img.save(tmp_path, **save_kwargs)
    new_size = os.path.getsize(tmp_path)
    if new_size < size_bytes:
        os.replace(tmp_path, path)
        return new_size, width, height
    os.remove(tmp_path)
    return size_bytes, width, height


class MediaStorage:
    """Project photos on the local media directory, keyed projects/<project_id>/<file>."""

    def __init__(self, root: str | None = None):
        self.root = root or settings.MEDIA_DIR

    def key_for(self, project_id: str, file_name: str) -> str:
        return f"projects/{project_id}/{normalize_filename(file_name)}"

    def path_for(self, key: str) -> str:
        return os.path.join(self.root, *key.split("/"))

    def url_for(self, base_url: str, key: str) -> str:
        return str(base_url).rstrip("/") + settings.MEDIA_URL_PATH + "/" + key

    def key_from_url(self, url: str) -> str | None:
        marker = settings.MEDIA_URL_PATH.rstrip("/") + "/"
        if not url or marker not in url:
            return None
        return url.split(marker, 1)[1]

    def save(self, project_id: str, file_name: str, fileobj: BinaryIO,
             content_type: str | None = None) -> StoredObject:
        key = self.key_for(project_id, file_name)
        path = self.path_for(key)
        if os.path.exists(path):
            raise FileExistsError(key)

        size_bytes = 0
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            # Stream to disk to avoid high memory usage
            with open(path, "wb") as out:
                while True:
                    chunk = fileobj.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    out.write(chunk)
                    size_bytes += len(chunk)
        except OSError as e:
            # No partial file may survive a failed write
            try:
                if os.path.exists(path):
                    os.remove(path)
            except OSError as cleanup_error:
                logger.warning("could not remove partial upload %s: %s", key, cleanup_error)
            raise PersistenceError(f"Could not store {key}: {e}") from e

        width = height = None
        if (content_type or "").startswith("image/"):
            try:
                size_bytes, width, height = _compress_image(path, size_bytes)
            except (OSError, UnidentifiedImageError) as e:
                # Keep the original upload as-is
                logger.warning("image re-encode skipped for %s: %s", key, e)

        logger.info("stored %s (%d bytes)", key, size_bytes)
        return StoredObject(key=key, size_bytes=size_bytes, width=width, height=height)

    def delete(self, key: str) -> bool:
        path = self.path_for(key)
        if not os.path.exists(path):
            return False
        try:
            os.remove(path)
        except OSError as e:
            raise PersistenceError(f"Could not delete {key}: {e}") from e
        return True

    def delete_project(self, project_id: str) -> None:
        folder = self.path_for(f"projects/{project_id}")
        if not os.path.isdir(folder):
            return
        try:
            shutil.rmtree(folder)
        except OSError as e:
            raise PersistenceError(f"Could not delete media for project {project_id}: {e}") from e


def get_storage() -> MediaStorage:
    return MediaStorage()
