"""
Local file storage for uploaded property assets.

All paths handed around the service are relative to the uploads root
(for example ``properties/prop-001/3f2a...e1.jpg``); this module is the only
place that turns them into filesystem paths or public URLs.
"""

import os
import uuid
from pathlib import Path
from typing import Optional, Union
from urllib.parse import quote

from listings_service.config import Settings
from listings_service.exceptions import StorageError
from listings_service.logging_config import logger

PROPERTIES_DIR = "properties"


class UploadStorage:
    def __init__(
        self,
        base_dir: Union[str, Path],
        public_base: str = "/uploads",
        public_base_url: str = "",
    ):
        self.root = Path(base_dir).resolve()
        self.public_base = "/" + public_base.strip("/") if public_base.strip("/") else ""
        self.public_base_url = public_base_url.rstrip("/")

    @classmethod
    def from_settings(cls, settings: Settings) -> "UploadStorage":
        return cls(
            settings.UPLOADS_FS_BASE,
            public_base=settings.UPLOADS_PUBLIC_BASE,
            public_base_url=settings.PUBLIC_BASE_URL,
        )

    # --- Path helpers ---

    @staticmethod
    def property_dir(folder: str) -> str:
        folder = folder.strip()
        if not folder or folder in (".", "..") or "/" in folder or "\\" in folder:
            raise StorageError(f"Unsafe storage folder name: {folder!r}")
        return f"{PROPERTIES_DIR}/{folder}"

    @staticmethod
    def generate_filename(extension: str) -> str:
        """Unique by construction; no collision probing is needed."""
        return f"{uuid.uuid4().hex}.{extension.lstrip('.').lower()}"

    @staticmethod
    def thumbnail_name(relative_path: str) -> str:
        stem, dot, ext = relative_path.rpartition(".")
        if not dot:
            return f"{relative_path}_thumb"
        return f"{stem}_thumb.{ext}"

    def absolute(self, relative_path: str) -> Path:
        path = (self.root / relative_path.lstrip("/")).resolve()
        if path != self.root and self.root not in path.parents:
            raise StorageError(f"Path escapes the uploads root: {relative_path!r}")
        return path

    def exists(self, relative_path: Optional[str]) -> bool:
        if not relative_path:
            return False
        try:
            return self.absolute(relative_path).is_file()
        except StorageError:
            return False

    # --- URLs ---

    def public_path(self, relative_path: str) -> str:
        encoded = "/".join(quote(part) for part in relative_path.strip("/").split("/"))
        return f"{self.public_base}/{encoded}"

    def public_url(self, relative_path: str) -> str:
        return f"{self.public_base_url}{self.public_path(relative_path)}"

    def absolute_url(self, path_or_url: str) -> str:
        if path_or_url.startswith(("http://", "https://")):
            return path_or_url
        return f"{self.public_base_url}/{path_or_url.lstrip('/')}"

    # --- Mutations ---

    def ensure_directory(self, relative_dir: str) -> Path:
        """
        Create the directory if needed, checking that its parent is writable.

        Raises StorageError on any failure; the caller does not retry.
        """
        target = self.absolute(relative_dir)
        if target.is_dir():
            if not os.access(target, os.W_OK):
                logger.error(f"Upload directory is not writable: {target}")
                raise StorageError(
                    f"Upload directory is not writable: {target}",
                    public_message="Upload directory is not writable",
                )
            return target

        parent = target.parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create parent directory {parent}: {e}")
            raise StorageError(
                f"Failed to create parent directory {parent}: {e}",
                public_message="Failed to create upload directory",
            ) from e
        if not os.access(parent, os.W_OK):
            logger.error(
                f"Parent directory is not writable: {parent} "
                f"(mode {oct(parent.stat().st_mode & 0o777)})"
            )
            raise StorageError(
                f"Parent directory is not writable: {parent}",
                public_message="Upload directory is not writable",
            )
        try:
            target.mkdir(exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create upload directory {target}: {e}")
            raise StorageError(
                f"Failed to create upload directory {target}: {e}",
                public_message="Failed to create upload directory",
            ) from e
        logger.info(f"Created upload directory {target}")
        return target

    def write(self, relative_path: str, data: bytes) -> Path:
        """Write bytes and verify the file is really there afterwards."""
        path = self.absolute(relative_path)
        try:
            with open(path, "xb") as fh:
                fh.write(data)
        except OSError as e:
            logger.error(f"Failed to write file {path}: {e}")
            raise StorageError(
                f"Failed to write file {path}: {e}",
                public_message="Failed to save uploaded file",
            ) from e
        if not path.is_file() or path.stat().st_size != len(data):
            logger.error(f"File verification failed after write: {path}")
            raise StorageError(
                f"File verification failed after write: {path}",
                public_message="Failed to save uploaded file",
            )
        return path

    def size(self, relative_path: str) -> Optional[int]:
        try:
            return self.absolute(relative_path).stat().st_size
        except OSError:
            return None

    def remove(self, relative_path: Optional[str]) -> Optional[bool]:
        """
        Delete a stored file.

        Returns True when the file was deleted, False when it exists but could
        not be deleted, and None when there was nothing to delete.
        """
        if not relative_path:
            return None
        try:
            path = self.absolute(relative_path)
        except StorageError:
            logger.warning(f"Refusing to delete path outside uploads root: {relative_path}")
            return False
        if not path.exists():
            return None
        try:
            path.unlink()
        except OSError as e:
            logger.warning(f"Failed to delete file {path}: {e}")
            return False
        return True
