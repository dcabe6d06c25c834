import os
import logging
from dataclasses import dataclass
from pathlib import Path

from podcast_generator.core.config import settings
from podcast_generator.core.errors import NotFoundError, StorageError

logger = logging.getLogger(__name__)

CONTENT_TYPE_SUFFIX = ".content-type"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass
class StoredBlob:
    """Bytes read back from the blob store together with their content type."""
    key: str
    data: bytes
    content_type: str


class LocalBlobStore:
    """
    A blob store backed by the local filesystem.

    Each blob lives at `<base_path>/<key>`, with its content type kept in a
    sidecar file next to it. It can be swapped for a cloud object store
    (S3, R2) without affecting the rest of the application, as long as the
    put/get/exists/delete contract is kept.
    """

    def __init__(self, base_path: str = settings.STORAGE_PATH):
        """
        Initializes the LocalBlobStore.

        Args:
            base_path: The root directory for all storage operations.
                       Defaults to the path specified in the application settings.
        """
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
        logger.info(f"Storage initialized at base path: {self.base_path}")

    def _resolve(self, key: str) -> Path:
        """
        Map a key to a path inside the base directory.

        Raises:
            ValueError: If the key is empty or points outside the base directory.
        """
        if not key:
            raise ValueError("Blob key cannot be empty")

        # Convert Windows path separators to forward slashes and normalize
        normalized_key = str(key).replace('\\', '/').lstrip('/')
        path = (self.base_path / normalized_key).resolve()
        try:
            path.relative_to(self.base_path.resolve())
        except ValueError:
            raise ValueError(f"Key '{key}' is outside the base directory")
        return path

    def put(self, key: str, data: bytes, content_type: str) -> str:
        """
        Durably write a blob.

        Args:
            key: Storage key, e.g. "podcasts/<episode_id>.mp3".
            data: The bytes to store.
            content_type: MIME type returned with the blob on reads.

        Returns:
            The key the blob was stored under.

        Raises:
            StorageError: If the write fails.
        """
        path = self._resolve(key)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
            path.with_name(path.name + CONTENT_TYPE_SUFFIX).write_text(content_type, encoding="utf-8")
        except OSError as e:
            logger.error(f"LocalBlobStore: Error writing blob {key}: {e}", exc_info=True)
            raise StorageError(f"Could not write blob '{key}': {e}") from e

        logger.info(f"LocalBlobStore: Stored {len(data)} bytes at key: {key}")
        return key

    def get(self, key: str) -> StoredBlob:
        """
        Read a blob back.

        Raises:
            NotFoundError: If no blob exists under the key.
        """
        path = self._resolve(key)
        if not path.is_file():
            logger.warning(f"LocalBlobStore: Blob not found: {key}")
            raise NotFoundError(f"Audio file not found in storage: {key}")

        sidecar = path.with_name(path.name + CONTENT_TYPE_SUFFIX)
        content_type = sidecar.read_text(encoding="utf-8").strip() if sidecar.is_file() else DEFAULT_CONTENT_TYPE
        return StoredBlob(key=key, data=path.read_bytes(), content_type=content_type)

    def exists(self, key: str) -> bool:
        return self._resolve(key).is_file()

    def delete(self, key: str):
        """
        Deletes a blob and its content-type sidecar.

        Args:
            key: The storage key of the blob.
        """
        path = self._resolve(key)
        if not path.is_file():
            logger.warning(f"LocalBlobStore: Attempted to delete non-existent blob: {key}")
            return
        try:
            path.unlink()
            path.with_name(path.name + CONTENT_TYPE_SUFFIX).unlink(missing_ok=True)
            logger.info(f"LocalBlobStore: Deleted blob: {key}")
        except OSError as e:
            logger.error(f"LocalBlobStore: Error deleting blob {key}: {e}")
            raise StorageError(f"Could not delete blob '{key}': {e}") from e


_blob_store = None

def get_blob_store() -> LocalBlobStore:
    """
    Dependency function to provide the blob store instance.
    """
    global _blob_store
    if _blob_store is None:
        _blob_store = LocalBlobStore()
    return _blob_store
