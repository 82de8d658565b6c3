"""
Opaque byte storage addressed by server generated keys.

Keys look like ``"<owner_id>/<hex>"`` and map onto files below the store's
root directory. Callers never see the on-disk layout.
"""
import logging
import os
from pathlib import Path

from minicloud.errors import NotFoundError, StorageFailureError

logger = logging.getLogger(__name__)


class LocalBlobStore:

    def __init__(self, root):
        self.root = Path(root).resolve()

    @classmethod
    def from_env(cls) -> "LocalBlobStore":
        return cls(os.getenv("STORAGE_DIR", "storage"))

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if not key or not path.is_relative_to(self.root) or path == self.root:
            raise StorageFailureError(f"Invalid storage key: {key!r}")
        return path

    def put(self, key: str, data: bytes) -> None:
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as error:
            logger.error("Could not write blob %s: %s", key, error)
            raise StorageFailureError("Could not store file content") from error

    def get(self, key: str) -> bytes:
        path = self._path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError as error:
            raise NotFoundError("File content not found") from error
        except OSError as error:
            logger.error("Could not read blob %s: %s", key, error)
            raise StorageFailureError("Could not read file content") from error

    def delete_if_exists(self, key: str) -> bool:
        path = self._path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as error:
            logger.error("Could not delete blob %s: %s", key, error)
            raise StorageFailureError("Could not delete file content") from error
        return True

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()
