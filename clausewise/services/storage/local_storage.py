import logging
from pathlib import Path

import aiofiles
import aiofiles.os

from clausewise.exceptions import StorageError
from clausewise.services.storage.base import FileStorage

logger = logging.getLogger(__name__)


class LocalFileStorage(FileStorage):
    def __init__(self, root_dir: str):
        self.root = Path(root_dir).resolve()

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        # Reject keys such as "../etc/passwd" that escape the storage root
        if not target.is_relative_to(self.root):
            raise StorageError(f"Path {path!r} escapes the storage root")
        return target

    async def save(self, path: str, content: bytes, content_type: str) -> None:
        target = self._resolve(path)
        try:
            await aiofiles.os.makedirs(target.parent, exist_ok=True)
            async with aiofiles.open(target, "wb") as f:
                await f.write(content)
        except OSError as e:
            raise StorageError(f"Failed to store {path}: {e}") from e
        logger.info(f"Stored file: path={path} bytes={len(content)}")

    async def read(self, path: str) -> bytes:
        target = self._resolve(path)
        try:
            async with aiofiles.open(target, "rb") as f:
                return await f.read()
        except FileNotFoundError:
            raise
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    async def delete(self, path: str) -> bool:
        target = self._resolve(path)
        try:
            await aiofiles.os.remove(target)
        except FileNotFoundError:
            logger.info(f"File already absent: path={path}")
            return False
        except OSError as e:
            raise StorageError(f"Failed to delete {path}: {e}") from e
        logger.info(f"Deleted file: path={path}")
        return True
