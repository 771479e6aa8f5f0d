from __future__ import annotations

import asyncio
import logging
import mimetypes
import os
import stat
from io import BufferedReader
from pathlib import Path

from docdrop.errors import ConfigurationError, NotFoundError, StorageReadError, StorageWriteError
from docdrop.identity import is_valid_key, original_name_from_key
from docdrop.models.location import DirectStream
from docdrop.storage.base import StorageBackend

logger = logging.getLogger(__name__)


def _open_regular_file(path: Path) -> tuple[BufferedReader | None, os.stat_result]:
    """Open path for reading if it is a regular file, else return no handle."""
    st = path.stat()
    if not stat.S_ISREG(st.st_mode):
        return None, st
    return path.open("rb"), st


class LocalStorage(StorageBackend):
    name = "local"

    def __init__(self, base_dir: str) -> None:
        self.base_dir = Path(base_dir)
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigurationError(f"Cannot create upload directory {self.base_dir}: {e}") from e

    def _path(self, key: str) -> Path:
        return self.base_dir / key

    async def put(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> None:
        if not is_valid_key(key):
            raise StorageWriteError(key, "invalid key")
        path = self._path(key)
        try:
            await asyncio.to_thread(path.write_bytes, data)
        except OSError as e:
            logger.error("Failed to write %s: %s", path, e)
            raise StorageWriteError(key, str(e)) from e
        logger.debug("Saved %s (%d bytes) to %s", key, len(data), path)

    async def resolve(self, key: str) -> DirectStream:
        if not is_valid_key(key):
            logger.warning("Rejected invalid key: %r", key)
            raise NotFoundError(key)
        path = self._path(key)
        try:
            source, st = await asyncio.to_thread(_open_regular_file, path)
        except FileNotFoundError as e:
            raise NotFoundError(key) from e
        except OSError as e:
            logger.error("Failed to open %s: %s", path, e)
            raise StorageReadError(key, str(e)) from e
        if source is None:
            raise NotFoundError(key)

        filename = original_name_from_key(key)
        content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
        logger.debug("Resolved %s to %s", key, path)
        return DirectStream(
            path=path,
            source=source,
            filename=filename,
            content_type=content_type,
            size_bytes=st.st_size,
        )
