from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator

from docdrop.errors import StorageReadError
from docdrop.logging import log_context
from docdrop.models.location import DirectStream, ResolvedLocation
from docdrop.storage.base import StorageBackend

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class DownloadService:
    def __init__(self, storage: StorageBackend) -> None:
        self.storage = storage

    async def resolve(self, key: str) -> ResolvedLocation:
        """Resolve key via the storage backend.

        The caller streams a DirectStream or redirects to a RedirectUrl.
        NotFoundError and StorageReadError propagate.
        """
        with log_context(storage_key=key):
            location = await self.storage.resolve(key)
            if isinstance(location, DirectStream):
                logger.info("Download %s: streaming %s", key, location.path)
            else:
                logger.info("Download %s: redirecting, expires %s", key, location.expires_at.isoformat())
        return location


async def stream_chunks(location: DirectStream, chunk_size: int = CHUNK_SIZE) -> AsyncIterator[bytes]:
    """Yield the open file in chunks, closing it when done or abandoned."""
    try:
        while True:
            try:
                chunk = await asyncio.to_thread(location.source.read, chunk_size)
            except OSError as e:
                logger.error("Reading %s failed mid-stream: %s", location.path, e)
                raise StorageReadError(location.path.name, str(e)) from e
            if not chunk:
                break
            yield chunk
    finally:
        location.source.close()
