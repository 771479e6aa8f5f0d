from __future__ import annotations

import logging
from datetime import datetime, timezone

from docdrop.errors import NoFileProvidedError
from docdrop.identity import KeyGenerator
from docdrop.logging import log_context
from docdrop.models.stored_object import StoredObject, UploadResult
from docdrop.qr import generate_qrcode_data_uri
from docdrop.storage.base import StorageBackend
from docdrop.urls import RequestContext, UrlStrategy, build_retrieval_url

logger = logging.getLogger(__name__)


class UploadService:
    def __init__(
        self,
        storage: StorageBackend,
        url_strategy: UrlStrategy,
        key_generator: KeyGenerator | None = None,
    ) -> None:
        self.storage = storage
        self.url_strategy = url_strategy
        self.key_generator = key_generator or KeyGenerator()

    async def upload(
        self,
        *,
        filename: str | None,
        data: bytes | None,
        content_type: str | None,
        context: RequestContext,
    ) -> UploadResult:
        """Store the file, then build its retrieval URL and QR code.

        Raises NoFileProvidedError before touching storage when there is no
        file. StorageWriteError and InvalidUrlError propagate unchanged; the
        key is only returned to the caller once every step succeeded.
        """
        if not filename or data is None:
            raise NoFileProvidedError()

        content_type = content_type or "application/octet-stream"
        key = self.key_generator.generate(filename)
        with log_context(storage_key=key):
            logger.info("Upload %s: %d bytes, %s", key, len(data), content_type)

            await self.storage.put(key, data, content_type)
            stored = StoredObject(
                key=key,
                original_name=filename,
                content_type=content_type,
                size_bytes=len(data),
                created_at=datetime.now(timezone.utc),
            )

            file_url = build_retrieval_url(self.url_strategy.resolve(context), key)
            qr_code = generate_qrcode_data_uri(file_url)
            logger.info("Upload %s available at %s", key, file_url)

        return UploadResult(file_url=file_url, qr_code=qr_code, stored_object=stored)
