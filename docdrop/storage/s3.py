from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from docdrop.errors import NotFoundError, StorageReadError, StorageWriteError
from docdrop.identity import is_valid_key
from docdrop.models.location import RedirectUrl
from docdrop.storage.base import StorageBackend

logger = logging.getLogger(__name__)

DEFAULT_PRESIGNED_EXPIRY = 600
_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class S3Storage(StorageBackend):
    """S3-compatible object storage.

    ``resolve`` signs a GET URL without checking the object exists unless
    ``check_exists`` is set; a missing object then only fails when the client
    follows the redirect.
    """

    name = "s3"

    def __init__(
        self,
        bucket: str,
        region: str,
        access_key_id: str,
        secret_access_key: str,
        endpoint_url: str = "",
        presigned_expiry: int = DEFAULT_PRESIGNED_EXPIRY,
        check_exists: bool = False,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.bucket = bucket
        self.presigned_expiry = presigned_expiry
        self.check_exists = check_exists
        self._clock = clock

        client_kwargs: dict = {
            "service_name": "s3",
            "region_name": region,
            "aws_access_key_id": access_key_id,
            "aws_secret_access_key": secret_access_key,
        }
        if endpoint_url:
            client_kwargs["endpoint_url"] = endpoint_url

        self.client = boto3.client(**client_kwargs)

    async def put(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> None:
        if not is_valid_key(key):
            raise StorageWriteError(key, "invalid key")

        def _put() -> None:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )

        try:
            await asyncio.to_thread(_put)
        except (ClientError, BotoCoreError) as e:
            logger.error("Upload of %s to bucket=%s failed: %s", key, self.bucket, e)
            raise StorageWriteError(key, str(e)) from e
        logger.debug("Uploaded %s (%d bytes) to bucket=%s", key, len(data), self.bucket)

    async def _ensure_exists(self, key: str) -> None:
        try:
            await asyncio.to_thread(self.client.head_object, Bucket=self.bucket, Key=key)
        except ClientError as e:
            if str(e.response.get("Error", {}).get("Code", "")) in _MISSING_CODES:
                raise NotFoundError(key) from e
            raise StorageReadError(key, str(e)) from e
        except BotoCoreError as e:
            raise StorageReadError(key, str(e)) from e

    async def resolve(self, key: str) -> RedirectUrl:
        if not is_valid_key(key):
            logger.warning("Rejected invalid key: %r", key)
            raise NotFoundError(key)
        if self.check_exists:
            await self._ensure_exists(key)

        issued_at = self._clock()
        try:
            url = await asyncio.to_thread(
                self.client.generate_presigned_url,
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=self.presigned_expiry,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Signing %s in bucket=%s failed: %s", key, self.bucket, e)
            raise StorageReadError(key, str(e)) from e
        return RedirectUrl(url=url, expires_at=issued_at + timedelta(seconds=self.presigned_expiry))
