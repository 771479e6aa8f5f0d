import logging

from docdrop.errors import ConfigurationError
from docdrop.settings import settings
from docdrop.storage.base import StorageBackend

logger = logging.getLogger(__name__)

_REQUIRED_S3_SETTINGS = ("s3_bucket", "s3_region", "s3_access_key_id", "s3_secret_access_key")


def get_storage() -> StorageBackend:
    """Build the process-wide storage backend from settings.

    Raises ConfigurationError for an unknown backend or missing S3 settings.
    """
    backend = settings.storage_backend

    if backend == "local":
        from docdrop.storage.local import LocalStorage

        logger.info("Using storage backend: local path=%s", settings.storage_local_path)
        return LocalStorage(settings.storage_local_path)

    if backend == "s3":
        missing = [name for name in _REQUIRED_S3_SETTINGS if not getattr(settings, name)]
        if missing:
            env_vars = ", ".join(f"DOCDROP_{name.upper()}" for name in missing)
            raise ConfigurationError(f"Missing S3 settings: {env_vars}")

        from docdrop.storage.s3 import S3Storage

        logger.info("Using storage backend: s3 bucket=%s", settings.s3_bucket)
        return S3Storage(
            bucket=settings.s3_bucket,
            region=settings.s3_region,
            access_key_id=settings.s3_access_key_id,
            secret_access_key=settings.s3_secret_access_key,
            endpoint_url=settings.s3_endpoint_url,
            presigned_expiry=settings.s3_presigned_expiry,
            check_exists=settings.s3_check_exists,
        )

    raise ConfigurationError(f"Unsupported storage backend: {backend}")
