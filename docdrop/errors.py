"""Error taxonomy for the upload and download pipelines.

Each error carries the HTTP status and a short machine-stable code so the
web layer can map it to a JSON response without knowing the cause.
"""

from __future__ import annotations


class DocDropError(Exception):
    status_code: int = 500
    code: str = "internal_error"
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NoFileProvidedError(DocDropError):
    status_code = 400
    code = "no_file"
    default_message = "No file uploaded"


class NotFoundError(DocDropError):
    status_code = 404
    code = "not_found"
    default_message = "File not found"

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__()


class StorageWriteError(DocDropError):
    """The storage medium rejected or could not receive the upload."""

    code = "storage_write_failed"
    default_message = "Upload failed"

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__()


class StorageReadError(DocDropError):
    """The storage medium failed while locating or signing an object."""

    code = "storage_read_failed"
    default_message = "Failed to fetch file"

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__()


class InvalidUrlError(DocDropError):
    code = "invalid_url"
    default_message = "Failed to build retrieval URL"

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__()


class ConfigurationError(DocDropError):
    """Invalid startup configuration. Raised before the server accepts requests."""

    code = "configuration_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
