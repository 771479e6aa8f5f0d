from abc import ABC, abstractmethod

from docdrop.models.location import ResolvedLocation


class StorageBackend(ABC):
    name: str = ""

    @abstractmethod
    async def put(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> None:
        """Store data under key. Raises StorageWriteError if the medium fails."""
        ...

    @abstractmethod
    async def resolve(self, key: str) -> ResolvedLocation:
        """Locate key as a direct stream (local) or a signed redirect (S3).

        Raises NotFoundError for unknown or invalid keys.
        """
        ...
