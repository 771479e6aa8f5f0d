from docdrop.models.location import DirectStream, RedirectUrl, ResolvedLocation, SignedAccess
from docdrop.models.stored_object import StoredObject, UploadResult

__all__ = [
    "DirectStream",
    "RedirectUrl",
    "ResolvedLocation",
    "SignedAccess",
    "StoredObject",
    "UploadResult",
]
