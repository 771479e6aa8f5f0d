from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class StoredObject(BaseModel):
    key: str
    original_name: str
    content_type: str = "application/octet-stream"
    size_bytes: int = 0
    created_at: datetime


class UploadResult(BaseModel):
    file_url: str
    qr_code: str
    stored_object: StoredObject
