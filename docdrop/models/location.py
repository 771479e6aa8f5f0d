from __future__ import annotations

from datetime import datetime
from io import BufferedIOBase
from pathlib import Path
from typing import Union

from pydantic import BaseModel, ConfigDict


class DirectStream(BaseModel):
    """A file the server streams itself.

    ``source`` is already open, so the bytes stay readable even if the file is
    unlinked before the response is sent. Whoever streams it closes it.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    path: Path
    source: BufferedIOBase
    filename: str
    content_type: str = "application/octet-stream"
    size_bytes: int = 0


class RedirectUrl(BaseModel):
    """A signed URL the client is redirected to. Never persisted."""

    url: str
    expires_at: datetime


SignedAccess = RedirectUrl

ResolvedLocation = Union[DirectStream, RedirectUrl]
