from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse, StreamingResponse
from starlette.background import BackgroundTask
from starlette.datastructures import UploadFile

from docdrop.models.location import DirectStream
from docdrop.services.download_service import stream_chunks
from docdrop.settings import settings
from web.deps import get_download_service, get_request_context, get_upload_service

logger = logging.getLogger(__name__)

router = APIRouter()


def content_disposition(filename: str) -> str:
    """Attachment header; non-ASCII or special names use RFC 5987 ``filename*``."""
    quoted = quote(filename)
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'


@router.post("/upload")
async def upload(request: Request):
    logger.info("POST /upload")
    upload_service = get_upload_service(request)

    form = await request.form()
    upload_file = form.get(settings.upload_field)
    filename = None
    data = None
    content_type = None
    if isinstance(upload_file, UploadFile) and upload_file.filename:
        filename = upload_file.filename
        data = await upload_file.read()
        content_type = upload_file.content_type

    result = await upload_service.upload(
        filename=filename,
        data=data,
        content_type=content_type,
        context=get_request_context(request),
    )
    return {"fileUrl": result.file_url, "qrCode": result.qr_code}


@router.get("/download/{key}")
async def download(request: Request, key: str):
    logger.info("GET /download/%s", key)
    download_service = get_download_service(request)

    location = await download_service.resolve(key)
    if isinstance(location, DirectStream):
        return StreamingResponse(
            stream_chunks(location),
            media_type=location.content_type,
            headers={
                "Content-Disposition": content_disposition(location.filename),
                "Content-Length": str(location.size_bytes),
            },
            background=BackgroundTask(location.source.close),
        )
    return RedirectResponse(location.url, status_code=302)
