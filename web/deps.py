from __future__ import annotations

from fastapi import Request

from docdrop.services.download_service import DownloadService
from docdrop.services.upload_service import UploadService
from docdrop.urls import RequestContext


def get_upload_service(request: Request) -> UploadService:
    state = request.app.state
    return UploadService(state.storage, state.url_strategy, state.key_generator)


def get_download_service(request: Request) -> DownloadService:
    return DownloadService(request.app.state.storage)


def get_request_context(request: Request) -> RequestContext:
    host = request.headers.get("host") or request.url.netloc
    return RequestContext(scheme=request.url.scheme, host=host, headers=request.headers)
