import asyncio
import re
from unittest.mock import patch

import pytest

from docdrop.errors import InvalidUrlError, NoFileProvidedError, StorageWriteError
from docdrop.identity import KeyGenerator
from docdrop.services.download_service import DownloadService
from docdrop.services.upload_service import UploadService
from docdrop.urls import ForwardedUrlStrategy, StaticUrlStrategy
from tests.conftest import FailingStorage, FixedClock, read_stream


def _upload(service, context, filename="a.pdf", data=b"0123456789", content_type="application/pdf"):
    return asyncio.run(service.upload(filename=filename, data=data, content_type=content_type, context=context))


class TestUploadService:
    def test_upload_returns_url_and_qr(self, local_storage, static_strategy, request_context):
        service = UploadService(local_storage, static_strategy)
        result = _upload(service, request_context)

        assert re.match(r"^https://files\.example\.com/download/\d+-a\.pdf$", result.file_url)
        assert result.qr_code.startswith("data:image/png;base64,")

    def test_stored_object_metadata(self, local_storage, static_strategy, request_context):
        service = UploadService(local_storage, static_strategy, KeyGenerator(clock=FixedClock(42)))
        result = _upload(service, request_context, filename="my file.pdf")

        stored = result.stored_object
        assert stored.key == "42-my file.pdf"
        assert stored.original_name == "my file.pdf"
        assert stored.content_type == "application/pdf"
        assert stored.size_bytes == 10
        assert stored.created_at.tzinfo is not None

    def test_upload_persists_bytes(self, local_storage, static_strategy, request_context):
        service = UploadService(local_storage, static_strategy)
        result = _upload(service, request_context)
        assert (local_storage.base_dir / result.stored_object.key).read_bytes() == b"0123456789"

    def test_missing_content_type_defaults(self, local_storage, static_strategy, request_context):
        service = UploadService(local_storage, static_strategy)
        result = _upload(service, request_context, content_type=None)
        assert result.stored_object.content_type == "application/octet-stream"

    def test_url_uses_request_context(self, local_storage, request_context):
        service = UploadService(local_storage, ForwardedUrlStrategy())
        result = _upload(service, request_context)
        assert result.file_url.startswith("http://10.0.0.5:5000/download/")

    @pytest.mark.parametrize("filename,data", [(None, b"x"), ("", b"x"), ("a.pdf", None)])
    def test_no_file_rejected_without_side_effects(self, local_storage, static_strategy, request_context, filename, data):
        service = UploadService(local_storage, static_strategy)
        with pytest.raises(NoFileProvidedError) as exc_info:
            _upload(service, request_context, filename=filename, data=data)
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "No file uploaded"
        assert list(local_storage.base_dir.iterdir()) == []

    def test_write_failure_propagates(self, static_strategy, request_context):
        service = UploadService(FailingStorage(StorageWriteError("k", "bucket unreachable")), static_strategy)
        with pytest.raises(StorageWriteError):
            _upload(service, request_context)

    def test_encode_failure_propagates(self, local_storage, request_context):
        service = UploadService(local_storage, StaticUrlStrategy("not-a-url"))
        with pytest.raises(InvalidUrlError):
            _upload(service, request_context)

    def test_qr_encodes_file_url(self, local_storage, static_strategy, request_context):
        service = UploadService(local_storage, static_strategy)
        with patch("docdrop.services.upload_service.generate_qrcode_data_uri", return_value="data:x") as mock_qr:
            result = _upload(service, request_context)
        mock_qr.assert_called_once_with(result.file_url)
        assert result.qr_code == "data:x"


class TestUploadDownloadRoundTrip:
    def test_round_trip(self, local_storage, static_strategy, request_context):
        upload = UploadService(local_storage, static_strategy)
        download = DownloadService(local_storage)

        result = _upload(upload, request_context)
        location = asyncio.run(download.resolve(result.stored_object.key))

        assert read_stream(location) == b"0123456789"
        assert location.filename == "a.pdf"

    def test_concurrent_same_name_same_instant(self, local_storage, static_strategy, request_context):
        service = UploadService(local_storage, static_strategy, KeyGenerator(clock=FixedClock(1000)))
        download = DownloadService(local_storage)

        async def _run():
            return await asyncio.gather(
                service.upload(filename="a.pdf", data=b"first", content_type="application/pdf", context=request_context),
                service.upload(filename="a.pdf", data=b"second", content_type="application/pdf", context=request_context),
            )

        first, second = asyncio.run(_run())

        assert first.stored_object.key != second.stored_object.key
        assert first.file_url != second.file_url
        assert read_stream(asyncio.run(download.resolve(first.stored_object.key))) == b"first"
        assert read_stream(asyncio.run(download.resolve(second.stored_object.key))) == b"second"
