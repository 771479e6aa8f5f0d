"""Web test fixtures: TestClient over an app with an explicit backend."""

from __future__ import annotations

import pytest
from starlette.testclient import TestClient

from docdrop.urls import ForwardedUrlStrategy


@pytest.fixture()
def client(local_storage):
    from web.app import create_app

    app = create_app(storage=local_storage, url_strategy=ForwardedUrlStrategy())
    with TestClient(app) as test_client:
        yield test_client


def upload_file(client, filename="a.pdf", data=b"0123456789", content_type="application/pdf", **kwargs):
    return client.post("/upload", files={"pdf": (filename, data, content_type)}, **kwargs)
