import asyncio

import httpx
import pytest

from ai_painter.core.codec import ImageBlob
from ai_painter.core.uploader import ImageHostUploader

UPLOAD_URL = "https://pic.foxhank.top/upload"


def upload_with(handler):
    uploader = ImageHostUploader(UPLOAD_URL, transport=httpx.MockTransport(handler))
    return asyncio.run(uploader.upload(ImageBlob(data=b"png-bytes")))


def test_upload_sends_multipart_file():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["content_type"] = request.headers["content-type"]
        seen["body"] = request.content
        return httpx.Response(200, json=[{"src": "/file/abc.png"}])

    assert upload_with(handler) == {"src": "/file/abc.png"}
    assert seen["method"] == "POST"
    assert seen["url"] == UPLOAD_URL
    assert seen["content_type"].startswith("multipart/form-data")
    assert b'name="file"; filename="image.png"' in seen["body"]
    assert b"Content-Type: image/png" in seen["body"]
    assert b"png-bytes" in seen["body"]


@pytest.mark.parametrize("status", [400, 413, 500, 502])
def test_non_2xx_returns_none(status):
    assert upload_with(lambda request: httpx.Response(status, text="nope")) is None


@pytest.mark.parametrize("response", [
    httpx.Response(200, text="<html>not json</html>"),
    httpx.Response(200, json=[]),
    httpx.Response(200, json={"src": "/x.png"}),
    httpx.Response(200, json=["just-a-string"]),
    httpx.Response(200, json=None),
])
def test_malformed_body_returns_none(response):
    assert upload_with(lambda request: response) is None


def test_network_error_returns_none():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    assert upload_with(handler) is None


def test_record_without_src_is_returned_as_is():
    assert upload_with(lambda request: httpx.Response(200, json=[{"error": "quota"}])) == {"error": "quota"}
