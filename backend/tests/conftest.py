"""Shared test doubles and fixtures."""
import base64

import pytest
from fastapi.testclient import TestClient

from ai_painter.core.config import Settings
from ai_painter.main import create_app

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-png-body"
PNG_B64 = base64.b64encode(PNG_BYTES).decode()


async def _chunks(data: bytes, size: int = 4):
    for i in range(0, len(data), size):
        yield data[i:i + size]


class FakeInference:
    """Records calls; returns a flux-style dict or a fresh byte stream."""

    def __init__(self, flux_result=None, stream_bytes: bytes = PNG_BYTES, error: Exception = None):
        self.flux_result = {"image": f"data:image/png;base64,{PNG_B64}"} if flux_result is None else flux_result
        self.stream_bytes = stream_bytes
        self.error = error
        self.calls = []

    async def run(self, model_id, inputs):
        self.calls.append((model_id, inputs))
        if self.error is not None:
            raise self.error
        if model_id.endswith("flux-1-schnell"):
            return self.flux_result
        return _chunks(self.stream_bytes)


class FakeUploader:
    def __init__(self, result=None):
        self.result = {"src": "/file/abc.png"} if result is None else result
        self.calls = []

    async def upload(self, image):
        self.calls.append(image)
        return self.result


class FailingUploader(FakeUploader):
    async def upload(self, image):
        self.calls.append(image)
        return None


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def inference():
    return FakeInference()


@pytest.fixture
def uploader():
    return FakeUploader()


@pytest.fixture
def client(settings, inference, uploader):
    app = create_app(settings, inference=inference, uploader=uploader)
    return TestClient(app)
