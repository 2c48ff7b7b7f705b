"""
Shared pytest fixtures and configuration for all tests
"""
import pytest
import sys
from pathlib import Path

import httpx

# Add backend to Python path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

RESULT_URL = "https://replicate.delivery/xezq/output.png"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00fake-image-data\xff" * 4


class FakeFileOutput:
    """Mimics replicate's FileOutput: exposes the result location as ``url``"""

    def __init__(self, url):
        self.url = url


class FakeReplicateClient:
    """In-memory stand-in for replicate.Client recording every model run"""

    def __init__(self, output=None, error=None):
        self.output = output if output is not None else FakeFileOutput(RESULT_URL)
        self.error = error
        self.calls = []

    async def async_run(self, ref, input=None, **params):
        self.calls.append({"ref": ref, "input": input})
        if self.error is not None:
            raise self.error
        return self.output


class FetchRecorder:
    """httpx.MockTransport handler serving a canned result image"""

    def __init__(self, status_code=200, content=PNG_BYTES, headers=None):
        self.status_code = status_code
        self.content = content
        self.headers = headers if headers is not None else {"content-type": "image/png"}
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, content=self.content, headers=self.headers)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def settings():
    """Provide settings independent of the developer's environment"""
    from config.settings import Settings
    return Settings(
        REPLICATE_API_TOKEN="r8_test_token",
        REPLICATE_MODEL="google/nano-banana",
        RESULT_FETCH_TIMEOUT=5.0,
    )


@pytest.fixture
def fake_replicate():
    """Provide a fake Replicate client returning a file output with a URL"""
    return FakeReplicateClient()


@pytest.fixture
def fetch_recorder():
    """Provide a mock result server returning PNG bytes"""
    return FetchRecorder()


@pytest.fixture
def generation_service(fake_replicate, fetch_recorder):
    """Provide an ImageGenerationService wired to the fakes"""
    from services.image_generation_service import ImageGenerationService
    return ImageGenerationService(
        client=fake_replicate,
        model="google/nano-banana",
        fetch_timeout=5.0,
        transport=fetch_recorder.transport,
    )


@pytest.fixture
def sample_image():
    """Provide an uploaded PNG image"""
    from models.generation import UploadedImage
    return UploadedImage(content=PNG_BYTES, content_type="image/png")
