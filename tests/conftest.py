"""Shared pytest fixtures for Gemini Wrapper tests."""

import io
import shutil
import tempfile
from collections.abc import AsyncIterator, Callable
from pathlib import Path
from typing import Generator
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from google.genai import types
from PIL import Image

from geminiwrap.core.client import GenerationClient
from geminiwrap.core.config import GeminiWrapConfig
from geminiwrap.core.pipeline import GenerationPipeline

IMAGE_URL = "https://images.test/cat.png"
MISSING_URL = "https://images.test/missing.png"
UNTYPED_URL = "https://images.test/raw"
UNREACHABLE_URL = "https://unreachable.test/cat.png"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> GeminiWrapConfig:
    """Create a test configuration with a temporary images directory."""
    return GeminiWrapConfig(
        _env_file=None,
        api_key="test-key",
        public_dir=str(temp_dir / "public"),
        images_dir=str(temp_dir / "public" / "images"),
        hitam_prompt="Darken this picture.",
    )


@pytest.fixture
def png_bytes() -> bytes:
    """A small, real PNG image."""
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=(255, 0, 0)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def jpeg_bytes() -> bytes:
    """A small, real JPEG image."""
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=(0, 0, 255)).save(buffer, format="JPEG")
    return buffer.getvalue()


# ---------------------------------------------------------------------------
# Model response builders.
# ---------------------------------------------------------------------------


@pytest.fixture
def make_response() -> Callable[..., types.GenerateContentResponse]:
    """Factory building a model response whose first candidate holds ``parts``.

    Calling it with no parts yields a response without candidates.
    """

    def _make(*parts: types.Part) -> types.GenerateContentResponse:
        if not parts:
            return types.GenerateContentResponse(candidates=[])
        return types.GenerateContentResponse(
            candidates=[types.Candidate(content=types.Content(role="model", parts=list(parts)))]
        )

    return _make


@pytest.fixture
def image_part() -> Callable[..., types.Part]:
    """Factory building an inline image part."""

    def _make(data: bytes, mime_type: str = "image/png") -> types.Part:
        return types.Part(inline_data=types.Blob(data=data, mime_type=mime_type))

    return _make


@pytest.fixture
def stream_of() -> Callable[[list], AsyncIterator]:
    """Factory turning a list of chunks into an async iterator."""

    def _make(chunks: list) -> AsyncIterator:
        async def _gen():
            for chunk in chunks:
                yield chunk

        return _gen()

    return _make


@pytest.fixture
def fake_genai() -> MagicMock:
    """Stand-in for ``genai.Client`` with async model methods.

    Tests set ``fake_genai.aio.models.generate_content.return_value`` or
    ``fake_genai.aio.models.generate_content_stream.return_value``.
    """
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock()
    client.aio.models.generate_content_stream = AsyncMock()
    return client


# ---------------------------------------------------------------------------
# Remote media.
# ---------------------------------------------------------------------------


@pytest.fixture
def media_handler(png_bytes: bytes) -> Callable[[httpx.Request], httpx.Response]:
    """Request handler emulating a remote image host."""

    def _handle(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if url == IMAGE_URL:
            return httpx.Response(200, content=png_bytes, headers={"content-type": "image/png"})
        if url == UNTYPED_URL:
            return httpx.Response(200, content=b"raw-bytes")
        if url == UNREACHABLE_URL:
            raise httpx.ConnectError("Name or service not known", request=request)
        return httpx.Response(404)

    return _handle


@pytest_asyncio.fixture
async def http_client(media_handler) -> AsyncIterator[httpx.AsyncClient]:
    """Async HTTP client backed by :func:`media_handler`."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(media_handler)) as client:
        yield client


# ---------------------------------------------------------------------------
# Pipeline and API.
# ---------------------------------------------------------------------------


@pytest.fixture
def pipeline(
    test_config: GeminiWrapConfig,
    fake_genai: MagicMock,
    http_client: httpx.AsyncClient,
) -> GenerationPipeline:
    """Pipeline wired to the fake model and the mock media host."""
    return GenerationPipeline(
        test_config,
        GenerationClient(test_config, client=fake_genai),
        http_client,
    )


@pytest.fixture
def test_client(
    test_config: GeminiWrapConfig,
    fake_genai: MagicMock,
    media_handler,
) -> Generator[TestClient, None, None]:
    """FastAPI test client wired to the fake model and the mock media host.

    Each request gets its own pipeline whose HTTP client is opened and
    closed on the application's event loop.  The lifespan handler is not
    run, so no real Gemini or HTTP client is created.
    """
    from geminiwrap.api.main import app, get_pipeline

    async def _pipeline() -> AsyncIterator[GenerationPipeline]:
        async with httpx.AsyncClient(transport=httpx.MockTransport(media_handler)) as client:
            yield GenerationPipeline(
                test_config,
                GenerationClient(test_config, client=fake_genai),
                client,
            )

    app.dependency_overrides[get_pipeline] = _pipeline
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
