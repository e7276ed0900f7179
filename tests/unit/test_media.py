"""Tests for geminiwrap.core.media — media source resolution.

Tests cover:
- Inline references: pure re-wrapping, MIME fallback.
- Remote references: success, content-type handling, failure messages.
"""

from __future__ import annotations

import httpx
import pytest

from geminiwrap.core.errors import MediaFetchError
from geminiwrap.core.media import (
    DEFAULT_MIME_TYPE,
    InlineMedia,
    InlineMediaReference,
    RemoteMediaReference,
    resolve_media,
)

IMAGE_URL = "https://images.test/cat.png"
MISSING_URL = "https://images.test/missing.png"
UNTYPED_URL = "https://images.test/raw"
UNREACHABLE_URL = "https://unreachable.test/cat.png"


class TestInlineResolution:
    """Inline references never fail and never do I/O."""

    @pytest.mark.asyncio
    async def test_bytes_and_type_preserved(self, png_bytes):
        ref = InlineMediaReference(data=png_bytes, declared_mime_type="image/png")
        media = await resolve_media(ref)
        assert media == InlineMedia(data=png_bytes, mime_type="image/png")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("declared", [None, ""])
    async def test_missing_type_falls_back_to_octet_stream(self, declared):
        """A missing declared type must never yield an empty MIME type."""
        media = await resolve_media(InlineMediaReference(data=b"abc", declared_mime_type=declared))
        assert media.mime_type == DEFAULT_MIME_TYPE

    @pytest.mark.asyncio
    async def test_empty_upload_still_resolves(self):
        media = await resolve_media(InlineMediaReference(data=b""))
        assert media.data == b""
        assert media.mime_type

    def test_reference_is_immutable(self):
        ref = InlineMediaReference(data=b"abc")
        with pytest.raises(AttributeError):
            ref.data = b"other"  # type: ignore[misc]


class TestRemoteResolution:
    """Remote references are fetched with the supplied HTTP client."""

    @pytest.mark.asyncio
    async def test_fetches_bytes_and_content_type(self, http_client, png_bytes):
        media = await resolve_media(RemoteMediaReference(IMAGE_URL), http_client=http_client)
        assert media.data == png_bytes
        assert media.mime_type == "image/png"

    @pytest.mark.asyncio
    async def test_missing_content_type_defaults(self, http_client):
        media = await resolve_media(RemoteMediaReference(UNTYPED_URL), http_client=http_client)
        assert media.data == b"raw-bytes"
        assert media.mime_type == DEFAULT_MIME_TYPE

    @pytest.mark.asyncio
    async def test_content_type_parameters_stripped(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, content=b"<svg/>", headers={"content-type": "image/svg+xml; charset=utf-8"}
            )

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            media = await resolve_media(RemoteMediaReference(IMAGE_URL), http_client=client)

        assert media.mime_type == "image/svg+xml"

    @pytest.mark.asyncio
    async def test_non_success_status_raises_with_status_text(self, http_client):
        with pytest.raises(MediaFetchError, match="404 Not Found"):
            await resolve_media(RemoteMediaReference(MISSING_URL), http_client=http_client)

    @pytest.mark.asyncio
    async def test_unreachable_host_raises_with_transport_error(self, http_client):
        with pytest.raises(MediaFetchError, match="Name or service not known"):
            await resolve_media(RemoteMediaReference(UNREACHABLE_URL), http_client=http_client)

    @pytest.mark.asyncio
    async def test_malformed_url_raises(self, http_client):
        with pytest.raises(MediaFetchError, match="Error fetching file from URL"):
            await resolve_media(RemoteMediaReference("not a url"), http_client=http_client)

    @pytest.mark.asyncio
    async def test_no_caching_between_calls(self, png_bytes):
        """The same URL resolved twice is fetched twice."""
        calls: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(str(request.url))
            return httpx.Response(200, content=png_bytes, headers={"content-type": "image/png"})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            await resolve_media(RemoteMediaReference(IMAGE_URL), http_client=client)
            await resolve_media(RemoteMediaReference(IMAGE_URL), http_client=client)

        assert calls == [IMAGE_URL, IMAGE_URL]
