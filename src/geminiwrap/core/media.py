"""Media source resolution.

An input image or file reaches the pipeline in one of two forms:

- an **inline** reference holding bytes already uploaded by the caller, or
- a **remote** reference holding a URL that must be downloaded first.

:func:`resolve_media` normalizes both into a single :class:`InlineMedia`
value: raw bytes plus a MIME type that is never empty.  Nothing is cached;
the same URL requested twice is downloaded twice.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Union

import httpx

from geminiwrap.core.errors import MediaFetchError

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class InlineMediaReference:
    """Media uploaded with the request."""

    data: bytes
    declared_mime_type: str | None = None
    kind: Literal["inline"] = "inline"


@dataclass(frozen=True)
class RemoteMediaReference:
    """Media that lives behind a URL."""

    url: str
    kind: Literal["remote"] = "remote"


MediaReference = Union[InlineMediaReference, RemoteMediaReference]


@dataclass(frozen=True)
class InlineMedia:
    """Resolved media ready to be embedded in a request.

    Attributes:
        data: Raw media bytes.  The google-genai SDK base64-encodes them
            when the request is serialized.
        mime_type: Media type, never empty.
    """

    data: bytes
    mime_type: str


def _normalize_mime_type(value: str | None) -> str:
    """Strip parameters from a content type and fall back to octet-stream."""
    if not value:
        return DEFAULT_MIME_TYPE
    mime_type = value.split(";", 1)[0].strip().lower()
    return mime_type or DEFAULT_MIME_TYPE


async def _fetch(url: str, client: httpx.AsyncClient) -> InlineMedia:
    try:
        response = await client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise MediaFetchError(f"Error fetching file from URL: {e}") from e

    if not response.is_success:
        raise MediaFetchError(
            "Error fetching file from URL: "
            f"Failed to fetch file: {response.status_code} {response.reason_phrase}"
        )

    mime_type = _normalize_mime_type(response.headers.get("content-type"))
    logger.debug("Fetched %d bytes (%s) from %s", len(response.content), mime_type, url)
    return InlineMedia(data=response.content, mime_type=mime_type)


async def resolve_media(
    ref: MediaReference,
    *,
    http_client: httpx.AsyncClient | None = None,
    timeout: float = 30.0,
) -> InlineMedia:
    """Resolve a media reference into inline bytes and a MIME type.

    Inline references are re-wrapped without any I/O and cannot fail.
    Remote references are downloaded with a single HTTP GET; any 2xx
    response is a success.

    Args:
        ref: The reference to resolve.
        http_client: Shared client to download with.  When omitted a
            short-lived client is created for this call.
        timeout: Download timeout in seconds, used only when no
            ``http_client`` is supplied.

    Returns:
        The resolved :class:`InlineMedia`.

    Raises:
        MediaFetchError: The URL is malformed, the host is unreachable, or
            the server answered with a non-success status.  The message
            carries the status line or the transport error text.
    """
    if isinstance(ref, InlineMediaReference):
        return InlineMedia(data=ref.data, mime_type=_normalize_mime_type(ref.declared_mime_type))

    if http_client is not None:
        return await _fetch(ref.url, http_client)

    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
        return await _fetch(ref.url, client)
