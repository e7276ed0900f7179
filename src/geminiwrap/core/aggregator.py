"""Response aggregation.

Both model modes end up here and produce the same
:class:`~geminiwrap.core.models.GeneratedArtifact`:

- :func:`aggregate_stream` pulls chunks in arrival order.  The text parts of
  each chunk form that chunk's delta; the delta is appended to the running
  text and also kept on its own in ``artifact.chunks``.
- :func:`aggregate_response` walks the parts of a single response once.

Inline-data parts become :class:`GeneratedImage` entries in emission order.
Chunks or responses without candidates, content or parts contribute nothing
and are not an error; an empty artifact is a valid "model produced nothing"
outcome that callers handle themselves.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable, Iterable

from google.genai import types

from geminiwrap.core.models import GeneratedArtifact, GeneratedImage

logger = logging.getLogger(__name__)


def _content_parts(response: types.GenerateContentResponse) -> list[types.Part]:
    """Return the parts of the first candidate, or an empty list."""
    if not response.candidates:
        return []
    content = response.candidates[0].content
    if content is None or not content.parts:
        return []
    return list(content.parts)


def _collect(parts: Iterable[types.Part], images: list[GeneratedImage]) -> str:
    """Append image parts to ``images`` and return the joined text parts."""
    text = ""
    for part in parts:
        if part.inline_data is not None and part.inline_data.data:
            images.append(
                GeneratedImage(
                    data=part.inline_data.data,
                    mime_type=part.inline_data.mime_type or "image/png",
                )
            )
        elif part.text and not part.thought:
            # Thought summaries are reasoning, not output.
            text += part.text
    return text


async def aggregate_stream(
    chunks: AsyncIterable[types.GenerateContentResponse],
) -> GeneratedArtifact:
    """Consume a chunk stream into an artifact.

    Args:
        chunks: Response chunks in delivery order.

    Returns:
        The aggregated artifact with per-chunk deltas recorded.
    """
    artifact = GeneratedArtifact()
    count = 0

    async for chunk in chunks:
        count += 1
        delta = _collect(_content_parts(chunk), artifact.images)
        if delta:
            artifact.text += delta
            artifact.chunks.append(delta)

    logger.debug(
        "Aggregated %d chunks: %d text deltas, %d images",
        count,
        len(artifact.chunks),
        len(artifact.images),
    )
    return artifact


def aggregate_response(response: types.GenerateContentResponse) -> GeneratedArtifact:
    """Normalize a single non-streaming response."""
    artifact = GeneratedArtifact()
    artifact.text = _collect(_content_parts(response), artifact.images)
    return artifact
