"""Content assembly: turn a generation request into model turns.

The ordering rules are fixed:

1. A system prompt, when present, becomes a leading ``user`` turn.
2. The final turn holds the message text followed by the media part.

:func:`assemble` is a pure function; the same request and media always
produce an equal list of turns.
"""

from __future__ import annotations

from google.genai import types

from geminiwrap.core.media import InlineMedia
from geminiwrap.core.models import GenerationRequest

USER_ROLE = "user"


def assemble(
    request: GenerationRequest,
    media: InlineMedia | None = None,
    *,
    prompt: str | None = None,
) -> list[types.Content]:
    """Build the ordered turns for one model call.

    Args:
        request: The incoming generation request.
        media: Resolved media to attach after the text part, if any.
        prompt: Fixed preset text used instead of ``request.message``.

    Returns:
        The list of :class:`google.genai.types.Content` turns.
    """
    contents: list[types.Content] = []

    if request.system_prompt:
        contents.append(
            types.Content(role=USER_ROLE, parts=[types.Part(text=request.system_prompt)])
        )

    parts = [types.Part(text=prompt if prompt is not None else request.message)]
    if media is not None:
        parts.append(
            types.Part(inline_data=types.Blob(data=media.data, mime_type=media.mime_type))
        )

    contents.append(types.Content(role=USER_ROLE, parts=parts))
    return contents
