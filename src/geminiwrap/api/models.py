"""Pydantic request and response models for the Gemini Wrapper API.

These models define the JSON schema for every API endpoint.  FastAPI uses
them for automatic request validation, serialisation, and OpenAPI
documentation generation.  Field names are snake_case in Python and
camelCase on the wire (``sessionId``, ``useTools``, ``mimeType`` ...).

Models
------
ChatRequest
    Payload for ``POST /chat``.
ImageRequest
    Payload for ``POST /image/generate`` and ``POST /image/save``.
ChatData, ImageEntry, ImageData
    ``data`` members of successful responses.
ErrorResponse
    The ``{"success": false, "error": ...}`` envelope.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from geminiwrap.core.models import FileImage, GenerationResult, ImageResult, InlineImage


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChatRequest(_CamelModel):
    """Request body for the ``POST /chat`` endpoint.

    Attributes:
        message: Text sent to the model.
        model: Model override.  Defaults to the configured chat model.
        session_id: Opaque identifier echoed back in the response.
        system_prompt: Optional leading instruction turn.
        use_tools: Enable the Google Search tool.
        use_thinking: Enable an unlimited thinking budget.
    """

    message: str = Field(..., description="Message to send to the model.")
    model: str | None = Field(default=None, description="Model override.")
    session_id: str | None = Field(
        default=None,
        description="Session identifier, echoed back unchanged.",
    )
    system_prompt: str | None = Field(default=None, description="Optional system prompt.")
    use_tools: bool = Field(default=False, description="Enable Google Search grounding.")
    use_thinking: bool = Field(default=False, description="Enable thinking mode.")


class ImageRequest(_CamelModel):
    """Request body for the image generation endpoints."""

    prompt: str = Field(..., description="Description of the image to generate.")
    model: str | None = Field(default=None, description="Model override.")


class ChatData(_CamelModel):
    """Payload of a successful chat response."""

    text: str
    chunks: list[str]
    session_id: str | None = None
    used_tools: bool
    used_thinking: bool

    @classmethod
    def from_result(cls, result: GenerationResult) -> ChatData:
        return cls(
            text=result.artifact.text,
            chunks=result.artifact.chunks,
            session_id=result.request.session_id,
            used_tools=result.request.use_tools,
            used_thinking=result.request.use_thinking,
        )


class ImageEntry(_CamelModel):
    """One generated image: base64 ``data`` or a saved-file ``url``."""

    url: str | None = None
    data: str | None = None
    mime_type: str

    @classmethod
    def from_image(cls, image: ImageResult) -> ImageEntry:
        if isinstance(image, FileImage):
            return cls(url=image.url, mime_type=image.mime_type)
        if isinstance(image, InlineImage):
            return cls(data=image.data, mime_type=image.mime_type)
        raise TypeError(f"{type(image).__name__} cannot be embedded in JSON")


class ImageData(_CamelModel):
    """Payload of a successful image generation response."""

    text: str
    images: list[ImageEntry]
    total_images: int

    @classmethod
    def from_result(cls, result: GenerationResult) -> ImageData:
        return cls(
            text=result.artifact.text,
            images=[ImageEntry.from_image(image) for image in result.images],
            total_images=result.total_images,
        )


class ErrorResponse(BaseModel):
    """The error envelope returned by every failing endpoint."""

    success: bool = False
    error: str
