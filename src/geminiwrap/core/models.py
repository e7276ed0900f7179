"""Data models shared by the generation pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

from geminiwrap.core.media import MediaReference


@dataclass(frozen=True)
class GenerationRequest:
    """Everything one pipeline run needs from the caller.

    ``session_id`` is echoed back in the chat response and never used to
    look anything up.
    """

    message: str = ""
    model_name: str | None = None
    system_prompt: str | None = None
    media: MediaReference | None = None
    use_tools: bool = False
    use_thinking: bool = False
    session_id: str | None = None


@dataclass(frozen=True)
class GeneratedImage:
    """An image part emitted by the model, as raw bytes."""

    data: bytes
    mime_type: str


@dataclass
class GeneratedArtifact:
    """Normalized output of one model call.

    Attributes:
        text: Concatenation of every text part, in emission order.
        chunks: Per-chunk text deltas (streaming only).
        images: Image parts in emission order.
    """

    text: str = ""
    chunks: list[str] = field(default_factory=list)
    images: list[GeneratedImage] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Materialized images.  Exactly one variant is produced per image, chosen by
# the preset's output policy.
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InlineImage:
    """Base64 image payload embedded in a JSON response."""

    data: str
    mime_type: str
    kind: Literal["inline"] = "inline"


@dataclass(frozen=True)
class FileImage:
    """Image written under the public images directory."""

    url: str
    mime_type: str
    kind: Literal["file"] = "file"


@dataclass(frozen=True)
class BufferImage:
    """Raw image bytes returned as the HTTP response body."""

    buffer: bytes
    mime_type: str
    kind: Literal["buffer"] = "buffer"


ImageResult = Union[InlineImage, FileImage, BufferImage]


@dataclass
class GenerationResult:
    """What the pipeline hands back to the API layer.

    Attributes:
        preset: Name of the preset that ran.
        artifact: The aggregated model output.
        images: Materialized images, one per ``artifact.images`` entry.
            Empty for presets without an output policy (chat).
        request: The request that produced this result.
    """

    preset: str
    artifact: GeneratedArtifact
    images: list[ImageResult]
    request: GenerationRequest

    @property
    def text(self) -> str:
        return self.artifact.text

    @property
    def total_images(self) -> int:
        return len(self.images)
