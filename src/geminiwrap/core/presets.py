"""Transform presets.

A preset is pure configuration: it fixes the prompt text (or lets the caller
supply it), the input contract, the model mode and the output policy for one
user-facing transform.  :class:`~geminiwrap.core.pipeline.GenerationPipeline`
reads these records; it never branches on the preset name.

========================  ==================  =========  ==========  ==========
Preset                    Input               Streaming  Output      Model
========================  ==================  =========  ==========  ==========
``chat``                  text + opt. media   yes        text only   chat
``image-generate``        text                no         inline      image
``image-save``            text                no         file        image
``figurine``              single image        no         buffer      image
``hijab``                 single image        no         buffer      image
``sdmtinggi``             single image        no         buffer      image
``hitam``                 single image        no         buffer      image
========================  ==================  =========  ==========  ==========
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal

from geminiwrap.core.config import GeminiWrapConfig
from geminiwrap.core.materializer import OutputPolicy

InputContract = Literal["text-plus-optional-media", "text-only", "single-required-media"]
ModelKind = Literal["chat", "image"]

TEXT_ONLY: tuple[str, ...] = ("TEXT",)
IMAGE_AND_TEXT: tuple[str, ...] = ("IMAGE", "TEXT")

FIGURINE_PROMPT = (
    "Using the nano-banana model, a commercial 1/7 scale figurine of the character "
    "in the picture was created, depicting a realistic style and a realistic "
    "environment. The figurine is placed on a computer desk with a round transparent "
    "acrylic base. There is no text on the base. The computer screen shows the Zbrush "
    "modeling process of the figurine. Next to the computer screen is a BANDAI-style "
    "toy box with the original painting printed on it."
)

HIJAB_PROMPT = (
    "Modify only the hair area by converting it into a neat, fully-covered white hijab "
    "in Indonesian Muslim style (100% no hair visible), while STRICTLY PRESERVING all "
    "other elements: do NOT alter skin color, clothing, facial features, pose, "
    "background, shadows, or any original details beyond the hair-to-hijab "
    "conversion—no additions/subtractions permitted."
)

SDMTINGGI_PROMPT = (
    "Edit the uploaded image by keeping the exact same character and anything they "
    "are holding without changing their pose, position, or appearance, convert only "
    "the character and held objects into grayscale with all visual details preserved "
    "(not fully white), add a clean solid black rectangular censor bar that precisely "
    "follows the orientation of the character's eyes and covers only the eyes, remove "
    "the entire original background completely and replace it with a flat solid pure "
    "red color (#FF0000), and make sure no parts of the character or the items they "
    "are holding are removed or replaced."
)


@dataclass(frozen=True)
class Preset:
    """Configuration record for one transform.

    Attributes:
        name: Registry key, e.g. ``"figurine"``.
        title: Human-readable label used in log and error messages.
        prompt: Fixed prompt text.  ``None`` means the caller's message is
            sent instead.
        input_contract: What the caller must supply.
        streaming: Consume the model output as a chunk stream.
        output_policy: How generated images are delivered, or ``None`` when
            the preset returns text only.
        model_kind: Which configured default model applies.
        response_modalities: Output modalities requested from the model.
        download_name: Suggested filename for buffer responses.
    """

    name: str
    title: str
    prompt: str | None
    input_contract: InputContract
    streaming: bool
    output_policy: OutputPolicy | None
    model_kind: ModelKind
    response_modalities: tuple[str, ...]
    download_name: str | None = None

    @property
    def requires_media(self) -> bool:
        return self.input_contract == "single-required-media"

    def default_model(self, config: GeminiWrapConfig) -> str:
        """Return the configured default model for this preset."""
        return config.chat_model if self.model_kind == "chat" else config.image_model


CHAT = Preset(
    name="chat",
    title="Chat",
    prompt=None,
    input_contract="text-plus-optional-media",
    streaming=True,
    output_policy=None,
    model_kind="chat",
    response_modalities=TEXT_ONLY,
)

IMAGE_GENERATE = Preset(
    name="image-generate",
    title="Image",
    prompt=None,
    input_contract="text-only",
    streaming=False,
    output_policy="inline",
    model_kind="image",
    response_modalities=IMAGE_AND_TEXT,
    download_name="generated.png",
)

IMAGE_SAVE = replace(IMAGE_GENERATE, name="image-save", output_policy="file")


def _image_transform(name: str, title: str, prompt: str) -> Preset:
    return Preset(
        name=name,
        title=title,
        prompt=prompt,
        input_contract="single-required-media",
        streaming=False,
        output_policy="buffer",
        model_kind="image",
        response_modalities=IMAGE_AND_TEXT,
        download_name=f"{name}.png",
    )


FIGURINE = _image_transform("figurine", "Figurine", FIGURINE_PROMPT)
HIJAB = _image_transform("hijab", "Hijab", HIJAB_PROMPT)
SDMTINGGI = _image_transform("sdmtinggi", "SdmTinggi", SDMTINGGI_PROMPT)


def build_presets(config: GeminiWrapConfig) -> dict[str, Preset]:
    """Return the preset registry.

    The hitam prompt is an externally supplied literal, so that preset is
    built from configuration.
    """
    hitam = _image_transform("hitam", "Hitam", config.hitam_prompt)
    return {
        preset.name: preset
        for preset in (CHAT, IMAGE_GENERATE, IMAGE_SAVE, FIGURINE, HIJAB, SDMTINGGI, hitam)
    }
