"""Generation pipeline for the Gemini Wrapper.

:class:`GenerationPipeline` runs one request through every stage:

1. **Validate** — presets that need an image reject requests without one,
   and text presets reject a blank message.  Nothing touches the network
   before this passes.
2. **Resolve** — the media reference, if any, becomes inline bytes.
3. **Assemble** — the preset prompt (or the caller's message) and the media
   become the ordered model turns.
4. **Generate** — the model is called in the preset's mode.
5. **Aggregate** — the output becomes a :class:`GeneratedArtifact`.
6. **Materialize** — each image is delivered per the preset's output policy.

Any stage failure propagates as a :class:`GeminiWrapError` subclass; nothing
partial is returned.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from geminiwrap.core.aggregator import aggregate_response, aggregate_stream
from geminiwrap.core.client import GenerationClient, ModelConfig
from geminiwrap.core.config import GeminiWrapConfig
from geminiwrap.core.content import assemble
from geminiwrap.core.errors import ValidationError
from geminiwrap.core.materializer import materialize
from geminiwrap.core.media import InlineMedia, resolve_media
from geminiwrap.core.models import GenerationRequest, GenerationResult
from geminiwrap.core.presets import Preset, build_presets

logger = logging.getLogger(__name__)


class GenerationPipeline:
    """Runs generation requests against a preset.

    The pipeline holds no per-request state; one instance serves every
    concurrent request of the process.

    Attributes:
        presets (dict[str, Preset]):
            Registry of available presets, keyed by name.
    """

    def __init__(
        self,
        config: GeminiWrapConfig,
        client: GenerationClient,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the pipeline.

        Args:
            config: Application configuration instance.
            client: Client used to call the model.
            http_client: Shared client for remote media downloads.  When
                omitted each download opens its own client.
        """
        self._config = config
        self._client = client
        self._http_client = http_client
        self.presets = build_presets(config)

    @property
    def images_dir(self) -> Path:
        return self._config.images_dir

    def get_preset(self, name: str) -> Preset:
        try:
            return self.presets[name]
        except KeyError:
            raise ValueError(f"Unknown preset: {name}") from None

    def validate(self, preset: Preset, request: GenerationRequest) -> None:
        """Check the request against the preset's input contract.

        Raises:
            ValidationError: Required media is missing, or the message is
                blank for a preset that sends the caller's text.
        """
        if preset.requires_media and request.media is None:
            raise ValidationError(f"{preset.title} requires an input image")
        if preset.prompt is None and not request.message.strip():
            raise ValidationError(f"{preset.title} requires a non-empty message")

    def model_config_for(self, preset: Preset, request: GenerationRequest) -> ModelConfig:
        """Build the model configuration for a request."""
        return ModelConfig(
            model=request.model_name or preset.default_model(self._config),
            response_modalities=preset.response_modalities,
            use_tools=request.use_tools,
            use_thinking=request.use_thinking,
        )

    async def run(self, preset: Preset | str, request: GenerationRequest) -> GenerationResult:
        """Run one request through the full pipeline.

        Args:
            preset: A :class:`Preset` or the name of a registered one.
            request: The caller's request.

        Returns:
            The aggregated artifact together with the materialized images.

        Raises:
            ValidationError: The request does not satisfy the preset.
            MediaFetchError: Remote media could not be downloaded.
            GenerationError: The model call failed.
            StorageError: A generated image could not be saved.
        """
        if isinstance(preset, str):
            preset = self.get_preset(preset)

        self.validate(preset, request)

        media: InlineMedia | None = None
        if request.media is not None:
            media = await resolve_media(
                request.media,
                http_client=self._http_client,
                timeout=self._config.fetch_timeout,
            )

        turns = assemble(request, media, prompt=preset.prompt)
        model_config = self.model_config_for(preset, request)

        logger.info("Running preset %s with model %s", preset.name, model_config.model)
        output = await self._client.generate(turns, model_config, streaming=preset.streaming)

        if preset.streaming:
            artifact = await aggregate_stream(output)
        else:
            artifact = aggregate_response(output)

        images = []
        if preset.output_policy is not None:
            images = [
                materialize(image, preset.output_policy, images_dir=self.images_dir)
                for image in artifact.images
            ]

        logger.info(
            "Preset %s produced %d characters of text and %d images",
            preset.name,
            len(artifact.text),
            len(images),
        )
        return GenerationResult(
            preset=preset.name,
            artifact=artifact,
            images=images,
            request=request,
        )
