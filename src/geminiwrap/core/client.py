"""Gemini model access for the Gemini Wrapper.

This module provides :class:`GenerationClient`, the single point of contact
with the external model.  It owns a ``google.genai`` client and dispatches
assembled turns in one of two modes:

- **streaming** — returns a lazy async iterator of response chunks; nothing
  is sent until the iterator is first advanced.
- **non-streaming** — awaits a single complete response.

Key Responsibilities
--------------------
- **Lazy client creation** — the ``genai.Client`` is created on the first
  call, so the application can start (and be tested) without an API key.
- **Config translation** — :class:`ModelConfig` becomes a
  ``types.GenerateContentConfig`` with response modalities, the Google
  Search tool and an unlimited thinking budget as requested.
- **Error wrapping** — any failure of the call, or of the stream while it is
  being consumed, is re-raised as :class:`GenerationError` with the upstream
  message preserved.  There is no retry.

Usage
-----
::

    from geminiwrap.core.config import config
    from geminiwrap.core.client import GenerationClient, ModelConfig

    client = GenerationClient(config)
    response = await client.generate(
        turns,
        ModelConfig(model="gemini-2.5-flash", response_modalities=("TEXT",)),
        streaming=False,
    )
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Union

from google import genai
from google.genai import types

from geminiwrap.core.config import GeminiWrapConfig
from geminiwrap.core.errors import GenerationError

logger = logging.getLogger(__name__)

# -1 lets the model decide how much reasoning to spend.
UNLIMITED_THINKING_BUDGET = -1

ModelOutput = Union[AsyncIterator[types.GenerateContentResponse], types.GenerateContentResponse]


@dataclass(frozen=True)
class ModelConfig:
    """Model selection and generation directives for one call.

    Attributes:
        model: Model name, e.g. ``"gemini-2.5-flash"``.
        response_modalities: Requested output modalities (``"TEXT"``,
            ``"IMAGE"``).
        use_tools: Attach the Google Search tool.
        use_thinking: Attach an unconstrained thinking budget.
    """

    model: str
    response_modalities: tuple[str, ...] = ("TEXT",)
    use_tools: bool = False
    use_thinking: bool = False

    def to_generate_config(self) -> types.GenerateContentConfig:
        """Translate into the SDK's request configuration."""
        kwargs: dict = {"response_modalities": list(self.response_modalities)}
        if self.use_tools:
            kwargs["tools"] = [types.Tool(google_search=types.GoogleSearch())]
        if self.use_thinking:
            kwargs["thinking_config"] = types.ThinkingConfig(
                thinking_budget=UNLIMITED_THINKING_BUDGET
            )
        return types.GenerateContentConfig(**kwargs)


class GenerationClient:
    """Dispatches assembled turns to the Gemini API.

    Attributes:
        _config (GeminiWrapConfig):
            Application configuration; ``api_key`` is read on first use.
        _client (genai.Client | None):
            The SDK client, or ``None`` until the first call.
    """

    def __init__(self, config: GeminiWrapConfig, client: genai.Client | None = None) -> None:
        """Initialise the generation client.

        Args:
            config: Application configuration instance.
            client: Pre-built SDK client.  When omitted one is created lazily
                from ``config.api_key``.
        """
        self._config = config
        self._client = client

    @property
    def sdk(self) -> genai.Client:
        """Return the SDK client, creating it on first access."""
        if self._client is None:
            logger.info("Creating Gemini client")
            self._client = genai.Client(api_key=self._config.api_key or None)
        return self._client

    async def generate(
        self,
        turns: list[types.Content],
        model_config: ModelConfig,
        *,
        streaming: bool,
    ) -> ModelOutput:
        """Send turns to the model.

        Args:
            turns: Assembled request contents.
            model_config: Model name and directives.
            streaming: Return a chunk iterator instead of one response.

        Returns:
            An async iterator of chunks when ``streaming`` is true, otherwise
            the complete response.

        Raises:
            GenerationError: The SDK could not be set up or the call failed.
        """
        logger.info(
            "Dispatching %s request to %s (tools=%s, thinking=%s)",
            "streaming" if streaming else "non-streaming",
            model_config.model,
            model_config.use_tools,
            model_config.use_thinking,
        )
        if streaming:
            return self._stream(turns, model_config)

        try:
            return await self.sdk.aio.models.generate_content(
                model=model_config.model,
                contents=turns,
                config=model_config.to_generate_config(),
            )
        except Exception as e:
            logger.error("Model call to %s failed: %s", model_config.model, e)
            raise GenerationError(f"Model call to {model_config.model} failed: {e}") from e

    async def _stream(
        self,
        turns: list[types.Content],
        model_config: ModelConfig,
    ) -> AsyncIterator[types.GenerateContentResponse]:
        try:
            stream = await self.sdk.aio.models.generate_content_stream(
                model=model_config.model,
                contents=turns,
                config=model_config.to_generate_config(),
            )
            async for chunk in stream:
                yield chunk
        except Exception as e:
            logger.error("Streaming call to %s failed: %s", model_config.model, e)
            raise GenerationError(f"Model call to {model_config.model} failed: {e}") from e
