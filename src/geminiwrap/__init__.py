"""Gemini Wrapper - HTTP chat and image transforms backed by Google Gemini."""

__version__ = "1.0.0"

from geminiwrap.core.config import GeminiWrapConfig, config
from geminiwrap.core.pipeline import GenerationPipeline
from geminiwrap.core.presets import Preset

__all__ = [
    "GeminiWrapConfig",
    "GenerationPipeline",
    "Preset",
    "config",
]
