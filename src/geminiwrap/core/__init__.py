"""Core generation pipeline for the Gemini Wrapper.

Architecture Overview
---------------------
The pipeline is built from small stages, leaves first:

1. **Media resolution** (media.py): uploads and URLs become inline bytes.
2. **Content assembly** (content.py): request text and media become turns.
3. **Model access** (client.py): streaming or single-shot Gemini calls.
4. **Aggregation** (aggregator.py): model output becomes text plus images.
5. **Materialization** (materializer.py): images become base64, files or
   raw buffers.
6. **Presets** (presets.py): fixed configurations for each transform.
7. **Orchestration** (pipeline.py): runs the stages for one request.

Configuration lives in config.py and the error hierarchy in errors.py.
"""

from geminiwrap.core.config import GeminiWrapConfig, config
from geminiwrap.core.errors import (
    GeminiWrapError,
    GenerationError,
    MediaFetchError,
    StorageError,
    ValidationError,
)
from geminiwrap.core.pipeline import GenerationPipeline

__all__ = [
    "GeminiWrapConfig",
    "GeminiWrapError",
    "GenerationError",
    "GenerationPipeline",
    "MediaFetchError",
    "StorageError",
    "ValidationError",
    "config",
]
