"""Output materialization for generated images.

Three delivery forms exist, selected by the preset's output policy:

- ``"inline"`` — base64 text for embedding in a JSON body.
- ``"file"`` — bytes written to ``generated_<epoch-ms>.<ext>`` under the
  images directory; the result carries the ``/images/<name>`` URL path.
- ``"buffer"`` — bytes handed back untouched for use as the response body.

File names are unique only to the millisecond.  Two images written by the
same process in the same millisecond overwrite each other.
"""

from __future__ import annotations

import base64
import logging
import re
import time
from pathlib import Path
from typing import Literal

from geminiwrap.core.errors import StorageError
from geminiwrap.core.models import (
    BufferImage,
    FileImage,
    GeneratedImage,
    ImageResult,
    InlineImage,
)

logger = logging.getLogger(__name__)

OutputPolicy = Literal["inline", "file", "buffer"]

IMAGES_URL_PREFIX = "/images"
DEFAULT_EXTENSION = "png"

_SUBTYPE_RE = re.compile(r"^[a-z0-9][a-z0-9.-]*$")


def extension_for(mime_type: str | None) -> str:
    """Derive a file extension from a MIME type's subtype.

    ``image/jpeg`` gives ``jpeg`` and ``image/svg+xml`` gives ``svg``.
    Anything without a usable subtype falls back to ``png``.
    """
    if not mime_type or "/" not in mime_type:
        return DEFAULT_EXTENSION
    subtype = mime_type.split("/", 1)[1].split(";", 1)[0].split("+", 1)[0].strip().lower()
    if not _SUBTYPE_RE.match(subtype):
        return DEFAULT_EXTENSION
    return subtype


def save_image(image: GeneratedImage, images_dir: Path) -> FileImage:
    """Write an image to disk and return its public URL path.

    Args:
        image: Image bytes and MIME type.
        images_dir: Directory to write into.  Must already exist.

    Returns:
        A :class:`FileImage` pointing at ``/images/<filename>``.

    Raises:
        StorageError: The file could not be written.
    """
    filename = f"generated_{time.time_ns() // 1_000_000}.{extension_for(image.mime_type)}"
    try:
        (images_dir / filename).write_bytes(image.data)
    except OSError as e:
        raise StorageError(f"Failed to save image: {e}") from e
    logger.info("Saved generated image to %s", images_dir / filename)
    return FileImage(url=f"{IMAGES_URL_PREFIX}/{filename}", mime_type=image.mime_type)


def materialize(
    image: GeneratedImage,
    policy: OutputPolicy,
    *,
    images_dir: Path | None = None,
) -> ImageResult:
    """Convert a generated image into its delivery form.

    Args:
        image: Image produced by the model.
        policy: ``"inline"``, ``"file"`` or ``"buffer"``.
        images_dir: Target directory, required for the ``"file"`` policy.

    Returns:
        The matching :data:`ImageResult` variant.

    Raises:
        ValueError: Unknown policy, or ``"file"`` without ``images_dir``.
    """
    if policy == "buffer":
        return BufferImage(buffer=image.data, mime_type=image.mime_type)
    if policy == "inline":
        return InlineImage(
            data=base64.b64encode(image.data).decode("ascii"),
            mime_type=image.mime_type,
        )
    if policy == "file":
        if images_dir is None:
            raise ValueError("images_dir is required for the 'file' output policy")
        return save_image(image, images_dir)
    raise ValueError(f"Unknown output policy: {policy}")
