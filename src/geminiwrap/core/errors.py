"""Exception hierarchy for the generation pipeline.

Every failure the pipeline can report derives from :class:`GeminiWrapError`.
Each subclass carries the HTTP status code the API layer should use when it
turns the exception into a ``{"success": false, "error": ...}`` envelope, so
route handlers never need to map exception types themselves.

The message of each exception is user-facing and always keeps the text of the
underlying cause (upstream status line, transport error, SDK error message).
"""

from __future__ import annotations


class GeminiWrapError(Exception):
    """Base class for all pipeline failures."""

    status_code: int = 500


class ValidationError(GeminiWrapError):
    """Request is missing something the selected preset requires.

    Raised before any network I/O takes place.
    """

    status_code = 400


class MediaFetchError(GeminiWrapError):
    """Remote media could not be retrieved."""

    status_code = 502


class GenerationError(GeminiWrapError):
    """The external model call failed."""

    status_code = 500


class StorageError(GeminiWrapError):
    """A generated image could not be written to disk."""

    status_code = 500
