"""Gemini Wrapper — FastAPI Application.

This module is the single entry point for the web application.  It defines
the FastAPI ``app`` instance, all REST API routes, and the ``main()`` CLI
function that launches the uvicorn server.

Architecture
------------
The application is stateless:

- **Generation** is delegated to
  :class:`~geminiwrap.core.pipeline.GenerationPipeline`, created once by the
  lifespan handler and shared by every request.
- **Errors** raised by the pipeline are turned into the
  ``{"success": false, "error": ...}`` envelope by an exception handler,
  and any other exception gets the same envelope with a 500; routes only
  deal with successful results.
- **Saved images** are served from the images directory by FastAPI's
  ``StaticFiles`` under ``/images``; the rest of the public tree is mounted
  at ``/`` after every route.
- **Sessions** are not stored.  ``sessionId`` is echoed back as received.

Endpoints
---------
========  ======================  ===========================================
Method    Path                    Purpose
========  ======================  ===========================================
GET       ``/``                   Welcome document listing the endpoints
POST      ``/chat``               Chat (JSON body)
GET       ``/chat``               Chat (query, optional ``file`` URL)
POST      ``/chat/upload``        Chat with an uploaded file
GET       ``/chat/with-file``     Chat with a file URL
POST      ``/image/generate``     Generate images, base64 in JSON
GET       ``/image/generate``     Same, via query parameters
POST      ``/image/save``         Generate images, saved under ``/images``
POST/GET  ``/figurine``           Figurine transform, image bytes response
POST/GET  ``/hijabkan``           Hijab transform, image bytes response
POST/GET  ``/sdmtinggi``          SdmTinggi transform, image bytes response
POST/GET  ``/hitamkan``           Hitam transform, image bytes response
========  ======================  ===========================================

Usage
-----
CLI (installed entry point)::

    geminiwrap

Direct invocation::

    python -m geminiwrap.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import Depends, FastAPI, File, Form, Query, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles

from geminiwrap import __version__
from geminiwrap.api.models import ChatData, ChatRequest, ErrorResponse, ImageData, ImageRequest
from geminiwrap.core.client import GenerationClient
from geminiwrap.core.config import config
from geminiwrap.core.errors import GeminiWrapError
from geminiwrap.core.media import InlineMediaReference, MediaReference, RemoteMediaReference
from geminiwrap.core.models import BufferImage, GenerationRequest, GenerationResult
from geminiwrap.core.pipeline import GenerationPipeline

logger = logging.getLogger(__name__)

NO_IMAGE_ERROR = "No image generated"

# ---------------------------------------------------------------------------
# Application lifecycle: shared HTTP client and pipeline.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown lifecycle.

    On startup:
        Opens the shared ``httpx.AsyncClient`` used for remote media and
        builds the :class:`GenerationPipeline`.  The Gemini client itself is
        created lazily on the first model call.

    On shutdown:
        Closes the shared HTTP client.
    """
    http_client = httpx.AsyncClient(timeout=config.fetch_timeout, follow_redirects=True)
    app.state.pipeline = GenerationPipeline(config, GenerationClient(config), http_client)
    logger.info("Generation pipeline ready (presets: %s).", ", ".join(app.state.pipeline.presets))

    yield

    await http_client.aclose()
    logger.info("HTTP client closed on shutdown.")


app = FastAPI(
    title="Gemini API Wrapper",
    description=(
        "A simple wrapper for Google's Gemini API with chat, image generation, "
        "and image transform capabilities."
    ),
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount("/images", StaticFiles(directory=str(config.images_dir)), name="images")


def get_pipeline(request: Request) -> GenerationPipeline:
    """Return the pipeline created by :func:`lifespan`."""
    return request.app.state.pipeline


@app.exception_handler(GeminiWrapError)
async def pipeline_error_handler(request: Request, exc: GeminiWrapError) -> JSONResponse:
    """Turn any pipeline failure into the error envelope."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc)).model_dump(),
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Report any other failure with the same envelope and a 500."""
    logger.exception("%s %s crashed", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error=str(exc)).model_dump(),
    )


# ---------------------------------------------------------------------------
# Response helpers.
# ---------------------------------------------------------------------------


def _no_image() -> dict:
    return ErrorResponse(error=NO_IMAGE_ERROR).model_dump()


def _chat_response(result: GenerationResult) -> dict:
    return {"success": True, "data": ChatData.from_result(result).model_dump(by_alias=True)}


def _image_json_response(result: GenerationResult) -> dict:
    if not result.images:
        return _no_image()
    data = ImageData.from_result(result).model_dump(by_alias=True, exclude_none=True)
    return {"success": True, "data": data}


def _buffer_response(result: GenerationResult, download_name: str) -> Response | dict:
    """Return the first generated image as the raw response body."""
    if not result.images:
        return _no_image()
    image: BufferImage = result.images[0]
    return Response(
        content=image.buffer,
        media_type=image.mime_type,
        headers={"Content-Disposition": f'attachment; filename="{download_name}"'},
    )


async def _upload_reference(upload: UploadFile | None) -> MediaReference | None:
    if upload is None:
        return None
    return InlineMediaReference(data=await upload.read(), declared_mime_type=upload.content_type)


def _url_reference(url: str | None) -> MediaReference | None:
    return RemoteMediaReference(url=url) if url else None


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@app.get("/")
async def index() -> dict:
    """Describe the API and list its endpoints."""
    return {
        "message": "Welcome to Gemini API Wrapper",
        "version": __version__,
        "endpoints": {
            "chat": {
                "post": "/chat - Generate chat response",
                "get": "/chat?message=hello - Generate chat response via GET",
                "upload": "/chat/upload - Generate chat response with file",
                "withFile": "/chat/with-file?message=hello&file=url - Chat with file URL",
            },
            "image": {
                "post": "/image/generate - Generate image from prompt",
                "get": "/image/generate?prompt=hello - Generate image via GET",
                "save": "/image/save - Generate image and save it under /images",
            },
            "figurine": {
                "post": "/figurine - Generate figurine from uploaded image",
                "get": "/figurine?imageUrl=url - Generate figurine from image URL",
            },
            "hijab": {
                "post": "/hijabkan - Generate hijab from uploaded image",
                "get": "/hijabkan?imageUrl=url - Generate hijab from image URL",
            },
            "sdmtinggi": {
                "post": "/sdmtinggi - Generate sdmtinggi from uploaded image",
                "get": "/sdmtinggi?imageUrl=url - Generate sdmtinggi from image URL",
            },
            "hitam": {
                "post": "/hitamkan - Generate hitam from uploaded image",
                "get": "/hitamkan?imageUrl=url - Generate hitam from image URL",
            },
        },
        "documentation": "/docs",
    }


# --- Chat ------------------------------------------------------------------


@app.post("/chat", tags=["chat"], summary="Generate chat response with streaming")
async def chat(
    req: ChatRequest,
    pipeline: GenerationPipeline = Depends(get_pipeline),
) -> dict:
    """Stream a chat response from the model, with optional tools and thinking."""
    result = await pipeline.run(
        "chat",
        GenerationRequest(
            message=req.message,
            model_name=req.model,
            system_prompt=req.system_prompt,
            use_tools=req.use_tools,
            use_thinking=req.use_thinking,
            session_id=req.session_id,
        ),
    )
    return _chat_response(result)


@app.get("/chat", tags=["chat"], summary="Generate chat response (GET) with streaming")
async def chat_query(
    message: str,
    model: str | None = None,
    session_id: str | None = Query(default=None, alias="sessionId"),
    system_prompt: str | None = Query(default=None, alias="systemPrompt"),
    file: str | None = Query(default=None, description="Optional file URL"),
    use_tools: bool = Query(default=False, alias="useTools"),
    use_thinking: bool = Query(default=False, alias="useThinking"),
    pipeline: GenerationPipeline = Depends(get_pipeline),
) -> dict:
    """Chat via query parameters, optionally attaching a file by URL."""
    result = await pipeline.run(
        "chat",
        GenerationRequest(
            message=message,
            model_name=model,
            system_prompt=system_prompt,
            media=_url_reference(file),
            use_tools=use_tools,
            use_thinking=use_thinking,
            session_id=session_id,
        ),
    )
    return _chat_response(result)


@app.post("/chat/upload", tags=["chat"], summary="Generate chat response with file upload")
async def chat_upload(
    message: str = Form(...),
    file: UploadFile = File(...),
    model: str | None = Form(default=None),
    session_id: str | None = Form(default=None, alias="sessionId"),
    system_prompt: str | None = Form(default=None, alias="systemPrompt"),
    use_tools: bool = Form(default=False, alias="useTools"),
    use_thinking: bool = Form(default=False, alias="useThinking"),
    pipeline: GenerationPipeline = Depends(get_pipeline),
) -> dict:
    """Chat about an uploaded file."""
    result = await pipeline.run(
        "chat",
        GenerationRequest(
            message=message,
            model_name=model,
            system_prompt=system_prompt,
            media=await _upload_reference(file),
            use_tools=use_tools,
            use_thinking=use_thinking,
            session_id=session_id,
        ),
    )
    return _chat_response(result)


@app.get("/chat/with-file", tags=["chat"], summary="Generate chat response with file URL (GET)")
async def chat_with_file(
    message: str,
    file: str = Query(..., description="URL of the file to attach"),
    model: str | None = None,
    session_id: str | None = Query(default=None, alias="sessionId"),
    system_prompt: str | None = Query(default=None, alias="systemPrompt"),
    pipeline: GenerationPipeline = Depends(get_pipeline),
) -> dict:
    """Chat about a file fetched from a URL."""
    result = await pipeline.run(
        "chat",
        GenerationRequest(
            message=message,
            model_name=model,
            system_prompt=system_prompt,
            media=_url_reference(file),
            session_id=session_id,
        ),
    )
    return _chat_response(result)


# --- Image generation ------------------------------------------------------


@app.post("/image/generate", tags=["image"], summary="Generate image")
async def image_generate(
    req: ImageRequest,
    pipeline: GenerationPipeline = Depends(get_pipeline),
) -> dict:
    """Generate images from a prompt and return them base64-encoded."""
    result = await pipeline.run(
        "image-generate", GenerationRequest(message=req.prompt, model_name=req.model)
    )
    return _image_json_response(result)


@app.get("/image/generate", tags=["image"], summary="Generate image (GET)")
async def image_generate_query(
    prompt: str,
    model: str | None = None,
    pipeline: GenerationPipeline = Depends(get_pipeline),
) -> dict:
    """Generate images using query parameters."""
    result = await pipeline.run(
        "image-generate", GenerationRequest(message=prompt, model_name=model)
    )
    return _image_json_response(result)


@app.post("/image/save", tags=["image"], summary="Generate image and save to disk")
async def image_save(
    req: ImageRequest,
    pipeline: GenerationPipeline = Depends(get_pipeline),
) -> dict:
    """Generate images, save them under ``/images`` and return their URLs."""
    result = await pipeline.run(
        "image-save", GenerationRequest(message=req.prompt, model_name=req.model)
    )
    return _image_json_response(result)


# --- Image transforms ------------------------------------------------------


def _register_transform(path: str, preset_name: str, tag: str, summary: str) -> None:
    """Register the upload (POST) and URL (GET) routes for an image transform.

    Both routes accept a missing image so the preset's own validation
    produces the error envelope.
    """

    async def from_upload(
        image: UploadFile | None = File(default=None, description="Input image"),
        pipeline: GenerationPipeline = Depends(get_pipeline),
    ) -> Response | dict:
        preset = pipeline.get_preset(preset_name)
        result = await pipeline.run(
            preset, GenerationRequest(media=await _upload_reference(image))
        )
        return _buffer_response(result, preset.download_name)

    async def from_url(
        image_url: str | None = Query(
            default=None, alias="imageUrl", description="URL of the input image"
        ),
        pipeline: GenerationPipeline = Depends(get_pipeline),
    ) -> Response | dict:
        preset = pipeline.get_preset(preset_name)
        result = await pipeline.run(preset, GenerationRequest(media=_url_reference(image_url)))
        return _buffer_response(result, preset.download_name)

    app.add_api_route(
        path,
        from_upload,
        methods=["POST"],
        tags=[tag],
        summary=f"{summary} from uploaded image",
        response_model=None,
        name=f"{preset_name}_upload",
    )
    app.add_api_route(
        path,
        from_url,
        methods=["GET"],
        tags=[tag],
        summary=f"{summary} from image URL",
        response_model=None,
        name=f"{preset_name}_url",
    )


_register_transform("/figurine", "figurine", "figurine", "Generate figurine")
_register_transform("/hijabkan", "hijab", "hijab", "Generate hijab")
_register_transform("/sdmtinggi", "sdmtinggi", "sdmtinggi", "Generate sdmtinggi")
_register_transform("/hitamkan", "hitam", "hitam", "Generate hitam")

# Must stay below every route: the root mount matches any path.
app.mount("/", StaticFiles(directory=str(config.public_dir), html=True), name="public")


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host, port and log level from :data:`~geminiwrap.core.config.config`
    (``GEMINI_SERVER_HOST``, ``GEMINI_SERVER_PORT``, ``GEMINI_LOG_LEVEL``).
    Defaults to ``0.0.0.0:3000``.

    This function is registered as the ``geminiwrap`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("Serving on http://%s:%d (docs at /docs)", config.server_host, config.server_port)

    uvicorn.run(
        "geminiwrap.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
