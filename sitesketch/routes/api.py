"""
API Routes for sitesketch

Generation endpoints answer with a Server-Sent Events stream of website code.
"""
from fastapi import APIRouter, Form, File, UploadFile, HTTPException
from fastapi.responses import HTMLResponse, StreamingResponse
from typing import List, Optional
from pathlib import Path
import logging

from sitesketch.config import get_settings
from sitesketch.exceptions import UploadRejectedError
from sitesketch.models.request import GenerationRequest, ImagePayload
from sitesketch.services.ai_service import get_ai_service
from sitesketch.services.relay import relay_generation, SSE_HEADERS
from sitesketch.utils.uploads import validate_images

logger = logging.getLogger(__name__)

router = APIRouter()


def get_frontend_html() -> str:
    """Get the frontend HTML content."""
    frontend_path = Path(get_settings().public_dir) / "index.html"

    if frontend_path.exists():
        return frontend_path.read_text(encoding="utf-8")

    return """
<!DOCTYPE html>
<html>
<head>
    <title>sitesketch</title>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body>
    <div id="app">Frontend not installed. Use the sitesketch CLI or POST /generate.</div>
</body>
</html>
    """


async def read_images(uploads: Optional[List[UploadFile]]) -> List[ImagePayload]:
    """Read uploaded files into payloads, enforcing the upload policy."""
    settings = get_settings()
    uploads = [upload for upload in (uploads or []) if upload.filename]

    # Count check happens before any bytes are read
    if len(uploads) > settings.max_images:
        raise HTTPException(
            status_code=400,
            detail=f"Too many images: {len(uploads)} attached, at most {settings.max_images} allowed"
        )

    images = []
    for upload in uploads:
        images.append(ImagePayload(
            filename=upload.filename,
            mime_type=upload.content_type or "image/jpeg",
            data=await upload.read()
        ))

    try:
        validate_images(images, settings.max_images, settings.max_upload_bytes)
    except UploadRejectedError as e:
        logger.warning("Rejected upload: %s", e)
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return images


def build_request(
    prompt: str,
    provider: str,
    model: str,
    images: List[ImagePayload],
    current_code: Optional[str] = None
) -> GenerationRequest:
    """Fill in default provider/model and freeze the request."""
    settings = get_settings()
    provider = provider or settings.default_provider
    if not model:
        models = settings.provider_models.get(provider) or [""]
        model = models[0]

    return GenerationRequest(
        prompt=prompt,
        provider=provider,
        model=model,
        current_code=current_code,
        images=images
    )


def stream_response(request: GenerationRequest) -> StreamingResponse:
    return StreamingResponse(
        relay_generation(get_ai_service(), request),
        media_type="text/event-stream",
        headers=SSE_HEADERS
    )


@router.get("/", response_class=HTMLResponse)
async def serve_frontend_root():
    """Serve the frontend HTML shell."""
    return HTMLResponse(content=get_frontend_html())


@router.post("/generate")
async def generate_website(
    prompt: str = Form(...),
    provider: str = Form(""),
    model: str = Form(""),
    images: Optional[List[UploadFile]] = File(None)
):
    """Generate a website from a description, streamed as SSE."""
    payloads = await read_images(images)
    request = build_request(prompt, provider, model, payloads)
    return stream_response(request)


@router.post("/modify")
async def modify_website(
    prompt: str = Form(...),
    currentCode: str = Form(""),
    provider: str = Form(""),
    model: str = Form(""),
    images: Optional[List[UploadFile]] = File(None)
):
    """Modify existing website code following an instruction, streamed as SSE."""
    payloads = await read_images(images)
    request = build_request(prompt, provider, model, payloads, current_code=currentCode)
    return stream_response(request)


@router.get("/models")
async def list_models():
    """Available model identifiers per provider."""
    return get_ai_service().available_models()


@router.get("/api/health")
async def health_check():
    """Health check endpoint."""
    settings = get_settings()
    return {
        "status": "healthy",
        "app": settings.app_name,
        "providers": [p for p in get_ai_service().available_models() if settings.api_key_for(p)]
    }
