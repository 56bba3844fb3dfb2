"""
Paint API Routes

Single endpoint, dispatched on method:
- GET and HEAD serve the landing page with the request host filled in.
- POST runs a Workers AI text-to-image model and returns the image,
  or relays it to the image host and returns its URL.

OPTIONS preflight and CORS headers are handled by the app middleware.
"""
import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response, StreamingResponse

from ai_painter.core.catalog import MODEL_CATALOG, ResponseEncoding, build_inference_inputs, resolve_model
from ai_painter.core.codec import PNG_CONTENT_TYPE, ImageBlob, base64_to_image, read_stream
from ai_painter.core.config import Settings
from ai_painter.core.responses import CORS_HEADERS, error_response
from ai_painter.models.generation import GenerationRequest, ImageUrlResponse, Resolution

logger = logging.getLogger(__name__)

router = APIRouter()

HOST_PLACEHOLDER = "{{host}}"
LEGACY_STREAM_CONTENT_TYPE = "image/png;base64"


# --- Dependencies ---

def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_inference(request: Request):
    return request.app.state.inference


def get_uploader(request: Request):
    return request.app.state.uploader


# --- Endpoints ---

@router.api_route("/{full_path:path}", methods=["GET", "HEAD"], response_class=HTMLResponse)
async def landing_page(request: Request, full_path: str):
    """Serve the landing page, pointing it at the host the client used."""
    host = request.headers.get("host", "")
    html = request.app.state.landing_template.replace(HOST_PLACEHOLDER, host)
    return HTMLResponse(content=html, headers=CORS_HEADERS)


@router.post("/{full_path:path}")
async def generate(
    request: Request,
    full_path: str,
    settings: Settings = Depends(get_settings),
    inference=Depends(get_inference),
    uploader=Depends(get_uploader),
):
    """
    Generate an image.

    Flux returns base64 JSON which is decoded here; every other model
    returns PNG bytes that are streamed straight back unless uploading.
    """
    start_time = time.time()

    # 1. Parse body
    try:
        body = await request.json()
        generation = GenerationRequest.model_validate(body)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid request format: {e}")

    upload = bool(generation.upload)

    # 2. Validate prompt before any upstream call
    prompt = generation.clean_prompt
    if not prompt:
        return PlainTextResponse("Missing prompt", status_code=400, headers=CORS_HEADERS)

    # 3. Resolve model and inputs
    model = resolve_model(generation.model)
    if generation.model is not None and generation.model not in MODEL_CATALOG:
        logger.info(f"[Paint] Unknown model '{generation.model}', using {model.key}")

    resolution = generation.resolution or Resolution()
    inputs = build_inference_inputs(model, prompt, resolution.width, resolution.height)

    # 4. Inference (failures propagate to the error boundary)
    result = await inference.run(model.model_id, inputs)

    # 5. Normalize by the model's encoding
    if model.encoding is ResponseEncoding.BASE64_JSON:
        image_b64 = result.get("image") if isinstance(result, dict) else None
        if not image_b64:
            logger.warning(f"[Paint] {model.key} returned no image")
            return error_response(500, ["No image found in the response"])

        blob = base64_to_image(image_b64)
        if not upload:
            _log_done(model.key, upload, start_time)
            return Response(content=blob.data, media_type=blob.content_type, headers=CORS_HEADERS)
    else:
        if not upload:
            media_type = LEGACY_STREAM_CONTENT_TYPE if settings.legacy_stream_content_type else PNG_CONTENT_TYPE
            _log_done(model.key, upload, start_time)
            return StreamingResponse(result, media_type=media_type, headers=CORS_HEADERS)

        blob = await read_stream(result)

    # 6. Relay to the image host
    return await _upload_and_respond(blob, uploader, settings, model.key, start_time)


async def _upload_and_respond(blob: ImageBlob, uploader, settings: Settings, model_key: str, start_time: float):
    upload_result = await uploader.upload(blob)
    src = upload_result.get("src") if upload_result else None

    if not src:
        return error_response(500, ["Image upload failed"])

    image_url = f"{settings.image_host_url.rstrip('/')}{src}"
    _log_done(model_key, True, start_time)
    return JSONResponse(
        content=ImageUrlResponse(imageUrl=image_url).model_dump(),
        headers=CORS_HEADERS,
    )


def _log_done(model_key: str, upload: bool, start_time: float) -> None:
    elapsed_ms = int((time.time() - start_time) * 1000)
    logger.info(f"[Paint] {model_key} done (upload={upload}) in {elapsed_ms}ms")
