import logging
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from ai_painter.api import routes_paint
from ai_painter.core.config import Settings
from ai_painter.core.inference import WorkersAIClient
from ai_painter.core.logging_config import configure_logging
from ai_painter.core.responses import CORS_HEADERS, error_response
from ai_painter.core.uploader import ImageHostUploader

logger = logging.getLogger(__name__)


class CORSBoundaryMiddleware(BaseHTTPMiddleware):
    """
    Answer CORS preflight, attach CORS headers to every response and turn
    uncaught errors into JSON error responses that still carry them.
    """

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=CORS_HEADERS)

        try:
            response = await call_next(request)
        except httpx.HTTPError as e:
            logger.exception(f"[Boundary] Upstream failure on {request.method} {request.url.path}")
            return error_response(502, ["Upstream request failed"], [str(e)])
        except Exception:
            logger.exception(f"[Boundary] Unhandled error on {request.method} {request.url.path}")
            return error_response(500, ["Internal server error"])

        for name, value in CORS_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    response = error_response(exc.status_code, [str(exc.detail)])
    if exc.headers:
        response.headers.update(exc.headers)
    return response


def load_template(path: str) -> str:
    with open(path, encoding="utf-8") as fh:
        return fh.read()


def create_app(
    settings: Optional[Settings] = None,
    inference=None,
    uploader=None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Runtime settings; read from the environment when omitted.
        inference: Object with `async run(model_id, inputs)`; defaults to Workers AI.
        uploader: Object with `async upload(image)`; defaults to the image host.
    """
    settings = settings or Settings.from_env()

    if inference is None:
        if not settings.cf_account_id or not settings.cf_api_token:
            logger.warning("CF_ACCOUNT_ID / CF_API_TOKEN not set, inference calls will be rejected upstream")
        inference = WorkersAIClient(
            account_id=settings.cf_account_id,
            api_token=settings.cf_api_token,
            base_url=settings.ai_base_url,
            timeout=settings.upstream_timeout,
        )
    if uploader is None:
        uploader = ImageHostUploader(settings.upload_url, timeout=settings.upstream_timeout)

    # Every GET path is the landing page, so the generated docs are off
    app = FastAPI(
        title="AI Painter",
        description="Text-to-image gateway for Cloudflare Workers AI",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.inference = inference
    app.state.uploader = uploader
    app.state.landing_template = load_template(settings.template_path)

    app.add_middleware(CORSBoundaryMiddleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    app.include_router(routes_paint.router, tags=["Paint"])

    return app


_settings = Settings.from_env()
configure_logging(_settings.log_file, _settings.log_level)

app = create_app(_settings)


def run():
    uvicorn.run("ai_painter.main:app", host=_settings.host, port=_settings.port)


if __name__ == "__main__":
    run()
