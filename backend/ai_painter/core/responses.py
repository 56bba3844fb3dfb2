"""
Response helpers shared by the router and the middleware.
"""
from typing import List, Optional

from fastapi.responses import JSONResponse

from ai_painter.models.generation import ErrorResponse

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST",
    "Access-Control-Allow-Headers": "Content-Type",
}


def error_response(status_code: int, errors: List[str], messages: Optional[List[str]] = None) -> JSONResponse:
    """JSON `{errors, messages}` envelope with CORS headers attached."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(errors=errors, messages=messages or []).model_dump(),
        headers=CORS_HEADERS,
    )
