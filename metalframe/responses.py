"""
MetalFrame API Response Utilities
Error bodies follow the site's wire contract: {"error": "<message>"}
"""
from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional

from .logging_config import api_logger


# ============================================================
# ERROR RESPONSES
# ============================================================

class ApiException(HTTPException):
    """API exception carrying an error code alongside the message"""

    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict] = None,
    ):
        self.error_code = error_code or f"ERR_{status_code}"
        self.details = details
        super().__init__(status_code=status_code, detail=message)


def bad_request(message: str, code: str = "BAD_REQUEST", details: Optional[Dict] = None):
    raise ApiException(400, message, code, details)

def not_found(message: str = "Not found"):
    raise ApiException(404, message, "NOT_FOUND")

def payload_too_large(message: str = "File too large"):
    raise ApiException(413, message, "PAYLOAD_TOO_LARGE")

def server_error(message: str = "Internal server error"):
    raise ApiException(500, message, "INTERNAL_ERROR")


def error_body(message: str, error_code: Optional[str] = None, details: Optional[Dict] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": message}
    if error_code:
        body["error_code"] = error_code
    if details:
        body["details"] = details
    return body


# ============================================================
# EXCEPTION HANDLERS
# ============================================================

async def api_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for API errors"""

    if isinstance(exc, ApiException):
        api_logger.warning(
            f"API Error: {exc.detail}",
            status_code=exc.status_code,
            error_code=exc.error_code,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.detail, exc.error_code, exc.details),
        )

    if isinstance(exc, HTTPException):
        api_logger.warning(
            f"HTTP Error: {exc.detail}",
            status_code=exc.status_code,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail), f"HTTP_{exc.status_code}"),
        )

    # Unexpected errors surface their message, as the admin panel shows it verbatim
    api_logger.error(
        f"Unexpected error: {exc}",
        error=exc,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=500,
        content=error_body(str(exc) or "An unexpected error occurred", "INTERNAL_ERROR"),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation failures in the same {"error": ...} shape"""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{field}: {first.get('msg', 'invalid value')}" if field else first.get("msg", "Invalid request")
    api_logger.warning(f"Validation Error: {message}", path=request.url.path)
    return JSONResponse(
        status_code=422,
        content=error_body(message, "VALIDATION_ERROR", {"errors": len(errors)}),
    )
