"""
PDF Gateway - FastAPI application.

Exposes POST /generate, which converts an HTML document to PDF using
Playwright/Chromium, and GET /health for container orchestration.
"""

import logging
from datetime import datetime
from io import BytesIO
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.datastructures import Headers

from . import __version__, renderer
from .config import (
    HOST,
    MAX_BODY_BYTES,
    PORT,
    configure_logging,
    get_settings,
    validate_config_on_startup,
)
from .models import HealthResponse, RenderRequest
from .renderer import RenderError

# Configure logging
configure_logging(get_settings().log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="PDF Gateway",
    version=__version__,
    description="HTML to PDF conversion service using Playwright/Chromium"
)

# Playwright readiness state
_playwright_ready = False
_playwright_error: Optional[str] = None


# ============================================================================
# Startup Event - Validate Configuration and Playwright
# ============================================================================

@app.on_event("startup")
async def validate_on_startup():
    """
    Validate configuration and check Chromium can print a page.

    The service keeps running if the probe fails, but /health reports
    503 until the problem is resolved.
    """
    global _playwright_ready, _playwright_error

    settings = validate_config_on_startup()

    if not settings.validate_playwright_on_startup:
        logger.info("Playwright startup validation disabled")
        _playwright_ready = True
        _playwright_error = None
        return

    logger.info("PDF Gateway starting - validating Playwright installation...")
    _playwright_ready, _playwright_error = await renderer.probe(settings)

    if not _playwright_ready:
        logger.error(f"Playwright validation failed: {_playwright_error}")
        logger.error("PDF generation will not work until this is resolved.")


# ============================================================================
# Middleware & Error Handlers
# ============================================================================

def _body_too_large() -> JSONResponse:
    return JSONResponse(
        status_code=413,
        content={"detail": f"Request body exceeds {MAX_BODY_BYTES} bytes"}
    )


class BodySizeLimitMiddleware:
    """
    Reject request bodies larger than MAX_BODY_BYTES with 413.

    A declared Content-Length is checked before anything is read. Bodies
    sent without one (chunked) are buffered while counting and rejected as
    soon as the count passes the limit; otherwise the buffered messages are
    replayed to the application.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = Headers(scope=scope).get("content-length")
        if content_length is not None:
            try:
                declared = int(content_length)
            except ValueError:
                response = JSONResponse(
                    status_code=400,
                    content={"detail": "Content-Length must be an integer"}
                )
                await response(scope, receive, send)
                return
            if declared > MAX_BODY_BYTES:
                logger.warning(f"Rejecting request body of {declared} bytes (limit {MAX_BODY_BYTES})")
                await _body_too_large()(scope, receive, send)
                return
            await self.app(scope, receive, send)
            return

        messages = []
        received = 0
        while True:
            message = await receive()
            messages.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body", b""))
            if received > MAX_BODY_BYTES:
                logger.warning(f"Rejecting streamed request body past {MAX_BODY_BYTES} bytes")
                await _body_too_large()(scope, receive, send)
                return
            if not message.get("more_body", False):
                break

        async def replay():
            if messages:
                return messages.pop(0)
            return await receive()

        await self.app(scope, replay, send)


app.add_middleware(BodySizeLimitMiddleware)


@app.exception_handler(RequestValidationError)
async def invalid_body_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed or mis-shaped request bodies are a client error (400)."""
    logger.warning(f"Invalid request body on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Invalid request body",
            "errors": jsonable_encoder(exc.errors()),
        }
    )


# ============================================================================
# Health Check Endpoint
# ============================================================================

@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint for container orchestration.

    Returns HTTP 503 if Playwright validation failed on startup.
    """
    if not _playwright_ready:
        raise HTTPException(
            status_code=503,
            detail={
                "status": "unhealthy",
                "timestamp": datetime.utcnow().isoformat(),
                "active_renders": renderer.active_renders(),
                "playwright_ready": False,
                "playwright_error": _playwright_error,
                "message": "PDF gateway is unhealthy - Playwright/Chromium not available"
            }
        )

    return HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow(),
        active_renders=renderer.active_renders(),
        playwright_ready=True,
        playwright_error=None
    )


# ============================================================================
# PDF Generation Endpoint
# ============================================================================

@app.post("/generate")
async def generate_pdf(request: RenderRequest):
    """
    HTML to PDF endpoint.

    Renders the HTML in a dedicated Chromium session and prints it with
    the requested format, margins and page counter header/footer.

    Args:
        request: HTML content, CSS and page settings

    Returns:
        StreamingResponse with PDF binary data

    Raises:
        HTTPException: 500 for rendering failures and timeouts
    """
    try:
        pdf_bytes = await renderer.generate(request, get_settings())
    except RenderError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    return StreamingResponse(
        BytesIO(pdf_bytes),
        media_type="application/pdf",
        headers={
            "Content-Disposition": 'inline; filename="document.pdf"'
        }
    )


def main() -> None:
    """Run the PDF gateway on the fixed service port."""
    settings = get_settings()
    logger.info(f"Starting PDF Gateway on http://{HOST}:{PORT}")
    uvicorn.run(
        app,
        host=HOST,
        port=PORT,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
