"""
Render pipeline - HTML to PDF through a per-request Chromium session.

A render session is one browser process plus one page. Sessions are never
shared or reused: each call to ``generate`` launches its own and closes it
on every exit path.
"""

import asyncio
import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Tuple

from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from .config import GatewaySettings, get_settings
from .models import RenderRequest
from .templates import build_pdf_options

logger = logging.getLogger(__name__)

# SHOW_HTML_REPORT output; pinned at INFO so LOG_LEVEL cannot mute it.
report_logger = logging.getLogger("pdf_gateway.report")
report_logger.setLevel(logging.INFO)

# Chromium flags for every render session.
CHROMIUM_ARGS = ["--no-sandbox", "--disable-web-security"]

PROBE_HTML = "<html><body><h1>Test</h1></body></html>"

# In-flight renders, reported by /health. Never used to reject work.
_active_renders = 0


class RenderError(Exception):
    """Raised when a render fails; carries the HTTP status to answer with."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


def active_renders() -> int:
    """Number of renders currently in progress in this process."""
    return _active_renders


@asynccontextmanager
async def render_session(settings: GatewaySettings) -> AsyncIterator:
    """
    Launch an isolated Chromium session and yield a fresh page.

    The browser is closed when the block exits, whether it finished,
    raised or was cancelled. If the launch itself fails, leaving
    ``async_playwright()`` stops the driver.
    """
    async with async_playwright() as p:
        browser = await p.chromium.launch(
            headless=settings.playwright_headless,
            args=CHROMIUM_ARGS,
        )
        try:
            page = await browser.new_page()
            page.set_default_timeout(settings.render_timeout_ms)
            yield page
        finally:
            await browser.close()


async def _render(request: RenderRequest, settings: GatewaySettings) -> bytes:
    async with render_session(settings) as page:
        await page.set_content(request.html, wait_until="networkidle")
        return await page.pdf(**build_pdf_options(request))


async def generate(request: RenderRequest, settings: Optional[GatewaySettings] = None) -> bytes:
    """
    Render the request's HTML to PDF bytes.

    Loads the HTML, waits for the network to go idle, then prints with the
    requested paper format and margins, background graphics on, and the
    page counter header/footer prefixed with the request CSS.

    Args:
        request: Render request
        settings: Gateway settings (defaults to the cached environment settings)

    Returns:
        Raw PDF bytes

    Raises:
        RenderError: on launch, load or export failure, or when the render
            runs past ``render_timeout_seconds``
    """
    global _active_renders

    settings = settings or get_settings()
    render_id = uuid.uuid4().hex[:8]

    if settings.html_report_enabled:
        report_logger.info(f"[{render_id}] Request input: {request.html}")

    logger.info(f"[{render_id}] Starting PDF render (format={request.format})")

    _active_renders += 1
    try:
        pdf_bytes = await asyncio.wait_for(
            _render(request, settings),
            timeout=settings.render_timeout_seconds,
        )
    except (asyncio.TimeoutError, PlaywrightTimeoutError) as e:
        logger.error(f"[{render_id}] PDF rendering timed out")
        raise RenderError(
            f"Rendering timed out after {settings.render_timeout_seconds}s"
        ) from e
    except Exception as e:
        logger.error(f"[{render_id}] PDF rendering failed: {str(e)}")
        raise RenderError(f"Rendering failed: {str(e)}") from e
    finally:
        _active_renders -= 1

    logger.info(f"[{render_id}] PDF render completed: {len(pdf_bytes)} bytes")
    return pdf_bytes


async def probe(settings: Optional[GatewaySettings] = None) -> Tuple[bool, Optional[str]]:
    """
    Check that Chromium can be launched and can print a page.

    Returns:
        (ready, error) where error is None when ready
    """
    settings = settings or get_settings()

    try:
        async with render_session(settings) as page:
            await page.set_content(PROBE_HTML)
            test_pdf = await page.pdf(format="Letter")
    except Exception as e:
        return False, str(e)

    if not test_pdf:
        return False, "Test PDF generation returned empty result"

    logger.info(f"Playwright validation successful - generated {len(test_pdf)} byte test PDF")
    return True, None
