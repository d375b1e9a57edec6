"""
Pytest fixtures for PDF gateway tests.

Playwright is replaced by mocks so no Chromium install is needed.
"""

import os
from unittest.mock import patch, MagicMock, AsyncMock

# IMPORTANT: Set environment variables BEFORE any imports from pdf_gateway
# so GatewaySettings picks them up when first loaded.
os.environ["ENVIRONMENT"] = "development"
os.environ["SHOW_HTML_REPORT"] = "false"
os.environ["RENDER_TIMEOUT_SECONDS"] = "5"
os.environ["VALIDATE_PLAYWRIGHT_ON_STARTUP"] = "false"

import pytest
from fastapi.testclient import TestClient


def make_playwright_mock(pdf_bytes=b"%PDF-1.4 fake pdf content"):
    """
    Build a mock for ``async_playwright`` whose chromium returns one browser.

    Returns:
        (mock_async_playwright, mock_chromium, mock_browser, mock_page)
    """
    mock_page = AsyncMock()
    mock_page.pdf = AsyncMock(return_value=pdf_bytes)
    # set_default_timeout is synchronous in Playwright
    mock_page.set_default_timeout = MagicMock()

    mock_browser = AsyncMock()
    mock_browser.new_page = AsyncMock(return_value=mock_page)

    mock_chromium = MagicMock(launch=AsyncMock(return_value=mock_browser))

    mock_async_playwright = MagicMock()
    mock_async_playwright.return_value.__aenter__ = AsyncMock(
        return_value=MagicMock(chromium=mock_chromium)
    )
    mock_async_playwright.return_value.__aexit__ = AsyncMock(return_value=False)

    return mock_async_playwright, mock_chromium, mock_browser, mock_page


@pytest.fixture
def playwright_factory():
    """Expose make_playwright_mock to tests that need several browsers."""
    return make_playwright_mock


@pytest.fixture
def playwright_mock():
    """Patch Playwright in the renderer with a single-browser mock."""
    mock_async_playwright, mock_chromium, mock_browser, mock_page = make_playwright_mock()
    with patch("pdf_gateway.renderer.async_playwright", mock_async_playwright):
        yield MagicMock(
            async_playwright=mock_async_playwright,
            chromium=mock_chromium,
            browser=mock_browser,
            page=mock_page,
        )


@pytest.fixture
def client():
    """Create test client with Playwright marked as ready."""
    import pdf_gateway.app as app_module
    app_module._playwright_ready = True
    app_module._playwright_error = None
    from pdf_gateway.app import app
    return TestClient(app)


@pytest.fixture
def client_playwright_unavailable():
    """Create test client with Playwright marked as unavailable."""
    import pdf_gateway.app as app_module
    app_module._playwright_ready = False
    app_module._playwright_error = "Test: Playwright not available"
    from pdf_gateway.app import app
    return TestClient(app)


@pytest.fixture
def render_payload():
    """A complete, valid render request body."""
    return {
        "html": "<p>hello</p>",
        "css": "<style>.report-page-footer { font-size: 8px; }</style>",
        "format": "A4",
        "pageMarginTop": "1cm",
        "pageMarginBottom": "2cm",
        "pageMarginLeft": "3mm",
        "pageMarginRight": "0.5in",
    }
