"""
Header/footer templates and print options for PDF rendering.

Chromium fills elements carrying the ``pageNumber`` and ``totalPages``
classes with the current page number and the page count when it prints
the header and footer templates.
"""

from typing import Dict, Optional

from .models import RenderRequest


HEADER_TEMPLATE = """<div class="report-page-header">
            <span class="report-page-header-number pageNumber"></span>
            <span class="report-page-header-separator">/</span>
            <span class="report-page-header-total-pages totalPages"></span>
          </div>"""

FOOTER_TEMPLATE = """<div class="report-page-footer">
            <span class="report-page-footer-number pageNumber"></span>
            <span class="report-page-footer-separator">/</span>
            <span class="report-page-footer-total-pages totalPages"></span>
          </div>"""


def build_header_template(css: Optional[str]) -> str:
    """
    Build the header template: caller CSS followed by the page counter markup.

    Example:
        >>> build_header_template("<style>.report-page-header{font-size:8px}</style>")
        '<style>.report-page-header{font-size:8px}</style><div class="report-page-header">...'
    """
    return (css or "") + HEADER_TEMPLATE


def build_footer_template(css: Optional[str]) -> str:
    """Build the footer template: caller CSS followed by the page counter markup."""
    return (css or "") + FOOTER_TEMPLATE


def build_margins(request: RenderRequest) -> Dict[str, str]:
    """
    Map the request margins onto Playwright's ``margin`` option.

    Margins the caller left out are omitted so the browser default applies.

    Args:
        request: Render request carrying the four CSS margin lengths

    Returns:
        Dict with any of the keys top, bottom, left, right
    """
    margins = {
        "top": request.pageMarginTop,
        "bottom": request.pageMarginBottom,
        "left": request.pageMarginLeft,
        "right": request.pageMarginRight,
    }
    return {side: value for side, value in margins.items() if value is not None}


def build_pdf_options(request: RenderRequest) -> Dict:
    """
    Build the keyword arguments for ``page.pdf()``.

    Background graphics and the header/footer band are always on; format and
    margins come from the request as-is.
    """
    return {
        "format": request.format,
        "print_background": True,
        "display_header_footer": True,
        "header_template": build_header_template(request.css),
        "footer_template": build_footer_template(request.css),
        "margin": build_margins(request),
    }
