"""
Request/response models for the PDF gateway.

Field names follow the JSON wire format (camelCase) so request bodies map
one-to-one onto the models.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RenderRequest(BaseModel):
    """
    HTML to PDF render request.

    Content is passed to the browser untouched: neither the HTML, the CSS nor
    the margin lengths are checked for well-formedness.
    """

    model_config = ConfigDict(frozen=True)

    html: str = Field(..., description="Full HTML document to render")
    css: Optional[str] = Field("", description="Stylesheet fragment prepended to the header/footer templates")
    format: str = Field("Letter", description="Paper format token, e.g. 'A4' or 'Letter'")
    pageMarginTop: Optional[str] = Field(None, description="Top margin as a CSS length")
    pageMarginBottom: Optional[str] = Field(None, description="Bottom margin as a CSS length")
    pageMarginLeft: Optional[str] = Field(None, description="Left margin as a CSS length")
    pageMarginRight: Optional[str] = Field(None, description="Right margin as a CSS length")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    timestamp: datetime
    active_renders: int
    playwright_ready: bool = True
    playwright_error: Optional[str] = None
