"""
PDF Gateway - HTML to PDF conversion service.

Accepts an HTML document plus page formatting parameters over HTTP and
returns the PDF rendered by headless Chromium (driven through Playwright).
Every request gets its own browser session, which is torn down when the
request finishes.
"""

__version__ = "0.1.0"
