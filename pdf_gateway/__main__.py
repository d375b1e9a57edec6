"""Entrypoint for ``python -m pdf_gateway``."""

from .app import main

main()
