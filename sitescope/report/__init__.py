"""Report rendering for analysis results."""

from .loader import document_to_result, load_document
from .renderer import build_document, render_console, render_json

__all__ = ["build_document", "document_to_result", "load_document", "render_console", "render_json"]
