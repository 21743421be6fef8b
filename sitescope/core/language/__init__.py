"""Syntax front-ends."""

from .js_ts import SOURCE_EXTENSIONS, parse_js_ts_source
from .session import ParseSession

__all__ = ["SOURCE_EXTENSIONS", "ParseSession", "parse_js_ts_source"]
