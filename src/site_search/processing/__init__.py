"""
Search result processing components.

This package contains focused components for extracting result fields,
escaping raw values, validating result URLs and rendering display records.
"""

from .field_extractor import (
    extract_all_fields,
    extract_field,
    parse_field_value,
    parse_raw_result,
)
from .html_sanitizer import escape
from .result_renderer import (
    derive_source_tag,
    paging_info,
    render,
    render_results,
    render_view,
)
from .result_sanitizer import sanitize_result, sanitize_results
from .url_sanitizer import parse_url, sanitize_url

__all__ = [
    "derive_source_tag",
    "escape",
    "extract_all_fields",
    "extract_field",
    "paging_info",
    "parse_field_value",
    "parse_raw_result",
    "parse_url",
    "render",
    "render_results",
    "render_view",
    "sanitize_result",
    "sanitize_results",
    "sanitize_url",
]
