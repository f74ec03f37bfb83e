"""
Search API Package

Provides the Site Search API connector used by search sessions.
"""

from .connector import (
    DEFAULT_RESULT_FIELDS,
    QueryConnector,
    adapt_record,
    adapt_response,
    build_search_request,
    default_filters,
    to_api_payload,
)

__all__ = [
    "DEFAULT_RESULT_FIELDS",
    "QueryConnector",
    "adapt_record",
    "adapt_response",
    "build_search_request",
    "default_filters",
    "to_api_payload",
]
