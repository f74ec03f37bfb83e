"""
Site Search Package

Search result ingestion for a documentation site: queries the Site Search
API, sanitizes result fields and links, and keeps search state in sync with
the page URL.
"""

from site_search.logger import setup_logging
from site_search.query_params import NavigableLocation, QueryParamSync
from site_search.session import SearchSession
from site_search.settings import Settings, get_settings
from site_search.web.search import QueryConnector

__version__ = "1.0.0"
__all__ = [
    "NavigableLocation",
    "QueryConnector",
    "QueryParamSync",
    "SearchSession",
    "Settings",
    "get_settings",
    "setup_logging",
]
