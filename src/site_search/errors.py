"""
Error types raised inside the search pipeline.

None of these escape to callers of the session or the renderer: each one
maps to a degraded rendering or a session state transition.
"""


class SearchError(Exception):
    """Base class for search pipeline failures."""


class ConnectorError(SearchError):
    """Raised when the search API request fails or returns an unusable payload."""


class MalformedResultError(SearchError):
    """Raised when a raw result holds no wrapped fields."""


class InvalidUrlError(SearchError):
    """Raised when a result URL is malformed or uses a disallowed scheme."""
