"""
Result URL validation and normalization.

Resolves candidate result URLs against the current site origin and rejects
anything that is malformed or not http(s). Malformed URLs from the search
index are expected, so every failure is reported as None rather than raised.
"""

from typing import Any

import httpx

from ..errors import InvalidUrlError
from ..logger import get_logger

ALLOWED_SCHEMES = frozenset({"http", "https"})

# Browser URL parsers drop these anywhere in the input and trim C0 controls
# and spaces from both ends before parsing.
_REMOVED_CHARS = str.maketrans("", "", "\t\n\r")
_TRIMMED_CHARS = "".join(chr(code) for code in range(0x21))

logger = get_logger("url_sanitizer")


def _preprocess(raw_url: str) -> str:
    return raw_url.translate(_REMOVED_CHARS).strip(_TRIMMED_CHARS)


def parse_url(raw_url: Any, current_origin: str) -> httpx.URL:
    """
    Resolve a candidate URL against the current origin and validate it.

    Args:
        raw_url: Candidate URL from a search result
        current_origin: Base URL relative links are resolved against

    Returns:
        The resolved URL

    Raises:
        InvalidUrlError: If the URL is missing, malformed or not http(s)
    """
    if not isinstance(raw_url, str) or not _preprocess(raw_url):
        raise InvalidUrlError(f"Missing result URL: {raw_url!r}")

    try:
        resolved = httpx.URL(current_origin).join(_preprocess(raw_url))
    except (httpx.InvalidURL, ValueError, TypeError) as e:
        raise InvalidUrlError(f"Malformed result URL {raw_url!r}: {e}") from e

    if resolved.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidUrlError(
            f"Disallowed scheme {resolved.scheme!r} in result URL {raw_url!r}"
        )
    if not resolved.host:
        raise InvalidUrlError(f"Result URL has no host: {raw_url!r}")

    return resolved


def sanitize_url(raw_url: Any, current_origin: str) -> httpx.URL | None:
    """
    Total version of parse_url: None means "render without a link".

    Args:
        raw_url: Candidate URL from a search result
        current_origin: Base URL relative links are resolved against

    Returns:
        The resolved URL, or None if it is not safe to link to
    """
    try:
        return parse_url(raw_url, current_origin)
    except InvalidUrlError as e:
        logger.debug(f"Dropping result link: {e}")
        return None
