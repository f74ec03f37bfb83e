"""
Turns raw result records into sanitized results.

Combines field extraction with URL validation. A record that cannot be
sanitized is skipped without affecting the rest of the result set.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from ..errors import MalformedResultError
from ..logger import get_logger
from ..types import RawResult, ResultFields, SanitizedResult, Wrapped
from .field_extractor import extract_all_fields, extract_field
from .url_sanitizer import sanitize_url

logger = get_logger("result_sanitizer")


def sanitize_result(
    result: RawResult,
    current_origin: str,
    fields: ResultFields = ResultFields(),
) -> SanitizedResult:
    """
    Sanitize one raw result.

    Args:
        result: Raw result record with classified field values
        current_origin: Base URL for resolving relative result links
        fields: Names of the title and URL fields

    Returns:
        SanitizedResult with render-safe fields, title and URL

    Raises:
        MalformedResultError: If the record holds no wrapped fields
    """
    if not isinstance(result, Mapping):
        raise MalformedResultError(f"Result is not a mapping: {type(result).__name__}")

    sanitized_fields = extract_all_fields(result)
    if not sanitized_fields:
        raise MalformedResultError(
            f"Result has no wrapped fields: {sorted(result.keys())}"
        )

    # Links are built from the raw value only; snippets carry highlight markup.
    url_value = result.get(fields.url)
    raw_url = url_value.raw if isinstance(url_value, Wrapped) else None

    return SanitizedResult(
        fields=sanitized_fields,
        url=sanitize_url(raw_url, current_origin),
        title=extract_field(result, fields.title),
    )


def sanitize_results(
    results: Iterable[Any],
    current_origin: str,
    fields: ResultFields = ResultFields(),
) -> list[SanitizedResult]:
    """Sanitize a result set, skipping malformed records."""
    sanitized: list[SanitizedResult] = []
    for index, result in enumerate(results):
        try:
            sanitized.append(sanitize_result(result, current_origin, fields))
        except MalformedResultError as e:
            logger.warning(f"Skipping result {index}: {e}")
    return sanitized
