"""
Field extraction from raw search results.

Decides per field whether to trust the pre-highlighted snippet or fall back
to the escaped raw value, and keeps anything that is not a wrapped field
out of the rendered output.
"""

from collections.abc import Mapping
from typing import Any

from ..types import FieldValue, Opaque, RawResult, SanitizedField, Wrapped
from .html_sanitizer import escape

FIELD_SEPARATOR = ", "


def parse_field_value(value: Any) -> FieldValue:
    """
    Classify one value from an API response.

    A mapping with a "raw" or "snippet" member is a wrapped field; anything
    else (plain metadata such as "_meta: '1939191'") is opaque.
    """
    if isinstance(value, Wrapped | Opaque):
        return value
    if isinstance(value, Mapping) and ("raw" in value or "snippet" in value):
        return Wrapped(raw=value.get("raw"), snippet=value.get("snippet"))
    return Opaque(value)


def parse_raw_result(record: Mapping[str, Any]) -> RawResult:
    """Classify every value of a decoded JSON record."""
    return {name: parse_field_value(value) for name, value in record.items()}


def _escape_raw(raw: Any) -> str:
    if isinstance(raw, list | tuple):
        return FIELD_SEPARATOR.join(escape(item) for item in raw)
    return escape(raw)


def _join_snippet(snippet: str | list[str]) -> str:
    if isinstance(snippet, list | tuple):
        return FIELD_SEPARATOR.join(str(item) for item in snippet)
    return str(snippet)


def extract_field(result: RawResult, field_name: str) -> str | None:
    """
    Get the render-safe value of one field.

    Args:
        result: Raw result record
        field_name: Field to extract

    Returns:
        The snippet if present and non-empty, otherwise the escaped raw
        value, or None if the field is missing or not a wrapped value
    """
    value = result.get(field_name)
    if not isinstance(value, Wrapped):
        return None

    if value.snippet:
        return _join_snippet(value.snippet)
    if value.raw is not None:
        return _escape_raw(value.raw)
    return None


def extract_all_fields(result: RawResult) -> dict[str, SanitizedField]:
    """
    Get every wrapped field of a result in render-safe form.

    Opaque values are discarded; they are never allowed into markup.
    """
    fields: dict[str, SanitizedField] = {}
    for name, value in result.items():
        if not isinstance(value, Wrapped):
            continue
        extracted = extract_field(result, name)
        if extracted is not None:
            fields[name] = SanitizedField(name=name, value=extracted)
    return fields
