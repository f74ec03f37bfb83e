"""
HTML escaping for untrusted raw field values.

Snippets arrive pre-highlighted and already escaped by the search API, so
only raw values go through here, exactly once.
"""

from typing import Any

# Ampersand must come first so the entities produced below are not re-escaped.
_REPLACEMENTS = (
    ("&", "&amp;"),
    ('"', "&quot;"),
    ("'", "&#39;"),
    ("<", "&lt;"),
    (">", "&gt;"),
)


def escape(value: Any) -> str:
    """
    Escape a raw value for insertion into markup.

    Args:
        value: Raw value from the search index. Non-strings are converted
            with str(); falsy values map to the empty string.

    Returns:
        Escaped text
    """
    if not value:
        return ""

    text = str(value)
    for char, entity in _REPLACEMENTS:
        text = text.replace(char, entity)
    return text
