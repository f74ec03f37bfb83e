"""
Unit tests for turning raw results into sanitized results.
"""

import pytest

from site_search.errors import MalformedResultError
from site_search.processing.result_sanitizer import sanitize_result, sanitize_results
from site_search.types import Opaque, ResultFields, Wrapped

ORIGIN = "https://docs.newrelic.com"


class TestSanitizeResult:
    """Test cases for sanitize_result."""

    def test_title_and_url_derived(self):
        """Test that the title and link come from the configured fields."""
        result = {
            "title": Wrapped(raw="Hi"),
            "url": Wrapped(raw="https://docs.newrelic.com/x"),
        }

        sanitized = sanitize_result(result, ORIGIN)

        assert sanitized.title == "Hi"
        assert str(sanitized.url) == "https://docs.newrelic.com/x"
        assert sanitized.get("url") == "https://docs.newrelic.com/x"

    def test_url_taken_from_raw_not_snippet(self):
        """Test that highlight markup never ends up in a link."""
        result = {
            "title": Wrapped(raw="Hi"),
            "url": Wrapped(
                raw="/docs/apm", snippet="/docs/<em>apm</em>"
            ),
        }

        sanitized = sanitize_result(result, ORIGIN)

        assert str(sanitized.url) == "https://docs.newrelic.com/docs/apm"

    def test_unsafe_url_degrades_to_no_link(self):
        """Test that an unsafe URL leaves the result without a link."""
        result = {
            "title": Wrapped(raw="Hi"),
            "url": Wrapped(raw="javascript:alert(1)"),
        }

        sanitized = sanitize_result(result, ORIGIN)

        assert sanitized.url is None
        assert sanitized.title == "Hi"

    def test_missing_title(self):
        """Test that a result without a title still sanitizes."""
        sanitized = sanitize_result({"body": Wrapped(raw="text")}, ORIGIN)
        assert sanitized.title is None

    def test_custom_field_names(self):
        """Test that field names are configurable."""
        result = {
            "name": Wrapped(raw="Custom"),
            "link": Wrapped(raw="/custom"),
        }

        sanitized = sanitize_result(
            result, ORIGIN, ResultFields(title="name", url="link")
        )

        assert sanitized.title == "Custom"
        assert str(sanitized.url) == "https://docs.newrelic.com/custom"

    def test_opaque_fields_not_kept(self):
        """Test that opaque metadata does not reach sanitized fields."""
        result = {"title": Wrapped(raw="Hi"), "_meta": Opaque("x")}
        assert "_meta" not in sanitize_result(result, ORIGIN).fields

    def test_result_without_wrapped_fields_is_malformed(self):
        """Test that a record of only metadata is malformed."""
        with pytest.raises(MalformedResultError):
            sanitize_result({"_meta": Opaque("x")}, ORIGIN)

    def test_non_mapping_is_malformed(self):
        """Test that a record that is not a mapping is malformed."""
        with pytest.raises(MalformedResultError):
            sanitize_result(["title"], ORIGIN)  # type: ignore[arg-type]


class TestSanitizeResults:
    """Test cases for sanitize_results."""

    def test_malformed_results_skipped(self):
        """Test that one malformed record does not fail the result set."""
        results = [
            {"title": Wrapped(raw="First")},
            {"_meta": Opaque("x")},
            "not a record",
            {"title": Wrapped(raw="Second")},
        ]

        sanitized = sanitize_results(results, ORIGIN)

        assert [result.title for result in sanitized] == ["First", "Second"]

    def test_empty_input(self):
        """Test that no records yield no results."""
        assert sanitize_results([], ORIGIN) == []
