"""
Unit tests for field extraction.

Tests snippet-versus-raw selection, escaping of raw values, list joining,
and the filtering of values that are not wrapped fields.
"""

from site_search.processing.field_extractor import (
    extract_all_fields,
    extract_field,
    parse_field_value,
    parse_raw_result,
)
from site_search.types import Opaque, SanitizedField, Wrapped


class TestParseFieldValue:
    """Test cases for classifying response values."""

    def test_raw_mapping_is_wrapped(self):
        """Test that a mapping with a raw member is a wrapped value."""
        assert parse_field_value({"raw": "1939191"}) == Wrapped(raw="1939191")

    def test_snippet_mapping_is_wrapped(self):
        """Test that a mapping with only a snippet member is wrapped."""
        assert parse_field_value({"snippet": "<em>x</em>"}) == Wrapped(
            snippet="<em>x</em>"
        )

    def test_plain_value_is_opaque(self):
        """Test that arbitrary metadata values are opaque."""
        assert parse_field_value("1939191") == Opaque("1939191")

    def test_mapping_without_wrapper_keys_is_opaque(self):
        """Test that other mappings are opaque."""
        value = {"engine": "docs", "score": 1.0}
        assert parse_field_value(value) == Opaque(value)

    def test_already_classified_value_unchanged(self):
        """Test that classified values pass through."""
        wrapped = Wrapped(raw="a")
        assert parse_field_value(wrapped) is wrapped

    def test_parse_raw_result(self):
        """Test classifying a whole decoded record."""
        result = parse_raw_result(
            {"title": {"raw": "Hi"}, "_meta": "1939191", "id": {"raw": 7}}
        )

        assert result == {
            "title": Wrapped(raw="Hi"),
            "_meta": Opaque("1939191"),
            "id": Wrapped(raw=7),
        }


class TestExtractField:
    """Test cases for extract_field."""

    def test_snippet_preferred_and_not_escaped(self):
        """Test that snippets are returned verbatim, highlight markup included."""
        result = {"title": Wrapped(raw="<b>raw</b>", snippet="<em>Alerts</em> guide")}
        assert extract_field(result, "title") == "<em>Alerts</em> guide"

    def test_raw_fallback_is_escaped(self):
        """Test that raw values are escaped when no snippet exists."""
        result = {"title": Wrapped(raw="<script>alert(1)</script>")}
        assert extract_field(result, "title") == (
            "&lt;script&gt;alert(1)&lt;/script&gt;"
        )

    def test_empty_snippet_falls_back_to_raw(self):
        """Test that an empty snippet is treated as missing."""
        result = {"title": Wrapped(raw="A & B", snippet="")}
        assert extract_field(result, "title") == "A &amp; B"

    def test_empty_snippet_list_falls_back_to_raw(self):
        """Test that an empty snippet list is treated as missing."""
        result = {"title": Wrapped(raw="A", snippet=[])}
        assert extract_field(result, "title") == "A"

    def test_non_string_raw_value(self):
        """Test that non-string raw values are stringified."""
        result = {"id": Wrapped(raw=1939191)}
        assert extract_field(result, "id") == "1939191"

    def test_raw_list_escaped_per_element_then_joined(self):
        """Test that the join separator is never escaped."""
        result = {"tags": Wrapped(raw=["<apm>", "Q&A"])}
        assert extract_field(result, "tags") == "&lt;apm&gt;, Q&amp;A"

    def test_snippet_list_joined(self):
        """Test that snippet lists are joined verbatim."""
        result = {"body": Wrapped(snippet=["<em>one</em>", "<em>two</em>"])}
        assert extract_field(result, "body") == "<em>one</em>, <em>two</em>"

    def test_snippet_list_keeps_empty_elements(self):
        """Test that every snippet element takes part in the join."""
        result = {"body": Wrapped(snippet=["<em>one</em>", "", "<em>three</em>"])}
        assert extract_field(result, "body") == "<em>one</em>, , <em>three</em>"

    def test_scalar_snippet_returned_as_string(self):
        """Test that a non-string snippet comes back as text."""
        result = {"version": Wrapped(raw=7, snippet=7)}
        assert extract_field(result, "version") == "7"

    def test_missing_field_returns_none(self):
        """Test that a missing field is omitted."""
        assert extract_field({"title": Wrapped(raw="Hi")}, "body") is None

    def test_wrapper_without_values_returns_none(self):
        """Test that a wrapper with neither representation is omitted."""
        assert extract_field({"title": Wrapped()}, "title") is None

    def test_opaque_value_returns_none(self):
        """Test that opaque values are never extracted."""
        result = {"_meta": Opaque("<img src=x onerror=alert(1)>")}
        assert extract_field(result, "_meta") is None

    def test_unclassified_plain_value_returns_none(self):
        """Test that values that never went through classification are ignored."""
        result = {"title": {"raw": "Hi"}}
        assert extract_field(result, "title") is None  # type: ignore[arg-type]


class TestExtractAllFields:
    """Test cases for extract_all_fields."""

    def test_opaque_fields_discarded(self):
        """Test that only wrapped fields survive."""
        result = {
            "title": Wrapped(raw="Hi"),
            "_meta": Opaque("1939191"),
            "_score": Opaque(12.5),
        }

        assert extract_all_fields(result) == {
            "title": SanitizedField(name="title", value="Hi"),
        }

    def test_all_wrapped_fields_extracted(self):
        """Test extraction of every wrapped field."""
        result = {
            "title": Wrapped(raw="Hi", snippet="<em>Hi</em>"),
            "body": Wrapped(raw="a < b"),
            "url": Wrapped(raw="https://docs.newrelic.com/x"),
        }

        fields = extract_all_fields(result)

        assert fields["title"].value == "<em>Hi</em>"
        assert fields["body"].value == "a &lt; b"
        assert fields["url"].value == "https://docs.newrelic.com/x"

    def test_empty_wrappers_omitted(self):
        """Test that wrappers with no representation are left out."""
        result = {"title": Wrapped(raw="Hi"), "body": Wrapped()}
        assert list(extract_all_fields(result)) == ["title"]

    def test_empty_result(self):
        """Test that an empty result yields no fields."""
        assert extract_all_fields({}) == {}
