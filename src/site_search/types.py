"""
Common type definitions for the site search pipeline.

TypedDict definitions for API payloads, plus the record types that flow
from raw results to display-ready results.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, NamedTuple, TypedDict

import httpx


class SnippetOptions(TypedDict):
    """Highlighting options for a snippet field."""

    size: int
    fallback: bool


class ResultFieldSpec(TypedDict, total=False):
    """Which representations of a field the search API should return."""

    snippet: SnippetOptions
    raw: dict[str, Any]


class SearchFilter(TypedDict):
    """A value filter applied to one field of the search index."""

    field: str
    values: list[str]
    type: Literal["any", "all"]


class SearchRequest(TypedDict):
    """Complete search request handed to the connector."""

    term: str
    page: int
    result_fields: dict[str, ResultFieldSpec]
    filters: list[SearchFilter]


@dataclass(frozen=True)
class Wrapped:
    """A field value as delivered by the search API: raw and/or snippet."""

    raw: Any = None
    snippet: str | list[str] | None = None


@dataclass(frozen=True)
class Opaque:
    """Any response value that is not a wrapped field. Never rendered."""

    value: Any = None


FieldValue = Wrapped | Opaque

RawResult = Mapping[str, FieldValue]


class SearchResults(TypedDict):
    """One page of results from the search API."""

    query: str
    page: int
    results: list[RawResult]
    total_pages: int
    total_results: int


class SanitizedField(NamedTuple):
    """A field whose value is safe to insert as markup."""

    name: str
    value: str


@dataclass
class SanitizedResult:
    """Render-safe fields of one result, its validated URL and its title."""

    fields: dict[str, SanitizedField]
    url: httpx.URL | None = None
    title: str | None = None

    def get(self, name: str) -> str | None:
        sanitized = self.fields.get(name)
        return sanitized.value if sanitized is not None else None


class ResultFields(NamedTuple):
    """Names of the fields the renderer reads from each result."""

    title: str = "title"
    url: str = "url"
    body: str = "body"


class DisplayResult(NamedTuple):
    """Display-ready result. Every string here is already markup-safe."""

    title: str
    body_html: str | None
    url: str | None
    source_tag: str | None

    @property
    def is_link(self) -> bool:
        return self.url is not None


class SearchStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    EMPTY = "empty"
    ERROR = "error"


@dataclass
class SessionState:
    """Snapshot of a search session."""

    query_term: str = ""
    page: int = 1
    status: SearchStatus = SearchStatus.IDLE
    results: list[SanitizedResult] = field(default_factory=list)
    total_pages: int = 0
    total_results: int = 0
    error: str | None = None


class PagingInfo(NamedTuple):
    """'Showing start - end out of total for: term'."""

    start: int
    end: int
    total_results: int
    search_term: str


class SearchView(NamedTuple):
    """Everything the search page needs to draw itself."""

    is_loading: bool
    has_searched: bool
    has_results: bool
    paging: PagingInfo | None
    results: list[DisplayResult]
    error: str | None
