"""
Fluent query builder.

A ``Query`` accumulates options through chained setters. Every setter mutates
the instance in place and returns it, so a query is single-owner and must be
fully configured before it is handed to ``Client.search``. The client only
reads it; the encoder turns it into a fixed-order argument list no matter which
order the setters were called in.

The search expression itself (including ``@field:[min max]`` ranges) is opaque
and passed through untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, Flag, auto
import math


class QueryFlag(Flag):
    """Flags that change how the engine matches and what the reply contains."""

    NONE = 0
    VERBATIM = auto()
    NO_CONTENT = auto()
    NO_STOPWORDS = auto()
    WITH_SCORES = auto()
    IN_ORDER = auto()
    WITH_PAYLOADS = auto()
    WITH_SORT_KEYS = auto()


# Wire keyword per flag, in the order they are emitted
FLAG_KEYWORDS: tuple[tuple[QueryFlag, str], ...] = (
    (QueryFlag.VERBATIM, "VERBATIM"),
    (QueryFlag.NO_CONTENT, "NOCONTENT"),
    (QueryFlag.NO_STOPWORDS, "NOSTOPWORDS"),
    (QueryFlag.WITH_SCORES, "WITHSCORES"),
    (QueryFlag.IN_ORDER, "INORDER"),
    (QueryFlag.WITH_PAYLOADS, "WITHPAYLOADS"),
    (QueryFlag.WITH_SORT_KEYS, "WITHSORTKEYS"),
)

DEFAULT_OFFSET = 0
DEFAULT_NUM = 10

DEFAULT_FRAGMENT_LEN = 20
DEFAULT_NUM_FRAGMENTS = 3
DEFAULT_SEPARATOR = "... "


@dataclass(frozen=True)
class Paging:
    offset: int = DEFAULT_OFFSET
    num: int = DEFAULT_NUM


@dataclass(frozen=True)
class SortingKey:
    field: str
    ascending: bool = True


@dataclass(frozen=True)
class HighlightOptions:
    """Wrap matched terms in ``tags``; an empty ``fields`` means every returned field."""

    fields: tuple[str, ...] = ()
    tags: tuple[str, str] = ("<b>", "</b>")


@dataclass(frozen=True)
class SummaryOptions:
    """
    Cut fields down to fragments around matched terms.

    Args:
        fields: Fields to summarize; empty means every returned field
        fragment_len: Approximate fragment length in tokens
        num_fragments: Number of fragments to keep
        separator: String appended after each fragment
    """

    fields: tuple[str, ...] = ()
    fragment_len: int = DEFAULT_FRAGMENT_LEN
    num_fragments: int = DEFAULT_NUM_FRAGMENTS
    separator: str = DEFAULT_SEPARATOR


class GeoUnit(str, Enum):
    METERS = "m"
    KILOMETERS = "km"
    FEET = "ft"
    MILES = "mi"


@dataclass(frozen=True)
class NumericFilter:
    """Numeric FILTER clause; infinite bounds are open-ended."""

    field: str
    min: float = -math.inf
    max: float = math.inf
    exclusive_min: bool = False
    exclusive_max: bool = False


@dataclass(frozen=True)
class GeoFilter:
    """GEOFILTER clause matching values within ``radius`` of (lon, lat)."""

    field: str
    lon: float
    lat: float
    radius: float
    unit: GeoUnit = GeoUnit.KILOMETERS


Predicate = NumericFilter | GeoFilter


@dataclass
class Query:
    """
    Search request description.

    Example:
        query = (
            Query("hello world @bar:[40 90]")
            .set_sort_by("bar", ascending=True)
            .set_return_fields("foo")
            .limit(0, 5)
        )
    """

    raw: str
    flags: QueryFlag = QueryFlag.NONE
    paging: Paging = field(default_factory=Paging)
    return_fields: tuple[str, ...] | None = None
    sort_by: SortingKey | None = None
    highlight_opts: HighlightOptions | None = None
    summarize_opts: SummaryOptions | None = None
    language: str | None = None
    filters: list[Predicate] = field(default_factory=list)
    in_keys: tuple[str, ...] | None = None
    slop: int | None = None
    scorer: str | None = None
    expander: str | None = None
    payload: bytes | None = None

    def limit(self, offset: int, num: int) -> Query:
        self.paging = Paging(offset, num)
        return self

    def set_flags(self, flags: QueryFlag) -> Query:
        self.flags = flags
        return self

    def add_flags(self, flags: QueryFlag) -> Query:
        self.flags |= flags
        return self

    def set_sort_by(self, field_name: str, ascending: bool = True) -> Query:
        self.sort_by = SortingKey(field_name, ascending)
        return self

    def set_return_fields(self, *fields: str) -> Query:
        """Restrict returned fields. Fields outside this set never appear in results."""
        self.return_fields = tuple(fields)
        return self

    def set_language(self, language: str) -> Query:
        self.language = language
        return self

    def highlight(self, fields: list[str] | tuple[str, ...], open_tag: str, close_tag: str) -> Query:
        self.highlight_opts = HighlightOptions(tuple(fields), (open_tag, close_tag))
        return self

    def summarize(self, *fields: str) -> Query:
        """Summarize ``fields`` with the default fragment length, count and separator."""
        self.summarize_opts = SummaryOptions(tuple(fields))
        return self

    def summarize_options(self, options: SummaryOptions) -> Query:
        self.summarize_opts = options
        return self

    def add_filter(self, predicate: Predicate) -> Query:
        self.filters.append(predicate)
        return self

    def limit_ids(self, *doc_ids: str) -> Query:
        self.in_keys = tuple(doc_ids)
        return self

    def set_slop(self, slop: int) -> Query:
        self.slop = slop
        return self

    def set_scorer(self, scorer: str) -> Query:
        self.scorer = scorer
        return self

    def set_expander(self, expander: str) -> Query:
        self.expander = expander
        return self

    def set_payload(self, payload: bytes) -> Query:
        self.payload = payload
        return self

    def has_flag(self, flag: QueryFlag) -> bool:
        return bool(self.flags & flag)

    def returns_field(self, name: str) -> bool:
        """Whether ``name`` can appear in results given the return-field projection."""
        return self.return_fields is None or name in self.return_fields

    def is_highlighted(self, name: str) -> bool:
        opts = self.highlight_opts
        if opts is None or not self.returns_field(name):
            return False
        return not opts.fields or name in opts.fields

    def is_summarized(self, name: str) -> bool:
        opts = self.summarize_opts
        if opts is None or not self.returns_field(name):
            return False
        return not opts.fields or name in opts.fields


def new_query(raw: str) -> Query:
    return Query(raw)
