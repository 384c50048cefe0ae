"""Documents sent to and returned from an index."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Tags:
    """A tag-list value, joined with ``separator`` when encoded."""

    values: tuple[str, ...]
    separator: str = ","

    @classmethod
    def of(cls, values: Iterable[str], separator: str = ",") -> Tags:
        return cls(tuple(values), separator)

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)


FieldValue = str | int | float | bytes | Tags


@dataclass
class Document:
    """
    One record in an index.

    Outbound documents are built by callers with ``set``; inbound documents are
    built by the reply decoder and only hold the fields the server returned.
    ``score`` is ``None`` on search results unless scores were requested, and
    ``sort_key`` is only set when sort keys were requested.

    Example:
        doc = Document("doc1", 1.0).set("title", "Hello world").set("date", 1700000000)
    """

    id: str
    score: float | None = 1.0
    payload: bytes | None = None
    properties: dict[str, FieldValue] = field(default_factory=dict)
    sort_key: str | None = None

    def set(self, name: str, value: FieldValue) -> Document:
        """Insert or overwrite a field value and return this document for chaining."""
        self.properties[name] = value
        return self

    def set_payload(self, payload: bytes) -> Document:
        self.payload = payload
        return self

    def get(self, name: str, default: FieldValue | None = None) -> FieldValue | None:
        return self.properties.get(name, default)

    def __contains__(self, name: str) -> bool:
        return name in self.properties


def new_document(doc_id: str, score: float = 1.0) -> Document:
    return Document(doc_id, score)


@dataclass(frozen=True)
class IndexingOptions:
    """
    Options applied to every document of an indexing batch.

    Args:
        language: Stemming language override for the batch
        no_save: Index without storing field values (NOSAVE)
        replace: Overwrite documents whose id already exists instead of failing
        partial: With ``replace``, only update the fields present in the document
    """

    language: str | None = None
    no_save: bool = False
    replace: bool = False
    partial: bool = False


DEFAULT_INDEXING_OPTIONS = IndexingOptions()
