"""
Schema definition for index creation.

Field types mirror what the engine understands:
- TextField: full-text searchable, optionally weighted
- NumericField: range-filterable numbers
- GeoField: longitude/latitude pairs for radius filters
- TagField: exact-match tag lists split on a separator

Sortable fields keep a copy of their value in the sorting vector so results can
be ordered by them. NOINDEX fields are not searchable and only make sense when
they are also sortable. Validation is deferred to encoding so schemas can be
assembled permissively and rejected as a whole.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum


class FieldType(str, Enum):
    """Field types supported by the engine."""

    TEXT = "TEXT"
    NUMERIC = "NUMERIC"
    GEO = "GEO"
    TAG = "TAG"


@dataclass(frozen=True)
class SchemaField(ABC):
    """Base class for all schema fields."""

    name: str
    sortable: bool = False
    no_index: bool = False

    @property
    @abstractmethod
    def field_type(self) -> FieldType:
        """Return the field type."""


@dataclass(frozen=True)
class TextField(SchemaField):
    """
    Full-text field.

    Args:
        name: Field name
        sortable: Allow SORTBY on this field
        no_index: Keep the value for sorting/returning but skip full-text indexing
        weight: Relevance multiplier for matches in this field (default: 1.0)
    """

    weight: float = 1.0

    @property
    def field_type(self) -> FieldType:
        return FieldType.TEXT


@dataclass(frozen=True)
class NumericField(SchemaField):
    """Numeric field usable in ``@field:[min max]`` ranges and FILTER clauses."""

    @property
    def field_type(self) -> FieldType:
        return FieldType.NUMERIC


@dataclass(frozen=True)
class GeoField(SchemaField):
    """Geo field holding ``"lon,lat"`` values."""

    @property
    def field_type(self) -> FieldType:
        return FieldType.GEO


@dataclass(frozen=True)
class TagField(SchemaField):
    """Tag field; values are split on ``separator`` by the engine."""

    separator: str = ","

    @property
    def field_type(self) -> FieldType:
        return FieldType.TAG


@dataclass(frozen=True)
class TextFieldOptions:
    """Named option set for text fields, see ``new_text_field_options``."""

    weight: float = 1.0
    sortable: bool = False
    no_index: bool = False


def new_text_field(name: str) -> TextField:
    return TextField(name)


def new_text_field_options(name: str, options: TextFieldOptions) -> TextField:
    return TextField(name, sortable=options.sortable, no_index=options.no_index, weight=options.weight)


def new_sortable_text_field(name: str, weight: float = 1.0) -> TextField:
    return TextField(name, sortable=True, weight=weight)


def new_numeric_field(name: str) -> NumericField:
    return NumericField(name)


def new_sortable_numeric_field(name: str) -> NumericField:
    return NumericField(name, sortable=True)


def new_geo_field(name: str) -> GeoField:
    return GeoField(name)


def new_tag_field(name: str, separator: str = ",") -> TagField:
    return TagField(name, separator=separator)


@dataclass(frozen=True)
class IndexOptions:
    """
    Index-level options sent with index creation.

    Args:
        language: Default stemming language for documents
        score: Default document score when a document does not carry one
        stopwords: ``None`` keeps the engine's list, an empty tuple disables stop-words
        no_field_flags: Do not store per-term field flags (NOFIELDS)
        no_frequencies: Do not store term frequencies (NOFREQS)
        no_offset_vectors: Do not store term offsets (NOOFFSETS); disables highlighting
        no_save: Index documents without storing their fields (NOSAVE)
    """

    language: str | None = None
    score: float | None = None
    stopwords: tuple[str, ...] | None = None
    no_field_flags: bool = False
    no_frequencies: bool = False
    no_offset_vectors: bool = False
    no_save: bool = False


DEFAULT_OPTIONS = IndexOptions()


@dataclass
class Schema:
    """
    Ordered collection of fields plus index options.

    Example:
        schema = (
            Schema()
            .add_field(new_text_field("body"))
            .add_field(new_text_field_options("title", TextFieldOptions(weight=5.0, sortable=True)))
            .add_field(new_numeric_field("date"))
        )
    """

    options: IndexOptions = DEFAULT_OPTIONS
    fields: list[SchemaField] = field(default_factory=list)

    def add_field(self, schema_field: SchemaField) -> Schema:
        """Append a field and return this schema for chaining."""
        self.fields.append(schema_field)
        return self

    def __iter__(self):
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __contains__(self, name: str) -> bool:
        return any(f.name == name for f in self.fields)

    def get(self, name: str) -> SchemaField | None:
        for schema_field in self.fields:
            if schema_field.name == name:
                return schema_field
        return None
