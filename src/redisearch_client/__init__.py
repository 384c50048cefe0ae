"""
Client library for RediSearch-style full-text indexes.

Modules:
- schema: Field types and index options for FT.CREATE
- document: Documents and per-batch indexing options
- query: Fluent query builder
- encoding: Schema/document/query to command arguments
- decoding: Search, info and explain reply decoding
- batch: Pipelined batch indexing with per-document outcomes
- client: Client facade over a redis connection
"""

from redisearch_client.client import Client
from redisearch_client.config import ClientSettings, ObservabilityCollectorConfig
from redisearch_client.decoding import SearchResult
from redisearch_client.document import (
    DEFAULT_INDEXING_OPTIONS,
    Document,
    IndexingOptions,
    Tags,
    new_document,
)
from redisearch_client.errors import (
    DecodeError,
    DocumentIndexError,
    EncodingError,
    FailureReason,
    MultiError,
    RediSearchError,
)
from redisearch_client.models import FieldInfo, IndexInfo
from redisearch_client.query import (
    GeoFilter,
    GeoUnit,
    HighlightOptions,
    NumericFilter,
    Paging,
    Query,
    QueryFlag,
    SortingKey,
    SummaryOptions,
    new_query,
)
from redisearch_client.schema import (
    DEFAULT_OPTIONS,
    FieldType,
    GeoField,
    IndexOptions,
    NumericField,
    Schema,
    TagField,
    TextField,
    TextFieldOptions,
    new_geo_field,
    new_numeric_field,
    new_sortable_numeric_field,
    new_sortable_text_field,
    new_tag_field,
    new_text_field,
    new_text_field_options,
)


__all__ = [
    "DEFAULT_INDEXING_OPTIONS",
    "DEFAULT_OPTIONS",
    "Client",
    "ClientSettings",
    "DecodeError",
    "Document",
    "DocumentIndexError",
    "EncodingError",
    "FailureReason",
    "FieldInfo",
    "FieldType",
    "GeoField",
    "GeoFilter",
    "GeoUnit",
    "HighlightOptions",
    "IndexInfo",
    "IndexOptions",
    "IndexingOptions",
    "MultiError",
    "NumericField",
    "NumericFilter",
    "ObservabilityCollectorConfig",
    "Paging",
    "Query",
    "QueryFlag",
    "RediSearchError",
    "Schema",
    "SearchResult",
    "SortingKey",
    "SummaryOptions",
    "TagField",
    "Tags",
    "TextField",
    "TextFieldOptions",
    "new_document",
    "new_geo_field",
    "new_numeric_field",
    "new_query",
    "new_sortable_numeric_field",
    "new_sortable_text_field",
    "new_tag_field",
    "new_text_field",
    "new_text_field_options",
]
