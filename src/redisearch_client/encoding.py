"""
Command encoding.

Pure functions turning schemas, documents and queries into the positional
argument lists of FT.CREATE, FT.ADD and FT.SEARCH/FT.EXPLAIN. Nothing here
touches the network; invalid input raises ``EncodingError`` before anything is
sent.

Option blocks are always emitted in a fixed canonical order so the same builder
state always produces the same arguments.
"""

from __future__ import annotations

from collections.abc import Sequence
import math

from redisearch_client.document import Document, FieldValue, IndexingOptions, Tags
from redisearch_client.errors import EncodingError
from redisearch_client.query import FLAG_KEYWORDS, GeoFilter, NumericFilter, Query
from redisearch_client.schema import NumericField, Schema, SchemaField, TagField, TextField


CREATE_CMD = "FT.CREATE"
ADD_CMD = "FT.ADD"
SEARCH_CMD = "FT.SEARCH"
EXPLAIN_CMD = "FT.EXPLAIN"
INFO_CMD = "FT.INFO"
DROP_CMD = "FT.DROP"
DEL_CMD = "FT.DEL"

Token = str | bytes


def format_number(value: int | float) -> str:
    """Canonical decimal form: shortest round-trip repr without a trailing ``.0``."""
    if isinstance(value, bool):
        raise EncodingError(f"Boolean is not a valid numeric value: {value!r}")
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        raise EncodingError("NaN is not a valid numeric value")
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


def encode_value(value: FieldValue) -> Token:
    if isinstance(value, (str, bytes)):
        return value
    if isinstance(value, Tags):
        for tag in value.values:
            if value.separator in tag:
                raise EncodingError(f"Tag {tag!r} contains separator {value.separator!r}")
        return value.separator.join(value.values)
    if isinstance(value, (int, float)):
        return format_number(value)
    raise EncodingError(f"Unsupported field value type: {type(value).__name__}")


def _encode_field(schema_field: SchemaField) -> list[Token]:
    args: list[Token] = [schema_field.name, schema_field.field_type.value]

    if isinstance(schema_field, TextField):
        if schema_field.weight <= 0:
            raise EncodingError(f"Field '{schema_field.name}': weight must be positive, got {schema_field.weight}")
        if schema_field.weight != 1.0:
            args.extend(["WEIGHT", format_number(schema_field.weight)])
    elif isinstance(schema_field, TagField):
        if len(schema_field.separator) != 1:
            raise EncodingError(f"Field '{schema_field.name}': tag separator must be a single character")
        args.extend(["SEPARATOR", schema_field.separator])

    if schema_field.sortable:
        if not isinstance(schema_field, (TextField, NumericField)):
            raise EncodingError(
                f"Field '{schema_field.name}': {schema_field.field_type.value} fields cannot be sortable"
            )
        args.append("SORTABLE")
    if schema_field.no_index:
        if not schema_field.sortable:
            raise EncodingError(f"Field '{schema_field.name}': NOINDEX requires SORTABLE")
        args.append("NOINDEX")
    return args


def encode_create_index(index_name: str, schema: Schema) -> list[Token]:
    """Arguments for FT.CREATE (command name excluded)."""
    if not schema.fields:
        raise EncodingError("Schema has no fields")

    options = schema.options
    args: list[Token] = [index_name]
    if options.no_save:
        args.append("NOSAVE")
    if options.language:
        args.extend(["LANGUAGE", options.language])
    if options.score is not None:
        args.extend(["SCORE", format_number(options.score)])
    if options.no_offset_vectors:
        args.append("NOOFFSETS")
    if options.no_field_flags:
        args.append("NOFIELDS")
    if options.no_frequencies:
        args.append("NOFREQS")
    if options.stopwords is not None:
        args.extend(["STOPWORDS", str(len(options.stopwords)), *options.stopwords])

    args.append("SCHEMA")
    seen: set[str] = set()
    for schema_field in schema.fields:
        if not schema_field.name:
            raise EncodingError("Field name must not be empty")
        if schema_field.name in seen:
            raise EncodingError(f"Duplicate field name: {schema_field.name}")
        seen.add(schema_field.name)
        args.extend(_encode_field(schema_field))
    return args


def encode_add_document(index_name: str, document: Document, options: IndexingOptions) -> list[Token]:
    """Arguments for FT.ADD of a single document (command name excluded)."""
    if not document.id:
        raise EncodingError("Document id must not be empty")
    if options.partial and not options.replace:
        raise EncodingError("Partial updates require the replace option")

    score = 1.0 if document.score is None else document.score
    if not 0.0 <= score <= 1.0:
        raise EncodingError(f"Document '{document.id}': score must be within [0, 1], got {score}")

    args: list[Token] = [index_name, document.id, format_number(score)]
    if options.no_save:
        args.append("NOSAVE")
    if options.replace:
        args.append("REPLACE")
        if options.partial:
            args.append("PARTIAL")
    if options.language:
        args.extend(["LANGUAGE", options.language])
    if document.payload is not None:
        args.extend(["PAYLOAD", document.payload])

    args.append("FIELDS")
    for name, value in document.properties.items():
        if not name:
            raise EncodingError(f"Document '{document.id}': field name must not be empty")
        args.extend([name, encode_value(value)])
    return args


def _numeric_bound(value: float, exclusive: bool) -> str:
    bound = format_number(value)
    if exclusive and not math.isinf(value):
        return f"({bound}"
    return bound


def _counted(keyword: str, items: Sequence[str]) -> list[Token]:
    return [keyword, str(len(items)), *items]


def encode_query(index_name: str, query: Query) -> list[Token]:
    """
    Arguments for FT.SEARCH / FT.EXPLAIN (command name excluded).

    Order: expression, flags, LIMIT, RETURN, SORTBY, HIGHLIGHT, SUMMARIZE,
    LANGUAGE, then FILTER, GEOFILTER, INKEYS, SLOP, SCORER, EXPANDER, PAYLOAD.
    """
    if not query.raw:
        raise EncodingError("Query expression must not be empty")
    paging = query.paging
    if paging.offset < 0 or paging.num < 0:
        raise EncodingError(f"Invalid paging: offset={paging.offset} num={paging.num}")

    args: list[Token] = [index_name, query.raw]
    args.extend(keyword for flag, keyword in FLAG_KEYWORDS if query.flags & flag)

    args.extend(["LIMIT", str(paging.offset), str(paging.num)])

    if query.return_fields is not None:
        args.extend(_counted("RETURN", query.return_fields))

    if query.sort_by is not None:
        args.extend(["SORTBY", query.sort_by.field, "ASC" if query.sort_by.ascending else "DESC"])

    if query.highlight_opts is not None:
        opts = query.highlight_opts
        args.append("HIGHLIGHT")
        if opts.fields:
            args.extend(_counted("FIELDS", opts.fields))
        args.extend(["TAGS", opts.tags[0], opts.tags[1]])

    if query.summarize_opts is not None:
        summary = query.summarize_opts
        if summary.fragment_len <= 0 or summary.num_fragments <= 0:
            raise EncodingError("Summary fragment length and count must be positive")
        args.append("SUMMARIZE")
        if summary.fields:
            args.extend(_counted("FIELDS", summary.fields))
        args.extend(["FRAGS", str(summary.num_fragments), "LEN", str(summary.fragment_len)])
        args.extend(["SEPARATOR", summary.separator])

    if query.language:
        args.extend(["LANGUAGE", query.language])

    for predicate in query.filters:
        if isinstance(predicate, NumericFilter):
            args.extend(
                [
                    "FILTER",
                    predicate.field,
                    _numeric_bound(predicate.min, predicate.exclusive_min),
                    _numeric_bound(predicate.max, predicate.exclusive_max),
                ]
            )
    for predicate in query.filters:
        if isinstance(predicate, GeoFilter):
            args.extend(
                [
                    "GEOFILTER",
                    predicate.field,
                    format_number(predicate.lon),
                    format_number(predicate.lat),
                    format_number(predicate.radius),
                    predicate.unit.value,
                ]
            )

    if query.in_keys is not None:
        args.extend(_counted("INKEYS", query.in_keys))
    if query.slop is not None:
        args.extend(["SLOP", str(query.slop)])
    if query.scorer:
        args.extend(["SCORER", query.scorer])
    if query.expander:
        args.extend(["EXPANDER", query.expander])
    if query.payload is not None:
        args.extend(["PAYLOAD", query.payload])
    return args
