"""
Reply decoding.

Search replies are flat and not self-describing::

    [total, id1, (score1), (payload1), (fields1), id2, ...]

How many elements belong to each document depends on the flags the query was
sent with, so the decoder always takes the originating ``Query``. A reply whose
shape does not match raises ``DecodeError``; no partial result is returned.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import Any, NamedTuple

from redisearch_client.document import Document
from redisearch_client.errors import DecodeError
from redisearch_client.models import FieldInfo, IndexInfo
from redisearch_client.query import Query, QueryFlag


logger = logging.getLogger(__name__)

_INT_INFO_KEYS = frozenset({"num_docs", "max_doc_id", "num_terms", "num_records"})
_FLOAT_INFO_KEYS = frozenset(
    {
        "inverted_sz_mb",
        "offset_vectors_sz_mb",
        "doc_table_size_mb",
        "key_table_size_mb",
        "records_per_doc_avg",
        "bytes_per_record_avg",
        "offsets_per_term_avg",
        "offset_bits_per_record_avg",
    }
)
_VALUED_FIELD_KEYS = frozenset({"type", "weight", "separator", "attribute", "identifier"})


class SearchResult(NamedTuple):
    """Decoded search reply; unpacks as ``documents, total``."""

    documents: list[Document]
    total: int


class ReplyShape(NamedTuple):
    """Offsets of each element within one document group (-1 when absent)."""

    width: int
    score_idx: int
    payload_idx: int
    sortkey_idx: int
    fields_idx: int


def _to_str(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


def _field_value(value: Any) -> str | bytes:
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return value
    return str(value)


def reply_shape(query: Query) -> ReplyShape:
    """Compute the per-document group layout implied by the query's flags."""
    width = 1
    score_idx = payload_idx = sortkey_idx = fields_idx = -1
    if query.has_flag(QueryFlag.WITH_SCORES):
        score_idx = width
        width += 1
    if query.has_flag(QueryFlag.WITH_PAYLOADS):
        payload_idx = width
        width += 1
    if query.has_flag(QueryFlag.WITH_SORT_KEYS):
        sortkey_idx = width
        width += 1
    # RETURN 0 suppresses content the same way NOCONTENT does
    if not query.has_flag(QueryFlag.NO_CONTENT) and query.return_fields != ():
        fields_idx = width
        width += 1
    return ReplyShape(width, score_idx, payload_idx, sortkey_idx, fields_idx)


def _decode_fields(raw: Any, query: Query, doc_id: str) -> dict[str, str | bytes]:
    if raw is None:
        return {}
    if not isinstance(raw, (list, tuple)):
        raise DecodeError(f"Document '{doc_id}': expected a field list, got {type(raw).__name__}")
    if len(raw) % 2:
        raise DecodeError(f"Document '{doc_id}': field list has odd length {len(raw)}")

    properties: dict[str, str | bytes] = {}
    for i in range(0, len(raw), 2):
        name = _to_str(raw[i])
        if not query.returns_field(name):
            logger.debug("Dropping field %s outside the return projection", name)
            continue
        properties[name] = _field_value(raw[i + 1])
    return properties


def _decode_document(group: Sequence[Any], shape: ReplyShape, query: Query) -> Document:
    doc_id = _to_str(group[0])

    score = None
    if shape.score_idx >= 0:
        try:
            score = float(_to_str(group[shape.score_idx]))
        except ValueError as exc:
            raise DecodeError(f"Document '{doc_id}': invalid score {group[shape.score_idx]!r}") from exc

    payload = None
    if shape.payload_idx >= 0:
        raw_payload = group[shape.payload_idx]
        if raw_payload is not None:
            payload = raw_payload if isinstance(raw_payload, bytes) else _to_str(raw_payload).encode("utf-8")

    sort_key = None
    if shape.sortkey_idx >= 0 and group[shape.sortkey_idx] is not None:
        sort_key = _to_str(group[shape.sortkey_idx])

    properties: dict[str, str | bytes] = {}
    if shape.fields_idx >= 0:
        properties = _decode_fields(group[shape.fields_idx], query, doc_id)

    return Document(doc_id, score=score, payload=payload, properties=properties, sort_key=sort_key)


def decode_search_reply(reply: Any, query: Query) -> SearchResult:
    """Decode an FT.SEARCH reply into documents plus the server-side total match count."""
    if not isinstance(reply, (list, tuple)) or not reply:
        raise DecodeError(f"Expected a non-empty array reply, got {type(reply).__name__}")

    total = reply[0]
    if isinstance(total, bool) or not isinstance(total, int):
        raise DecodeError(f"Expected an integer total, got {total!r}")

    shape = reply_shape(query)
    body = reply[1:]
    if len(body) % shape.width:
        raise DecodeError(
            f"Reply has {len(body)} elements after the total, not a multiple of the group size {shape.width}"
        )

    documents = [_decode_document(body[i : i + shape.width], shape, query) for i in range(0, len(body), shape.width)]
    return SearchResult(documents, total)


def decode_explain_reply(reply: Any) -> str:
    if isinstance(reply, (list, tuple)):
        return "\n".join(_to_str(line) for line in reply)
    if reply is None:
        raise DecodeError("Empty explain reply")
    return _to_str(reply)


def _pairs(raw: Sequence[Any]) -> list[tuple[str, Any]]:
    if len(raw) % 2:
        raise DecodeError(f"Expected key/value pairs, got {len(raw)} elements")
    return [(_to_str(raw[i]), raw[i + 1]) for i in range(0, len(raw), 2)]


def _decode_field_info(raw: Any) -> FieldInfo:
    if not isinstance(raw, (list, tuple)) or not raw:
        raise DecodeError(f"Malformed field description: {raw!r}")
    tokens = [_to_str(token) for token in raw]
    # Older servers lead with the bare name, newer ones with "identifier" <name>
    i = 0 if tokens[0].lower() == "identifier" else 1
    name = tokens[0] if i else ""
    values: dict[str, str] = {}
    flags: list[str] = []
    while i < len(tokens):
        key = tokens[i]
        if key.lower() in _VALUED_FIELD_KEYS and i + 1 < len(tokens):
            values[key.lower()] = tokens[i + 1]
            i += 2
        else:
            flags.append(key.upper())
            i += 1

    weight = values.get("weight")
    return FieldInfo(
        name=values.get("attribute") or values.get("identifier") or name,
        type=values.get("type", ""),
        weight=float(weight) if weight is not None else None,
        separator=values.get("separator"),
        flags=flags,
    )


def decode_info_reply(reply: Any) -> IndexInfo:
    """Decode the flat key/value FT.INFO reply."""
    if not isinstance(reply, (list, tuple)):
        raise DecodeError(f"Expected an array reply, got {type(reply).__name__}")

    data: dict[str, Any] = {}
    extra: dict[str, Any] = {}
    for key, value in _pairs(reply):
        try:
            if key == "index_name":
                data["name"] = _to_str(value)
            elif key == "index_options":
                data["options"] = [_to_str(opt) for opt in value or []]
            elif key in ("fields", "attributes"):
                data["fields"] = [_decode_field_info(item) for item in value or []]
            elif key in _INT_INFO_KEYS:
                data[key] = int(float(_to_str(value)))
            elif key in _FLOAT_INFO_KEYS:
                data[key] = float(_to_str(value))
            else:
                extra[key] = value
        except (TypeError, ValueError) as exc:
            raise DecodeError(f"Invalid value for '{key}': {value!r}") from exc

    if "name" not in data:
        raise DecodeError("Info reply has no index_name")
    return IndexInfo(**data, extra=extra)
