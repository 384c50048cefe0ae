"""Client facade binding one index name to a redis connection.

Every public call is one synchronous round trip. There are no retries: redis
errors propagate unchanged, encoding errors are raised before anything is sent
and decode errors are raised instead of returning partial results.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
import logging
from typing import Any

import redis

from redisearch_client.batch import BatchIndexer
from redisearch_client.config import ClientSettings
from redisearch_client.decoding import SearchResult, decode_explain_reply, decode_info_reply, decode_search_reply
from redisearch_client.document import DEFAULT_INDEXING_OPTIONS, Document, IndexingOptions
from redisearch_client.encoding import (
    ADD_CMD,
    CREATE_CMD,
    DEL_CMD,
    DROP_CMD,
    EXPLAIN_CMD,
    INFO_CMD,
    SEARCH_CMD,
    encode_create_index,
    encode_query,
)
from redisearch_client.errors import DocumentIndexError
from redisearch_client.models import IndexInfo
from redisearch_client.observability.metrics import COMMAND_COUNT, COMMAND_LATENCY, SEARCH_RESULTS, track_latency
from redisearch_client.observability.tracing import create_span
from redisearch_client.query import Query
from redisearch_client.schema import Schema


logger = logging.getLogger(__name__)


class Client:
    """
    Manage and query a single index.

    Example:
        client = Client("myIndex")
        client.create_index(Schema().add_field(new_text_field("body")))
        client.index(Document("doc1", 1.0).set("body", "foo bar"))
        docs, total = client.search(Query("foo").limit(0, 2))
    """

    def __init__(
        self,
        index_name: str | None = None,
        connection: redis.Redis | None = None,
        settings: ClientSettings | None = None,
    ) -> None:
        self.settings = settings or ClientSettings()
        self.index_name = index_name or self.settings.index_name
        self._owns_connection = connection is None
        self.connection = connection if connection is not None else self.settings.create_connection()
        self._batch = BatchIndexer(self.connection, self.index_name)

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the connection if this client created it."""
        if self._owns_connection:
            self.connection.close()

    def _span_attributes(self, command: str) -> dict[str, Any]:
        return {"db.system": "redis", "db.operation": command, "redisearch.index": self.index_name}

    def _execute(self, command: str, *args: Any) -> Any:
        with (
            create_span(command, attributes=self._span_attributes(command)),
            track_latency(COMMAND_LATENCY, index=self.index_name, command=command),
        ):
            try:
                reply = self.connection.execute_command(command, *args)
            except redis.RedisError as exc:
                COMMAND_COUNT.labels(index=self.index_name, command=command, status="error").inc()
                logger.warning("%s on %s failed: %s", command, self.index_name, exc)
                raise
        COMMAND_COUNT.labels(index=self.index_name, command=command, status="ok").inc()
        return reply

    def create_index(self, schema: Schema) -> None:
        """Create the index. Fails if it already exists."""
        args = encode_create_index(self.index_name, schema)
        self._execute(CREATE_CMD, *args)
        logger.info("Created index %s with %d fields", self.index_name, len(schema))

    def drop(self, keep_documents: bool = False) -> None:
        """Drop the index. Fails if it does not exist."""
        args: list[str] = [self.index_name]
        if keep_documents:
            args.append("KEEPDOCS")
        self._execute(DROP_CMD, *args)
        logger.info("Dropped index %s", self.index_name)

    def index(self, *documents: Document) -> None:
        """Index documents with the default options; see ``index_options``."""
        self.index_options(DEFAULT_INDEXING_OPTIONS, *documents)

    def index_options(self, options: IndexingOptions, *documents: Document) -> None:
        """Index a batch of documents in one round trip.

        Raises:
            MultiError: one or more documents were rejected; it holds one entry per
                document, ``None`` for those that were indexed.
            redis.RedisError: transport failure, the batch outcome is unknown.
        """
        if documents:
            self._run_batch(self._batch.index, documents, options)

    def index_outcomes(
        self, options: IndexingOptions, documents: Iterable[Document]
    ) -> list[DocumentIndexError | None]:
        """Like ``index_options`` but return the outcome list instead of raising ``MultiError``."""
        batch = list(documents)
        if not batch:
            return []
        return self._run_batch(self._batch.run, batch, options)

    def _run_batch(
        self,
        run: Callable[[Sequence[Document], IndexingOptions], Any],
        documents: Sequence[Document],
        options: IndexingOptions,
    ) -> Any:
        attributes = {**self._span_attributes(ADD_CMD), "redisearch.batch_size": len(documents)}
        with (
            create_span(ADD_CMD, attributes=attributes),
            track_latency(COMMAND_LATENCY, index=self.index_name, command=ADD_CMD),
        ):
            try:
                result = run(documents, options)
            except redis.RedisError:
                COMMAND_COUNT.labels(index=self.index_name, command=ADD_CMD, status="error").inc()
                raise
        COMMAND_COUNT.labels(index=self.index_name, command=ADD_CMD, status="ok").inc()
        return result

    def search(self, query: Query) -> SearchResult:
        """Run a query and return ``(documents, total)``.

        ``total`` counts every match on the server, independent of paging.
        """
        args = encode_query(self.index_name, query)
        reply = self._execute(SEARCH_CMD, *args)
        result = decode_search_reply(reply, query)
        SEARCH_RESULTS.labels(index=self.index_name).observe(len(result.documents))
        logger.debug(
            "Search on %s returned %d of %d matches", self.index_name, len(result.documents), result.total
        )
        return result

    def explain(self, query: Query) -> str:
        """Return the engine's execution plan for the query expression."""
        reply = self._execute(EXPLAIN_CMD, self.index_name, query.raw)
        return decode_explain_reply(reply)

    def info(self) -> IndexInfo:
        reply = self._execute(INFO_CMD, self.index_name)
        return decode_info_reply(reply)

    def delete(self, doc_id: str, delete_document: bool = False) -> bool:
        """Remove a document from the index; ``delete_document`` also deletes its hash.

        Returns:
            True if the document was in the index.
        """
        args: list[str] = [self.index_name, doc_id]
        if delete_document:
            args.append("DD")
        return bool(self._execute(DEL_CMD, *args))
