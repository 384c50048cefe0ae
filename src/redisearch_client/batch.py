"""
Batch indexing with per-document outcomes.

A batch goes out as one non-transactional pipeline of FT.ADD commands, i.e. a
single round trip. The pipeline runs with ``raise_on_error=False`` so a
rejected document does not stop its siblings; every document gets an entry in
the outcome list at its input position.

Transport errors (connection refused, timeout) are raised by redis-py while
executing the pipeline and propagate unchanged: in that case nothing can be
said about individual documents.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging

import redis

from redisearch_client.document import Document, IndexingOptions
from redisearch_client.encoding import ADD_CMD, encode_add_document
from redisearch_client.errors import DecodeError, DocumentIndexError, EncodingError, FailureReason, MultiError
from redisearch_client.observability.metrics import BATCH_FAILURES


logger = logging.getLogger(__name__)

Outcome = DocumentIndexError | None


class BatchIndexer:
    """Send documents to one index and collect an outcome per document."""

    def __init__(self, connection: redis.Redis, index_name: str) -> None:
        self.connection = connection
        self.index_name = index_name

    def run(self, documents: Sequence[Document], options: IndexingOptions) -> list[Outcome]:
        """Index ``documents`` and return one outcome per document, in input order.

        Raises:
            redis.RedisError: on transport failure; no outcomes are available then.
        """
        outcomes: list[Outcome] = [None] * len(documents)
        queued: list[int] = []

        pipe = self.connection.pipeline(transaction=False)
        for position, document in enumerate(documents):
            try:
                args = encode_add_document(self.index_name, document, options)
            except EncodingError as exc:
                outcomes[position] = DocumentIndexError(document.id, FailureReason.INVALID_VALUE, str(exc))
                continue
            pipe.execute_command(ADD_CMD, *args)
            queued.append(position)

        if queued:
            replies = pipe.execute(raise_on_error=False)
            if len(replies) != len(queued):
                raise DecodeError(f"Pipeline returned {len(replies)} replies for {len(queued)} commands")
            for position, reply in zip(queued, replies):
                if isinstance(reply, Exception):
                    message = str(reply)
                    outcomes[position] = DocumentIndexError(
                        documents[position].id, FailureReason.classify(message), message
                    )
        else:
            pipe.reset()

        for outcome in outcomes:
            if outcome is not None:
                BATCH_FAILURES.labels(index=self.index_name, reason=outcome.reason.value).inc()
        return outcomes

    def index(self, documents: Sequence[Document], options: IndexingOptions) -> None:
        """Index ``documents``; raise ``MultiError`` if any of them was rejected."""
        outcomes = self.run(documents, options)
        failed = sum(1 for outcome in outcomes if outcome is not None)
        if failed:
            logger.warning("Indexing batch on %s: %d of %d documents failed", self.index_name, failed, len(outcomes))
            raise MultiError(outcomes)
        logger.debug("Indexed %d documents into %s", len(outcomes), self.index_name)
