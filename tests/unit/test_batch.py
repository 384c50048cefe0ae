"""Unit tests for pipelined batch indexing and MultiError."""

import pytest
import redis

from redisearch_client.batch import BatchIndexer
from redisearch_client.document import DEFAULT_INDEXING_OPTIONS, Document, IndexingOptions, Tags
from redisearch_client.encoding import ADD_CMD
from redisearch_client.errors import DecodeError, DocumentIndexError, FailureReason, MultiError


def make_docs(count: int) -> list[Document]:
    return [Document(f"doc{i}", 1.0).set("foo", f"hello world {i}").set("bar", i) for i in range(count)]


@pytest.fixture
def indexer(connection) -> BatchIndexer:
    return BatchIndexer(connection, "testung")


def test_batch_uses_single_non_transactional_pipeline(indexer, connection, pipeline):
    docs = make_docs(3)
    pipeline.execute.return_value = [b"OK", b"OK", b"OK"]

    outcomes = indexer.run(docs, DEFAULT_INDEXING_OPTIONS)

    assert outcomes == [None, None, None]
    connection.pipeline.assert_called_once_with(transaction=False)
    pipeline.execute.assert_called_once_with(raise_on_error=False)
    connection.execute_command.assert_not_called()
    queued = [c.args for c in pipeline.execute_command.call_args_list]
    assert queued[0] == (ADD_CMD, "testung", "doc0", "1", "FIELDS", "foo", "hello world 0", "bar", "0")
    assert [args[2] for args in queued] == ["doc0", "doc1", "doc2"]


def test_options_applied_to_every_document(indexer, pipeline):
    pipeline.execute.return_value = [b"OK", b"OK"]

    indexer.run(make_docs(2), IndexingOptions(replace=True, language="english"))

    for c in pipeline.execute_command.call_args_list:
        assert c.args[4:7] == ("REPLACE", "LANGUAGE", "english")


def test_index_succeeds_silently(indexer, pipeline):
    pipeline.execute.return_value = [b"OK"] * 5

    assert indexer.index(make_docs(5), DEFAULT_INDEXING_OPTIONS) is None


def test_all_duplicates_yield_full_length_multi_error(indexer, pipeline):
    docs = make_docs(100)
    pipeline.execute.return_value = [redis.ResponseError("Document already exists") for _ in docs]

    with pytest.raises(MultiError) as exc_info:
        indexer.index(docs, DEFAULT_INDEXING_OPTIONS)

    errors = exc_info.value
    assert len(errors) == 100
    assert all(isinstance(e, DocumentIndexError) for e in errors)
    assert all(e.reason == FailureReason.DUPLICATE for e in errors)
    assert [e.doc_id for e in errors] == [d.id for d in docs]
    assert str(errors) == "100 of 100 documents failed to index"


def test_mixed_outcomes_keep_positions(indexer, pipeline):
    docs = make_docs(4)
    pipeline.execute.return_value = [
        b"OK",
        redis.ResponseError("Document already in index"),
        b"OK",
        redis.ResponseError("Could not parse numeric value"),
    ]

    with pytest.raises(MultiError) as exc_info:
        indexer.index(docs, DEFAULT_INDEXING_OPTIONS)

    errors = exc_info.value
    assert errors[0] is None
    assert errors[2] is None
    assert errors[1].reason == FailureReason.DUPLICATE
    assert errors[3].reason == FailureReason.INVALID_VALUE
    assert [e.doc_id for e in errors.failures] == ["doc1", "doc3"]
    assert "2 of 4" in str(errors)


def test_unencodable_document_is_not_sent(indexer, pipeline):
    docs = [
        Document("good1").set("foo", "a"),
        Document("bad", 1.0).set("tags", Tags.of(["x,y"])),
        Document("good2").set("foo", "b"),
    ]
    pipeline.execute.return_value = [b"OK", b"OK"]

    outcomes = indexer.run(docs, DEFAULT_INDEXING_OPTIONS)

    assert outcomes[0] is None
    assert outcomes[2] is None
    assert outcomes[1].doc_id == "bad"
    assert outcomes[1].reason == FailureReason.INVALID_VALUE
    assert [c.args[2] for c in pipeline.execute_command.call_args_list] == ["good1", "good2"]


def test_nothing_encodable_skips_round_trip(indexer, pipeline):
    outcomes = indexer.run([Document("")], DEFAULT_INDEXING_OPTIONS)

    assert len(outcomes) == 1
    assert outcomes[0].reason == FailureReason.INVALID_VALUE
    pipeline.execute.assert_not_called()
    pipeline.reset.assert_called_once()


def test_transport_error_propagates_unwrapped(indexer, pipeline):
    pipeline.execute.side_effect = redis.ConnectionError("Connection refused")

    with pytest.raises(redis.ConnectionError):
        indexer.index(make_docs(2), DEFAULT_INDEXING_OPTIONS)


def test_reply_count_mismatch_raises(indexer, pipeline):
    pipeline.execute.return_value = [b"OK"]

    with pytest.raises(DecodeError):
        indexer.run(make_docs(2), DEFAULT_INDEXING_OPTIONS)


@pytest.mark.parametrize(
    ("message", "reason"),
    [
        ("Document already exists", FailureReason.DUPLICATE),
        ("Document already in index", FailureReason.DUPLICATE),
        ("Could not parse numeric value", FailureReason.INVALID_VALUE),
        ("Invalid geo string", FailureReason.INVALID_VALUE),
        ("Unknown index name", FailureReason.OTHER),
    ],
)
def test_failure_reason_classification(message, reason):
    assert FailureReason.classify(message) == reason


def test_multi_error_is_a_sequence():
    failure = DocumentIndexError("b", FailureReason.OTHER, "boom")
    errors = MultiError([None, failure])

    assert list(errors) == [None, failure]
    assert errors[-1] is failure
    assert errors.failures == [failure]
    assert str(failure) == "b: boom"
