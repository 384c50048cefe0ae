"""Exception taxonomy for the RediSearch client.

Transport failures are never wrapped: ``redis.ConnectionError`` and friends reach
the caller unchanged, so a ``MultiError`` always means the batch was attempted.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from enum import Enum


class RediSearchError(Exception):
    """Base class for errors raised by this package."""


class EncodingError(RediSearchError):
    """A schema, document or query could not be turned into command arguments."""


class DecodeError(RediSearchError):
    """A server reply did not have the shape the originating command implies."""


class FailureReason(str, Enum):
    """Why the server (or the encoder) rejected a single document."""

    DUPLICATE = "duplicate"
    INVALID_VALUE = "invalid_value"
    OTHER = "other"

    @classmethod
    def classify(cls, message: str) -> FailureReason:
        lowered = message.lower()
        if "already" in lowered and ("exist" in lowered or "index" in lowered):
            return cls.DUPLICATE
        if "parse" in lowered or "invalid" in lowered or "could not" in lowered:
            return cls.INVALID_VALUE
        return cls.OTHER


class DocumentIndexError(RediSearchError):
    """One document of a batch was rejected."""

    def __init__(self, doc_id: str, reason: FailureReason, message: str) -> None:
        super().__init__(f"{doc_id}: {message}")
        self.doc_id = doc_id
        self.reason = reason
        self.message = message

    def __repr__(self) -> str:
        return f"DocumentIndexError(doc_id={self.doc_id!r}, reason={self.reason.value!r})"


class MultiError(RediSearchError, Sequence):
    """Per-document outcome of a batch; ``None`` marks a document that was indexed.

    The length always equals the number of documents submitted and entries are
    in submission order.
    """

    def __init__(self, outcomes: Sequence[DocumentIndexError | None]) -> None:
        self._outcomes = tuple(outcomes)
        failed = len(self.failures)
        super().__init__(f"{failed} of {len(self._outcomes)} documents failed to index")

    def __getitem__(self, index):
        return self._outcomes[index]

    def __len__(self) -> int:
        return len(self._outcomes)

    def __iter__(self) -> Iterator[DocumentIndexError | None]:
        return iter(self._outcomes)

    @property
    def failures(self) -> list[DocumentIndexError]:
        """Only the failed entries, still in submission order."""
        return [outcome for outcome in self._outcomes if outcome is not None]
