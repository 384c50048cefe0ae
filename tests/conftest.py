"""Shared test fixtures and configuration."""

import os
from unittest.mock import MagicMock

import pytest
import redis

from redisearch_client import Client, ClientSettings


# Keep a developer's REDISEARCH_* variables from leaking into unit tests
TEST_ENV = {
    "REDISEARCH_HOST": "localhost",
    "REDISEARCH_PORT": "6379",
    "REDISEARCH_DB": "0",
    "REDISEARCH_INDEX_NAME": "testung",
    "REDISEARCH_LOG_LEVEL": "info",
}


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset client environment variables before each test."""
    for key in list(os.environ):
        if key.upper().startswith("REDISEARCH_") and key.upper() != "REDISEARCH_TEST_HOST":
            monkeypatch.delenv(key, raising=False)
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)


@pytest.fixture
def connection() -> MagicMock:
    """A redis.Redis stand-in; ``connection.pipeline.return_value`` is the pipeline mock."""
    conn = MagicMock(spec=redis.Redis)
    conn.pipeline.return_value = MagicMock()
    return conn


@pytest.fixture
def pipeline(connection: MagicMock) -> MagicMock:
    return connection.pipeline.return_value


@pytest.fixture
def client(connection: MagicMock) -> Client:
    return Client("testung", connection=connection, settings=ClientSettings(_env_file=None))
