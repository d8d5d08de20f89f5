"""Pytest fixtures shared by the docstore test suite."""

from __future__ import annotations

import pytest
from flask import Flask
from flask.testing import FlaskClient

from docstore.api import create_app
from docstore.document.config import DataProviderConfig
from docstore.document.data_provider import DataProvider
from fakes import FakeBucket, FakeClock, FakeDatabase, FakeMongoClient


@pytest.fixture
def config() -> DataProviderConfig:
    """Config pointing at a single local server."""
    return DataProviderConfig(addresses=["localhost:27017"], database="docstore_test")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mongo_client() -> FakeMongoClient:
    return FakeMongoClient()


@pytest.fixture
def provider(config: DataProviderConfig, mongo_client: FakeMongoClient, clock: FakeClock) -> DataProvider:
    """Initialized and connected provider backed by in-memory doubles."""
    FakeBucket.uploads = []
    data_provider = DataProvider(
        config,
        client_factory=mongo_client.factory,
        bucket_factory=FakeBucket,
        clock=clock,
    )
    data_provider.init()
    data_provider.connect()
    return data_provider


@pytest.fixture
def database(provider: DataProvider, mongo_client: FakeMongoClient) -> FakeDatabase:
    return mongo_client[provider.config.database]


@pytest.fixture
def app(provider: DataProvider) -> Flask:
    flask_app = create_app(provider=provider)
    flask_app.testing = True
    return flask_app


@pytest.fixture
def http(app: Flask) -> FlaskClient:
    return app.test_client()
