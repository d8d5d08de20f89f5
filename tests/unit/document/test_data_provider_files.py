"""Unit tests for DataProvider file operations."""

from __future__ import annotations

import base64
import io

import pytest
from pymongo.errors import AutoReconnect
from werkzeug.exceptions import ClientDisconnected

from docstore.document.data_provider import DataProvider
from docstore.utilities.provider_error import BadRequestError, NotFoundError, ServerError
from fakes import FakeBucket, FakeClock, FakeDatabase


def _encoded(payload: bytes) -> io.BytesIO:
    return io.BytesIO(base64.b64encode(payload))


def test_create_file_stores_decoded_content(provider: DataProvider, database: FakeDatabase, clock: FakeClock) -> None:
    """The stored blob is the decoded payload, addressed by the returned id."""
    response = provider.create_file(_encoded(b"\x00\x01binary\xff"))

    stored = database.files[response["_id"]]
    assert stored["content"] == b"\x00\x01binary\xff"
    assert stored["filename"] == response["_id"]
    assert stored["metadata"] == {"createdAt": clock.now}
    assert response["createdAt"] == clock.now


def test_create_file_rejects_missing_stream(provider: DataProvider) -> None:
    with pytest.raises(BadRequestError, match="Request body cannot be empty for create file requests."):
        provider.create_file(None)


def test_create_file_aborts_on_invalid_base64(provider: DataProvider, database: FakeDatabase) -> None:
    """Invalid input discards the partial upload."""
    with pytest.raises(BadRequestError):
        provider.create_file(io.BytesIO(b"@@@@"))

    assert database.files == {}
    assert FakeBucket.uploads[-1].aborted


def test_create_file_surfaces_open_failure(provider: DataProvider, database: FakeDatabase) -> None:
    database.failures.add("grid_open_upload", AutoReconnect("down"))

    with pytest.raises(ServerError, match="Creating file failed."):
        provider.create_file(_encoded(b"data"))


def test_create_file_surfaces_write_failure(provider: DataProvider, database: FakeDatabase) -> None:
    database.failures.add("grid_write", AutoReconnect("down"))

    with pytest.raises(ServerError, match="Writing file failed."):
        provider.create_file(_encoded(b"data"))

    assert FakeBucket.uploads[-1].aborted


def test_create_file_surfaces_close_failure(provider: DataProvider, database: FakeDatabase) -> None:
    database.failures.add("grid_close", AutoReconnect("down"))

    with pytest.raises(ServerError, match="Closing file failed."):
        provider.create_file(_encoded(b"data"))


def test_get_file_returns_bytes(provider: DataProvider) -> None:
    created = provider.create_file(_encoded(b"hello file"))

    assert provider.get_file(created["_id"]) == b"hello file"


def test_get_file_missing_is_not_found(provider: DataProvider) -> None:
    with pytest.raises(NotFoundError, match="File not found."):
        provider.get_file("5f1d7a3b9c1e4a0012345678")


def test_get_file_surfaces_open_failure(provider: DataProvider, database: FakeDatabase) -> None:
    """Failures other than a missing file are server errors."""
    database.failures.add("grid_open_download", AutoReconnect("down"))

    with pytest.raises(ServerError, match="Getting file failed."):
        provider.get_file("anything")


def test_get_file_surfaces_read_failure(provider: DataProvider, database: FakeDatabase) -> None:
    created = provider.create_file(_encoded(b"hello file"))
    database.failures.add("grid_read", AutoReconnect("down"))

    with pytest.raises(ServerError, match="Reading file failed."):
        provider.get_file(created["_id"])


class _DisconnectingStream:
    """Yields one chunk of base64, then fails the way werkzeug does when the client goes away."""

    def __init__(self) -> None:
        self.reads = 0

    def read(self, size: int = -1) -> bytes:
        self.reads += 1
        if self.reads > 1:
            raise ClientDisconnected()
        return base64.b64encode(b"first chunk!")


def test_create_file_aborts_when_client_disconnects(provider: DataProvider, database: FakeDatabase) -> None:
    """Any failure while reading the body discards the partial upload."""
    with pytest.raises(ClientDisconnected):
        provider.create_file(_DisconnectingStream())

    assert FakeBucket.uploads[-1].chunks == [b"first chunk!"]
    assert FakeBucket.uploads[-1].aborted
    assert database.files == {}
