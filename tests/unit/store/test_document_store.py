"""Unit tests for the MongoDB document store."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any

import pytest

from core.config import LineportConfig
from core.errors import LineportConfigError, LineportStoreError
from store import document_store
from store.document_store import open_document_store


class _FakePyMongoError(Exception):
    pass


class _FakeCollection:
    def __init__(self, name: str, write_concern: Any) -> None:
        self.name = name
        self.write_concern = write_concern
        self.inserted: list[dict[str, Any]] = []

    async def insert_one(self, document: dict[str, Any]) -> None:
        self.inserted.append(document)


class _FakeDatabase:
    def __init__(self, name: str) -> None:
        self.name = name
        self.collection: _FakeCollection | None = None

    def get_collection(self, name: str, write_concern: Any = None) -> _FakeCollection:
        self.collection = _FakeCollection(name, write_concern)
        return self.collection


class _FakeAdmin:
    def __init__(self, fail: bool) -> None:
        self._fail = fail

    async def command(self, name: str) -> dict[str, int]:
        if self._fail:
            raise _FakePyMongoError("connection refused")
        return {"ok": 1}


class _FakeClient:
    instances: list["_FakeClient"] = []
    fail_ping = False

    def __init__(self, uri: str, **kwargs: Any) -> None:
        self.uri = uri
        self.kwargs = kwargs
        self.admin = _FakeAdmin(self.fail_ping)
        self.databases: dict[str, _FakeDatabase] = {}
        self.closed = False
        _FakeClient.instances.append(self)

    def __getitem__(self, name: str) -> _FakeDatabase:
        return self.databases.setdefault(name, _FakeDatabase(name))

    async def close(self) -> None:
        self.closed = True


def _install_fake_pymongo(monkeypatch: pytest.MonkeyPatch, fail_ping: bool) -> None:
    _FakeClient.instances = []
    _FakeClient.fail_ping = fail_ping
    fake_module = SimpleNamespace(
        AsyncMongoClient=_FakeClient,
        WriteConcern=lambda w: ("w", w),
        errors=SimpleNamespace(PyMongoError=_FakePyMongoError),
    )
    monkeypatch.setattr(document_store, "_import_pymongo", lambda: fake_module)


def _config() -> LineportConfig:
    return LineportConfig(host="db.example:27017", db="logs", collection="lines")


def test_open_document_store_connects_and_inserts(monkeypatch: pytest.MonkeyPatch) -> None:
    """Store should ping, bind the collection, and insert copies of documents."""
    _install_fake_pymongo(monkeypatch, fail_ping=False)
    document = {"_id": "f-000000000001", "text": "a"}

    async def scenario() -> None:
        store = await open_document_store(_config())
        await store.insert_document(document)
        await store.close()

    asyncio.run(scenario())

    client = _FakeClient.instances[0]
    collection = client.databases["logs"].collection
    assert client.uri == "mongodb://db.example:27017/logs" and client.closed
    assert collection is not None and collection.write_concern == ("w", 1)
    assert collection.inserted == [document] and collection.inserted[0] is not document


def test_open_document_store_raises_when_unreachable(monkeypatch: pytest.MonkeyPatch) -> None:
    """Connection failures should be fatal store errors."""
    _install_fake_pymongo(monkeypatch, fail_ping=True)

    with pytest.raises(LineportStoreError):
        asyncio.run(open_document_store(_config()))

    assert _FakeClient.instances[0].closed


def test_open_document_store_requires_collection(monkeypatch: pytest.MonkeyPatch) -> None:
    """Missing selectors should fail before any client is created."""
    _install_fake_pymongo(monkeypatch, fail_ping=False)
    config = LineportConfig(host="h", db="d", collection=None)

    with pytest.raises(LineportConfigError):
        asyncio.run(open_document_store(config))

    assert _FakeClient.instances == []
