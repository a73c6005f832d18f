"""MongoDB document sink.

This module opens a write-capable collection handle for an import run.
Connection failures are fatal before any source is read.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol

from core.config import LineportConfig
from core.constants import DEFAULT_WRITE_CONCERN
from core.errors import LineportDependencyError, LineportStoreError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


class DocumentSink(Protocol):
    """Asynchronous destination for accepted documents."""

    async def insert_document(self, document: Mapping[str, Any]) -> None:
        """Persist one document."""


class MongoDocumentStore:
    """Collection-bound sink backed by pymongo's asyncio client."""

    def __init__(self, client: Any, collection: Any) -> None:
        self._client = client
        self._collection = collection

    async def insert_document(self, document: Mapping[str, Any]) -> None:
        """Insert one document with the configured write concern."""
        await self._collection.insert_one(dict(document))

    async def close(self) -> None:
        """Close the underlying client."""
        await self._client.close()


async def open_document_store(config: LineportConfig) -> MongoDocumentStore:
    """Connect to MongoDB and return a collection sink.

    Args:
        config: Runtime config with host, database, and collection.

    Returns:
        Connected document store.

    Raises:
        LineportConfigError: If store selectors are missing.
        LineportDependencyError: If pymongo is not installed.
        LineportStoreError: If the server cannot be reached.
    """
    config.require_store_target()
    pymongo = _import_pymongo()
    client = pymongo.AsyncMongoClient(
        config.mongo_uri,
        serverSelectionTimeoutMS=config.server_selection_timeout_ms,
    )
    try:
        await client.admin.command("ping")
    except pymongo.errors.PyMongoError as error:
        await client.close()
        raise LineportStoreError(
            f"Failed to connect to MongoDB at {config.host}: {error}. "
            "Check --host and that the server is reachable."
        ) from error
    collection = client[config.db].get_collection(
        config.collection,
        write_concern=pymongo.WriteConcern(w=DEFAULT_WRITE_CONCERN),
    )
    _LOGGER.info("store_connected", host=config.host, db=config.db, collection=config.collection)
    return MongoDocumentStore(client, collection)


def _import_pymongo() -> Any:
    """Import pymongo with a clear error when missing."""
    try:
        import pymongo
        import pymongo.errors
    except ImportError as error:
        raise LineportDependencyError(
            "MongoDB support requires pymongo, but it is not installed. "
            "Install pymongo>=4.13 to import into MongoDB."
        ) from error
    return pymongo
