"""
Car Doctor Backend — Document Store
=====================================

What:  The document store contract, its MongoDB implementation, and the
       FastAPI dependency that hands the shared store to route handlers.
How:   `DocumentStore` is an abstract interface over two logical
       collections ("services" and "orders"). `MongoDocumentStore`
       implements it on PyMongo's native asyncio client, so every call is
       awaited and no request blocks another.
Who:   Services receive the store as an argument; routes obtain it with
       `Depends(get_store)`.
When:  One store is created by the lifespan handler at startup, kept on
       `app.state.store`, and closed at shutdown.

Error Translation:
    Connection / server-selection failures → StoreUnavailableError (503)
    Rejected credentials (code 18)          → StoreUnavailableError (503)
    Any other PyMongoError                  → StoreOperationError (500)
    Nothing is retried.
"""

import json
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional

from bson import (
    Binary,
    Code,
    DBRef,
    Decimal128,
    MaxKey,
    MinKey,
    ObjectId,
    Regex,
    Timestamp,
    json_util,
)
from bson.errors import InvalidId
from fastapi import Request
from pymongo import AsyncMongoClient
from pymongo.errors import ConnectionFailure, OperationFailure, PyMongoError
from pymongo.server_api import ServerApi

from car_doctor.config import Settings
from car_doctor.exceptions import (
    StoreOperationError,
    StoreUnavailableError,
    ValidationError,
)
from car_doctor.schemas.common import DeleteResult, InsertResult, UpdateResult

logger = logging.getLogger(__name__)

# Logical collection names used by the services layer.
SERVICES = "services"
ORDERS = "orders"

# BSON values with no plain JSON counterpart.
_EXTENDED_JSON_TYPES = (Binary, bytes, Code, DBRef, MaxKey, MinKey, Regex, Timestamp)

# Server error code: AuthenticationFailed.
_AUTHENTICATION_FAILED = 18


def _is_unavailable(error: PyMongoError) -> bool:
    """Failures meaning the deployment cannot serve us at all, as opposed to one bad operation."""
    if isinstance(error, ConnectionFailure):
        return True
    return isinstance(error, OperationFailure) and error.code == _AUTHENTICATION_FAILED


def to_object_id(value: str, field: str = "id") -> ObjectId:
    """
    Parse a store-native id string, rejecting malformed input up front.

    Raises:
        ValidationError: `value` is not a 24-character hex ObjectId.
    """
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationError(
            message=f"'{value}' is not a valid document id",
            field=field,
        )


def _to_json_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, Decimal128):
        return str(value.to_decimal())
    if isinstance(value, Mapping):
        return {key: _to_json_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json_value(item) for item in value]
    if isinstance(value, _EXTENDED_JSON_TYPES):
        # Relaxed Extended JSON, e.g. {"$binary": {...}} or {"$timestamp": {...}}
        return json.loads(json_util.dumps(value, json_options=json_util.RELAXED_JSON_OPTIONS))
    return value


def serialize_document(document: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Render a stored document as plain JSON-compatible values, at any depth.

    ObjectId → hex string, Decimal128 → decimal string (precision kept),
    binary / timestamp / regex / DBRef / min-max keys → relaxed Extended
    JSON. datetimes and plain Python values pass through untouched.
    """
    return {key: _to_json_value(value) for key, value in document.items()}


class DocumentStore(ABC):
    """
    Abstract interface for the persistence collaborator.

    Contract:
        - Documents are returned as plain dicts with `_id` as a hex string
        - Lookups by id take an already-validated ObjectId
        - Updates apply a `$set` of the given fields to one document
        - Implementations translate driver errors into StoreUnavailableError
          or StoreOperationError
    """

    @abstractmethod
    async def find(
        self, collection: str, filter: Optional[Mapping[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        """Return every document in `collection` matching `filter` (all when None)."""
        ...

    @abstractmethod
    async def find_one(self, collection: str, object_id: ObjectId) -> Optional[Dict[str, Any]]:
        """Return the document with `_id == object_id`, or None."""
        ...

    @abstractmethod
    async def insert_one(self, collection: str, document: Mapping[str, Any]) -> InsertResult:
        ...

    @abstractmethod
    async def update_one(
        self, collection: str, object_id: ObjectId, changes: Mapping[str, Any]
    ) -> UpdateResult:
        ...

    @abstractmethod
    async def delete_one(self, collection: str, object_id: ObjectId) -> DeleteResult:
        ...

    @abstractmethod
    async def ping(self) -> bool:
        """Lightweight connectivity probe used by the health check. Never raises."""
        ...

    async def close(self) -> None:
        """Release driver resources. Default: nothing to release."""
        return None


class MongoDocumentStore(DocumentStore):
    """
    DocumentStore backed by MongoDB through `pymongo.AsyncMongoClient`.

    The client is created lazily by the driver; `connect()` forces a
    round trip (admin `ping`) so that a bad URI is reported at startup
    rather than on the first request.
    """

    def __init__(
        self,
        client: AsyncMongoClient,
        database_name: str,
        collection_names: Mapping[str, str],
    ):
        self._client = client
        self._db = client[database_name]
        self._collection_names = dict(collection_names)

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoDocumentStore":
        """
        Build a store from MONGO_URI using the Stable API v1 in strict mode.

        Raises:
            StoreUnavailableError: MONGO_URI is empty or not a valid URI.
        """
        if not settings.mongo_uri:
            raise StoreUnavailableError(context={"reason": "MONGO_URI is not set"})
        try:
            client = AsyncMongoClient(
                settings.mongo_uri,
                server_api=ServerApi("1", strict=True, deprecation_errors=True),
                serverSelectionTimeoutMS=settings.mongo_server_selection_timeout_ms,
            )
        except PyMongoError as e:
            raise StoreUnavailableError(context={"reason": str(e)}) from e
        return cls(
            client=client,
            database_name=settings.mongo_db_name,
            collection_names={
                SERVICES: settings.services_collection,
                ORDERS: settings.orders_collection,
            },
        )

    def _collection(self, name: str):
        try:
            return self._db[self._collection_names[name]]
        except KeyError:
            raise StoreOperationError(
                message="Unknown collection",
                context={"collection": name},
            )

    @contextmanager
    def _translate_errors(self, operation: str, collection: str) -> Iterator[None]:
        """Wrap driver exceptions raised inside the block in application errors."""
        try:
            yield
        except PyMongoError as e:
            if _is_unavailable(e):
                logger.error("Store unreachable during %s on %s: %s", operation, collection, e)
                raise StoreUnavailableError(
                    context={"operation": operation, "collection": collection},
                ) from e
            logger.error("Store error during %s on %s: %s", operation, collection, e)
            raise StoreOperationError(
                context={
                    "operation": operation,
                    "collection": collection,
                    "error_type": type(e).__name__,
                },
            ) from e

    async def connect(self) -> None:
        """
        Verify connectivity with an admin `ping`.

        Raises:
            StoreUnavailableError: The deployment could not be reached.
        """
        with self._translate_errors("ping", "admin"):
            await self._client.admin.command("ping")
        logger.info("MongoDB connection is successful (database=%s)", self._db.name)

    async def find(
        self, collection: str, filter: Optional[Mapping[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        with self._translate_errors("find", collection):
            cursor = self._collection(collection).find(dict(filter or {}))
            documents = await cursor.to_list(length=None)
        return [serialize_document(doc) for doc in documents]

    async def find_one(self, collection: str, object_id: ObjectId) -> Optional[Dict[str, Any]]:
        with self._translate_errors("find_one", collection):
            document = await self._collection(collection).find_one({"_id": object_id})
        return serialize_document(document) if document is not None else None

    async def insert_one(self, collection: str, document: Mapping[str, Any]) -> InsertResult:
        # The driver writes the generated _id into the dict it is given.
        to_insert = dict(document)
        with self._translate_errors("insert_one", collection):
            result = await self._collection(collection).insert_one(to_insert)
        return InsertResult(
            acknowledged=result.acknowledged,
            inserted_id=str(result.inserted_id),
        )

    async def update_one(
        self, collection: str, object_id: ObjectId, changes: Mapping[str, Any]
    ) -> UpdateResult:
        with self._translate_errors("update_one", collection):
            result = await self._collection(collection).update_one(
                {"_id": object_id}, {"$set": dict(changes)}
            )
        return UpdateResult(
            acknowledged=result.acknowledged,
            matched_count=result.matched_count,
            modified_count=result.modified_count,
            upserted_id=str(result.upserted_id) if result.upserted_id is not None else None,
        )

    async def delete_one(self, collection: str, object_id: ObjectId) -> DeleteResult:
        with self._translate_errors("delete_one", collection):
            result = await self._collection(collection).delete_one({"_id": object_id})
        return DeleteResult(
            acknowledged=result.acknowledged,
            deleted_count=result.deleted_count,
        )

    async def ping(self) -> bool:
        try:
            await self._client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning("Store ping failed: %s", e)
            return False

    async def close(self) -> None:
        await self._client.close()


# ── Store Dependency ──────────────────────────────────────────────────────
def get_store(request: Request) -> DocumentStore:
    """
    FastAPI dependency returning the process-wide store.

    Raises:
        StoreUnavailableError: The lifespan handler has not installed a
            store (startup failed or is still in progress).
    """
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise StoreUnavailableError()
    return store
