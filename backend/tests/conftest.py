"""
Car Doctor Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── store:        InMemoryDocumentStore (no MongoDB needed)
    ├── tokens:       TokenService signed with the test secret
    ├── app:          create_app() wired to the two fixtures above
    ├── test_client:  HTTPX AsyncClient over ASGITransport
    └── session_cookie: builds a Cookie header for a given email
"""

import os
from typing import Any, Dict, List, Mapping, Optional

# Override settings for testing BEFORE any app imports
os.environ["ACCESS_TOKEN_SECRET"] = "test-secret-for-session-tokens-0123456789"
os.environ["MONGO_URI"] = ""
os.environ["PORT"] = "5000"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["COOKIE_SECURE"] = "false"
os.environ["REQUIRE_AUTH_FOR_ORDER_WRITES"] = "false"
os.environ["ENABLE_LEGACY_ROUTES"] = "false"

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient

from car_doctor.database import DocumentStore, serialize_document
from car_doctor.schemas.common import DeleteResult, InsertResult, UpdateResult
from car_doctor.services.token_service import TokenService

TEST_SECRET = os.environ["ACCESS_TOKEN_SECRET"]


class InMemoryDocumentStore(DocumentStore):
    """
    DocumentStore kept in dicts, with a call log.

    `calls` records (operation, collection) for every store method so tests
    can assert that a rejected request never reached the store.
    """

    def __init__(self):
        self.collections: Dict[str, Dict[ObjectId, Dict[str, Any]]] = {}
        self.calls: List[tuple] = []
        self.reachable = True

    def seed(self, collection: str, document: Mapping[str, Any]) -> str:
        object_id = ObjectId()
        self.collections.setdefault(collection, {})[object_id] = {"_id": object_id, **document}
        return str(object_id)

    async def find(self, collection, filter=None):
        self.calls.append(("find", collection))
        filter = dict(filter or {})
        return [
            serialize_document(doc)
            for doc in self.collections.get(collection, {}).values()
            if all(doc.get(key) == value for key, value in filter.items())
        ]

    async def find_one(self, collection, object_id):
        self.calls.append(("find_one", collection))
        doc = self.collections.get(collection, {}).get(object_id)
        return serialize_document(doc) if doc is not None else None

    async def insert_one(self, collection, document):
        self.calls.append(("insert_one", collection))
        object_id = ObjectId()
        self.collections.setdefault(collection, {})[object_id] = {"_id": object_id, **document}
        return InsertResult(acknowledged=True, inserted_id=str(object_id))

    async def update_one(self, collection, object_id, changes):
        self.calls.append(("update_one", collection))
        doc = self.collections.get(collection, {}).get(object_id)
        if doc is None:
            return UpdateResult(acknowledged=True, matched_count=0, modified_count=0)
        modified = any(doc.get(key) != value for key, value in changes.items())
        doc.update(changes)
        return UpdateResult(acknowledged=True, matched_count=1, modified_count=int(modified))

    async def delete_one(self, collection, object_id):
        self.calls.append(("delete_one", collection))
        removed = self.collections.get(collection, {}).pop(object_id, None)
        return DeleteResult(acknowledged=True, deleted_count=0 if removed is None else 1)

    async def ping(self):
        return self.reachable

    def get(self, collection: str, object_id: str) -> Optional[Dict[str, Any]]:
        return self.collections.get(collection, {}).get(ObjectId(object_id))


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def tokens():
    return TokenService(secret=TEST_SECRET, ttl_seconds=3600)


@pytest.fixture
def app(store, tokens):
    from car_doctor.main import create_app
    return create_app(store=store, tokens=tokens)


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_root(test_client):
            response = await test_client.get("/")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def session_cookie(tokens):
    """Returns a function building request headers that carry a session for `email`."""
    def _build(email: str) -> Dict[str, str]:
        return {"Cookie": f"token={tokens.issue(email)}"}
    return _build


@pytest.fixture
def sample_order():
    return {
        "email": "a@x.com",
        "service": "oil-change",
        "status": False,
        "customerName": "Alex",
        "date": "2024-05-01",
        "price": 20.0,
    }
