"""
Shared pytest fixtures for the leaderboard test suite.

Provides:
- An in-memory DatabaseManager and a FastAPI app/TestClient around it
- A fake MongoDB collection and connection so the mongo path can be tested
  without a server, plus a BSON-encoding variant for storage round trips
"""
from types import SimpleNamespace

import bson
import pytest
from bson import ObjectId
from bson.codec_options import CodecOptions
from fastapi.testclient import TestClient

from leaderboard.database import DatabaseManager
from leaderboard.main import create_app


# ============================================================================
# Fake MongoDB collection
# ============================================================================

class FakeCursor:
    def __init__(self, docs):
        self.docs = docs

    def sort(self, keys):
        # apply keys last-to-first so the first key wins; list.sort is stable
        for key, direction in reversed(keys):
            self.docs.sort(key=lambda d: d[key], reverse=direction == -1)
        return self

    def limit(self, n):
        self.docs = self.docs[:n]
        return self

    async def to_list(self, length=None):
        return [dict(d) for d in self.docs]


class FakeCollection:
    """The subset of an async pymongo collection used by MongoScoreStore"""

    def __init__(self):
        self.docs = []
        self.indexes = []

    def find(self, flt):
        return FakeCursor(list(self.docs))

    async def insert_one(self, doc):
        stored = dict(doc)
        stored['_id'] = ObjectId()
        self.docs.append(stored)
        return SimpleNamespace(inserted_id=stored['_id'])

    async def find_one_and_update(self, flt, update, return_document=None):
        for doc in self.docs:
            if doc['_id'] == flt['_id']:
                doc.update(update['$set'])
                return dict(doc)
        return None

    async def find_one_and_delete(self, flt):
        for idx, doc in enumerate(self.docs):
            if doc['_id'] == flt['_id']:
                return self.docs.pop(idx)
        return None

    async def create_index(self, keys):
        self.indexes.append(keys)


class BsonCollection(FakeCollection):
    """Keeps documents as encoded BSON, the way the server stores them.

    Reads decode like a ``tz_aware`` client and come back newest first, so
    only the sort keys decide the order.
    """

    OPTIONS = CodecOptions(tz_aware=True)

    def _decoded(self):
        return [bson.decode(raw, codec_options=self.OPTIONS) for raw in reversed(self.docs)]

    def find(self, flt):
        return FakeCursor(self._decoded())

    async def insert_one(self, doc):
        stored = dict(doc)
        stored['_id'] = ObjectId()
        self.docs.append(bson.encode(stored))
        return SimpleNamespace(inserted_id=stored['_id'])

    async def find_one_and_update(self, flt, update, return_document=None):
        for idx, raw in enumerate(self.docs):
            doc = bson.decode(raw, codec_options=self.OPTIONS)
            if doc['_id'] == flt['_id']:
                doc.update(update['$set'])
                self.docs[idx] = bson.encode(doc)
                return bson.decode(self.docs[idx], codec_options=self.OPTIONS)
        return None

    async def find_one_and_delete(self, flt):
        for idx, raw in enumerate(self.docs):
            doc = bson.decode(raw, codec_options=self.OPTIONS)
            if doc['_id'] == flt['_id']:
                del self.docs[idx]
                return doc
        return None


class FakeConnection:
    """Stands in for DatabaseConnection with a switchable connectivity flag"""

    def __init__(self, collection, connected=False):
        self.collection = collection
        self.connected = connected
        self.closed = False

    @property
    def is_connected(self):
        return self.connected

    def mark_disconnected(self, reason=""):
        self.connected = False

    async def initialize(self):
        pass

    async def close(self):
        self.closed = True


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def db():
    """DatabaseManager with no MongoDB configured (memory mode only)"""
    return DatabaseManager()


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def connection(collection):
    return FakeConnection(collection)


@pytest.fixture
def dual_db(connection):
    """DatabaseManager whose MongoDB side can be switched on and off"""
    return DatabaseManager(connection)


@pytest.fixture
def app(db):
    return create_app(db)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def dual_client(dual_db):
    with TestClient(create_app(dual_db)) as c:
        yield c
