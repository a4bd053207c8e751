import asyncio
from types import SimpleNamespace

from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

from leaderboard.core.events import shutdown_event, startup_event
from leaderboard.database import DatabaseConnection, DatabaseManager

from .conftest import FakeCollection


class FakeAdmin:
    def __init__(self):
        self.reachable = False

    async def command(self, name):
        if not self.reachable:
            raise ServerSelectionTimeoutError("No servers found")
        return {"ok": 1}


def _connection():
    conn = DatabaseConnection("mongodb://example.invalid:27017/leaderboard", heartbeat_interval=0.01)
    admin = FakeAdmin()
    conn.client = SimpleNamespace(admin=admin)
    conn.collection = FakeCollection()
    return conn, admin


async def test_ping_tracks_reachability():
    conn, admin = _connection()
    assert await conn.ping() is False
    assert conn.is_connected is False

    admin.reachable = True
    assert await conn.ping() is True
    assert conn.is_connected is True
    assert conn.collection.indexes == [[("score", -1), ("createdAt", 1), ("_id", 1)]]

    admin.reachable = False
    assert await conn.ping() is False
    assert conn.is_connected is False


async def test_manager_switches_when_database_returns():
    conn, admin = _connection()
    db = DatabaseManager(conn)
    await conn.ping()
    assert db.db_mode == "memory"
    admin.reachable = True
    await conn.ping()
    assert db.db_mode == "mongo"


async def test_mark_disconnected():
    conn, admin = _connection()
    admin.reachable = True
    await conn.ping()
    conn.mark_disconnected("socket closed")
    assert conn.is_connected is False


async def test_startup_and_shutdown_events():
    db = DatabaseManager()
    await startup_event(db)
    assert db.db_mode == "memory"
    await shutdown_event(db)


class FakeClient:
    def __init__(self, admin):
        self.admin = admin
        self.closed = False

    async def close(self):
        self.closed = True


class UnindexableCollection(FakeCollection):
    async def create_index(self, keys):
        raise OperationFailure("not authorized to create index")


async def test_index_failure_keeps_mongo_mode():
    conn, admin = _connection()
    conn.collection = UnindexableCollection()
    admin.reachable = True
    assert await conn.ping() is True
    assert conn.is_connected is True
    assert DatabaseManager(conn).db_mode == "mongo"


async def test_index_is_created_once_it_succeeds():
    conn, admin = _connection()
    admin.reachable = True
    conn.collection = UnindexableCollection()
    await conn.ping()
    conn.collection = FakeCollection()
    await conn.ping()
    await conn.ping()
    assert len(conn.collection.indexes) == 1


async def test_initialize_retries_then_starts_in_memory_mode(monkeypatch):
    conn = DatabaseConnection("mongodb://127.0.0.1:1/leaderboard", heartbeat_interval=0.01,
                              timeout_ms=50, max_retries=2, retry_delay=0)
    attempts = []
    ping = conn.ping

    async def counting_ping():
        attempts.append(1)
        return await ping()

    monkeypatch.setattr(conn, "ping", counting_ping)
    await conn.initialize()
    try:
        assert conn.is_connected is False
        assert len(attempts) >= 2
        assert DatabaseManager(conn).db_mode == "memory"
    finally:
        await conn.close()


async def test_monitor_picks_up_returning_database():
    conn = DatabaseConnection("mongodb://127.0.0.1:1/leaderboard", heartbeat_interval=0.01,
                              timeout_ms=50, max_retries=1, retry_delay=0)
    await conn.initialize()
    assert conn.is_connected is False

    await conn.client.close()
    admin = FakeAdmin()
    admin.reachable = True
    fake_client = FakeClient(admin)
    conn.client = fake_client
    conn.collection = FakeCollection()

    for _ in range(50):
        if conn.is_connected:
            break
        await asyncio.sleep(0.01)
    assert conn.is_connected is True
    assert conn.collection.indexes

    admin.reachable = False
    for _ in range(50):
        if not conn.is_connected:
            break
        await asyncio.sleep(0.01)
    assert conn.is_connected is False

    await conn.close()
    assert fake_client.closed is True
