import asyncio
from typing import Optional

from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from ..config import database
from ..logger import get_logger
from .mongo_store import TOP_ORDER

logger = get_logger(__name__)


class DatabaseConnection:
    """Owns the MongoDB client and tracks whether the server is reachable.

    ``is_connected`` is read on every request. A monitor task pings the
    server every ``heartbeat_interval`` seconds, so the flag follows the
    database going away and coming back without a restart.
    """

    def __init__(self, uri: Optional[str] = None, heartbeat_interval: Optional[float] = None,
                 timeout_ms: Optional[int] = None, max_retries: Optional[int] = None,
                 retry_delay: Optional[float] = None):
        self.uri = uri or database.MONGODB_URI
        self.heartbeat_interval = heartbeat_interval or database.MONGODB_HEARTBEAT_SECONDS
        self.timeout_ms = timeout_ms or database.MONGODB_TIMEOUT_MS
        self.max_retries = max_retries if max_retries is not None else database.max_retries
        self.retry_delay = retry_delay if retry_delay is not None else database.retry_delay
        self.client = None
        self.collection = None
        self._connected = False
        self._indexed = False
        self._monitor_task = None

    @property
    def is_connected(self) -> bool:
        return self._connected

    async def initialize(self):
        """Create the client and try to reach the server; never fails startup"""
        self.client = AsyncMongoClient(
            self.uri,
            serverSelectionTimeoutMS=self.timeout_ms,
            tz_aware=True,
        )
        db = self.client.get_default_database(default=database.MONGODB_DB)
        self.collection = db[database.MONGODB_COLLECTION]

        retry_count = 0
        while retry_count < self.max_retries:
            if await self.ping():
                logger.info("Connected to MongoDB")
                break
            retry_count += 1
            logger.error(f"MongoDB connection failed (attempt {retry_count}/{self.max_retries})")
            if retry_count < self.max_retries:
                await asyncio.sleep(self.retry_delay * retry_count)
        else:
            logger.warning("MongoDB unreachable. The API will run in memory mode (data resets on restart).")

        self._monitor_task = asyncio.create_task(self._monitor())

    async def ping(self) -> bool:
        """Ping the server and update the connection state"""
        try:
            await self.client.admin.command('ping')
        except PyMongoError as e:
            self._set_connected(False, reason=str(e))
            return False
        self._set_connected(True)
        await self._ensure_index()
        return True

    async def _ensure_index(self):
        if self._indexed:
            return
        try:
            await self.collection.create_index(TOP_ORDER)
            self._indexed = True
        except PyMongoError as e:
            logger.warning(f"Could not create the score index, will retry on next heartbeat: {e}")

    def mark_disconnected(self, reason: str = ""):
        self._set_connected(False, reason=reason)

    def _set_connected(self, value: bool, reason: str = ""):
        if value == self._connected:
            return
        self._connected = value
        if value:
            logger.info("MongoDB reachable, switching to mongo mode")
        else:
            logger.warning(f"MongoDB unreachable, switching to memory mode: {reason}")

    async def _monitor(self):
        while True:
            await asyncio.sleep(self.heartbeat_interval)
            await self.ping()

    async def close(self):
        """Stop the monitor and close the client"""
        if self._monitor_task:
            self._monitor_task.cancel()
            try:
                await self._monitor_task
            except asyncio.CancelledError:
                pass
            self._monitor_task = None
        if self.client:
            await self.client.close()
        self._connected = False
