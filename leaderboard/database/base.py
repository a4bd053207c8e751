from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import ConnectionFailure, PyMongoError

from ..core.errors import InternalError, ValidationError, issues_from_pydantic
from ..logger import get_logger
from ..models.data import ScoreRecord
from ..models.score import ScoreCreate, ScoreUpdate
from .connection import DatabaseConnection
from .memory_store import MemoryScoreStore
from .mongo_store import MongoScoreStore
from .store import ScoreStore

logger = get_logger(__name__)


class DatabaseManager:
    """Persistence adapter choosing MongoDB or the memory fallback per call.

    One instance per application, handed to the routes; it owns the fallback list.
    """

    def __init__(self, connection: Optional[DatabaseConnection] = None,
                 memory: Optional[MemoryScoreStore] = None):
        self.connection = connection
        self.memory = memory if memory is not None else MemoryScoreStore()
        self._mongo = None

    async def initialize(self):
        """Connect to MongoDB if a connection is configured"""
        if self.connection is not None:
            await self.connection.initialize()
        logger.info(f"Database manager initialized in {self.db_mode} mode")

    async def close(self):
        if self.connection is not None:
            await self.connection.close()

    def active_store(self) -> ScoreStore:
        if self.connection is not None and self.connection.is_connected:
            if self._mongo is None or self._mongo.collection is not self.connection.collection:
                self._mongo = MongoScoreStore(self.connection.collection)
            return self._mongo
        return self.memory

    @property
    def db_mode(self) -> str:
        return self.active_store().mode

    async def list(self, limit: int) -> List[ScoreRecord]:
        store = self.active_store()
        return await self._run(store, store.list(limit))

    async def create(self, name: str, score: int) -> ScoreRecord:
        try:
            data = ScoreCreate(name=name, score=score)
        except PydanticValidationError as e:
            raise ValidationError(issues_from_pydantic(e.errors())) from e
        store = self.active_store()
        return await self._run(store, store.create(data.name, data.score))

    async def update(self, score_id: str, fields: Union[ScoreUpdate, Mapping[str, Any]]) -> ScoreRecord:
        if not isinstance(fields, ScoreUpdate):
            try:
                fields = ScoreUpdate.model_validate(dict(fields))
            except PydanticValidationError as e:
                raise ValidationError(issues_from_pydantic(e.errors())) from e
        changes: Dict[str, Any] = fields.changes()
        store = self.active_store()
        return await self._run(store, store.update(score_id, changes))

    async def delete(self, score_id: str) -> None:
        store = self.active_store()
        await self._run(store, store.delete(score_id))

    async def _run(self, store: ScoreStore, operation):
        try:
            return await operation
        except ConnectionFailure as e:
            logger.error(f"MongoDB connection lost during {store.mode} operation: {e}")
            if self.connection is not None:
                self.connection.mark_disconnected(str(e))
            raise InternalError() from e
        except PyMongoError as e:
            logger.error(f"MongoDB operation failed: {e}")
            raise InternalError() from e
