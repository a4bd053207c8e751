from typing import Any, Dict, List

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, ReturnDocument

from ..core.errors import BadRequest, NotFound
from ..logger import get_logger
from ..models.data import ScoreRecord, utcnow
from .store import ScoreStore

logger = get_logger(__name__)

TOP_ORDER = [("score", DESCENDING), ("createdAt", ASCENDING), ("_id", ASCENDING)]


def stored_now():
    """Current UTC time at the millisecond precision BSON dates keep"""
    now = utcnow()
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


class MongoScoreStore(ScoreStore):
    mode = "mongo"

    def __init__(self, collection):
        self.collection = collection

    async def list(self, limit: int) -> List[ScoreRecord]:
        """Get the top ``limit`` scores"""
        cursor = self.collection.find({}).sort(TOP_ORDER).limit(limit)
        docs = await cursor.to_list(length=limit)
        return [ScoreRecord.from_document(doc) for doc in docs]

    async def create(self, name: str, score: int) -> ScoreRecord:
        now = stored_now()
        doc = {'name': name, 'score': score, 'createdAt': now, 'updatedAt': now}
        result = await self.collection.insert_one(doc)
        doc['_id'] = result.inserted_id
        return ScoreRecord.from_document(doc)

    async def update(self, score_id: str, changes: Dict[str, Any]) -> ScoreRecord:
        """Apply a partial update and return the document as stored afterwards"""
        oid = self._object_id(score_id)
        doc = await self.collection.find_one_and_update(
            {'_id': oid},
            {'$set': {**changes, 'updatedAt': stored_now()}},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            raise NotFound()
        return ScoreRecord.from_document(doc)

    async def delete(self, score_id: str) -> None:
        oid = self._object_id(score_id)
        doc = await self.collection.find_one_and_delete({'_id': oid})
        if doc is None:
            raise NotFound()

    @staticmethod
    def _object_id(score_id: str) -> ObjectId:
        if not ObjectId.is_valid(score_id):
            logger.debug(f"Rejected malformed id {score_id!r}")
            raise BadRequest()
        return ObjectId(score_id)
