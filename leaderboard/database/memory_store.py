from typing import Any, Dict, List

from ..core.errors import NotFound
from ..logger import get_logger
from ..models.data import ScoreRecord
from .store import ScoreStore

logger = get_logger(__name__)


class MemoryScoreStore(ScoreStore):
    """Process-local fallback used while MongoDB is unreachable.

    A plain list: append on create, linear scan for update/delete, full sort
    for list. Not synchronized and not durable.
    """
    mode = "memory"

    def __init__(self):
        self.data: List[ScoreRecord] = []

    async def list(self, limit: int) -> List[ScoreRecord]:
        # sorted() is stable, so equal keys keep insertion order
        return sorted(self.data, key=lambda rec: rec.sort_key)[:limit]

    async def create(self, name: str, score: int) -> ScoreRecord:
        rec = ScoreRecord.new(name, score)
        self.data.append(rec)
        logger.debug(f"Stored {rec!r} in memory ({len(self.data)} records)")
        return rec

    async def update(self, score_id: str, changes: Dict[str, Any]) -> ScoreRecord:
        idx = self._index_of(score_id)
        self.data[idx] = self.data[idx].merged(changes)
        return self.data[idx]

    async def delete(self, score_id: str) -> None:
        idx = self._index_of(score_id)
        del self.data[idx]

    def _index_of(self, score_id: str) -> int:
        for idx, rec in enumerate(self.data):
            if rec.id == str(score_id):
                return idx
        raise NotFound()

    def __len__(self):
        return len(self.data)
