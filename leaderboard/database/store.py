from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ..models.data import ScoreRecord


class ScoreStore(ABC):
    """Backing store for score records.

    Implemented by the MongoDB store and the in-memory fallback.
    """
    mode: str = ""

    @abstractmethod
    async def list(self, limit: int) -> List[ScoreRecord]:
        """Top ``limit`` records by score descending, then createdAt ascending"""

    @abstractmethod
    async def create(self, name: str, score: int) -> ScoreRecord:
        """Store a new, already validated record"""

    @abstractmethod
    async def update(self, score_id: str, changes: Dict[str, Any]) -> ScoreRecord:
        """Merge ``changes`` into the record; raises NotFound or BadRequest"""

    @abstractmethod
    async def delete(self, score_id: str) -> None:
        """Remove the record; raises NotFound or BadRequest"""
