from datetime import datetime, timezone
from typing import Any, Dict, Optional
import uuid


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ScoreRecord:
    __slots__ = ('id', 'name', 'score', 'created_at', 'updated_at')
    def __init__(self, id: str, name: str, score: int,
                 created_at: Optional[datetime] = None, updated_at: Optional[datetime] = None):
        self.id = id
        self.name = name
        self.score = int(score)
        self.created_at = created_at or utcnow()
        self.updated_at = updated_at or self.created_at

    @classmethod
    def new(cls, name: str, score: int) -> "ScoreRecord":
        """Fresh record for the memory store"""
        now = utcnow()
        return cls(uuid.uuid4().hex, name, score, now, now)

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "ScoreRecord":
        """Build a record from a MongoDB document"""
        return cls(
            id=str(doc['_id']),
            name=doc['name'],
            score=doc['score'],
            created_at=_as_utc(doc.get('createdAt')),
            updated_at=_as_utc(doc.get('updatedAt')),
        )

    def merged(self, changes: Dict[str, Any]) -> "ScoreRecord":
        return ScoreRecord(
            self.id,
            changes.get('name', self.name),
            changes.get('score', self.score),
            self.created_at,
            utcnow(),
        )

    @property
    def sort_key(self):
        # score descending, then earliest submission first
        return (-self.score, self.created_at)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'score': self.score,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at
        }

    def __repr__(self):
        return f"ScoreRecord(id={self.id!r}, name={self.name!r}, score={self.score})"


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
