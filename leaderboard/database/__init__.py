from .base import DatabaseManager
from .connection import DatabaseConnection
from .memory_store import MemoryScoreStore
from .mongo_store import MongoScoreStore
from .store import ScoreStore

__all__ = [
    "DatabaseManager",
    "DatabaseConnection",
    "MemoryScoreStore",
    "MongoScoreStore",
    "ScoreStore",
]
