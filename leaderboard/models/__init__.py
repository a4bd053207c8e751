from .data import ScoreRecord
from .response import ErrorResponse, HealthResponse, ScoreOut, ServiceInfo
from .score import ScoreCreate, ScoreUpdate, parse_limit

__all__ = [
    "ScoreRecord",
    "ScoreCreate",
    "ScoreUpdate",
    "parse_limit",
    "ScoreOut",
    "HealthResponse",
    "ServiceInfo",
    "ErrorResponse",
]
