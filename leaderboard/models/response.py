from datetime import datetime
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Literal, Optional

class ScoreOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    score: int
    created_at: datetime
    updated_at: datetime

class HealthResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    ok: Literal[True] = True
    db_mode: Literal["mongo", "memory"]

class ServiceInfo(BaseModel):
    service: str
    endpoints: List[str]

class ErrorResponse(BaseModel):
    error: str
    issues: Optional[List[Dict[str, Any]]] = None
