# --- Pydantic Models ---
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Any, Dict, Optional

from ..config import limits

UPDATABLE_FIELDS = ('name', 'score')


def _clean_name(v):
    if isinstance(v, str):
        return v.strip()
    return v


class ScoreCreate(BaseModel):
    name: str = Field(..., min_length=limits.name_min_length, max_length=limits.name_max_length, strict=True)
    score: int = Field(..., ge=limits.score_min, le=limits.score_max, strict=True)

    @field_validator('name', mode='before')
    @classmethod
    def validate_name(cls, v):
        return _clean_name(v)


class ScoreUpdate(BaseModel):
    """Partial update: a field is either present with a valid value or absent.

    Fields left out of the payload stay out of ``changes()``; an explicit
    ``null`` is rejected rather than read as "absent".
    """
    name: Optional[str] = Field(None, min_length=limits.name_min_length, max_length=limits.name_max_length, strict=True)
    score: Optional[int] = Field(None, ge=limits.score_min, le=limits.score_max, strict=True)

    @field_validator('name', 'score', mode='before')
    @classmethod
    def reject_null(cls, v, info):
        if v is None:
            raise ValueError(f'{info.field_name} cannot be null')
        if info.field_name == 'name':
            return _clean_name(v)
        return v

    @model_validator(mode='after')
    def require_one_field(self):
        if not self.model_fields_set.intersection(UPDATABLE_FIELDS):
            raise ValueError('At least one of name or score is required')
        return self

    def changes(self) -> Dict[str, Any]:
        return {k: getattr(self, k) for k in UPDATABLE_FIELDS if k in self.model_fields_set}


def parse_limit(raw: Optional[str]) -> int:
    """Clamp a raw ``limit`` query value into [1, max_limit], defaulting when absent or garbage"""
    if raw is None or not str(raw).strip():
        return limits.default_limit
    try:
        value = int(str(raw).strip())
    except ValueError:
        return limits.default_limit
    return max(1, min(value, limits.max_limit))
