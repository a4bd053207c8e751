from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response

from ..core.errors import InternalError, LeaderboardError
from ..database import DatabaseManager
from ..logger import get_logger
from ..models.response import ErrorResponse, ScoreOut
from ..models.score import ScoreCreate, ScoreUpdate, parse_limit
from .deps import get_db

logger = get_logger(__name__)
router = APIRouter(prefix="/api/scores", responses={500: {"model": ErrorResponse}})

ERRORS = {400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}


@router.get("", response_model=List[ScoreOut])
async def list_scores(
    limit: Optional[str] = Query(None, description="Number of scores to return (1-100, default: 10)"),
    db: DatabaseManager = Depends(get_db),
):
    """
    Get the top scores, highest first; ties go to the earliest submission.

    - **limit**: Number of scores to return, clamped to 1-100
    """
    try:
        n = parse_limit(limit)
        records = await db.list(n)
        logger.debug(f"Listed {len(records)} scores (limit {n}, {db.db_mode} mode)")
        return [rec.to_dict() for rec in records]
    except LeaderboardError:
        raise
    except Exception as e:
        logger.error(f"GET /api/scores failed: {e}")
        raise InternalError() from e


@router.post("", response_model=ScoreOut, status_code=201, responses={400: ERRORS[400]})
async def create_score(data: ScoreCreate, db: DatabaseManager = Depends(get_db)):
    """
    Submit a new score.

    - **name**: Player name, 1-50 characters after trimming
    - **score**: Integer between 0 and 1,000,000
    """
    try:
        rec = await db.create(data.name, data.score)
        logger.info(f"Created score {rec.id} ({rec.name}: {rec.score}) in {db.db_mode} mode")
        return rec.to_dict()
    except LeaderboardError:
        raise
    except Exception as e:
        logger.error(f"POST /api/scores failed: {e}")
        raise InternalError() from e


@router.patch("/{score_id}", response_model=ScoreOut, responses=ERRORS)
async def update_score(
    data: ScoreUpdate,
    score_id: str = Path(..., min_length=1),
    db: DatabaseManager = Depends(get_db),
):
    """
    Update the name and/or score of an entry. At least one field is required.
    """
    try:
        rec = await db.update(score_id, data)
        logger.info(f"Updated score {rec.id}: {data.changes()}")
        return rec.to_dict()
    except LeaderboardError:
        raise
    except Exception as e:
        logger.error(f"PATCH /api/scores/{score_id} failed: {e}")
        raise InternalError() from e


@router.delete("/{score_id}", status_code=204, response_class=Response, responses=ERRORS)
async def delete_score(
    score_id: str = Path(..., min_length=1),
    db: DatabaseManager = Depends(get_db),
):
    """Delete an entry"""
    try:
        await db.delete(score_id)
        logger.info(f"Deleted score {score_id}")
        return Response(status_code=204)
    except LeaderboardError:
        raise
    except Exception as e:
        logger.error(f"DELETE /api/scores/{score_id} failed: {e}")
        raise InternalError() from e
