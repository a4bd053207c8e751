from fastapi import APIRouter, Depends

from ..config import server
from ..database import DatabaseManager
from ..logger import get_logger
from ..models.response import HealthResponse, ServiceInfo
from .deps import get_db

logger = get_logger(__name__)
router = APIRouter()


@router.get("/api/health", response_model=HealthResponse)
@router.head("/api/health")
async def health_check(db: DatabaseManager = Depends(get_db)):
    """Health check endpoint reporting which store backs the API"""
    response = HealthResponse(db_mode=db.db_mode)
    logger.debug(f"Health check response: {response.model_dump(by_alias=True)}")
    return response


@router.get("/", response_model=ServiceInfo)
async def service_info():
    return ServiceInfo(service=server.service_name, endpoints=["/api/health", "/api/scores"])
