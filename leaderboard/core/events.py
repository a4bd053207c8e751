import asyncio

from ..database import DatabaseManager
from ..logger import get_logger

logger = get_logger(__name__)


async def startup_event(db: DatabaseManager):
    """Connect the persistence layer; an unreachable database only degrades to memory mode"""
    try:
        await db.initialize()
        logger.info(f"Database initialized ({db.db_mode} mode)")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


async def shutdown_event(db: DatabaseManager, timeout: float = 5.0):
    """Close database connections"""
    try:
        async with asyncio.timeout(timeout):
            await db.close()
            logger.info("Database connections closed")
    except asyncio.TimeoutError:
        logger.warning("Shutdown timed out, abandoning open connections")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}")
