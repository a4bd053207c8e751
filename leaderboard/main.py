from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import ORJSONResponse

from . import __version__
from .config import server
from .core.events import shutdown_event, startup_event
from .core.handlers import register_exception_handlers
from .core.middleware import register_middleware
from .database import DatabaseConnection, DatabaseManager
from .routes import health_router, scores_router


def create_app(db: Optional[DatabaseManager] = None, cors_origin: Optional[str] = None) -> FastAPI:
    """Build the API around ``db``; by default MongoDB with the memory fallback"""
    if db is None:
        db = DatabaseManager(DatabaseConnection())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await startup_event(app.state.db)
        yield
        await shutdown_event(app.state.db)

    app = FastAPI(
        default_response_class=ORJSONResponse,
        title="Leaderboard Service",
        description="Leaderboard API backed by MongoDB with an in-memory fallback",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.db = db

    register_middleware(app, cors_origin)
    register_exception_handlers(app)
    app.include_router(health_router)
    app.include_router(scores_router)
    return app


app = create_app()


def run():
    import uvicorn

    uvicorn.run(
        "leaderboard.main:app",
        host="0.0.0.0",
        port=server.PORT,
        log_level=server.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
