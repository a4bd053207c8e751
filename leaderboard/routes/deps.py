from fastapi import Request

from ..database import DatabaseManager


def get_db(request: Request) -> DatabaseManager:
    """The DatabaseManager owned by the running application"""
    return request.app.state.db
