import logging

from .config import server

_configured = False


def get_logger(name: str = "leaderboard") -> logging.Logger:
    """Return a module logger, configuring the root handler on first use"""
    global _configured
    if not _configured:
        logging.basicConfig(
            level=server.LOG_LEVEL.upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        _configured = True
    return logging.getLogger(name)
