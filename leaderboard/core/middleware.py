import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..config import server
from ..logger import get_logger
from .handlers import unhandled_exception_handler

logger = get_logger("leaderboard.access")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-origin",
}


async def security_headers(request: Request, call_next):
    response = await call_next(request)
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    return response


async def catch_unhandled(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as exc:
        return await unhandled_exception_handler(request, exc)


async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f} ms")
    return response


def register_middleware(app: FastAPI, cors_origin: str = None):
    origin = cors_origin or server.CORS_ORIGIN
    origins = [o.strip() for o in origin.split(',') if o.strip()]
    # innermost, so unexpected 500s still pass through CORS and security headers
    app.middleware("http")(catch_unhandled)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.middleware("http")(security_headers)
    app.middleware("http")(log_requests)
