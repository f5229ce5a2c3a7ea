"""FastAPI application entrypoint."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.api.v1 import v1_router
from app.core.config import get_settings
from app.core.database import init_db
from app.core.errors import (
    NotesError,
    NotProvisioned,
    TransientStoreError,
    Unauthenticated,
    ValidationError,
)

logger = logging.getLogger(__name__)

_settings = get_settings()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    logging.basicConfig(
        level=_settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Startup: ensure tables exist (use Alembic in production)
    await init_db()
    yield


app = FastAPI(
    title="Tenant Notes",
    version="0.1.0",
    description="Multi-tenant notes with per-plan quotas",
    lifespan=lifespan,
)

# ── CORS ─────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in _settings.allowed_origins.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Error translation ────────────────────────────────────────
_ERROR_STATUS: dict[type[NotesError], int] = {
    Unauthenticated: status.HTTP_401_UNAUTHORIZED,
    NotProvisioned: status.HTTP_404_NOT_FOUND,
    ValidationError: 422,
    TransientStoreError: status.HTTP_503_SERVICE_UNAVAILABLE,
}

_UNAVAILABLE = {
    "code": TransientStoreError.code,
    "message": "Service temporarily unavailable, please retry",
}


@app.exception_handler(NotesError)
async def notes_error_handler(_request: Request, exc: NotesError) -> JSONResponse:
    status_code = _ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    headers = None

    if isinstance(exc, TransientStoreError):
        logger.error("Transient store failure: %s", exc.message, exc_info=exc.__cause__)
        detail = _UNAVAILABLE
    else:
        detail = {"code": exc.code, "message": exc.message}
        if isinstance(exc, Unauthenticated):
            headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(status_code=status_code, content={"detail": detail}, headers=headers)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(_request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Unhandled database error", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": _UNAVAILABLE},
    )


# ── API routes ───────────────────────────────────────────────
app.include_router(v1_router)


@app.get("/health", tags=["system"])
async def health_check() -> dict:
    return {"status": "ok"}
