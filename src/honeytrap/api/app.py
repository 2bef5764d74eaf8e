"""FastAPI application factory.

API layer:
- Resolves the caller and the record store for each request
- Validates inputs, delegates to repository and aggregation functions
- Forbidden: building store filters directly
"""

from __future__ import annotations

import os
from pathlib import Path

from fastapi import FastAPI, Header, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from honeytrap.db.session import init_db
from honeytrap.models.domain import Caller
from honeytrap.store.base import RecordStore
from honeytrap.store.errors import (
    ConstraintError,
    NotFoundError,
    StoreError,
    TransportError,
    UnauthorizedError,
)
from honeytrap.store.sql import SqlRecordStore

# Comma-separated list of allowed UI origins
CORS_ORIGINS_ENV = "HONEYTRAP_CORS_ORIGINS"
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",  # UI dev server
    "http://127.0.0.1:3000",
]

# HTTP status returned for each store failure kind
_STORE_ERROR_STATUS: dict[type[StoreError], int] = {
    NotFoundError: 404,
    UnauthorizedError: 401,
    ConstraintError: 409,
    TransportError: 503,
}


def get_store(request: Request) -> RecordStore:
    """Dependency to get the application's record store."""
    return request.app.state.store


def get_caller(x_user_id: str | None = Header(default=None)) -> Caller | None:
    """Dependency to get the current caller from the X-User-Id header.

    Returns:
        Caller, or None when the request carries no identity.
    """
    if not x_user_id:
        return None
    return Caller(user_id=x_user_id)


def _cors_origins() -> list[str]:
    raw = os.environ.get(CORS_ORIGINS_ENV)
    if not raw:
        return DEFAULT_CORS_ORIGINS
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


async def _store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    """Map record store failures to HTTP responses."""
    status_code = 500
    for error_type, code in _STORE_ERROR_STATUS.items():
        if isinstance(exc, error_type):
            status_code = code
            break
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def create_app(db_path: Path | None = None, store: RecordStore | None = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        db_path: Optional path to database file, used when no store is given.
        store: Optional record store; defaults to a SQL store on db_path.

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(
        title="honeytrap API",
        description="Scam detection records and dashboard",
        version="0.1.0",
    )

    if store is None:
        init_db(db_path)
        store = SqlRecordStore.from_path(db_path)
    app.state.store = store

    # Add CORS middleware for UI access
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StoreError, _store_error_handler)

    # Include routes
    from honeytrap.api.routes import (
        conversations,
        dashboard,
        intelligence,
        logs,
        messages,
        personas,
        profiles,
    )

    app.include_router(profiles.router, prefix="/api")
    app.include_router(messages.router, prefix="/api")
    app.include_router(personas.router, prefix="/api")
    app.include_router(conversations.router, prefix="/api")
    app.include_router(intelligence.router, prefix="/api")
    app.include_router(logs.router, prefix="/api")
    app.include_router(dashboard.router, prefix="/api")

    # Health check endpoint
    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app
