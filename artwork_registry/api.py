"""
FastAPI application for the artwork catalog admin API.
"""

from __future__ import annotations

import importlib.metadata
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, Dict

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session

from .catalog.errors import ArtworkRegistryError
from .catalog.routes import router as catalog_router
from .config import get_settings
from .db.base import get_db, init_database
from .logging_config import configure_logging

logger = structlog.get_logger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    configure_logging(settings.log_level, settings.log_format)
    logger.info("Starting Artwork Registry", environment=settings.environment)

    try:
        await init_database()
        logger.info("Database initialized")
    except Exception as e:
        logger.error("Failed to start application", error=str(e))
        raise

    yield

    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.app_name,
    description="Admin API for the fan gallery's artwork and usage catalog",
    version=importlib.metadata.version("artwork-registry"),
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ArtworkRegistryError)
async def _registry_error_handler(request: Request, exc: ArtworkRegistryError) -> JSONResponse:
    logger.info(
        "request.rejected",
        path=request.url.path,
        error=exc.code,
        message=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/health", tags=["system"])
def health(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Report API liveness and whether the database answers."""
    try:
        db.execute(text("SELECT 1"))
        db_ok = True
    except DBAPIError as e:
        logger.warning("health.db_unreachable", error=str(e.orig))
        db_ok = False
    return {"status": "ok" if db_ok else "degraded", "db": db_ok}


@app.get("/version", tags=["system"])
def version() -> Dict[str, str]:
    """Return the version of the application."""
    return {"version": importlib.metadata.version("artwork-registry")}


app.include_router(catalog_router)
