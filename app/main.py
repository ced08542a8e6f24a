"""
Royalty Ingest - FastAPI Application

Ingests distributor royalty exports and PRS performance statements into a
catalog of tracks and works, and reports earnings per track and work.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.database import engine, Base
from app.core.exceptions import IngestionError
from app.routers import imports
from app.routers.catalog import router as catalog_router
from app.routers.prs import router as prs_router
from app.routers.spotify import router as spotify_router, tracks_router as spotify_tracks_router
from app.services.spotify import build_spotify_service

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    # Create tables on startup (for development)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # One matching client per app; it holds the Spotify token
    app.state.spotify_service = build_spotify_service()

    yield
    # Cleanup on shutdown
    await engine.dispose()


app = FastAPI(
    title="Royalty Ingest",
    description="Royalty statement ingestion and reporting for independent labels",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(IngestionError)
async def ingestion_error_handler(request: Request, exc: IngestionError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": str(exc)})


# Include routers
app.include_router(imports.router, prefix="/api")
app.include_router(catalog_router, prefix="/api")
app.include_router(prs_router, prefix="/api")
app.include_router(spotify_router, prefix="/api")
app.include_router(spotify_tracks_router, prefix="/api")


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "timestamp": datetime.utcnow().isoformat()}
