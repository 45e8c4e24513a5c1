# Main application entry point
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api import health_router, notes_router, search_router, sharing_router
from .config import get_settings
from .core.exceptions import NoteShareError
from .core.logging import LoggingMiddleware, get_logger, setup_logging
from .core.redis_client import get_redis_client
from .core.schemas.common import ErrorResponse
from .database import create_tables

# Setup logging first
setup_logging()
logger = get_logger("main")

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info(
        "Starting NoteShare application",
        extra={"version": __version__, "environment": settings.environment, "debug": settings.debug},
    )

    # search index is optional, search falls back to the database without it
    redis_client = get_redis_client()
    try:
        await redis_client.connect()
        logger.info("Redis connection established")
    except Exception as e:
        logger.warning(f"Redis connection failed: {e}. Search will use the database")

    # Tests run against their own in-memory database
    if os.getenv("NOTESHARE_SKIP_LIFESPAN_DB") == "1":
        logger.info("Skipping DB table creation due to NOTESHARE_SKIP_LIFESPAN_DB=1")
    else:
        try:
            await create_tables()
            logger.info("Database tables created/verified")
        except Exception as e:
            logger.error("Failed to create database tables", exc_info=e)
            raise

    yield

    # Shutdown
    logger.info("Shutting down NoteShare application")
    try:
        await redis_client.disconnect()
    except Exception as e:
        logger.warning(f"Redis disconnect failed: {e}")


app = FastAPI(
    title=settings.app_name,
    description="Collaborative note sharing API",
    version=__version__,
    lifespan=lifespan,
)


@app.exception_handler(NoteShareError)
async def noteshare_error_handler(request: Request, exc: NoteShareError):
    logger.warning(
        exc.message,
        extra={
            "error": type(exc).__name__,
            "status_code": exc.status_code,
            "method": request.method,
            "path": request.url.path,
        },
    )
    body = ErrorResponse(error=type(exc).__name__, message=exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(mode="json"),
        headers=headers,
    )


# Add logging middleware
app.add_middleware(LoggingMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(notes_router, prefix="/api")
app.include_router(search_router, prefix="/api")
app.include_router(sharing_router, prefix="/api")
app.include_router(health_router, prefix="/api")


# API root endpoint for better navigation
@app.get("/api/")
async def api_root():
    return {
        "message": settings.app_name,
        "version": __version__,
        "endpoints": {
            "notes": "/api/notes/",
            "search": "/api/search/notes",
            "sharing": "/api/sharing/",
            "health": "/api/health/",
        },
    }


# Bare liveness probe
@app.get("/health")
async def basic_health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("noteshare.main:app", host=settings.host, port=settings.port, reload=settings.reload)
