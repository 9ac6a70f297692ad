"""Main entry point for the Rogha application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from rogha.api.v1 import (
    circles_router,
    cron_router,
    editions_router,
    friends_router,
    notifications_router,
    posts_router,
)
from rogha.core.errors import RoghaError
from rogha.core.settings import settings
from rogha.schemas.common import ErrorResponse

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=f"{settings.app_name} API",
    description="Weekly editions of posts shared with friends and circles",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(posts_router, prefix="/api/v1")
app.include_router(editions_router, prefix="/api/v1")
app.include_router(friends_router, prefix="/api/v1")
app.include_router(circles_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")
app.include_router(cron_router, prefix="/api/v1")


@app.exception_handler(RoghaError)
async def rogha_error_handler(request: Request, exc: RoghaError) -> JSONResponse:
    """Render rejected requests as ``{"code", "detail"}``."""
    logger.info("request.rejected path=%s code=%s", request.url.path, exc.code)
    body = ErrorResponse(code=exc.code, detail=exc.message)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": f"{settings.app_name} API",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("rogha.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
