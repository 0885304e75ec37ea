# src/viet_kconnect/main.py
"""Main entry point for the Viet K-Connect application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from viet_kconnect.api import posts_router
from viet_kconnect.api.responses import error_response
from viet_kconnect.core.errors import ApiError, ValidationError
from viet_kconnect.core.settings import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Q&A community API for Vietnamese residents in Korea",
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


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Render domain errors in the standard error envelope."""
    logger.info("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.code)
    return error_response(exc.message, exc.code, exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render malformed request bodies as VALIDATION_ERROR."""
    logger.debug("Invalid request to %s: %s", request.url.path, exc.errors())
    error = ValidationError()
    return error_response(error.message, error.code, error.status_code)


# Include API routers
app.include_router(posts_router, prefix="/api")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Q&A community API for Vietnamese residents in Korea",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("viet_kconnect.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
