# src/blog_stage/main.py
"""Main entry point for the Blog Stage application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from blog_stage.api import seo
from blog_stage.api.v1 import (
    auth_router,
    comments_router,
    notifications_router,
    posts_router,
    profile_router,
    system_router,
    tags_router,
)
from blog_stage.api.v1.dependencies import apply_session_update
from blog_stage.api.v1.endpoints.auth import auth_callback
from blog_stage.core.logger import configure_logging
from blog_stage.core.settings import settings
from blog_stage.services.http import get_supabase_http

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    logger.info("%s %s starting (backend %s)", settings.app_name, settings.app_version,
                settings.supabase_url)
    yield
    await get_supabase_http().close()
    logger.info("%s stopped", settings.app_name)


# Initialize FastAPI app
app = FastAPI(
    title="Blog Stage API",
    description="Blogging API backed by hosted auth and GraphQL",
    version=settings.app_version,
    lifespan=lifespan,
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


@app.middleware("http")
async def session_cookies(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Persist a refreshed or revoked session on every response, errors included."""
    response = await call_next(request)
    apply_session_update(request, response)
    return response


# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(posts_router, prefix="/api/v1")
app.include_router(comments_router, prefix="/api/v1")
app.include_router(profile_router, prefix="/api/v1")
app.include_router(tags_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")
app.include_router(system_router, prefix="/api/v1")
app.include_router(seo.router)

# Email and OAuth links point at {SITE_URL}/auth/callback.
app.add_api_route("/auth/callback", auth_callback, methods=["GET"], include_in_schema=False)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Blog Stage API",
        "version": settings.app_version,
        "description": "Blogging API backed by hosted auth and GraphQL",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("blog_stage.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
