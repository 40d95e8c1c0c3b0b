"""System and diagnostics endpoints for the Blog Stage API."""

from __future__ import annotations

import time
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from blog_stage.api.v1.dependencies import GraphQLClientDep
from blog_stage.core.settings import settings
from blog_stage.services.http import SupabaseHTTP, get_supabase_http

router = APIRouter(prefix="/system", tags=["system"])


def get_supabase_http_dep() -> SupabaseHTTP:
    """Return the shared backend transport."""
    return get_supabase_http()


SupabaseHTTPDep = Annotated[SupabaseHTTP, Depends(get_supabase_http_dep)]


@router.get("/config")
async def get_public_config() -> dict[str, object]:
    """Return a sanitized snapshot of public runtime configuration.

    Excludes keys and secrets; suitable for client bootstrapping.
    """
    return {
        "app": {
            "name": settings.app_name,
            "version": settings.app_version,
            "debug": settings.debug,
            "site_url": settings.base_site_url,
        },
        "pagination": {
            "posts_per_page": settings.posts_per_page,
            "search_page_size": settings.search_page_size,
            "comments_page_size": settings.comments_page_size,
            "notifications_page_size": settings.notifications_page_size,
        },
        "cache": {
            "revalidate_seconds": settings.revalidate_seconds,
            "max_entries": settings.query_cache_max_entries,
        },
        "auth": {
            "oauth_providers": ["google"],
            "supabase_url": settings.supabase_url,
        },
    }


@router.get("/health")
async def get_system_health(
    http: SupabaseHTTPDep,
    graphql: GraphQLClientDep,
) -> dict[str, object]:
    """Health of the hosted backend connection and the read cache.

    Returns:
        Dictionary with overall status, backend health check result, transport
        metrics and cache size
    """
    backend = await http.health_check()
    return {
        "status": "healthy" if backend.get("status") == "healthy" else "degraded",
        "timestamp": int(time.time()),
        "components": {
            "backend": backend,
            "cache": {"entries": len(graphql.cache)},
        },
        "metrics": http.get_metrics(),
        "version": settings.app_version,
    }


@router.post("/cache/clear")
async def clear_cache(graphql: GraphQLClientDep) -> dict[str, int]:
    """Drop every cached read. Only available in debug mode.

    Raises:
        HTTPException: When debug mode is off
    """
    if not settings.debug:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    cleared = len(graphql.cache)
    graphql.cache.clear()
    return {"cleared": cleared}
