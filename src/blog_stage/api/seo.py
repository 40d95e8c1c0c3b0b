"""Crawler documents: ``/robots.txt`` and ``/sitemap.xml``."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from xml.etree import ElementTree

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse, Response

from blog_stage.api.v1.dependencies import GraphQLClientDep
from blog_stage.core.settings import settings
from blog_stage.services.http import BackendError
from blog_stage.services.posts import PostService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["seo"])

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
DISALLOWED_PATHS = ("/auth/", "/posts/new", "/api/")


@dataclass(frozen=True)
class SitemapEntry:
    url: str
    last_modified: str
    change_frequency: str
    priority: float


def render_robots(base_url: str) -> str:
    lines = ["User-agent: *", "Allow: /"]
    lines.extend(f"Disallow: {path}" for path in DISALLOWED_PATHS)
    lines.append("")
    lines.append(f"Sitemap: {base_url}/sitemap.xml")
    return "\n".join(lines) + "\n"


def static_entries(base_url: str, now: str) -> list[SitemapEntry]:
    return [
        SitemapEntry(base_url, now, "daily", 1.0),
        SitemapEntry(f"{base_url}/auth/login", now, "monthly", 0.5),
        SitemapEntry(f"{base_url}/auth/signup", now, "monthly", 0.5),
    ]


async def build_sitemap(posts: PostService, base_url: str) -> list[SitemapEntry]:
    """Static pages plus one entry per published post.

    A backend failure is logged and yields the static pages only.
    """
    now = datetime.now(timezone.utc).isoformat()
    entries = static_entries(base_url, now)
    try:
        published = await posts.list_published_ids()
    except BackendError as exc:
        logger.error("Error generating sitemap: %s", exc)
        return entries
    entries.extend(
        SitemapEntry(
            f"{base_url}/posts/{post['id']}",
            post.get("updated_at") or now,
            "weekly",
            0.8,
        )
        for post in published
    )
    return entries


def render_sitemap(entries: list[SitemapEntry]) -> bytes:
    urlset = ElementTree.Element("urlset", xmlns=SITEMAP_NS)
    for entry in entries:
        url = ElementTree.SubElement(urlset, "url")
        ElementTree.SubElement(url, "loc").text = entry.url
        ElementTree.SubElement(url, "lastmod").text = entry.last_modified
        ElementTree.SubElement(url, "changefreq").text = entry.change_frequency
        ElementTree.SubElement(url, "priority").text = f"{entry.priority:.1f}"
    return ElementTree.tostring(urlset, encoding="utf-8", xml_declaration=True)


@router.get("/robots.txt", response_class=PlainTextResponse)
async def robots() -> str:
    """Crawl rules for search engines."""
    return render_robots(settings.base_site_url)


@router.get("/sitemap.xml")
async def sitemap(client: GraphQLClientDep) -> Response:
    """Sitemap of the public pages."""
    entries = await build_sitemap(PostService(client), settings.base_site_url)
    return Response(content=render_sitemap(entries), media_type="application/xml")
