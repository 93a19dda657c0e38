"""Sitemap endpoint.

Builds the sitemap on request from the same registry and catalogs the
offline build uses.
"""

import logging

from aiohttp import web

from sitestage.app_keys import site_key
from sitestage.core.errors import SitestageError
from sitestage.core.sitemap import render_sitemap

logger = logging.getLogger(__name__)


def create_sitemap_routes() -> list[web.RouteDef]:
    return [web.get("/sitemap.xml", get_sitemap)]


async def get_sitemap(request: web.Request) -> web.Response:
    site = request.app[site_key]

    try:
        entries = site.sitemap_builder().build()
    except SitestageError as e:
        logger.error(f"Sitemap build failed: {e}")
        return web.json_response({"error": "Sitemap build failed"}, status=500)

    return web.Response(
        text=render_sitemap(entries),
        content_type="application/xml",
        charset="utf-8",
    )
