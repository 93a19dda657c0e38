"""Navigation API endpoint.

Returns localized header items and language switcher links for a path.
"""

from aiohttp import web

from sitestage.app_keys import navigation_keys_key, site_key
from sitestage.core.navigation import build_language_links, build_navigation


def create_navigation_routes() -> list[web.RouteDef]:
    return [web.get("/api/navigation", get_navigation)]


async def get_navigation(request: web.Request) -> web.Response:
    path = request.query.get("path", "/")
    site = request.app[site_key]
    locale = site.resolver.detect_locale(path)

    items = build_navigation(
        site.resolver,
        request.app[navigation_keys_key],
        locale,
        path,
        site.navigation_titles(locale),
    )
    languages = build_language_links(site.resolver, path)

    return web.json_response(
        {
            "locale": locale,
            "items": [item.to_dict() for item in items],
            "languages": [link.to_dict() for link in languages],
        },
    )
