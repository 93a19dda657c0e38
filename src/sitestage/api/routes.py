"""Route resolution API endpoints.

Exposes reverse lookup and locale translation of paths.
"""

from aiohttp import web

from sitestage.app_keys import site_key
from sitestage.core.errors import NotFoundError


def create_route_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/resolve/{path:.*}", get_resolve),
        web.get("/api/translate", get_translate),
    ]


async def get_resolve(request: web.Request) -> web.Response:
    path = request.match_info["path"]
    resolver = request.app[site_key].resolver

    try:
        match = resolver.resolve_key_from_path(f"/{path}")
    except NotFoundError:
        return web.json_response(
            {"error": "Route not found", "path": path},
            status=404,
        )

    return web.json_response(match.to_dict())


async def get_translate(request: web.Request) -> web.Response:
    path = request.query.get("path", "/")
    locale = request.query.get("locale")
    resolver = request.app[site_key].resolver

    if locale is None:
        return web.json_response({"error": "Missing locale parameter"}, status=400)

    # translate_path never raises; unresolvable paths land on the locale root
    return web.json_response({"path": resolver.translate_path(path, locale)})
