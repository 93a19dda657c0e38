"""Head tags API endpoint."""

from aiohttp import web

from sitestage.app_keys import site_key


def create_head_routes() -> list[web.RouteDef]:
    return [web.get("/api/head", get_head)]


async def get_head(request: web.Request) -> web.Response:
    path = request.query.get("path", "/")
    locale = request.query.get("locale")
    binder = request.app[site_key].binder

    tags = binder.compute(path, locale)
    return web.json_response(tags.to_dict())
