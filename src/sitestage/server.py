"""aiohttp server for Sitestage.

Application factory and route registration for standalone server mode.
"""

import logging

from aiohttp import web

from sitestage.api.head import create_head_routes
from sitestage.api.navigation import create_navigation_routes
from sitestage.api.routes import create_route_routes
from sitestage.api.sitemap import create_sitemap_routes
from sitestage.app_keys import navigation_keys_key, site_key
from sitestage.config import Config
from sitestage.routes import NAVIGATION_KEYS
from sitestage.site import Site

logger = logging.getLogger(__name__)


def create_app(config: Config, *, site: Site | None = None) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration
        site: Preloaded site (default: loaded from config)

    Returns:
        Configured aiohttp application
    """
    app = web.Application()

    app[site_key] = site if site is not None else Site.from_config(config)
    app[navigation_keys_key] = NAVIGATION_KEYS

    app.router.add_routes(create_route_routes())
    app.router.add_routes(create_head_routes())
    app.router.add_routes(create_navigation_routes())
    app.router.add_routes(create_sitemap_routes())

    return app


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    logger.info(f"Serving on {config.server.host}:{config.server.port}")
    web.run_app(app, host=config.server.host, port=config.server.port)
