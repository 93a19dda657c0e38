"""Application keys for type-safe app configuration access."""

from aiohttp import web

from sitestage.site import Site

site_key = web.AppKey("site", Site)
navigation_keys_key = web.AppKey("navigation_keys", tuple)
