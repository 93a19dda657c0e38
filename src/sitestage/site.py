"""Site assembly.

Wires registry, resolver, catalogs, strings and head binder from a
configuration. Shared by the CLI and the HTTP server.
"""

import logging
from dataclasses import dataclass

from sitestage.config import Config
from sitestage.core.catalog import CatalogLoader
from sitestage.core.head import MetaBinder
from sitestage.core.registry import RouteRegistry, load_registry
from sitestage.core.resolver import Resolver
from sitestage.core.sitemap import SitemapBuilder
from sitestage.core.strings import NAVIGATION_SECTION, StringTable
from sitestage.routes import default_registry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Site:
    """Loaded site: immutable registry plus its consumers."""

    config: Config
    registry: RouteRegistry
    resolver: Resolver
    catalogs: CatalogLoader
    strings: StringTable
    binder: MetaBinder

    @classmethod
    def from_config(cls, config: Config) -> "Site":
        """Load the site described by config.

        Raises:
            FileNotFoundError: If a configured registry or strings file is missing
            RegistryError: If the registry violates an invariant
            ValueError: If the strings file is malformed
        """
        if config.site.registry_file is not None:
            registry = load_registry(config.site.registry_file)
        else:
            registry = default_registry()
            logger.debug(f"Using built-in registry with {len(registry)} routes")

        strings = StringTable()
        if config.site.strings_file is not None:
            strings = StringTable.load(config.site.strings_file)

        resolver = Resolver(registry)
        catalogs = CatalogLoader(config.catalogs)
        binder = MetaBinder(
            resolver,
            config.site.origin,
            default_description=config.site.default_description,
            descriptions=strings,
            catalogs=catalogs,
        )
        return cls(
            config=config,
            registry=registry,
            resolver=resolver,
            catalogs=catalogs,
            strings=strings,
            binder=binder,
        )

    def sitemap_builder(self) -> SitemapBuilder:
        return SitemapBuilder(self.resolver, self.config.site.origin, self.catalogs)

    def navigation_titles(self, locale: str) -> dict[str, str]:
        return self.strings.section(locale, NAVIGATION_SECTION)
