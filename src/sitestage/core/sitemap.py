"""Sitemap generation.

Expands the route registry and the content catalogs into a flat list of
indexable URLs and serializes it to the sitemaps.org XML format. The
build is all-or-nothing: any unreadable catalog aborts it before a file
is written.
"""

import logging
import os
import tempfile
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from sitestage.core.catalog import CatalogLoader, extract_ids
from sitestage.core.errors import RegistryError
from sitestage.core.registry import RouteEntry
from sitestage.core.resolver import Resolver
from sitestage.core.types import ChangeFrequency, Locale, URLPath

logger = logging.getLogger(__name__)

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"


@dataclass(frozen=True)
class SitemapEntry:
    """One indexable URL."""

    url: str
    change_frequency: ChangeFrequency
    priority: float
    last_modified: datetime


class SitemapBuilder:
    """Builds sitemap entries from the registry and bound catalogs."""

    def __init__(self, resolver: Resolver, origin: str, catalogs: CatalogLoader) -> None:
        """Initialize builder.

        Args:
            resolver: Route resolver over the registry to index
            origin: Site origin prepended to every path
            catalogs: Loader for the catalogs dynamic routes are bound to
        """
        self._resolver = resolver
        self._origin = origin.rstrip("/")
        self._catalogs = catalogs

    def build(self, timestamp: datetime | None = None) -> list[SitemapEntry]:
        """Build entries in registry order, then catalog order, then locale order.

        Args:
            timestamp: Last-modified time of every entry (default: now, UTC)

        Returns:
            Sitemap entries, neither sorted nor deduplicated

        Raises:
            CatalogUnavailableError: If a bound catalog cannot be read
            DuplicateIdentifierError: If a bound catalog repeats an id
            RegistryError: If a record path is owned by another route
        """
        last_modified = timestamp or datetime.now(UTC)
        indexed = [entry for entry in self._resolver.registry.all_entries() if entry.indexed]

        catalog_names = [
            entry.catalog
            for entry in indexed
            if entry.is_dynamic and entry.catalog is not None
        ]
        catalogs = self._catalogs.load_many(catalog_names)
        ids = {name: extract_ids(catalog) for name, catalog in catalogs.items()}

        entries: list[SitemapEntry] = []
        for entry in indexed:
            values: list[str | None] = [None]
            if entry.is_dynamic and entry.catalog is not None:
                values = list(ids[entry.catalog])

            for value in values:
                for locale in entry.locales:
                    path = self._resolve(entry, locale, value)
                    entries.append(
                        SitemapEntry(
                            url=f"{self._origin}{path}",
                            change_frequency=entry.change_frequency,
                            priority=entry.priority,
                            last_modified=last_modified,
                        ),
                    )

        logger.info(f"Built sitemap with {len(entries)} URLs")
        return entries

    def _resolve(self, entry: RouteEntry, locale: Locale, value: str | None) -> URLPath:
        """Resolve the path of entry and check that it resolves back to entry."""
        path = self._resolver.resolve_path(entry.key, locale, value)
        if value is None:
            return path

        match = self._resolver.resolve_key_from_path(path)
        if match.key != entry.key or match.dynamic_value != value:
            raise RegistryError(
                f"Record {value!r} of catalog {entry.catalog!r} resolves to {path!r}, "
                f"which belongs to route {match.key!r}",
            )
        return path


def render_sitemap(entries: list[SitemapEntry]) -> str:
    """Serialize entries to sitemap XML."""
    root = ET.Element("urlset", xmlns=SITEMAP_NS)
    for entry in entries:
        url_el = ET.SubElement(root, "url")
        ET.SubElement(url_el, "loc").text = entry.url
        ET.SubElement(url_el, "lastmod").text = entry.last_modified.isoformat(
            timespec="seconds",
        )
        ET.SubElement(url_el, "changefreq").text = entry.change_frequency.value
        ET.SubElement(url_el, "priority").text = str(float(entry.priority))
    ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode", method="xml")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'


def write_sitemap(entries: list[SitemapEntry], output_path: Path) -> Path:
    """Write sitemap XML atomically.

    The document is written to a temporary file next to output_path and
    moved into place.

    Returns:
        The written path
    """
    content = render_sitemap(entries)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        dir=output_path.parent,
        prefix=f".{output_path.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        Path(tmp_name).replace(output_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info(f"Sitemap written to {output_path} ({len(entries)} URLs)")
    return output_path
