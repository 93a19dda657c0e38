"""Canonical URL and meta description binding.

Derives the canonical URL and the meta description of the current page
and writes them into a document head: one canonical link and three
description metas (plain, Open Graph and Twitter card). Binding twice
with the same input leaves the head unchanged.
"""

import html
import logging
from dataclasses import dataclass, field

from sitestage.core.catalog import CatalogLoader
from sitestage.core.errors import CatalogUnavailableError, NotFoundError
from sitestage.core.resolver import Resolver, RouteMatch, normalize_path
from sitestage.core.strings import DESCRIPTIONS_SECTION, StringTable
from sitestage.core.types import Locale

logger = logging.getLogger(__name__)

CANONICAL_REL = "canonical"

# (attribute, value) identifying each description meta element
DESCRIPTION_METAS = (
    ("name", "description"),
    ("property", "og:description"),
    ("name", "twitter:description"),
)

# Record fields tried in order for content pages
RECORD_DESCRIPTION_FIELDS = ("metaDescription", "summary")


@dataclass
class HeadElement:
    """Element of a document head."""

    tag: str
    attrs: dict[str, str] = field(default_factory=dict)

    def to_html(self) -> str:
        attrs = "".join(
            f' {name}="{html.escape(value, quote=True)}"'
            for name, value in self.attrs.items()
        )
        return f"<{self.tag}{attrs}>"


class DocumentHead:
    """Minimal model of an HTML document head."""

    def __init__(self, elements: list[HeadElement] | None = None) -> None:
        self._elements = list(elements or [])
        self.lang: str | None = None

    @property
    def elements(self) -> list[HeadElement]:
        return list(self._elements)

    def find(self, tag: str, attr: str, value: str) -> HeadElement | None:
        """Find the first element with tag and attr == value."""
        for element in self._elements:
            if element.tag == tag and element.attrs.get(attr) == value:
                return element
        return None

    def upsert(
        self,
        tag: str,
        attr: str,
        value: str,
        content_attr: str,
        content: str,
    ) -> HeadElement:
        """Set content_attr of the matching element, creating it if absent."""
        element = self.find(tag, attr, value)
        if element is None:
            element = HeadElement(tag=tag, attrs={attr: value})
            self._elements.append(element)
        element.attrs[content_attr] = content
        return element

    def render(self) -> str:
        return "\n".join(element.to_html() for element in self._elements)


@dataclass(frozen=True)
class HeadTags:
    """Derived head values for one page."""

    canonical_url: str
    description: str
    lang: Locale

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {
            "canonical": self.canonical_url,
            "description": self.description,
            "lang": self.lang,
        }


class MetaBinder:
    """Computes and writes canonical and description tags for a path."""

    def __init__(
        self,
        resolver: Resolver,
        origin: str,
        *,
        default_description: str,
        descriptions: StringTable | None = None,
        catalogs: CatalogLoader | None = None,
    ) -> None:
        """Initialize binder.

        Args:
            resolver: Route resolver
            origin: Site origin (e.g., "https://www.example.com")
            default_description: Site-wide fallback description
            descriptions: String table with a "descriptions" section per locale
            catalogs: Catalog loader for content page descriptions
        """
        self._resolver = resolver
        self._origin = origin.rstrip("/")
        self._default_description = default_description
        self._descriptions = descriptions or StringTable()
        self._catalogs = catalogs

    @property
    def origin(self) -> str:
        return self._origin

    def canonical_url(self, path: str) -> str:
        """Absolute URL without trailing slash, query string or fragment."""
        return f"{self._origin}{normalize_path(path)}"

    def description(self, path: str, locale: str | None = None) -> str:
        """Get the meta description for a path.

        Looks up the route key in the locale's description table, then
        the content record of dynamic pages, then falls back to the
        site-wide default.
        """
        effective_locale = locale or self._resolver.detect_locale(path)
        try:
            match = self._resolver.resolve_key_from_path(path)
        except NotFoundError:
            logger.debug(f"No route for {path!r}, using default description")
            return self._default_description

        text = self._descriptions.lookup(effective_locale, DESCRIPTIONS_SECTION, match.key)
        if text:
            return text

        if match.dynamic_value is not None:
            text = self._record_description(match, effective_locale)
            if text:
                return text

        return self._default_description

    def compute(self, path: str, locale: str | None = None) -> HeadTags:
        """Compute head values without touching a document."""
        effective_locale = Locale(locale or self._resolver.detect_locale(path))
        return HeadTags(
            canonical_url=self.canonical_url(path),
            description=self.description(path, effective_locale),
            lang=effective_locale,
        )

    def bind(self, head: DocumentHead, path: str, locale: str | None = None) -> HeadTags:
        """Write canonical link, description metas and language to head.

        Args:
            head: Document head to update
            path: Current path
            locale: Current locale, detected from path when omitted

        Returns:
            The values written
        """
        tags = self.compute(path, locale)

        head.upsert("link", "rel", CANONICAL_REL, "href", tags.canonical_url)
        for attr, value in DESCRIPTION_METAS:
            head.upsert("meta", attr, value, "content", tags.description)
        head.lang = tags.lang

        return tags

    def _record_description(self, match: RouteMatch, locale: str) -> str | None:
        """Get the description of the content record behind a dynamic page."""
        entry = self._resolver.registry.lookup(match.key)
        if entry.catalog is None or self._catalogs is None or match.dynamic_value is None:
            return None

        try:
            catalog = self._catalogs.load(entry.catalog)
        except CatalogUnavailableError as e:
            logger.warning(f"Cannot describe {match.key!r} page: {e}")
            return None

        record = catalog.get(match.dynamic_value)
        if record is None:
            return None

        for name in RECORD_DESCRIPTION_FIELDS:
            text = record.text(name, locale)
            if text:
                return text
        return None
