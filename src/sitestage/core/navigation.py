"""Localized navigation.

Builds header navigation items with active-page highlighting and the
language switcher links from the route registry.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TypedDict

from sitestage.core.errors import NotFoundError
from sitestage.core.resolver import Resolver, normalize_path
from sitestage.core.types import Locale, RouteKey, URLPath


class NavItemDict(TypedDict):
    """Dictionary representation of a navigation item."""

    key: str
    title: str
    path: str
    active: bool


class LanguageLinkDict(TypedDict):
    """Dictionary representation of a language switcher link."""

    locale: str
    path: str
    current: bool


@dataclass(frozen=True)
class NavItem:
    """Navigation item of the site header."""

    key: RouteKey
    title: str
    path: URLPath
    active: bool = False

    def to_dict(self) -> NavItemDict:
        """Convert to dictionary for JSON serialization."""
        return {
            "key": self.key,
            "title": self.title,
            "path": self.path,
            "active": self.active,
        }


@dataclass(frozen=True)
class LanguageLink:
    """Link to the current page in another locale."""

    locale: Locale
    path: URLPath
    current: bool = False

    def to_dict(self) -> LanguageLinkDict:
        """Convert to dictionary for JSON serialization."""
        return {"locale": self.locale, "path": self.path, "current": self.current}


def is_active(resolver: Resolver, key: str, locale: str, current_path: str) -> bool:
    """Check whether the page of key contains the current path.

    A page is active when the current path is its path or lies below it
    ("/en/success-stories" is active on "/en/success-stories/2024").
    """
    try:
        route_path = resolver.resolve_path(key, locale)
    except NotFoundError:
        return False
    current = normalize_path(current_path)
    return current == route_path or current.startswith(f"{route_path}/")


def build_navigation(
    resolver: Resolver,
    keys: Sequence[RouteKey],
    locale: str,
    current_path: str,
    titles: Mapping[str, str] | None = None,
) -> list[NavItem]:
    """Build navigation items for a locale.

    Args:
        resolver: Route resolver
        keys: Static route keys in display order
        locale: Locale of the navigation
        current_path: Path of the current page
        titles: Route key to translated title, key used when missing

    Returns:
        NavItem per key, with the current page marked active
    """
    titles = titles or {}
    return [
        NavItem(
            key=key,
            title=titles.get(key, key),
            path=resolver.resolve_path(key, locale),
            active=is_active(resolver, key, locale, current_path),
        )
        for key in keys
    ]


def build_language_links(resolver: Resolver, current_path: str) -> list[LanguageLink]:
    """Build one link per locale pointing at the current page."""
    current_locale = resolver.detect_locale(current_path)
    return [
        LanguageLink(
            locale=locale,
            path=resolver.translate_path(current_path, locale),
            current=locale == current_locale,
        )
        for locale in resolver.locales
    ]
