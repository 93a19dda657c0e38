"""Bilingual route resolution.

Maps route keys to localized paths and back, detects the locale of a
path and translates paths between locales. Every consumer (navigation,
canonical tag, meta description, language switch) goes through this
module so they share one set of edge-case rules.
"""

import logging
from dataclasses import dataclass

from sitestage.core.errors import (
    InvalidParameterError,
    MissingParameterError,
    NotFoundError,
    SitestageError,
    UnexpectedParameterError,
)
from sitestage.core.registry import RouteRegistry
from sitestage.core.types import Locale, RouteKey, URLPath

logger = logging.getLogger(__name__)

_FORBIDDEN_VALUE_CHARS = frozenset("/?#")


@dataclass(frozen=True)
class RouteMatch:
    """Result of reverse route lookup."""

    key: RouteKey
    locale: Locale
    dynamic_value: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        """Convert to dictionary for JSON serialization."""
        return {
            "key": self.key,
            "locale": self.locale,
            "dynamicValue": self.dynamic_value,
        }


def normalize_path(path: str) -> URLPath:
    """Normalize a path to its canonical form.

    Drops query string and fragment, ensures a leading slash and strips
    trailing slashes except for the bare root.
    """
    for separator in ("#", "?"):
        path = path.split(separator, 1)[0]
    path = path.rstrip("/")
    if not path.startswith("/"):
        path = f"/{path}"
    return URLPath(path)


def _segments(path: str) -> list[str]:
    """Split a normalized path into segments ("/" has none)."""
    if path == "/":
        return []
    return path[1:].split("/")


class Resolver:
    """Pure resolution functions over an immutable route registry."""

    __slots__ = ("_locales", "_registry")

    def __init__(self, registry: RouteRegistry) -> None:
        self._registry = registry
        self._locales = frozenset(registry.locales)

    @property
    def registry(self) -> RouteRegistry:
        return self._registry

    @property
    def locales(self) -> tuple[Locale, ...]:
        return self._registry.locales

    @property
    def default_locale(self) -> Locale:
        return self._registry.default_locale

    def is_supported(self, locale: str) -> bool:
        return locale in self._locales

    def locale_root(self, locale: str) -> URLPath:
        """Get the root path of a locale ("/de")."""
        return URLPath(f"/{locale}")

    def detect_locale(self, path: str) -> Locale:
        """Detect the locale from the first path segment.

        Args:
            path: URL path (e.g., "/en/pricing")

        Returns:
            The first segment if it is a supported locale, otherwise the
            default locale
        """
        start = 1 if path.startswith("/") else 0
        end = path.find("/", start)
        segment = path[start:] if end == -1 else path[start:end]
        for separator in ("?", "#"):
            segment = segment.split(separator, 1)[0]
        if segment in self._locales:
            return Locale(segment)
        return self.default_locale

    def is_locale_route(self, path: str) -> bool:
        """Check whether path is a locale root or lies below one."""
        normalized = normalize_path(path)
        segments = _segments(normalized)
        return bool(segments) and segments[0] in self._locales

    def resolve_path(
        self,
        key: str,
        locale: str,
        dynamic_value: str | None = None,
    ) -> URLPath:
        """Resolve a route key to its localized path.

        Args:
            key: Route key (e.g., "pricing")
            locale: Target locale
            dynamic_value: Value for the dynamic segment, if any

        Returns:
            Path beginning with "/{locale}" and without trailing slash

        Raises:
            NotFoundError: If the key is unknown or has no path for locale
            MissingParameterError: If the template is dynamic and no value was given
            UnexpectedParameterError: If the template is static and a value was given
            InvalidParameterError: If the value does not fit in one path segment
        """
        entry = self._registry.lookup(key)
        template = entry.template(Locale(locale))

        if template.is_dynamic:
            if not dynamic_value:
                raise MissingParameterError(
                    f"Route {key!r} requires a value for ':{template.parameter}'",
                )
            if _FORBIDDEN_VALUE_CHARS.intersection(dynamic_value):
                raise InvalidParameterError(
                    f"Value for ':{template.parameter}' of route {key!r} "
                    f"must be a single path segment: {dynamic_value!r}",
                )
            return URLPath(template.render(dynamic_value))

        if dynamic_value is not None:
            raise UnexpectedParameterError(
                f"Route {key!r} is static but got value {dynamic_value!r}",
            )
        return URLPath(template.template)

    def resolve_key_from_path(self, path: str) -> RouteMatch:
        """Resolve a path back to its route key.

        Exact matches against the locale's static templates win. Otherwise
        dynamic templates are tried most specific (longest static prefix)
        first. Only templates of the path's own locale are considered.

        Args:
            path: URL path, possibly with trailing slash or query string

        Returns:
            RouteMatch with key, locale and captured dynamic value

        Raises:
            NotFoundError: If no template of the detected locale matches
        """
        normalized = normalize_path(path)
        locale = self.detect_locale(normalized)

        entry = self._registry.find_static(locale, normalized)
        if entry is not None:
            return RouteMatch(key=entry.key, locale=locale)

        segments = _segments(normalized)
        for template, entry in self._registry.dynamic_templates(locale):
            value = template.match(segments)
            if value is not None:
                return RouteMatch(key=entry.key, locale=locale, dynamic_value=value)

        raise NotFoundError(f"No route matches path: {path!r}")

    def translate_path(self, path: str, target_locale: str) -> URLPath:
        """Translate a path to the same page in another locale.

        Never raises: unresolvable paths fall back to the target locale's
        root, unsupported target locales to the default locale's root.

        Args:
            path: Current URL path
            target_locale: Locale to translate into

        Returns:
            Localized path of the same page
        """
        if not self.is_supported(target_locale):
            logger.warning(
                f"Unsupported locale {target_locale!r}, falling back to "
                f"{self.default_locale!r}",
            )
            return self.locale_root(self.default_locale)

        try:
            match = self.resolve_key_from_path(path)
            return self.resolve_path(match.key, target_locale, match.dynamic_value)
        except SitestageError as e:
            logger.debug(f"Cannot translate {path!r} to {target_locale!r}: {e}")
            return self.locale_root(target_locale)
