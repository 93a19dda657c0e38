"""Route registry.

The registry is the single source of truth mapping route keys to
locale-specific path templates. It is validated once when built and never
mutated afterwards.
"""

import logging
import tomllib
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from sitestage.core.errors import NotFoundError, RegistryError
from sitestage.core.types import DYNAMIC_MARKER, ChangeFrequency, Locale, RouteKey

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathTemplate:
    """Locale-specific URL path template.

    Either static ("/de/preise") or containing exactly one dynamic
    segment ("/de/success-story/:id").
    """

    template: str
    segments: tuple[str, ...]
    dynamic_index: int | None = None

    @classmethod
    def parse(cls, template: str) -> "PathTemplate":
        """Parse a template string.

        Args:
            template: Path template (e.g., "/en/success-story/:id")

        Returns:
            Parsed PathTemplate

        Raises:
            RegistryError: If the template is malformed
        """
        if not template.startswith("/"):
            raise RegistryError(f"Template must start with '/': {template!r}")
        if template.endswith("/"):
            raise RegistryError(f"Template must not end with '/': {template!r}")

        segments = tuple(template[1:].split("/"))
        if any(not segment for segment in segments):
            raise RegistryError(f"Template contains an empty segment: {template!r}")

        dynamic = [i for i, s in enumerate(segments) if s.startswith(DYNAMIC_MARKER)]
        if len(dynamic) > 1:
            raise RegistryError(
                f"Template has more than one dynamic segment: {template!r}",
            )
        if dynamic and segments[dynamic[0]] == DYNAMIC_MARKER:
            raise RegistryError(f"Dynamic segment must be named: {template!r}")

        return cls(
            template=template,
            segments=segments,
            dynamic_index=dynamic[0] if dynamic else None,
        )

    @property
    def is_dynamic(self) -> bool:
        return self.dynamic_index is not None

    @property
    def parameter(self) -> str | None:
        """Name of the dynamic segment without its marker."""
        if self.dynamic_index is None:
            return None
        return self.segments[self.dynamic_index][len(DYNAMIC_MARKER) :]

    @property
    def static_prefix(self) -> tuple[str, ...]:
        """Segments before the dynamic segment (all segments if static)."""
        if self.dynamic_index is None:
            return self.segments
        return self.segments[: self.dynamic_index]

    @property
    def shape(self) -> tuple[str, ...]:
        """Segments with the dynamic one replaced by the bare marker."""
        return tuple(
            DYNAMIC_MARKER if i == self.dynamic_index else segment
            for i, segment in enumerate(self.segments)
        )

    def render(self, value: str | None = None) -> str:
        """Substitute the dynamic value into the template.

        Static templates are returned unchanged. Presence of the value
        is checked by the resolver.
        """
        if self.dynamic_index is None or value is None:
            return self.template
        segments = list(self.segments)
        segments[self.dynamic_index] = value
        return "/" + "/".join(segments)

    def match(self, segments: Sequence[str]) -> str | None:
        """Match path segments against a dynamic template.

        Every static segment must be equal; the dynamic segment captures
        exactly one path segment.

        Args:
            segments: Segments of a normalized path

        Returns:
            Captured dynamic value, or None if the path does not match
        """
        if self.dynamic_index is None or len(segments) != len(self.segments):
            return None
        for i, (expected, actual) in enumerate(zip(self.segments, segments)):
            if i != self.dynamic_index and expected != actual:
                return None
        return segments[self.dynamic_index]


@dataclass(frozen=True)
class RouteEntry:
    """Registry entry describing one logical page."""

    key: RouteKey
    paths: Mapping[Locale, PathTemplate]
    priority: float = 0.5
    change_frequency: ChangeFrequency = ChangeFrequency.WEEKLY
    catalog: str | None = None
    indexed: bool = True

    @property
    def is_dynamic(self) -> bool:
        return any(template.is_dynamic for template in self.paths.values())

    @property
    def locales(self) -> tuple[Locale, ...]:
        return tuple(self.paths)

    def template(self, locale: Locale) -> PathTemplate:
        """Get the template for a locale.

        Raises:
            NotFoundError: If the entry declares no path for the locale
        """
        try:
            return self.paths[locale]
        except KeyError:
            raise NotFoundError(
                f"Route {self.key!r} has no path for locale {locale!r}",
            ) from None


class RouteRegistry:
    """Immutable, validated table of route entries.

    Keeps per-locale indexes so static paths resolve in O(1) and dynamic
    templates are tried most specific first.
    """

    __slots__ = (
        "_default_locale",
        "_dynamic_index",
        "_entries",
        "_key_index",
        "_locales",
        "_static_index",
    )

    def __init__(
        self,
        entries: Sequence[RouteEntry],
        locales: Sequence[Locale],
        default_locale: Locale,
    ) -> None:
        """Initialize and validate the registry.

        Args:
            entries: Route entries in declaration order
            locales: Supported locales in display order
            default_locale: Locale used when detection fails

        Raises:
            RegistryError: If any registry invariant is violated
        """
        _validate(entries, locales, default_locale)

        self._entries = tuple(entries)
        self._locales = tuple(locales)
        self._default_locale = default_locale
        self._key_index = {entry.key: i for i, entry in enumerate(self._entries)}

        self._static_index: dict[Locale, dict[str, RouteEntry]] = {
            locale: {} for locale in self._locales
        }
        dynamic: dict[Locale, list[tuple[PathTemplate, RouteEntry]]] = {
            locale: [] for locale in self._locales
        }
        for entry in self._entries:
            for locale, template in entry.paths.items():
                if template.is_dynamic:
                    dynamic[locale].append((template, entry))
                else:
                    self._static_index[locale][template.template] = entry

        # Longest static prefix first; sort is stable so declaration order breaks ties
        self._dynamic_index = {
            locale: sorted(candidates, key=lambda item: -len(item[0].static_prefix))
            for locale, candidates in dynamic.items()
        }

    @property
    def locales(self) -> tuple[Locale, ...]:
        return self._locales

    @property
    def default_locale(self) -> Locale:
        return self._default_locale

    def lookup(self, key: str) -> RouteEntry:
        """Get entry by route key.

        Raises:
            NotFoundError: If the key is not registered
        """
        idx = self._key_index.get(RouteKey(key))
        if idx is None:
            raise NotFoundError(f"Unknown route key: {key!r}")
        return self._entries[idx]

    def all_entries(self) -> tuple[RouteEntry, ...]:
        """Get all entries in declaration order."""
        return self._entries

    def find_static(self, locale: Locale, path: str) -> RouteEntry | None:
        """Find the entry whose static template for locale equals path."""
        return self._static_index.get(locale, {}).get(path)

    def dynamic_templates(self, locale: Locale) -> list[tuple[PathTemplate, RouteEntry]]:
        """Get dynamic templates for locale, most specific first."""
        return list(self._dynamic_index.get(locale, []))

    def __contains__(self, key: object) -> bool:
        return key in self._key_index

    def __iter__(self) -> Iterator[RouteEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


class RegistryBuilder:
    """Builder for constructing RouteRegistry instances."""

    def __init__(self, locales: Sequence[str], default_locale: str) -> None:
        self._locales = tuple(Locale(locale) for locale in locales)
        self._default_locale = Locale(default_locale)
        self._entries: list[RouteEntry] = []
        self._keys: set[str] = set()

    def add_route(
        self,
        key: str,
        paths: Mapping[str, str],
        *,
        priority: float = 0.5,
        change_frequency: ChangeFrequency = ChangeFrequency.WEEKLY,
        catalog: str | None = None,
        indexed: bool = True,
    ) -> RouteEntry:
        """Add a route to the registry.

        Args:
            key: Stable route key
            paths: Template per locale
            priority: Sitemap priority in [0, 1]
            change_frequency: Sitemap change frequency
            catalog: Name of the catalog a dynamic route is bound to
            indexed: Whether the route is listed in the sitemap

        Returns:
            The added entry

        Raises:
            RegistryError: If the key is already registered, a locale is
                unsupported or a template is malformed
        """
        if key in self._keys:
            raise RegistryError(f"Duplicate route key: {key!r}")

        unknown = [locale for locale in paths if locale not in self._locales]
        if unknown:
            raise RegistryError(
                f"Route {key!r} uses unsupported locale(s): {', '.join(unknown)}",
            )

        # Keep templates in registry locale order, not declaration order
        templates = {
            locale: PathTemplate.parse(paths[locale])
            for locale in self._locales
            if locale in paths
        }
        entry = RouteEntry(
            key=RouteKey(key),
            paths=templates,
            priority=priority,
            change_frequency=change_frequency,
            catalog=catalog,
            indexed=indexed,
        )
        self._entries.append(entry)
        self._keys.add(key)
        return entry

    def build(self) -> RouteRegistry:
        """Build and validate the RouteRegistry instance."""
        return RouteRegistry(
            entries=self._entries,
            locales=self._locales,
            default_locale=self._default_locale,
        )


def load_registry(path: Path) -> RouteRegistry:
    """Load a route registry from a TOML file.

    Args:
        path: Path to the registry file

    Returns:
        Validated RouteRegistry

    Raises:
        FileNotFoundError: If the file doesn't exist
        RegistryError: If the file is malformed or violates invariants
    """
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise RegistryError(f"Invalid registry file {path}: {e}") from e

    registry = parse_registry(data)
    logger.info(f"Loaded {len(registry)} routes from {path}")
    return registry


def parse_registry(data: Mapping[str, object]) -> RouteRegistry:
    """Build a route registry from decoded registry data.

    Expected structure::

        locales = ["de", "en"]
        default_locale = "de"

        [[routes]]
        key = "pricing"
        priority = 0.9
        changefreq = "weekly"
        paths = { de = "/de/preise", en = "/en/pricing" }
    """
    locales = data.get("locales")
    if not isinstance(locales, list) or not locales:
        raise RegistryError("locales must be a non-empty list")
    if not all(isinstance(locale, str) for locale in locales):
        raise RegistryError("locales items must be strings")

    default_locale = data.get("default_locale", locales[0])
    if not isinstance(default_locale, str):
        raise RegistryError("default_locale must be a string")

    routes = data.get("routes", [])
    if not isinstance(routes, list):
        raise RegistryError("routes must be a list of tables")

    builder = RegistryBuilder(locales, default_locale)
    for item in routes:
        _add_route_from_table(builder, item)
    return builder.build()


def _add_route_from_table(builder: RegistryBuilder, item: object) -> None:
    """Parse one [[routes]] table into the builder."""
    if not isinstance(item, dict):
        raise RegistryError("routes items must be tables")

    key = item.get("key")
    if not isinstance(key, str) or not key:
        raise RegistryError("routes.key must be a non-empty string")

    paths = item.get("paths")
    if not isinstance(paths, dict) or not all(
        isinstance(value, str) for value in paths.values()
    ):
        raise RegistryError(f"routes.paths of {key!r} must map locales to strings")

    priority = item.get("priority", 0.5)
    if isinstance(priority, bool) or not isinstance(priority, int | float):
        raise RegistryError(f"routes.priority of {key!r} must be a number")

    changefreq = item.get("changefreq", ChangeFrequency.WEEKLY.value)
    try:
        change_frequency = ChangeFrequency(changefreq)
    except ValueError:
        raise RegistryError(
            f"routes.changefreq of {key!r} is not a valid frequency: {changefreq!r}",
        ) from None

    catalog = item.get("catalog")
    if catalog is not None and not isinstance(catalog, str):
        raise RegistryError(f"routes.catalog of {key!r} must be a string")

    indexed = item.get("indexed", True)
    if not isinstance(indexed, bool):
        raise RegistryError(f"routes.indexed of {key!r} must be a boolean")

    builder.add_route(
        key,
        paths,
        priority=float(priority),
        change_frequency=change_frequency,
        catalog=catalog,
        indexed=indexed,
    )


def _validate(
    entries: Sequence[RouteEntry],
    locales: Sequence[Locale],
    default_locale: Locale,
) -> None:
    """Check registry invariants.

    Raises:
        RegistryError: On the first violated invariant
    """
    if not locales:
        raise RegistryError("At least one locale is required")
    if len(set(locales)) != len(locales):
        raise RegistryError("Locales must be unique")
    for locale in locales:
        if not locale or "/" in locale:
            raise RegistryError(f"Invalid locale: {locale!r}")
    if default_locale not in locales:
        raise RegistryError(f"Default locale {default_locale!r} is not supported")

    seen_keys: set[RouteKey] = set()
    static_paths: dict[Locale, dict[str, RouteKey]] = {locale: {} for locale in locales}
    dynamic_shapes: dict[Locale, dict[tuple[str, ...], RouteKey]] = {
        locale: {} for locale in locales
    }

    for entry in entries:
        if entry.key in seen_keys:
            raise RegistryError(f"Duplicate route key: {entry.key!r}")
        seen_keys.add(entry.key)

        if default_locale not in entry.paths:
            raise RegistryError(
                f"Route {entry.key!r} has no path for default locale {default_locale!r}",
            )
        if not 0.0 <= entry.priority <= 1.0:
            raise RegistryError(
                f"Route {entry.key!r} priority must be in [0, 1], got {entry.priority}",
            )
        if entry.is_dynamic and entry.indexed and entry.catalog is None:
            raise RegistryError(
                f"Indexed dynamic route {entry.key!r} must be bound to a catalog",
            )

        layouts = {
            (len(template.segments), template.dynamic_index)
            for template in entry.paths.values()
        }
        if len(layouts) > 1:
            raise RegistryError(
                f"Route {entry.key!r} templates differ in segment count "
                "or dynamic segment position between locales",
            )

        for locale, template in entry.paths.items():
            if locale not in static_paths:
                raise RegistryError(
                    f"Route {entry.key!r} uses unsupported locale {locale!r}",
                )
            if template.segments[0] != locale:
                raise RegistryError(
                    f"Route {entry.key!r} path {template.template!r} "
                    f"must start with '/{locale}'",
                )

            if template.is_dynamic:
                other = dynamic_shapes[locale].get(template.shape)
                if other is not None:
                    raise RegistryError(
                        f"Ambiguous dynamic templates for {locale!r}: "
                        f"{other!r} and {entry.key!r} both match {template.template!r}",
                    )
                dynamic_shapes[locale][template.shape] = entry.key
            else:
                other = static_paths[locale].get(template.template)
                if other is not None:
                    raise RegistryError(
                        f"Path {template.template!r} is registered by both "
                        f"{other!r} and {entry.key!r}",
                    )
                static_paths[locale][template.template] = entry.key
