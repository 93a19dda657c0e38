"""Tests for route resolution."""

import pytest
from sitestage.core.errors import (
    InvalidParameterError,
    MissingParameterError,
    NotFoundError,
    UnexpectedParameterError,
)
from sitestage.core.registry import RegistryBuilder
from sitestage.core.resolver import Resolver, RouteMatch, normalize_path
from sitestage.routes import default_registry

_REGISTRY = default_registry()

# (key, locale, value) for every registered route and locale
_ROUTE_CASES = [
    (entry.key, locale, "acme" if entry.is_dynamic else None)
    for entry in _REGISTRY.all_entries()
    for locale in entry.locales
]

_RESOLVABLE_PATHS = [
    str(Resolver(_REGISTRY).resolve_path(key, locale, value))
    for key, locale, value in _ROUTE_CASES
]


class TestNormalizePath:
    """Tests for normalize_path()."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("", "/"),
            ("/", "/"),
            ("/de/", "/de"),
            ("/de/preise//", "/de/preise"),
            ("de/preise", "/de/preise"),
            ("/de/preise?utm_source=x", "/de/preise"),
            ("/de/preise/#top", "/de/preise"),
        ],
    )
    def test__normalizes(self, path: str, expected: str) -> None:
        assert normalize_path(path) == expected


class TestDetectLocale:
    """Tests for Resolver.detect_locale()."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/en/pricing", "en"),
            ("/de/preise", "de"),
            ("/en", "en"),
            ("/en?x=1", "en"),
            ("/", "de"),
            ("", "de"),
            ("/fr/prix", "de"),
            ("/english/pricing", "de"),
            ("/maintenance", "de"),
        ],
    )
    def test__detects_locale(self, resolver: Resolver, path: str, expected: str) -> None:
        assert resolver.detect_locale(path) == expected


class TestResolvePath:
    """Tests for Resolver.resolve_path()."""

    def test__static_route__returns_localized_path(self, resolver: Resolver) -> None:
        """Resolve pricing in German."""
        assert resolver.resolve_path("pricing", "de") == "/de/preise"
        assert resolver.resolve_path("pricing", "en") == "/en/pricing"

    def test__dynamic_route__substitutes_value(self, resolver: Resolver) -> None:
        """Resolve success story detail in English."""
        path = resolver.resolve_path("successStoryDetail", "en", "acme")

        assert path == "/en/success-story/acme"

    def test__locale_root(self, resolver: Resolver) -> None:
        """Home resolves to the bare locale root."""
        assert resolver.resolve_path("home", "en") == "/en"

    def test__dynamic_without_value__raises_missing(self, resolver: Resolver) -> None:
        with pytest.raises(MissingParameterError):
            resolver.resolve_path("successStoryDetail", "en")

    def test__dynamic_with_empty_value__raises_missing(self, resolver: Resolver) -> None:
        with pytest.raises(MissingParameterError):
            resolver.resolve_path("successStoryDetail", "en", "")

    def test__static_with_value__raises_unexpected(self, resolver: Resolver) -> None:
        with pytest.raises(UnexpectedParameterError):
            resolver.resolve_path("pricing", "en", "acme")

    @pytest.mark.parametrize("value", ["a/b", "a?b", "a#b"])
    def test__value_with_separator__raises_invalid(
        self,
        resolver: Resolver,
        value: str,
    ) -> None:
        with pytest.raises(InvalidParameterError):
            resolver.resolve_path("successStoryDetail", "en", value)

    def test__unknown_key__raises_not_found(self, resolver: Resolver) -> None:
        with pytest.raises(NotFoundError):
            resolver.resolve_path("nonexistent", "en")

    def test__unsupported_locale__raises_not_found(self, resolver: Resolver) -> None:
        with pytest.raises(NotFoundError):
            resolver.resolve_path("pricing", "fr")

    @pytest.mark.parametrize(("key", "locale", "value"), _ROUTE_CASES)
    def test__output_shape(
        self,
        resolver: Resolver,
        key: str,
        locale: str,
        value: str | None,
    ) -> None:
        """Every path starts with its locale and has no trailing slash."""
        path = resolver.resolve_path(key, locale, value)

        assert path == f"/{locale}" or path.startswith(f"/{locale}/")
        assert not path.endswith("/")


class TestResolveKeyFromPath:
    """Tests for Resolver.resolve_key_from_path()."""

    def test__static_path__returns_key(self, resolver: Resolver) -> None:
        """Resolve German pricing path."""
        match = resolver.resolve_key_from_path("/de/preise")

        assert match == RouteMatch(key="pricing", locale="de")
        assert match.dynamic_value is None

    def test__dynamic_path__captures_value(self, resolver: Resolver) -> None:
        """Resolve English success story path."""
        match = resolver.resolve_key_from_path("/en/success-story/acme")

        assert match.key == "successStoryDetail"
        assert match.dynamic_value == "acme"
        assert match.locale == "en"

    def test__trailing_slash__normalized(self, resolver: Resolver) -> None:
        assert resolver.resolve_key_from_path("/en/pricing/").key == "pricing"

    def test__query_string__ignored(self, resolver: Resolver) -> None:
        match = resolver.resolve_key_from_path("/en/use-cases/order-to-cash?ref=nav")

        assert match.key == "useCases"
        assert match.dynamic_value == "order-to-cash"

    def test__locale_root__returns_home(self, resolver: Resolver) -> None:
        assert resolver.resolve_key_from_path("/de").key == "home"
        assert resolver.resolve_key_from_path("/en/").key == "home"

    def test__other_locale_template__not_matched(self, resolver: Resolver) -> None:
        """Matching is scoped to the path's locale."""
        with pytest.raises(NotFoundError):
            resolver.resolve_key_from_path("/en/preise")

    def test__unknown_path__raises_not_found(self, resolver: Resolver) -> None:
        with pytest.raises(NotFoundError):
            resolver.resolve_key_from_path("/de/gibt-es-nicht")

    def test__extra_segment__raises_not_found(self, resolver: Resolver) -> None:
        with pytest.raises(NotFoundError):
            resolver.resolve_key_from_path("/en/success-story/acme/extra")

    def test__bare_root__raises_not_found(self, resolver: Resolver) -> None:
        """The bare root carries no locale segment and matches no template."""
        with pytest.raises(NotFoundError):
            resolver.resolve_key_from_path("/")

    def test__overlapping_dynamic__longest_static_prefix_wins(self) -> None:
        """Prefer the template with the longest static prefix."""
        builder = RegistryBuilder(["en"], "en")
        builder.add_route("topic", {"en": "/en/:topic/acme"}, indexed=False)
        builder.add_route("story", {"en": "/en/stories/:id"}, indexed=False)
        resolver = Resolver(builder.build())

        match = resolver.resolve_key_from_path("/en/stories/acme")

        assert match.key == "story"
        assert match.dynamic_value == "acme"
        other = resolver.resolve_key_from_path("/en/news/acme")
        assert other.key == "topic"
        assert other.dynamic_value == "news"

    def test__overlapping_dynamic__independent_of_declaration_order(self) -> None:
        """Tie-break does not depend on which route was declared first."""
        builder = RegistryBuilder(["en"], "en")
        builder.add_route("story", {"en": "/en/stories/:id"}, indexed=False)
        builder.add_route("topic", {"en": "/en/:topic/acme"}, indexed=False)
        resolver = Resolver(builder.build())

        assert resolver.resolve_key_from_path("/en/stories/acme").key == "story"

    def test__static_beats_dynamic(self) -> None:
        """Exact static matches win over dynamic templates."""
        builder = RegistryBuilder(["en"], "en")
        builder.add_route("story", {"en": "/en/stories/:id"}, indexed=False)
        builder.add_route("featured", {"en": "/en/stories/featured"})
        resolver = Resolver(builder.build())

        assert resolver.resolve_key_from_path("/en/stories/featured").key == "featured"

    @pytest.mark.parametrize(("key", "locale", "value"), _ROUTE_CASES)
    def test__round_trip(
        self,
        resolver: Resolver,
        key: str,
        locale: str,
        value: str | None,
    ) -> None:
        """Resolving a resolved path returns the key and value."""
        match = resolver.resolve_key_from_path(resolver.resolve_path(key, locale, value))

        assert match.key == key
        assert match.locale == locale
        assert match.dynamic_value == value

    def test__results_independent_of_call_order(self, resolver: Resolver) -> None:
        forward = [resolver.resolve_key_from_path(p) for p in _RESOLVABLE_PATHS]
        backward = [resolver.resolve_key_from_path(p) for p in reversed(_RESOLVABLE_PATHS)]

        assert forward == list(reversed(backward))


class TestTranslatePath:
    """Tests for Resolver.translate_path()."""

    def test__static_path__translated(self, resolver: Resolver) -> None:
        """Translate German pricing path to English."""
        assert resolver.translate_path("/de/preise", "en") == "/en/pricing"

    def test__dynamic_path__keeps_value(self, resolver: Resolver) -> None:
        path = resolver.translate_path("/de/success-story/hector", "en")

        assert path == "/en/success-story/hector"

    def test__same_locale__returns_normalized_path(self, resolver: Resolver) -> None:
        assert resolver.translate_path("/en/pricing/", "en") == "/en/pricing"

    @pytest.mark.parametrize(
        "path",
        ["/de/gibt-es-nicht", "/", "", "/maintenance", "/en/success-story/a/b"],
    )
    def test__unresolvable__returns_target_root(self, resolver: Resolver, path: str) -> None:
        """Fall back to the target locale's root."""
        assert resolver.translate_path(path, "en") == "/en"

    def test__unsupported_target__returns_default_root(self, resolver: Resolver) -> None:
        assert resolver.translate_path("/de/preise", "fr") == "/de"

    def test__target_missing_in_partial_route__returns_target_root(self) -> None:
        """Routes without a path in the target locale fall back to its root."""
        builder = RegistryBuilder(["de", "en"], "de")
        builder.add_route("home", {"de": "/de", "en": "/en"})
        builder.add_route("impressum", {"de": "/de/impressum"})
        resolver = Resolver(builder.build())

        assert resolver.translate_path("/de/impressum", "en") == "/en"

    @pytest.mark.parametrize("path", _RESOLVABLE_PATHS)
    @pytest.mark.parametrize("target", ["de", "en"])
    def test__detected_locale_matches_target(
        self,
        resolver: Resolver,
        path: str,
        target: str,
    ) -> None:
        """The translated path is in the target locale and never empty."""
        translated = resolver.translate_path(path, target)

        assert translated
        assert resolver.detect_locale(translated) == target


class TestIsLocaleRoute:
    """Tests for Resolver.is_locale_route()."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/de", True),
            ("/en/", True),
            ("/en/pricing", True),
            ("/", False),
            ("/maintenance", False),
            ("/english", False),
        ],
    )
    def test__checks_prefix(self, resolver: Resolver, path: str, expected: bool) -> None:
        assert resolver.is_locale_route(path) is expected

    def test__locale_root(self, resolver: Resolver) -> None:
        assert resolver.locale_root("en") == "/en"
