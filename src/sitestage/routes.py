"""Route table of the marketing site.

Every page of the site is declared here once. Navigation, canonical tags,
meta descriptions, the language switch and the sitemap all derive their
paths from this table.
"""

from sitestage.core.registry import RegistryBuilder, RouteRegistry
from sitestage.core.types import ChangeFrequency, RouteKey

LOCALES = ("de", "en")
DEFAULT_LOCALE = "de"

SUCCESS_STORIES_CATALOG = "successStories"
USE_CASES_CATALOG = "useCases"

# Header navigation order
NAVIGATION_KEYS: tuple[RouteKey, ...] = (
    RouteKey("functionalities"),
    RouteKey("pricing"),
    RouteKey("successStories"),
    RouteKey("partners"),
    RouteKey("team"),
    RouteKey("events"),
    RouteKey("downloads"),
)

DAILY = ChangeFrequency.DAILY
WEEKLY = ChangeFrequency.WEEKLY
MONTHLY = ChangeFrequency.MONTHLY


def default_registry() -> RouteRegistry:
    """Build the site's built-in route registry."""
    builder = RegistryBuilder(LOCALES, DEFAULT_LOCALE)
    add = builder.add_route

    add("home", {"de": "/de", "en": "/en"}, priority=1.0, change_frequency=DAILY)

    add(
        "functionalities",
        {"de": "/de/plattform", "en": "/en/platform"},
        priority=0.9,
        change_frequency=WEEKLY,
    )
    add(
        "pricing",
        {"de": "/de/preise", "en": "/en/pricing"},
        priority=0.9,
        change_frequency=WEEKLY,
    )
    add(
        "successStories",
        {"de": "/de/success-stories", "en": "/en/success-stories"},
        priority=0.9,
        change_frequency=WEEKLY,
    )
    add(
        "successStoryDetail",
        {"de": "/de/success-story/:id", "en": "/en/success-story/:id"},
        priority=0.7,
        change_frequency=MONTHLY,
        catalog=SUCCESS_STORIES_CATALOG,
    )

    add(
        "partners",
        {"de": "/de/partner", "en": "/en/partners"},
        priority=0.8,
        change_frequency=WEEKLY,
    )
    add("team", {"de": "/de/team", "en": "/en/team"}, priority=0.8)
    add(
        "events",
        {"de": "/de/veranstaltungen", "en": "/en/events"},
        priority=0.8,
        change_frequency=WEEKLY,
    )
    add(
        "downloads",
        {"de": "/de/downloads", "en": "/en/downloads"},
        priority=0.8,
        change_frequency=WEEKLY,
    )
    add(
        "downloadThankYou",
        {"de": "/de/download-vielen-dank", "en": "/en/download-thank-you"},
        indexed=False,
    )
    add(
        "aiAgents",
        {"de": "/de/frontier-agents", "en": "/en/frontier-agents"},
        priority=0.8,
        change_frequency=WEEKLY,
    )
    add(
        "useCases",
        {"de": "/de/use-cases/:id", "en": "/en/use-cases/:id"},
        priority=0.7,
        change_frequency=MONTHLY,
        catalog=USE_CASES_CATALOG,
    )
    add(
        "contact",
        {"de": "/de/kontakt", "en": "/en/contact"},
        priority=0.8,
        change_frequency=WEEKLY,
    )

    # Legal pages
    add(
        "imprint",
        {"de": "/de/impressum", "en": "/en/imprint"},
        priority=0.5,
        change_frequency=MONTHLY,
    )
    add(
        "privacy",
        {"de": "/de/datenschutz", "en": "/en/privacy"},
        priority=0.5,
        change_frequency=MONTHLY,
    )
    add(
        "terms",
        {"de": "/de/nutzungsbedingungen", "en": "/en/terms"},
        priority=0.5,
        change_frequency=MONTHLY,
    )

    return builder.build()
