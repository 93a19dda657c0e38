"""Core type definitions."""

from enum import StrEnum
from typing import NewType

# URL path for routing (e.g., "/de/preise", "/en/success-story/acme")
URLPath = NewType("URLPath", str)

# Stable identifier of a logical page, independent of locale and URL text
RouteKey = NewType("RouteKey", str)

# Supported language identifier, also the mandatory first path segment
Locale = NewType("Locale", str)

# Prefix marking a dynamic path segment in route templates ("/de/success-story/:id")
DYNAMIC_MARKER = ":"


class ChangeFrequency(StrEnum):
    """Crawl hint for how often a page is expected to change."""

    ALWAYS = "always"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    NEVER = "never"
