"""Locale-scoped string tables.

Translated strings are opaque to this package: it only looks them up by
locale, section and key. Tables are TOML files shaped like::

    [de.navigation]
    pricing = "Preise"

    [en.descriptions]
    pricing = "Discover our pricing models."
"""

import tomllib
from collections.abc import Mapping
from pathlib import Path

NAVIGATION_SECTION = "navigation"
DESCRIPTIONS_SECTION = "descriptions"


class StringTable:
    """Read-only lookup of translated strings."""

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Mapping[str, Mapping[str, str]]] | None = None) -> None:
        self._data = {
            locale: {section: dict(values) for section, values in sections.items()}
            for locale, sections in (data or {}).items()
        }

    @classmethod
    def load(cls, path: Path) -> "StringTable":
        """Load a string table from a TOML file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the table is not locale -> section -> key -> string
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        for locale, sections in data.items():
            if not isinstance(sections, dict):
                raise ValueError(f"strings.{locale} must be a table")
            for section, values in sections.items():
                if not isinstance(values, dict):
                    raise ValueError(f"strings.{locale}.{section} must be a table")
                for key, value in values.items():
                    if not isinstance(value, str):
                        raise ValueError(
                            f"strings.{locale}.{section}.{key} must be a string",
                        )
        return cls(data)

    def lookup(self, locale: str, section: str, key: str) -> str | None:
        """Get one string, None if missing."""
        return self._data.get(locale, {}).get(section, {}).get(key)

    def section(self, locale: str, section: str) -> dict[str, str]:
        """Get all strings of a section in a locale."""
        return dict(self._data.get(locale, {}).get(section, {}))
