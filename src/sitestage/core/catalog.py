"""Content catalogs and id extraction.

A catalog is a JSON document exposing its records as a top-level array:

    {
      "records": [
        {
          "id": "hector",
          "summary": {"de": "...", "en": "..."},
          "metaDescription": {"de": "...", "en": "..."},
          "relatedStories": [{"id": "megatron", "summary": {...}}]
        }
      ]
    }

Only elements of the "records" array are records. Nested objects of the
same shape (like "relatedStories") are content of their parent record and
never become pages of their own.
"""

import json
import logging
from collections.abc import Iterator, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from sitestage.core.errors import CatalogUnavailableError, DuplicateIdentifierError
from sitestage.core.once import InitOnce

logger = logging.getLogger(__name__)

# Ids become a single URL path segment
_FORBIDDEN_ID_CHARS = frozenset("/?#")


@dataclass(frozen=True)
class ContentRecord:
    """Catalog record with locale-keyed text fields."""

    id: str
    fields: Mapping[str, Mapping[str, str]] = field(default_factory=dict)

    def text(self, name: str, locale: str) -> str | None:
        """Get a display field in a locale, None if absent or empty."""
        value = self.fields.get(name, {}).get(locale)
        return value or None


@dataclass(frozen=True)
class Catalog:
    """Read-only, ordered collection of content records."""

    name: str
    records: tuple[ContentRecord, ...] = ()

    def get(self, record_id: str) -> ContentRecord | None:
        """Get record by id, compared case-insensitively."""
        folded = record_id.casefold()
        for record in self.records:
            if record.id.casefold() == folded:
                return record
        return None

    def __iter__(self) -> Iterator[ContentRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)


def parse_catalog(name: str, data: object) -> Catalog:
    """Build a catalog from decoded JSON data.

    Args:
        name: Catalog name used in error messages
        data: Decoded catalog document

    Returns:
        Catalog with the top-level records in document order

    Raises:
        CatalogUnavailableError: If the document structure is invalid
    """
    if not isinstance(data, dict):
        raise CatalogUnavailableError(name, "catalog must be a JSON object")

    records_raw = data.get("records")
    if not isinstance(records_raw, list):
        raise CatalogUnavailableError(name, "catalog must have a 'records' array")

    records: list[ContentRecord] = []
    for index, item in enumerate(records_raw):
        if not isinstance(item, dict):
            raise CatalogUnavailableError(name, f"records[{index}] must be an object")
        record_id = item.get("id")
        if not isinstance(record_id, str) or not record_id:
            raise CatalogUnavailableError(
                name,
                f"records[{index}].id must be a non-empty string",
            )
        if _FORBIDDEN_ID_CHARS.intersection(record_id):
            raise CatalogUnavailableError(
                name,
                f"records[{index}].id must be a single path segment: {record_id!r}",
            )
        records.append(ContentRecord(id=record_id, fields=_text_fields(item)))

    return Catalog(name=name, records=tuple(records))


def _text_fields(item: dict[str, object]) -> dict[str, dict[str, str]]:
    """Collect fields shaped like {"de": "...", "en": "..."}."""
    fields: dict[str, dict[str, str]] = {}
    for key, value in item.items():
        if key == "id" or not isinstance(value, dict) or not value:
            continue
        if all(isinstance(text, str) for text in value.values()):
            fields[key] = {str(locale): text for locale, text in value.items()}
    return fields


def load_catalog(name: str, path: Path) -> Catalog:
    """Load a catalog from a JSON file.

    Raises:
        CatalogUnavailableError: If the file cannot be read or decoded
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise CatalogUnavailableError(name, f"cannot read {path}: {e}") from e
    except ValueError as e:
        raise CatalogUnavailableError(name, f"invalid JSON in {path}: {e}") from e

    catalog = parse_catalog(name, data)
    logger.info(f"Loaded catalog {name!r} with {len(catalog)} records from {path}")
    return catalog


def extract_ids(catalog: Catalog) -> list[str]:
    """Get the ids of the catalog's top-level records in order.

    Args:
        catalog: Catalog to index

    Returns:
        Duplicate-free list of record ids

    Raises:
        DuplicateIdentifierError: If two records share an id (case-insensitively)
    """
    seen: set[str] = set()
    ids: list[str] = []
    for record in catalog.records:
        folded = record.id.casefold()
        if folded in seen:
            raise DuplicateIdentifierError(catalog.name, record.id)
        seen.add(folded)
        ids.append(record.id)
    return ids


class CatalogLoader:
    """Loads named catalogs once per process.

    Several catalogs can be read in parallel; results are always returned
    in the requested order.
    """

    def __init__(
        self,
        sources: Mapping[str, Path],
        *,
        catalogs: Sequence[Catalog] = (),
        max_workers: int = 4,
    ) -> None:
        """Initialize loader.

        Args:
            sources: Catalog name to JSON file path
            catalogs: Already parsed catalogs, served without file access
            max_workers: Upper bound of parallel reads in load_many()
        """
        self._sources = dict(sources)
        self._parsed = {catalog.name: catalog for catalog in catalogs}
        self._max_workers = max_workers
        self._loaded: InitOnce[Catalog] = InitOnce()

    @property
    def names(self) -> list[str]:
        return list(dict.fromkeys([*self._parsed, *self._sources]))

    def load(self, name: str) -> Catalog:
        """Get a catalog, reading it on first use.

        Raises:
            CatalogUnavailableError: If the catalog is unknown or unreadable
        """
        parsed = self._parsed.get(name)
        if parsed is not None:
            return parsed
        path = self._sources.get(name)
        if path is None:
            raise CatalogUnavailableError(name, "no source configured")
        return self._loaded.get(name, lambda: load_catalog(name, path))

    def load_many(self, names: Sequence[str]) -> dict[str, Catalog]:
        """Load several catalogs, reading them in parallel.

        Raises:
            CatalogUnavailableError: If any catalog is unknown or unreadable
        """
        unique = list(dict.fromkeys(names))
        if len(unique) <= 1:
            return {name: self.load(name) for name in unique}

        workers = min(self._max_workers, len(unique))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            catalogs = list(pool.map(self.load, unique))
        return dict(zip(unique, catalogs))

    def invalidate(self, name: str | None = None) -> None:
        """Drop loaded catalogs so they are read again on next use."""
        self._loaded.reset(name)
