"""Error taxonomy for route resolution, catalogs and sitemap builds.

Navigation-time callers recover from NotFoundError by falling back to a
locale root. Everything else signals a programmer error or a broken build
and must propagate.
"""


class SitestageError(Exception):
    """Base class for all sitestage errors."""


class NotFoundError(SitestageError, LookupError):
    """A route key, locale or path has no registry match."""


class MissingParameterError(SitestageError, ValueError):
    """A dynamic template was resolved without a dynamic value."""


class UnexpectedParameterError(SitestageError, ValueError):
    """A static template was resolved with a dynamic value."""


class InvalidParameterError(SitestageError, ValueError):
    """A dynamic value cannot be placed in a single path segment."""


class RegistryError(SitestageError, ValueError):
    """The route registry violates one of its invariants."""


class DuplicateIdentifierError(SitestageError, ValueError):
    """A catalog contains the same record id more than once."""

    def __init__(self, catalog: str, record_id: str) -> None:
        super().__init__(f"Duplicate id {record_id!r} in catalog {catalog!r}")
        self.catalog = catalog
        self.record_id = record_id


class CatalogUnavailableError(SitestageError):
    """A content catalog could not be read."""

    def __init__(self, catalog: str, reason: str) -> None:
        super().__init__(f"Catalog {catalog!r} unavailable: {reason}")
        self.catalog = catalog
        self.reason = reason
