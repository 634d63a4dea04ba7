"""Exceptions raised while loading, indexing and aggregating the catalog."""


class CatalogError(Exception):
    """Base class for catalog errors."""


class CatalogLoadError(CatalogError):
    """The catalog could not be fetched or decoded."""


class MalformedCatalogError(CatalogError):
    """A catalog node is missing expected fields.

    Raised for a single document, section or entry; the indexer skips
    the offending node and keeps going.
    """


class AnchorExtractionError(CatalogError):
    """A label has an anchor tag but no quoted id could be read from it."""
