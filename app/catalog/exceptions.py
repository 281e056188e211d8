"""Catalogue exceptions."""


class CatalogError(Exception):
    pass


class SearchError(CatalogError):
    """A catalogue search failed (HTTP status, transport or parse error)."""
