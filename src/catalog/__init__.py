"""Concurrent catalog loading."""

from .exceptions import CatalogLoadError, CatalogTimeoutError
from .loader import (
    MAX_ALBUMS_IN_FLIGHT,
    MAX_ARTISTS_IN_FLIGHT,
    Catalog,
    CatalogLoader,
    CatalogSource,
    flatten,
    run_bounded,
)

__all__ = [
    "Catalog",
    "CatalogLoader",
    "CatalogSource",
    "CatalogLoadError",
    "CatalogTimeoutError",
    "MAX_ARTISTS_IN_FLIGHT",
    "MAX_ALBUMS_IN_FLIGHT",
    "flatten",
    "run_bounded",
]
