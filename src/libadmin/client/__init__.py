"""HTTP client for the libadmin API with a local read-through cache."""

from .api import (
    CatalogClient,
    CollectionClient,
    IssueClient,
    LibraryAPIError,
    LibraryClient,
    ResourceClient,
)

__all__ = [
    "CatalogClient",
    "CollectionClient",
    "IssueClient",
    "LibraryAPIError",
    "LibraryClient",
    "ResourceClient",
]
