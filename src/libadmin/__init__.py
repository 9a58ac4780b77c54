"""libadmin: library catalog backend built around a read-through cache.

Main modules:
- cache: cache contract, in-memory and Redis backends, factory, key catalog
- backend: Flask JSON API over a SQLite system of record
- client: HTTP client keeping its own cache consistent after writes
"""

from .cache import (
    Cache,
    CacheConfigurationError,
    CacheFactory,
    CacheKeys,
    InMemoryCache,
    TypedCache,
)
from .client import LibraryAPIError, LibraryClient

# Import version information
from .version import VERSION

__all__ = [
    "VERSION",
    "Cache",
    "CacheConfigurationError",
    "CacheFactory",
    "CacheKeys",
    "InMemoryCache",
    "LibraryAPIError",
    "LibraryClient",
    "TypedCache",
]
